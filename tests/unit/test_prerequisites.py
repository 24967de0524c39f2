"""
Unit tests for prerequisite chain resolution.

Focused on the in-memory resolver so these tests do not require a DB.
"""

import pytest

from limba_insights.analytics.exceptions import FeatureNotFoundError
from limba_insights.analytics.models import UNRESOLVED_FEATURE_NAME, GrammarFeature
from limba_insights.analytics.prerequisites import (
    PrerequisiteResolver,
    TraversalState,
    index_features,
    resolve,
)


def feature(key: str, *prereqs: str, level: str = "A1") -> GrammarFeature:
    return GrammarFeature(
        feature_key=key,
        feature_name=key.replace("_", " ").title(),
        cefr_level=level,
        prerequisites=tuple(prereqs),
    )


def table(*features: GrammarFeature) -> dict[str, GrammarFeature]:
    return index_features(features)


def keys(node) -> list[str]:
    return [child.feature_key for child in node.prerequisites]


class TestNotFound:
    def test_missing_root_raises(self):
        with pytest.raises(FeatureNotFoundError) as exc_info:
            resolve("missing", {})
        assert exc_info.value.feature_key == "missing"
        assert 'Feature "missing" not found' in str(exc_info.value)


class TestCycles:
    def test_two_node_cycle_terminates(self):
        tree = resolve("A", table(feature("A", "B"), feature("B", "A")))

        assert tree.feature_key == "A"
        assert keys(tree) == ["B"]
        assert tree.prerequisites[0].prerequisites == []

    def test_self_reference_is_pruned(self):
        tree = resolve("A", table(feature("A", "A", "B"), feature("B")))
        assert keys(tree) == ["B"]

    def test_shared_prerequisite_appears_once(self):
        # diamond: D reaches A through both B and C
        features = table(
            feature("D", "B", "C"),
            feature("B", "A"),
            feature("C", "A"),
            feature("A"),
        )
        tree = resolve("D", features)

        assert keys(tree) == ["B", "C"]
        assert keys(tree.prerequisites[0]) == ["A"]
        # A was already opened under B, so C's branch omits it
        assert keys(tree.prerequisites[1]) == []


class TestDepthCap:
    def test_chain_of_fifteen_stops_at_ten_levels(self):
        chain = [feature(f"f{i}", f"f{i + 1}") for i in range(14)] + [feature("f14")]
        tree = resolve("f0", table(*chain))

        assert tree.depth() == 10
        node = tree
        for expected in range(1, 11):
            assert keys(node) == [f"f{expected}"]
            node = node.prerequisites[0]
        assert node.feature_key == "f10"
        assert node.prerequisites == []

    def test_custom_max_depth(self):
        chain = table(feature("a", "b"), feature("b", "c"), feature("c"))
        tree = PrerequisiteResolver(chain, max_depth=1).resolve("a")
        assert keys(tree) == ["b"]
        assert tree.prerequisites[0].prerequisites == []

    def test_zero_depth_returns_bare_root(self):
        tree = resolve("a", table(feature("a", "b"), feature("b")), max_depth=0)
        assert tree.prerequisites == []


class TestDanglingReferences:
    def test_missing_prerequisite_becomes_placeholder_leaf(self):
        tree = resolve("A", table(feature("A", "ghost")))

        assert keys(tree) == ["ghost"]
        ghost = tree.prerequisites[0]
        assert ghost.feature_name == UNRESOLVED_FEATURE_NAME
        assert ghost.cefr_level == "unknown"
        assert ghost.prerequisites == []
        assert ghost.is_placeholder

    def test_repeated_dangling_key_appears_once(self):
        tree = resolve("A", table(feature("A", "ghost", "B"), feature("B", "ghost")))
        assert keys(tree) == ["ghost", "B"]
        assert keys(tree.prerequisites[1]) == []


class TestOrderingAndPurity:
    def test_children_follow_listed_order(self):
        features = table(feature("root", "c", "a", "b"), feature("a"), feature("b"), feature("c"))
        assert keys(resolve("root", features)) == ["c", "a", "b"]

    def test_resolution_is_idempotent(self, grammar_features):
        resolver = PrerequisiteResolver(index_features(grammar_features))
        first = resolver.resolve("subjunctive").to_dict()
        second = resolver.resolve("subjunctive").to_dict()
        assert first == second

    def test_sample_catalog_tree(self, grammar_features):
        tree = resolve("subjunctive", index_features(grammar_features))

        assert tree.to_dict() == {
            "feature_key": "subjunctive",
            "feature_name": "Subjunctive mood",
            "cefr_level": "B2",
            "prerequisites": [
                {
                    "feature_key": "reflexive_verbs",
                    "feature_name": "Reflexive verbs",
                    "cefr_level": "B1",
                    "prerequisites": [
                        {
                            "feature_key": "present_tense",
                            "feature_name": "Present tense",
                            "cefr_level": "A1",
                            "prerequisites": [],
                        },
                        {
                            "feature_key": "past_tense",
                            "feature_name": "Compound past",
                            "cefr_level": "A2",
                            "prerequisites": [
                                {
                                    "feature_key": "ghost_feature",
                                    "feature_name": UNRESOLVED_FEATURE_NAME,
                                    "cefr_level": "unknown",
                                    "prerequisites": [],
                                },
                            ],
                        },
                    ],
                },
            ],
        }


class TestTraversalState:
    def test_should_expand_counts_pruned_branches(self):
        state = TraversalState(max_depth=2)
        state.visited.add("seen")

        assert state.should_expand("new", 2) is True
        assert state.should_expand("new", 3) is False
        assert state.should_expand("seen", 0) is False
        assert state.pruned == 2
