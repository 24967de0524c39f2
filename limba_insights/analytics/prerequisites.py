"""
Prerequisite chain resolution for grammar features.

grammar_feature_map stores each feature's prerequisites as a list of
feature keys. The store does not enforce referential integrity, so a
list may name keys that do not exist, loop back on itself, or chain
arbitrarily deep. The resolver turns that into a bounded tree:

- keys missing from the map become placeholder leaves
- a key already opened anywhere in this call is pruned (cycles terminate)
- branches deeper than max_depth below the root are pruned

Pruned branches are dropped, not represented; callers see the first
visited copy of any feature.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from limba_insights.analytics.exceptions import FeatureNotFoundError
from limba_insights.analytics.models import GrammarFeature, PrerequisiteNode

DEFAULT_MAX_DEPTH = 10


@dataclass
class TraversalState:
    """Mutable state owned by a single resolve() call."""
    max_depth: int = DEFAULT_MAX_DEPTH
    visited: set[str] = field(default_factory=set)
    pruned: int = 0
    unresolved: list[str] = field(default_factory=list)

    def should_expand(self, feature_key: str, depth: int) -> bool:
        if depth > self.max_depth or feature_key in self.visited:
            self.pruned += 1
            return False
        return True


def index_features(features: Iterable[GrammarFeature]) -> dict[str, GrammarFeature]:
    """Build the key -> feature table the resolver works on."""
    return {feature.feature_key: feature for feature in features}


class PrerequisiteResolver:
    """
    Resolve a feature's transitive prerequisites against an in-memory table.

    The resolver does no I/O; the table is fetched by the caller. It holds
    no state between calls, so one instance can serve many requests.

    Usage:
        resolver = PrerequisiteResolver(index_features(features))
        tree = resolver.resolve("past_tense")
    """

    def __init__(self, feature_table: Mapping[str, GrammarFeature], max_depth: int = DEFAULT_MAX_DEPTH):
        self._features = feature_table
        self._max_depth = max_depth

    def resolve(self, feature_key: str) -> PrerequisiteNode:
        """
        Build the prerequisite tree rooted at feature_key.

        Raises:
            FeatureNotFoundError: feature_key is not in the table
        """
        if feature_key not in self._features:
            raise FeatureNotFoundError(feature_key)

        state = TraversalState(max_depth=self._max_depth)
        tree = self._build(feature_key, 0, state)

        logger.debug(
            f"Resolved prerequisites for {feature_key}: "
            f"{len(state.visited)} visited, {state.pruned} pruned, "
            f"{len(state.unresolved)} unresolved"
        )
        return tree

    def _build(self, feature_key: str, depth: int, state: TraversalState) -> Optional[PrerequisiteNode]:
        if not state.should_expand(feature_key, depth):
            return None
        state.visited.add(feature_key)

        feature = self._features.get(feature_key)
        if feature is None:
            state.unresolved.append(feature_key)
            return PrerequisiteNode.placeholder(feature_key)

        children: list[PrerequisiteNode] = []
        for prereq_key in feature.prerequisites:
            child = self._build(prereq_key, depth + 1, state)
            if child is not None:
                children.append(child)

        return PrerequisiteNode(
            feature_key=feature.feature_key,
            feature_name=feature.feature_name,
            cefr_level=feature.cefr_level,
            prerequisites=children,
        )


def resolve(
    feature_key: str,
    feature_table: Mapping[str, GrammarFeature],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> PrerequisiteNode:
    """Resolve feature_key against feature_table (see PrerequisiteResolver)."""
    return PrerequisiteResolver(feature_table, max_depth=max_depth).resolve(feature_key)
