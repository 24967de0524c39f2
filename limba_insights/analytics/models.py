"""
Plain data models for the analytics core.

These are request-scoped values: fetched or derived for one call, handed
to a serializer, then discarded. Nothing here is persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from limba_insights.analytics.cefr import UNKNOWN_LEVEL

UNRESOLVED_FEATURE_NAME = "(not found in grammar_feature_map)"


# =============================================================================
# GRAMMAR
# =============================================================================

@dataclass(frozen=True)
class GrammarFeature:
    """One row of grammar_feature_map."""
    feature_key: str
    feature_name: str
    cefr_level: str
    category: Optional[str] = None
    prerequisites: tuple[str, ...] = ()
    description: Optional[str] = None
    sort_order: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature_key": self.feature_key,
            "feature_name": self.feature_name,
            "cefr_level": self.cefr_level,
            "category": self.category,
            "description": self.description,
            "prerequisites": list(self.prerequisites),
            "sort_order": self.sort_order,
        }


@dataclass
class PrerequisiteNode:
    """A feature and its resolved prerequisites, in the order the parent lists them."""
    feature_key: str
    feature_name: str
    cefr_level: str
    prerequisites: list[PrerequisiteNode] = field(default_factory=list)

    @classmethod
    def placeholder(cls, feature_key: str) -> PrerequisiteNode:
        """Leaf standing in for a prerequisite key with no catalog entry."""
        return cls(
            feature_key=feature_key,
            feature_name=UNRESOLVED_FEATURE_NAME,
            cefr_level=UNKNOWN_LEVEL,
        )

    @property
    def is_placeholder(self) -> bool:
        return self.feature_name == UNRESOLVED_FEATURE_NAME and self.cefr_level == UNKNOWN_LEVEL

    def depth(self) -> int:
        """Number of levels below this node (0 for a leaf)."""
        if not self.prerequisites:
            return 0
        return 1 + max(child.depth() for child in self.prerequisites)

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature_key": self.feature_key,
            "feature_name": self.feature_name,
            "cefr_level": self.cefr_level,
            "prerequisites": [child.to_dict() for child in self.prerequisites],
        }


# =============================================================================
# CONTENT
# =============================================================================

@dataclass(frozen=True)
class ContentItem:
    """Read projection of a content_items row."""
    id: str
    type: str
    title: str
    difficulty_level: float
    created_at: datetime
    topic: Optional[str] = None
    language_features: Optional[dict[str, Any]] = None
    duration_seconds: Optional[int] = None

    @property
    def grammar_features(self) -> list[str]:
        """Grammar feature keys this item is tagged with (empty when untagged)."""
        return grammar_keys(self.language_features)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "difficulty_level": self.difficulty_level,
            "topic": self.topic,
            "language_features": self.language_features,
            "duration_seconds": self.duration_seconds,
            "created_at": self.created_at.isoformat(),
        }


def grammar_keys(language_features: Any) -> list[str]:
    """
    Extract the grammar feature keys from a language_features payload.

    Missing, null or malformed payloads reference nothing.
    """
    if not isinstance(language_features, dict):
        return []
    keys = language_features.get("grammar")
    if not isinstance(keys, list):
        return []
    return [key for key in keys if isinstance(key, str)]


# =============================================================================
# COVERAGE
# =============================================================================

@dataclass(frozen=True)
class CoverageRow:
    feature_key: str
    feature_name: str
    cefr_level: str
    category: Optional[str]
    content_count: int

    @property
    def is_gap(self) -> bool:
        return self.content_count == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature_key": self.feature_key,
            "feature_name": self.feature_name,
            "cefr_level": self.cefr_level,
            "category": self.category,
            "content_count": self.content_count,
            "is_gap": self.is_gap,
        }


@dataclass(frozen=True)
class CoverageSummary:
    total_features: int = 0
    covered: int = 0
    gaps: int = 0
    coverage_percent: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_features": self.total_features,
            "covered": self.covered,
            "gaps": self.gaps,
            "coverage_percent": self.coverage_percent,
        }


@dataclass(frozen=True)
class CoverageReport:
    """Feature-keyed coverage rows plus their roll-up."""
    summary: CoverageSummary
    features: tuple[CoverageRow, ...] = ()

    @property
    def gap_rows(self) -> list[CoverageRow]:
        return [row for row in self.features if row.is_gap]

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "features": [row.to_dict() for row in self.features],
        }
