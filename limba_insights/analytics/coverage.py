"""
Grammar coverage reconciliation.

Cross-references grammar_feature_map against the grammar tags on
content_items to show which features have content and which are gaps.

Two independent passes:
1. count_feature_references() - feature key -> number of tagged items
2. build_coverage_report()    - join the counts onto the feature catalog

Either input can be a generator; neither pass looks at the other's source.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from limba_insights.analytics.cefr import rank_of
from limba_insights.analytics.models import (
    ContentItem,
    CoverageReport,
    CoverageRow,
    CoverageSummary,
    GrammarFeature,
    grammar_keys,
)


def count_feature_references(tag_payloads: Iterable[Any]) -> Counter[str]:
    """
    Count how many content items reference each grammar feature key.

    Each payload is one item's language_features value. Keys unknown to
    the catalog are counted too; they simply never match a row.
    """
    counts: Counter[str] = Counter()
    for payload in tag_payloads:
        for feature_key in grammar_keys(payload):
            counts[feature_key] += 1
    return counts


def coverage_percent(covered: int, total: int) -> int:
    """Percentage of covered features, rounded half up; 0 for an empty catalog."""
    if total <= 0:
        return 0
    # Integer form of floor(100 * covered / total + 0.5)
    return (200 * covered + total) // (2 * total)


def summarize(rows: Iterable[CoverageRow]) -> CoverageSummary:
    total = 0
    gaps = 0
    for row in rows:
        total += 1
        if row.is_gap:
            gaps += 1
    covered = total - gaps
    return CoverageSummary(
        total_features=total,
        covered=covered,
        gaps=gaps,
        coverage_percent=coverage_percent(covered, total),
    )


def build_coverage_report(
    features: Iterable[GrammarFeature],
    counts: Mapping[str, int],
) -> CoverageReport:
    """
    One row per feature, sorted by CEFR rank then content count ascending.

    Within a level, gaps come first. sorted() is stable, so rows with equal
    keys keep their catalog order.
    """
    rows = [
        CoverageRow(
            feature_key=feature.feature_key,
            feature_name=feature.feature_name,
            cefr_level=feature.cefr_level,
            category=feature.category,
            content_count=counts.get(feature.feature_key, 0),
        )
        for feature in features
    ]
    rows = sorted(rows, key=lambda row: (rank_of(row.cefr_level), row.content_count))

    summary = summarize(rows)
    logger.debug(
        f"Coverage: {summary.covered}/{summary.total_features} features covered "
        f"({summary.coverage_percent}%), {summary.gaps} gaps"
    )
    return CoverageReport(summary=summary, features=tuple(rows))


def reconcile(features: Iterable[GrammarFeature], items: Iterable[ContentItem]) -> CoverageReport:
    """Coverage report for a feature catalog against a set of content items."""
    counts = count_feature_references(item.language_features for item in items)
    return build_coverage_report(features, counts)
