"""
Analytics operations: fetch from the store, run the core, return values.

Fetches happen first and in sequence; the core computations that follow
are pure and hold nothing between calls.
"""
from __future__ import annotations

from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

from config import get_settings
from limba_insights.analytics.coverage import build_coverage_report, count_feature_references
from limba_insights.analytics.models import ContentItem, CoverageReport, GrammarFeature, PrerequisiteNode
from limba_insights.analytics.prerequisites import PrerequisiteResolver, index_features
from limba_insights.analytics.sampler import stratified_sample
from limba_insights.db.repository import (
    ContentFilters,
    fetch_all_grammar_features,
    fetch_candidate_content,
    fetch_content_tag_payloads,
)


def get_grammar_map(session: Session, cefr_level: Optional[str] = None) -> list[GrammarFeature]:
    """All grammar features, optionally for a single CEFR level."""
    return fetch_all_grammar_features(session, cefr_level)


def get_prerequisite_chain(
    session: Session,
    feature_key: str,
    max_depth: Optional[int] = None,
) -> PrerequisiteNode:
    """
    Resolve the full prerequisite tree for a feature.

    The whole grammar map is loaded; it is a small reference table.

    Raises:
        FeatureNotFoundError: feature_key is not in grammar_feature_map
    """
    if max_depth is None:
        max_depth = get_settings().prerequisite_max_depth
    logger.info(f"Resolving prerequisite chain for {feature_key} (max depth {max_depth})")

    feature_table = index_features(fetch_all_grammar_features(session))
    return PrerequisiteResolver(feature_table, max_depth=max_depth).resolve(feature_key)


def get_coverage_report(session: Session) -> CoverageReport:
    """Cross-reference grammar_feature_map against content grammar tags."""
    logger.info("Building grammar coverage report")

    features = fetch_all_grammar_features(session)
    counts = count_feature_references(fetch_content_tag_payloads(session))
    return build_coverage_report(features, counts)


def get_content(session: Session, filters: ContentFilters) -> list[ContentItem]:
    """
    List content items.

    An exact difficulty filter returns the earliest `limit` matches. Without
    one, results are stratified across CEFR bands and may exceed `limit`
    by up to 5 items.
    """
    logger.info(f"Listing content: {filters}")

    candidates = fetch_candidate_content(session, filters)
    if filters.has_difficulty:
        return candidates
    return stratified_sample(candidates, filters.limit)
