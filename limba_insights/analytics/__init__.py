"""
Pedagogical graph and coverage analytics.

Pure, request-scoped computations over data already fetched from the store:
- cefr: difficulty score <-> CEFR band mapping
- prerequisites: bounded, cycle-safe prerequisite trees
- coverage: grammar feature coverage report
- sampler: CEFR-stratified content sampling
"""
from limba_insights.analytics.cefr import CEFR_LEVELS, CefrLevel, band_of, order_of, query_range
from limba_insights.analytics.coverage import (
    build_coverage_report,
    count_feature_references,
    reconcile,
)
from limba_insights.analytics.exceptions import FeatureNotFoundError, LimbaInsightsError
from limba_insights.analytics.models import (
    ContentItem,
    CoverageReport,
    CoverageRow,
    CoverageSummary,
    GrammarFeature,
    PrerequisiteNode,
)
from limba_insights.analytics.prerequisites import PrerequisiteResolver, index_features, resolve
from limba_insights.analytics.sampler import stratified_sample

__all__ = [
    "CEFR_LEVELS",
    "CefrLevel",
    "ContentItem",
    "CoverageReport",
    "CoverageRow",
    "CoverageSummary",
    "FeatureNotFoundError",
    "GrammarFeature",
    "LimbaInsightsError",
    "PrerequisiteNode",
    "PrerequisiteResolver",
    "band_of",
    "build_coverage_report",
    "count_feature_references",
    "index_features",
    "order_of",
    "query_range",
    "reconcile",
    "resolve",
    "stratified_sample",
]
