"""
Read access to grammar metadata and content items.

Every function takes an open Session, runs one SELECT built with the
SQLAlchemy query builder (bound parameters only), and converts rows to
the analytics dataclasses. Nothing here writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from limba_insights.analytics.models import ContentItem, GrammarFeature
from limba_insights.db.models import ContentItemRecord, GrammarFeatureRecord


@dataclass(frozen=True)
class ContentFilters:
    """Filters for content listings; all optional except limit."""
    difficulty_level: Optional[float] = None
    topic: Optional[str] = None
    content_type: Optional[str] = None
    limit: int = 50

    @property
    def has_difficulty(self) -> bool:
        return self.difficulty_level is not None


# ========================================
# Row conversion
# ========================================


def _to_feature(record: GrammarFeatureRecord) -> GrammarFeature:
    return GrammarFeature(
        feature_key=record.feature_key,
        feature_name=record.feature_name,
        cefr_level=record.cefr_level,
        category=record.category,
        prerequisites=tuple(record.prerequisites or ()),
        description=record.description,
        sort_order=record.sort_order,
    )


def _to_content_item(record: ContentItemRecord) -> ContentItem:
    return ContentItem(
        id=str(record.id),
        type=record.type,
        title=record.title,
        difficulty_level=float(record.difficulty_level),
        topic=record.topic,
        language_features=record.language_features,
        duration_seconds=record.duration_seconds,
        created_at=record.created_at,
    )


# ========================================
# Grammar
# ========================================


def fetch_all_grammar_features(session: Session, cefr_level: Optional[str] = None) -> list[GrammarFeature]:
    """
    Fetch grammar_feature_map, optionally restricted to one CEFR level.

    Ordered by (cefr_level, sort_order), which is also the catalog order
    the coverage report preserves for ties.
    """
    stmt = select(GrammarFeatureRecord)
    if cefr_level:
        stmt = stmt.where(GrammarFeatureRecord.cefr_level == cefr_level)
    stmt = stmt.order_by(GrammarFeatureRecord.cefr_level, GrammarFeatureRecord.sort_order)

    features = [_to_feature(record) for record in session.scalars(stmt)]
    logger.debug(f"Fetched {len(features)} grammar features")
    return features


# ========================================
# Content
# ========================================


def fetch_content_tag_payloads(session: Session) -> list[dict[str, Any]]:
    """Fetch language_features for every content item that has one."""
    stmt = select(ContentItemRecord.language_features).where(
        ContentItemRecord.language_features.is_not(None)
    )
    payloads = [payload for payload in session.scalars(stmt) if payload is not None]
    logger.debug(f"Fetched {len(payloads)} content tag payloads")
    return payloads


def fetch_candidate_content(session: Session, filters: ContentFilters) -> list[ContentItem]:
    """
    Fetch content items matching the filters.

    With an exact difficulty filter the query is ordered by created_at and
    limited in SQL. Without one, every match is returned so the caller can
    stratify across CEFR bands.
    """
    stmt = select(ContentItemRecord)
    if filters.has_difficulty:
        stmt = stmt.where(ContentItemRecord.difficulty_level == filters.difficulty_level)
    if filters.topic:
        stmt = stmt.where(ContentItemRecord.topic.ilike(f"%{filters.topic}%"))
    if filters.content_type:
        stmt = stmt.where(ContentItemRecord.type == filters.content_type)

    if filters.has_difficulty:
        stmt = stmt.order_by(ContentItemRecord.created_at).limit(filters.limit)

    items = [_to_content_item(record) for record in session.scalars(stmt)]
    logger.debug(f"Fetched {len(items)} content items for {filters}")
    return items
