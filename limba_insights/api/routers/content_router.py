"""
Content router: content listing and the grammar coverage audit.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from limba_insights.analytics import service
from limba_insights.db.database import get_db
from limba_insights.db.repository import ContentFilters

router = APIRouter()


# ========================================
# Response Models
# ========================================


class ContentItemResponse(BaseModel):
    id: str
    type: str
    title: str
    difficulty_level: float
    topic: Optional[str] = None
    language_features: Optional[Dict[str, Any]] = None
    duration_seconds: Optional[int] = None
    created_at: datetime


class CoverageRowResponse(BaseModel):
    feature_key: str
    feature_name: str
    cefr_level: str
    category: Optional[str] = None
    content_count: int
    is_gap: bool


class CoverageSummaryResponse(BaseModel):
    total_features: int
    covered: int
    gaps: int
    coverage_percent: int


class CoverageReportResponse(BaseModel):
    """Coverage rows sorted by CEFR level, gaps first within a level."""

    summary: CoverageSummaryResponse
    features: List[CoverageRowResponse]


# ========================================
# Endpoints
# ========================================


@router.get(
    "",
    response_model=List[ContentItemResponse],
    summary="Get content items",
)
def get_content(
    difficulty_level: Optional[float] = Query(
        None, ge=1.0, le=9.5, description="Filter by exact difficulty level (1.0-9.5)"
    ),
    topic: Optional[str] = Query(None, description="Filter by topic (partial match, case-insensitive)"),
    type: Optional[Literal["audio", "text"]] = Query(None, description="Filter by content type"),
    limit: int = Query(50, ge=1, description="Max results to return (default 50)"),
    db: Session = Depends(get_db),
) -> List[ContentItemResponse]:
    """
    Return content items, optionally filtered by difficulty, topic or type.

    Without a difficulty filter, results are stratified across CEFR levels
    for even coverage; each level contributes up to ceil(limit / 6) items,
    so the response can hold a few more than `limit`.
    """
    filters = ContentFilters(
        difficulty_level=difficulty_level,
        topic=topic,
        content_type=type,
        limit=limit,
    )
    try:
        items = service.get_content(db, filters)
    except SQLAlchemyError as exc:
        logger.exception("Failed to list content")
        raise HTTPException(status_code=500, detail=str(exc))
    return [ContentItemResponse(**item.to_dict()) for item in items]


@router.get(
    "/coverage",
    response_model=CoverageReportResponse,
    summary="Grammar coverage report",
)
def get_coverage_report(db: Session = Depends(get_db)) -> CoverageReportResponse:
    """
    Cross-reference grammar_feature_map against content grammar tags.

    Shows which grammar features have content coverage and which are gaps.
    """
    try:
        report = service.get_coverage_report(db)
    except SQLAlchemyError as exc:
        logger.exception("Failed to build coverage report")
        raise HTTPException(status_code=500, detail=str(exc))
    return CoverageReportResponse.model_validate(report.to_dict())
