"""
Telemetry router: anonymized usage, learner, error and exercise listings.

Every endpoint is a thin parameter-to-filter translation over one table;
no learner identifiers are returned.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Literal, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from limba_insights.db.database import get_db
from limba_insights.telemetry import service

router = APIRouter()

CefrLevelParam = Literal["A1", "A2", "B1", "B2", "C1", "C2"]
ErrorTypeParam = Literal["grammar", "pronunciation", "vocabulary", "word_order"]

T = TypeVar("T")


def _run(name: str, call: Callable[[], T]) -> T:
    try:
        return call()
    except SQLAlchemyError as exc:
        logger.exception(f"Telemetry listing {name} failed")
        raise HTTPException(status_code=500, detail=str(exc))


# ========================================
# Usage
# ========================================


@router.get("/tts-usage", summary="Get TTS usage")
def get_tts_usage(
    days: int = Query(30, ge=1, le=365, description="Number of days to look back"),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Text-to-speech characters consumed per day."""
    return _run("tts_usage", lambda: service.get_tts_usage(db, days))


# ========================================
# Learner data
# ========================================


@router.get("/sessions", summary="Get session summary")
def get_session_summary(
    session_type: Optional[str] = Query(None, description="Session type for per-content breakdown"),
    limit: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Session counts by type, average duration and content engagement."""
    return _run("session_summary", lambda: service.get_session_summary(db, session_type, limit))


@router.get("/proficiency", summary="Get proficiency trends")
def get_proficiency_trends(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run("proficiency_trends", lambda: service.get_proficiency_trends(db, limit))


@router.get("/feature-exposure", summary="Get feature exposure")
def get_feature_exposure(
    feature_key: Optional[str] = Query(None, description="Filter by feature key"),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """How often each grammar feature was seen, with correctness rates."""
    return _run("feature_exposure", lambda: service.get_feature_exposure(db, feature_key, limit))


@router.get("/mystery-items", summary="Get mystery items")
def get_mystery_items(
    explored: Optional[bool] = Query(None, description="Filter by exploration status"),
    limit: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run("mystery_items", lambda: service.get_mystery_items(db, explored, limit))


@router.get("/generated-content", summary="Get generated content summary")
def get_generated_content_summary(
    content_type: Optional[str] = Query(None, description="Filter by content type"),
    limit: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run(
        "generated_content_summary",
        lambda: service.get_generated_content_summary(db, content_type, limit),
    )


@router.get("/narratives", summary="Get learning narratives")
def get_learning_narratives(
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run("learning_narratives", lambda: service.get_learning_narratives(db, limit))


# ========================================
# Errors & adaptation
# ========================================


@router.get("/error-patterns", summary="Get error patterns")
def get_error_patterns(
    error_type: Optional[ErrorTypeParam] = Query(None, description="Filter by error type"),
    limit: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Where learners actually struggle, aggregated across all users."""
    return _run("error_patterns", lambda: service.get_error_patterns(db, error_type, limit))


@router.get("/adaptation", summary="Get adaptation summary")
def get_adaptation_summary(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """Fossilization interventions: max tier reached and resolution counts."""
    return _run("adaptation_summary", lambda: service.get_adaptation_summary(db))


# ========================================
# Exercises
# ========================================


@router.get("/reading-questions", summary="Get reading questions")
def get_reading_questions(
    level: Optional[CefrLevelParam] = Query(None, description="Filter by CEFR level"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run("reading_questions", lambda: service.get_reading_questions(db, level, limit))


@router.get("/stress-pairs", summary="Get stress minimal pairs")
def get_stress_pairs(
    limit: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run("stress_pairs", lambda: service.get_stress_pairs(db, limit))


@router.get("/suggested-questions", summary="Get suggested questions")
def get_suggested_questions(
    cefr_level: Optional[CefrLevelParam] = Query(None, description="Filter by CEFR level"),
    category: Optional[str] = Query(None, description="Filter by category"),
    limit: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run(
        "suggested_questions",
        lambda: service.get_suggested_questions(db, cefr_level, category, limit),
    )


@router.get("/tutor-openings", summary="Get tutor opening messages")
def get_tutor_openings(
    self_assessment_key: Optional[str] = Query(None, description="Filter by self-assessment key"),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return _run("tutor_openings", lambda: service.get_tutor_openings(db, self_assessment_key))


# ========================================
# Schema
# ========================================

schema_router = APIRouter()


@schema_router.get("", summary="Get database schema")
def get_schema(db: Session = Depends(get_db)) -> Dict[str, List[Dict[str, str]]]:
    """Tables and columns of the public schema, for orientation."""
    return _run("schema", lambda: service.get_schema(db))
