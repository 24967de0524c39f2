"""
Telemetry listings: usage, anonymized learner data, errors and exercises.

Each function maps its arguments onto one statement from
limba_insights.db.queries and returns the rows as plain dicts. Argument
bounds are enforced by the routers that call these.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Literal, Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.orm import Session

from limba_insights.db.queries import QUERIES

ErrorType = Literal["grammar", "pronunciation", "vocabulary", "word_order"]


def _rows(session: Session, query_name: str, params: Optional[dict[str, Any]] = None) -> list[dict[str, Any]]:
    result = session.execute(text(QUERIES[query_name]), params or {})
    rows = [dict(row) for row in result.mappings().all()]
    logger.debug(f"{query_name}: {len(rows)} rows")
    return rows


# =============================================================================
# Usage
# =============================================================================

def get_tts_usage(session: Session, days: int = 30) -> list[dict[str, Any]]:
    """Characters of text-to-speech consumed per day over the last `days` days."""
    return _rows(session, "tts_usage", {"days": days})


# =============================================================================
# Learner data
# =============================================================================

def get_session_summary(
    session: Session,
    session_type: Optional[str] = None,
    limit: int = 30,
) -> dict[str, Any]:
    """
    Session counts and durations by session type.

    With session_type, adds a per-content breakdown for that type.
    """
    summary: dict[str, Any] = {"by_type": _rows(session, "session_summary")}
    if session_type:
        summary["content_breakdown"] = _rows(
            session,
            "session_content_breakdown",
            {"session_type": session_type, "limit": limit},
        )
    return summary


def get_proficiency_trends(session: Session, limit: int = 20) -> list[dict[str, Any]]:
    return _rows(session, "proficiency_trends", {"limit": limit})


def get_feature_exposure(
    session: Session,
    feature_key: Optional[str] = None,
    limit: int = 50,
) -> list[dict[str, Any]]:
    """Exposure counts and accuracy per grammar feature and exposure type."""
    return _rows(session, "feature_exposure", {"feature_key": feature_key, "limit": limit})


def get_mystery_items(
    session: Session,
    explored: Optional[bool] = None,
    limit: int = 30,
) -> list[dict[str, Any]]:
    return _rows(session, "mystery_items", {"explored": explored, "limit": limit})


def get_generated_content_summary(
    session: Session,
    content_type: Optional[str] = None,
    limit: int = 30,
) -> list[dict[str, Any]]:
    """Generated-content volume, listen rate and TTS cost by target."""
    return _rows(session, "generated_content_summary", {"content_type": content_type, "limit": limit})


def get_learning_narratives(session: Session, limit: int = 10) -> list[dict[str, Any]]:
    return _rows(session, "learning_narratives", {"limit": limit})


# =============================================================================
# Errors & adaptation
# =============================================================================

def get_error_patterns(
    session: Session,
    error_type: Optional[ErrorType] = None,
    limit: int = 30,
) -> list[dict[str, Any]]:
    """Error frequency by type, category and modality across all learners."""
    return _rows(session, "error_patterns", {"error_type": error_type, "limit": limit})


def get_adaptation_summary(session: Session) -> list[dict[str, Any]]:
    """Top 25 escalated error patterns with their resolution counts."""
    return _rows(session, "adaptation_summary")


# =============================================================================
# Exercises
# =============================================================================

def get_reading_questions(
    session: Session,
    level: Optional[str] = None,
    limit: int = 20,
) -> list[dict[str, Any]]:
    return _rows(session, "reading_questions", {"level": level, "limit": limit})


def get_stress_pairs(session: Session, limit: int = 30) -> list[dict[str, Any]]:
    return _rows(session, "stress_pairs", {"limit": limit})


def get_suggested_questions(
    session: Session,
    cefr_level: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 30,
) -> list[dict[str, Any]]:
    return _rows(
        session,
        "suggested_questions",
        {"cefr_level": cefr_level, "category": category, "limit": limit},
    )


def get_tutor_openings(session: Session, self_assessment_key: Optional[str] = None) -> list[dict[str, Any]]:
    return _rows(session, "tutor_openings", {"self_assessment_key": self_assessment_key})


# =============================================================================
# Schema
# =============================================================================

def get_schema(session: Session) -> dict[str, list[dict[str, str]]]:
    """Columns of every public table, grouped by table name."""
    tables: dict[str, list[dict[str, str]]] = defaultdict(list)
    for row in _rows(session, "public_columns"):
        tables[row["table_name"]].append({"column": row["column_name"], "type": row["data_type"]})
    return dict(tables)
