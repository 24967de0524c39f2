"""
Grammar router: feature map listing and prerequisite chain resolution.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from limba_insights.analytics import service
from limba_insights.analytics.exceptions import FeatureNotFoundError
from limba_insights.analytics.models import PrerequisiteNode
from limba_insights.db.database import get_db

router = APIRouter()

CefrLevelParam = Literal["A1", "A2", "B1", "B2", "C1", "C2"]


# ========================================
# Response Models
# ========================================


class GrammarFeatureResponse(BaseModel):
    """One entry of the grammar feature map."""

    feature_key: str
    feature_name: str
    cefr_level: str
    category: Optional[str] = None
    description: Optional[str] = None
    prerequisites: List[str] = Field(default_factory=list)
    sort_order: Optional[int] = None


class PrerequisiteTreeResponse(BaseModel):
    """A feature with its resolved prerequisites nested below it."""

    feature_key: str
    feature_name: str
    cefr_level: str
    prerequisites: List["PrerequisiteTreeResponse"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: PrerequisiteNode) -> "PrerequisiteTreeResponse":
        return cls.model_validate(node.to_dict())


PrerequisiteTreeResponse.model_rebuild()


# ========================================
# Endpoints
# ========================================


@router.get(
    "/map",
    response_model=List[GrammarFeatureResponse],
    summary="Get grammar feature map",
)
def get_grammar_map(
    cefr_level: Optional[CefrLevelParam] = Query(None, description="Filter by CEFR level"),
    db: Session = Depends(get_db),
) -> List[GrammarFeatureResponse]:
    """
    Return every grammar feature, optionally for one CEFR level.

    Shows feature keys, names, categories, descriptions, prerequisites
    and sort order, ordered by level then sort order.
    """
    try:
        features = service.get_grammar_map(db, cefr_level)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch grammar map")
        raise HTTPException(status_code=500, detail=str(exc))
    return [GrammarFeatureResponse(**feature.to_dict()) for feature in features]


@router.get(
    "/prerequisites/{feature_key}",
    response_model=PrerequisiteTreeResponse,
    summary="Get prerequisite chain",
)
def get_prerequisite_chain(
    feature_key: str,
    db: Session = Depends(get_db),
) -> PrerequisiteTreeResponse:
    """
    Return the recursive prerequisite tree for a grammar feature.

    Use it to audit whether sequencing is pedagogically sound. Depth is
    capped (10 levels by default), a feature already shown elsewhere in the
    tree is not repeated, and prerequisite keys missing from the map appear
    as "(not found in grammar_feature_map)" leaves.
    """
    try:
        tree = service.get_prerequisite_chain(db, feature_key)
    except FeatureNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to resolve prerequisites for {feature_key}")
        raise HTTPException(status_code=500, detail=str(exc))
    return PrerequisiteTreeResponse.from_node(tree)
