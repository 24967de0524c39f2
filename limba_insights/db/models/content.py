"""
Read models for grammar metadata and content items.

Only the columns the analytics core reads are mapped. The service never
creates, alters or writes these tables; the mappings exist so queries can
be built with select() instead of assembled SQL strings.

Postgres stores prerequisites as text[] and language_features as JSONB;
the JSON variants let the same models run against SQLite in tests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import ARRAY, JSON, DateTime, Float, Integer, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

_TextArray = ARRAY(Text).with_variant(JSON(), "sqlite")
_JsonDocument = JSONB().with_variant(JSON(), "sqlite")


class GrammarFeatureRecord(Base):
    """One grammar concept in the curriculum map."""

    __tablename__ = "grammar_feature_map"

    feature_key: Mapped[str] = mapped_column(Text, primary_key=True)
    feature_name: Mapped[str] = mapped_column(Text, nullable=False)
    cefr_level: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    # Keys of other features; not foreign keys, may dangle or cycle
    prerequisites: Mapped[list[str] | None] = mapped_column(_TextArray)
    sort_order: Mapped[int | None] = mapped_column(Integer)


class ContentItemRecord(Base):
    """An audio or text item learners consume."""

    __tablename__ = "content_items"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    difficulty_level: Mapped[float] = mapped_column(Float, nullable=False)
    topic: Mapped[str | None] = mapped_column(Text)
    # {"grammar": [feature_key, ...], ...}
    language_features: Mapped[dict[str, Any] | None] = mapped_column(_JsonDocument)
    duration_seconds: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
