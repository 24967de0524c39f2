"""
CEFR banding for content difficulty scores.

Content items carry a continuous difficulty score (roughly 1.0-10.0);
grammar features carry a CEFR level. This module maps between the two:

- band_of(): score -> level, using non-overlapping upper bounds
- query_range(): level -> overlapping score range for i+1 input selection
- order_of() / rank_of(): fixed A1..C2 rank for sorting (never lexical)
"""
from __future__ import annotations

from enum import Enum


class CefrLevel(str, Enum):
    """The six ordered CEFR proficiency bands."""
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


CEFR_LEVELS: tuple[CefrLevel, ...] = tuple(CefrLevel)

# Label used on placeholder nodes whose feature is missing from the catalog.
UNKNOWN_LEVEL = "unknown"

# Upper bound (inclusive) of each band; anything above C1 is C2.
_UPPER_BOUNDS: tuple[tuple[float, CefrLevel], ...] = (
    (2.0, CefrLevel.A1),
    (3.5, CefrLevel.A2),
    (5.0, CefrLevel.B1),
    (7.0, CefrLevel.B2),
    (9.0, CefrLevel.C1),
)

# Center points used when storing content.
CEFR_CENTER_POINTS: dict[CefrLevel, float] = {
    CefrLevel.A1: 1.5,
    CefrLevel.A2: 2.5,
    CefrLevel.B1: 4.0,
    CefrLevel.B2: 6.0,
    CefrLevel.C1: 8.0,
    CefrLevel.C2: 9.5,
}

# Non-overlapping display ranges (difficulty -> CEFR).
CEFR_DISPLAY_RANGES: dict[CefrLevel, tuple[float, float]] = {
    CefrLevel.A1: (0.0, 2.0),
    CefrLevel.A2: (2.1, 3.5),
    CefrLevel.B1: (3.6, 5.0),
    CefrLevel.B2: (5.1, 7.0),
    CefrLevel.C1: (7.1, 9.0),
    CefrLevel.C2: (9.1, 10.0),
}

# Overlapping query ranges (CEFR -> difficulty) so a level also sees
# slightly harder material.
CEFR_QUERY_RANGES: dict[CefrLevel, tuple[float, float]] = {
    CefrLevel.A1: (1.0, 2.5),
    CefrLevel.A2: (2.0, 4.0),
    CefrLevel.B1: (3.5, 5.5),
    CefrLevel.B2: (5.0, 7.0),
    CefrLevel.C1: (7.0, 9.0),
    CefrLevel.C2: (9.0, 10.0),
}

_ORDER: dict[CefrLevel, int] = {level: index for index, level in enumerate(CEFR_LEVELS)}


def band_of(score: float) -> CefrLevel:
    """
    Map a difficulty score to its CEFR band.

    Boundary scores belong to the lower band (2.0 -> A1, 3.5 -> A2, ...).
    Every real number maps to exactly one band.
    """
    for upper, level in _UPPER_BOUNDS:
        if score <= upper:
            return level
    return CefrLevel.C2


def order_of(level: CefrLevel | str) -> int:
    """Return the fixed rank of a band, A1=0 through C2=5."""
    return _ORDER[CefrLevel(level)]


def rank_of(label: str | None) -> int:
    """
    Sort key for a level label as stored in the database.

    Labels outside the six bands (e.g. "unknown") rank after C2.
    """
    try:
        return order_of(label)
    except ValueError:
        return len(CEFR_LEVELS)


def query_range(level: CefrLevel | str) -> tuple[float, float]:
    """Return the (min, max) difficulty range used to select content for a band."""
    return CEFR_QUERY_RANGES[CefrLevel(level)]


def display_range(level: CefrLevel | str) -> tuple[float, float]:
    """Return the non-overlapping (min, max) difficulty range a band displays as."""
    return CEFR_DISPLAY_RANGES[CefrLevel(level)]


def center_point(level: CefrLevel | str) -> float:
    return CEFR_CENTER_POINTS[CefrLevel(level)]
