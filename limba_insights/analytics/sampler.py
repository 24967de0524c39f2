"""
CEFR-stratified content sampling.

When content is browsed without a difficulty filter, drawing the first N
rows lets whichever level has the most content crowd out the rest. The
sampler instead gives each of the six bands an equal share:

    per-band cap = ceil(limit / 6), earliest-created first

The cap is a per-band allocation, not a global truncation: the result
can hold up to 6 * cap items, i.e. up to 5 more than limit.
"""
from __future__ import annotations

import math
from collections.abc import Iterable

from loguru import logger

from limba_insights.analytics.cefr import CEFR_LEVELS, CefrLevel, band_of
from limba_insights.analytics.models import ContentItem


def per_band_cap(total_limit: int) -> int:
    """Number of items each band may contribute for a requested total."""
    if total_limit < 1:
        raise ValueError(f"total_limit must be >= 1, got {total_limit}")
    return math.ceil(total_limit / len(CEFR_LEVELS))


def partition_by_band(candidates: Iterable[ContentItem]) -> dict[CefrLevel, list[ContentItem]]:
    groups: dict[CefrLevel, list[ContentItem]] = {level: [] for level in CEFR_LEVELS}
    for item in candidates:
        groups[band_of(item.difficulty_level)].append(item)
    return groups


def stratified_sample(candidates: Iterable[ContentItem], total_limit: int) -> list[ContentItem]:
    """
    Draw an evenly allocated slice of content across CEFR bands.

    Args:
        candidates: Content already filtered by topic/type
        total_limit: Requested number of items (>= 1)

    Returns:
        Items sorted by (difficulty_level, created_at)
    """
    cap = per_band_cap(total_limit)
    groups = partition_by_band(candidates)

    selected: list[ContentItem] = []
    for level in CEFR_LEVELS:
        earliest = sorted(groups[level], key=lambda item: item.created_at)[:cap]
        if earliest:
            logger.debug(f"Band {level.value}: {len(earliest)}/{len(groups[level])} items (cap {cap})")
        selected.extend(earliest)

    return sorted(selected, key=lambda item: (item.difficulty_level, item.created_at))
