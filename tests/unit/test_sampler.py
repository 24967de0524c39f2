"""
Unit tests for CEFR-stratified content sampling.
"""

from collections import Counter
from datetime import datetime, timedelta

import pytest

from limba_insights.analytics.cefr import CEFR_CENTER_POINTS, CEFR_LEVELS, band_of
from limba_insights.analytics.models import ContentItem
from limba_insights.analytics.sampler import partition_by_band, per_band_cap, stratified_sample

START = datetime(2024, 3, 1)


def item(item_id: str, difficulty: float, day: int) -> ContentItem:
    return ContentItem(
        id=item_id,
        type="text",
        title=item_id,
        difficulty_level=difficulty,
        created_at=START + timedelta(days=day),
    )


def two_per_band() -> list[ContentItem]:
    items = []
    for index, level in enumerate(CEFR_LEVELS):
        center = CEFR_CENTER_POINTS[level]
        items.append(item(f"{level.value}-late", center, 10 + index))
        items.append(item(f"{level.value}-early", center, index))
    return items


class TestPerBandCap:
    @pytest.mark.parametrize("limit, cap", [(1, 1), (6, 1), (7, 2), (12, 2), (50, 9)])
    def test_cap_rounds_up(self, limit, cap):
        assert per_band_cap(limit) == cap

    def test_limit_below_one_rejected(self):
        with pytest.raises(ValueError):
            per_band_cap(0)


class TestStratifiedSample:
    def test_one_per_band_when_limit_is_six(self):
        sample = stratified_sample(two_per_band(), total_limit=6)

        assert len(sample) == 6
        per_band = Counter(band_of(entry.difficulty_level) for entry in sample)
        assert all(count == 1 for count in per_band.values())
        # earliest item of each band wins
        assert all(entry.id.endswith("-early") for entry in sample)

    def test_result_can_exceed_limit_by_design(self):
        sample = stratified_sample(two_per_band(), total_limit=7)
        # cap is ceil(7 / 6) = 2, so every band contributes both items
        assert len(sample) == 12

    def test_never_more_than_cap_per_band(self):
        crowded = [item(f"a1-{n}", 1.5, n) for n in range(20)] + [item("c2", 9.8, 0)]
        sample = stratified_sample(crowded, total_limit=12)

        assert [entry.id for entry in sample] == ["a1-0", "a1-1", "c2"]

    def test_sorted_by_difficulty_then_created(self):
        items = [
            item("hard", 8.5, 0),
            item("easy-late", 1.2, 5),
            item("easy-early", 1.2, 1),
            item("mid", 4.4, 2),
        ]
        sample = stratified_sample(items, total_limit=12)
        assert [entry.id for entry in sample] == ["easy-early", "easy-late", "mid", "hard"]

    def test_empty_candidates(self):
        assert stratified_sample([], total_limit=10) == []

    def test_sample_catalog(self, content_items):
        sample = stratified_sample(content_items, total_limit=6)
        assert [entry.id for entry in sample] == ["c1", "c3", "c4", "c6", "c7", "c8"]


class TestPartition:
    def test_every_band_present_even_if_empty(self):
        groups = partition_by_band([item("x", 3.0, 0)])
        assert list(groups) == list(CEFR_LEVELS)
        assert [entry.id for entry in groups[band_of(3.0)]] == ["x"]
        assert sum(len(group) for group in groups.values()) == 1
