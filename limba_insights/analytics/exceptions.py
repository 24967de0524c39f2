"""Exceptions raised by the analytics layer."""
from __future__ import annotations


class LimbaInsightsError(Exception):
    """Base class for analytics errors surfaced to callers."""


class FeatureNotFoundError(LimbaInsightsError):
    """The requested grammar feature is not in the grammar feature map."""

    def __init__(self, feature_key: str):
        self.feature_key = feature_key
        super().__init__(f'Feature "{feature_key}" not found in grammar_feature_map.')
