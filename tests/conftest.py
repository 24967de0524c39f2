"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
Storage-backed tests run against an in-memory SQLite database holding the
grammar_feature_map and content_items read models.
"""
import sys
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from limba_insights.analytics.models import ContentItem, GrammarFeature  # noqa: E402
from limba_insights.db.models import Base, ContentItemRecord, GrammarFeatureRecord  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


# ============================================================================
# Sample data
# ============================================================================

GRAMMAR_ROWS = [
    {"feature_key": "present_tense", "feature_name": "Present tense", "cefr_level": "A1",
     "category": "verbs", "prerequisites": [], "sort_order": 1},
    {"feature_key": "articles", "feature_name": "Definite articles", "cefr_level": "A1",
     "category": "nouns", "prerequisites": [], "sort_order": 2},
    {"feature_key": "plural_nouns", "feature_name": "Plural nouns", "cefr_level": "A1",
     "category": "nouns", "prerequisites": ["articles"], "sort_order": 3},
    {"feature_key": "past_tense", "feature_name": "Compound past", "cefr_level": "A2",
     "category": "verbs", "prerequisites": ["present_tense", "ghost_feature"], "sort_order": 1},
    {"feature_key": "reflexive_verbs", "feature_name": "Reflexive verbs", "cefr_level": "B1",
     "category": "verbs", "prerequisites": ["present_tense", "past_tense"], "sort_order": 1},
    {"feature_key": "subjunctive", "feature_name": "Subjunctive mood", "cefr_level": "B2",
     "category": "moods", "prerequisites": ["reflexive_verbs", "subjunctive"], "sort_order": 1},
]

CONTENT_ROWS = [
    {"id": "c1", "type": "text", "title": "At the market", "difficulty_level": 1.5, "topic": "food",
     "language_features": {"grammar": ["present_tense", "articles"]}, "created_at": datetime(2024, 1, 1)},
    {"id": "c2", "type": "audio", "title": "Train station", "difficulty_level": 1.8, "topic": "travel",
     "language_features": {"grammar": ["present_tense"]}, "created_at": datetime(2024, 1, 2)},
    {"id": "c3", "type": "text", "title": "Yesterday's dinner", "difficulty_level": 2.5, "topic": "food",
     "language_features": {"grammar": ["past_tense", "unknown_key"]}, "created_at": datetime(2024, 1, 3)},
    {"id": "c4", "type": "audio", "title": "Family visit", "difficulty_level": 4.0, "topic": "family",
     "language_features": None, "created_at": datetime(2024, 1, 4)},
    {"id": "c5", "type": "text", "title": "Saturday stalls", "difficulty_level": 4.0, "topic": "Food markets",
     "language_features": {"vocabulary": ["piata"]}, "created_at": datetime(2024, 1, 5)},
    {"id": "c6", "type": "text", "title": "Office small talk", "difficulty_level": 6.0, "topic": "work",
     "language_features": {"grammar": ["present_tense"]}, "created_at": datetime(2024, 1, 6)},
    {"id": "c7", "type": "audio", "title": "Folk festival", "difficulty_level": 8.0, "topic": "culture",
     "language_features": {}, "created_at": datetime(2024, 1, 7)},
    {"id": "c8", "type": "text", "title": "Union of 1918", "difficulty_level": 9.5, "topic": "history",
     "language_features": {"grammar": ["subjunctive"]}, "created_at": datetime(2024, 1, 8)},
]


@pytest.fixture
def grammar_features():
    """The sample grammar map as analytics dataclasses, in catalog order."""
    return [
        GrammarFeature(
            feature_key=row["feature_key"],
            feature_name=row["feature_name"],
            cefr_level=row["cefr_level"],
            category=row["category"],
            prerequisites=tuple(row["prerequisites"]),
            sort_order=row["sort_order"],
        )
        for row in GRAMMAR_ROWS
    ]


@pytest.fixture
def content_items():
    """The sample content catalog as analytics dataclasses."""
    return [ContentItem(**row) for row in CONTENT_ROWS]


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads (for TestClient)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to a database seeded with the sample data."""
    factory = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    with factory() as session:
        session.add_all(GrammarFeatureRecord(**row) for row in GRAMMAR_ROWS)
        session.add_all(ContentItemRecord(**row) for row in CONTENT_ROWS)
        session.commit()
    return factory


@pytest.fixture
def db_session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def empty_session(db_engine):
    """Session on a database with the tables but no rows."""
    factory = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    with factory() as session:
        yield session
