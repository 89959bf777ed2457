"""
Pytest configuration for ormkit.

Provides fixtures for:
- Settings pointing at a throwaway SQLite file
- A `Database` with the test schema created, closed after each test
- A fixed clock for timestamp assertions
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from ormkit.config import Settings
from ormkit.infrastructure.db_factory import Database
from tests.models import Base

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'ormkit-test.db'}",
        log_level="DEBUG",
        bulk_chunk_size=100,
    )


@pytest.fixture
def sqlite_engine(test_settings: Settings) -> Generator[Engine, None, None]:
    """
    Engine with the test schema created and no ormkit hooks registered.
    """
    engine = create_engine(test_settings.database_url)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def database(test_settings: Settings) -> Generator[Database, None, None]:
    """
    Database with interceptors registered on the test base.

    Closing removes the listeners so tests never see each other's hooks.
    """
    db = Database(test_settings, base=Base)
    Base.metadata.create_all(db.engine)
    try:
        yield db
    finally:
        db.close()
