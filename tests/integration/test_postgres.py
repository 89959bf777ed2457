"""
Integration tests against a real PostgreSQL instance (psycopg driver).

Run with: RUN_INTEGRATION_TESTS=1 ORM_TEST_DATABASE_URL=postgres://... pytest tests/integration/
"""

from __future__ import annotations

import os
from typing import Generator

import pytest
from sqlalchemy import func, select

from ormkit.config import Settings
from ormkit.infrastructure.db_factory import Database
from tests.models import Author, Base, Book

BULK_ROWS = 50
CHUNK_SIZE = 20

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1" or not os.getenv("ORM_TEST_DATABASE_URL"),
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and ORM_TEST_DATABASE_URL",
)


@pytest.fixture
def pg_database() -> Generator[Database, None, None]:
    db = Database(Settings(database_url=os.environ["ORM_TEST_DATABASE_URL"]), base=Base)
    Base.metadata.drop_all(db.engine)
    Base.metadata.create_all(db.engine)
    try:
        yield db
    finally:
        Base.metadata.drop_all(db.engine)
        db.close()


def test_bulk_create_uses_psycopg_placeholders(pg_database: Database) -> None:
    result = pg_database.bulk_create(
        [Author(name=f"a{i}") for i in range(BULK_ROWS)], chunk_size=CHUNK_SIZE
    )

    assert result["chunks"] == 3
    with pg_database.session() as session:
        assert session.execute(select(func.count()).select_from(Author)).scalar_one() == BULK_ROWS


def test_guard_rolls_back_on_postgres(pg_database: Database) -> None:
    with pg_database.begin() as tx:
        tx.bulk_create([Book(id=f"b{i}", title="t") for i in range(3)])

    with pg_database.session() as session:
        assert session.execute(select(func.count()).select_from(Book)).scalar_one() == 0


def test_create_assigns_identifier_on_postgres(pg_database: Database) -> None:
    book = pg_database.create(Book(title="Dune"))

    with pg_database.session() as session:
        assert session.get(Book, book.id) is not None
