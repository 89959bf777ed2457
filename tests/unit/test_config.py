from __future__ import annotations

import pytest
from pydantic import ValidationError

from ormkit.config import DEFAULT_CHUNK_SIZE, Settings
from ormkit.infrastructure.db_factory import build_url

ENV_VARS = [
    "ORM_DATABASE_URL",
    "ORM_LOG_SQL",
    "ORM_BULK_CHUNK_SIZE",
    "ORM_SOFT_DELETE_SUFFIX",
    "ORM_DELETED_AT_FIELD",
    "ORM_ID_FIELD",
]


@pytest.fixture
def clean_env(monkeypatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults(clean_env) -> None:
    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///ormkit.db"
    assert settings.log_sql is False
    assert settings.bulk_chunk_size == DEFAULT_CHUNK_SIZE == 2000
    assert settings.soft_delete_suffix == "deleted"
    assert settings.deleted_at_field == "deleted_at"
    assert settings.id_field == "id"


def test_settings_read_environment(clean_env, monkeypatch) -> None:
    monkeypatch.setenv("ORM_BULK_CHUNK_SIZE", "250")
    monkeypatch.setenv("ORM_LOG_SQL", "true")

    settings = Settings(_env_file=None)

    assert settings.bulk_chunk_size == 250
    assert settings.log_sql is True


@pytest.mark.parametrize("chunk_size", [0, -1])
def test_non_positive_chunk_size_is_rejected(chunk_size: int) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, bulk_chunk_size=chunk_size)


@pytest.mark.parametrize(
    ("dsn", "url"),
    [
        ("postgres://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("postgresql://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("sqlite3:///tmp/app.db", "sqlite:///tmp/app.db"),
        ("mysql+pymysql://u@db/app", "mysql+pymysql://u@db/app"),
    ],
)
def test_build_url_maps_dialect_names_to_drivers(dsn: str, url: str) -> None:
    assert build_url(dsn) == url


def test_build_url_requires_a_scheme() -> None:
    with pytest.raises(ValueError):
        build_url("app.db")
