"""
Configuration settings for ormkit.

Uses Pydantic Settings to load environment variables for the database URL,
logging, and bulk-insert defaults. A `Settings` instance is the explicit
configuration object handed to `Database`; `get_settings()` caches one built
from the environment.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHUNK_SIZE = 2000


class Settings(BaseSettings):
    # Database
    database_url: str = Field("sqlite:///ormkit.db", alias="ORM_DATABASE_URL")
    log_sql: bool = Field(False, alias="ORM_LOG_SQL")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Bulk insert and create-hook conventions
    bulk_chunk_size: int = Field(DEFAULT_CHUNK_SIZE, alias="ORM_BULK_CHUNK_SIZE", gt=0)
    soft_delete_suffix: str = Field("deleted", alias="ORM_SOFT_DELETE_SUFFIX")
    deleted_at_field: str = Field("deleted_at", alias="ORM_DELETED_AT_FIELD")
    id_field: str = Field("id", alias="ORM_ID_FIELD")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_CHUNK_SIZE", "Settings", "get_settings"]
