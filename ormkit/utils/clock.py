"""Time source shared by timestamp injection and soft-delete stamping."""

from __future__ import annotations

from datetime import UTC, datetime


def now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


__all__ = ["now"]
