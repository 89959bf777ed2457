"""
Client-side primary key generation.

`new_id()` returns 32 lowercase hex characters: a 12-digit millisecond
timestamp, a 6-digit per-process counter, and 14 random digits from `secrets`.
Identifiers sort lexically by creation millisecond and are known before the
row reaches the database; the counter keeps ids of one process distinct
within a millisecond.

`assign_identifier` is the pre-create interceptor that stamps them.
"""

from __future__ import annotations

import itertools
import secrets
import threading
import time
from datetime import datetime
from typing import Callable, Optional

from ormkit.domain.models import Scope
from ormkit.utils import clock
from ormkit.utils.logging import get_logger

log = get_logger(__name__)

ID_LENGTH = 32
_COUNTER_MASK = 0xFFFFFF

_counter = itertools.count(secrets.randbelow(_COUNTER_MASK))
_lock = threading.Lock()


def new_id() -> str:
    """Generate a new time-ordered unique identifier."""
    with _lock:
        millis = time.time_ns() // 1_000_000
        sequence = next(_counter) & _COUNTER_MASK
    return f"{millis:012x}{sequence:06x}{secrets.token_hex(7)}"


def assign_identifier(
    scope: Scope,
    *,
    soft_delete_suffix: str = "deleted",
    id_field: str = "id",
    deleted_at_field: str = "deleted_at",
    now: Optional[Callable[[], datetime]] = None,
) -> None:
    """
    Prepare a record that is about to be created.

    Live tables: a blank primary key named `id_field` (attribute or column)
    gets a new identifier; a key the caller already set, or one the database
    assigns through auto-increment, is left alone.
    Soft-delete marker tables (name ends with `soft_delete_suffix`): the
    `deleted_at_field` column, when present, is stamped with the current time.
    """
    if not scope.table_name.endswith(soft_delete_suffix):
        primary = scope.primary_field()
        if (
            primary is not None
            and id_field in (primary.name, primary.db_name)
            and primary.is_blank
            and not primary.is_auto_increment
        ):
            scope.set_column(primary.name, new_id())
    elif scope.has_column(deleted_at_field):
        scope.set_column(deleted_at_field, (now or clock.now)())
        log.debug("Stamped soft-delete marker", extra={"table": scope.table_name})


__all__ = ["ID_LENGTH", "assign_identifier", "new_id"]
