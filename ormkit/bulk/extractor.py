"""
Record field extraction for bulk inserts.

Turns one mapped record into the column -> value mapping that becomes a row of
a multi-value INSERT.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from ormkit.domain.models import FieldInfo, FieldMapping, Scope
from ormkit.infrastructure.scope import resolve_scope
from ormkit.utils import clock

TIMESTAMP_FIELDS = frozenset({"created_at", "updated_at"})


def _is_excluded(info: FieldInfo, excluded: frozenset[str]) -> bool:
    return (
        info.name in excluded
        or info.db_name in excluded
        or info.is_relationship
        or info.is_ignored
        or (info.is_primary_key and info.is_auto_increment)
    )


def extract_from_scope(
    scope: Scope,
    exclude_columns: Iterable[str] = (),
    now: Optional[Callable[[], datetime]] = None,
) -> FieldMapping:
    """
    Build the column mapping of an already resolved scope.

    Dropped: excluded names, relationships, ignored fields and the
    database-assigned primary key. `created_at` / `updated_at` always get the
    current time; blank fields with a default get the declared default, or
    their own value when only a server default (or a default that needs the
    INSERT context) exists.

    A blank field with only a server default is therefore sent as an explicit
    value, usually NULL, and the server default never applies. For a
    `NOT NULL` column with a `server_default`, pass the column in
    `exclude_columns` so the database fills it in.
    """
    excluded = frozenset(exclude_columns)
    timestamp = (now or clock.now)()

    attrs: FieldMapping = {}
    for info in scope.fields:
        if _is_excluded(info, excluded):
            continue
        if info.name in TIMESTAMP_FIELDS:
            attrs[info.db_name] = timestamp
        elif info.has_default and info.is_blank and info.has_declared_default:
            attrs[info.db_name] = info.declared_default()
        else:
            attrs[info.db_name] = info.value
    return attrs


def extract_field_mapping(
    record: Any,
    exclude_columns: Iterable[str] = (),
    now: Optional[Callable[[], datetime]] = None,
) -> FieldMapping:
    """
    Obtain the columns and values required to insert `record`.

    Raises
    ------
    NotAStructError
        If `record` is not a mapped instance.
    """
    return extract_from_scope(resolve_scope(record), exclude_columns, now)


__all__ = ["TIMESTAMP_FIELDS", "extract_field_mapping", "extract_from_scope"]
