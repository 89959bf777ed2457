"""
Domain models for ormkit.

Defines the per-record `Scope` (table name plus field metadata), the
`Statement` produced by the batch builder, and the validated options and
result contracts of a bulk insert.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, NamedTuple, Optional, TypedDict

from pydantic import BaseModel, Field

from ormkit.config import DEFAULT_CHUNK_SIZE

FieldMapping = Dict[str, Any]


class _NoDefault:
    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


def is_blank(value: Any) -> bool:
    """True when `value` is the zero value of its type."""
    if value is None:
        return True
    if isinstance(value, (str, bytes, bytearray, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    if isinstance(value, (bool, int, float, Decimal)):
        return value == 0
    return False


@dataclass(frozen=True)
class FieldInfo:
    """
    Metadata and current value of one attribute of a record.

    `default_loader` produces the declared client-side default on demand; it
    is None when the field has no default that can be computed outside an
    INSERT.
    """

    name: str
    db_name: str
    value: Any = None
    is_primary_key: bool = False
    is_auto_increment: bool = False
    is_ignored: bool = False
    is_relationship: bool = False
    has_default: bool = False
    default_loader: Optional[Callable[[], Any]] = None

    @property
    def is_blank(self) -> bool:
        return is_blank(self.value)

    @property
    def has_declared_default(self) -> bool:
        return self.default_loader is not None

    def declared_default(self) -> Any:
        """Evaluate the declared default, or return `NO_DEFAULT`."""
        if self.default_loader is None:
            return NO_DEFAULT
        return self.default_loader()


@dataclass
class Scope:
    """
    Resolved view of a single record: its table and its fields.

    `set_column` writes through to the record and refreshes the cached field,
    so interceptors can chain several updates on one scope.
    """

    record: Any
    table_name: str
    fields: List[FieldInfo] = field(default_factory=list)
    table: Any = None

    def lookup(self, name: str) -> Optional[FieldInfo]:
        """Find a field by attribute name or column name."""
        for info in self.fields:
            if info.name == name or info.db_name == name:
                return info
        return None

    def primary_field(self) -> Optional[FieldInfo]:
        for info in self.fields:
            if info.is_primary_key:
                return info
        return None

    def has_column(self, name: str) -> bool:
        info = self.lookup(name)
        return info is not None and not info.is_relationship

    def set_column(self, name: str, value: Any) -> bool:
        info = self.lookup(name)
        if info is None or info.is_relationship:
            return False
        setattr(self.record, info.name, value)
        for index, current in enumerate(self.fields):
            if current is info:
                self.fields[index] = dataclasses.replace(info, value=value)
        return True


class Statement(NamedTuple):
    """Generated SQL text with its ordered positional parameters."""

    sql: str
    params: List[Any]


class BulkInsertOptions(BaseModel):
    """
    Validated options for one bulk insert call.
    """

    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, gt=0, description="Records per statement.")
    replace: bool = Field(False, description="Emit REPLACE instead of INSERT.")
    exclude_columns: List[str] = Field(
        default_factory=list, description="Attribute or column names left out of the insert."
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }


class BulkInsertResult(TypedDict, total=False):
    """
    Summary of a completed bulk insert.
    """

    rows: int
    chunks: int
    duration_seconds: float
    throughput_rows_per_sec: float


__all__ = [
    "BulkInsertOptions",
    "BulkInsertResult",
    "FieldInfo",
    "FieldMapping",
    "NO_DEFAULT",
    "Scope",
    "Statement",
    "is_blank",
]
