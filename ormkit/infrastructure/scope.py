"""
Scope resolution over SQLAlchemy mapper inspection.

`resolve_scope` turns a mapped instance into a `Scope`: the table it persists
to and one `FieldInfo` per column attribute and relationship. Values are read
from the instance state without triggering loads, so resolving a pending
record inside a flush never emits SQL.

Column metadata recognized:
- `info={"ignore": True}` on the column or its mapped property marks a field
  ignored; computed columns and SQL-expression properties are ignored too.
- client-side defaults (`default=`) are declared defaults, evaluated only
  when a blank field is extracted; callables that take the execution context
  and server defaults only set `has_default`.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Optional

from sqlalchemy import Column, Table
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import ColumnProperty, InstanceState

from ormkit.domain.models import FieldInfo, Scope
from ormkit.errors import NotAStructError

IGNORE_INFO_KEY = "ignore"


def _instance_state(record: Any) -> InstanceState:
    try:
        state = sa_inspect(record)
    except NoInspectionAvailable as exc:
        raise NotAStructError(record) from exc
    if not isinstance(state, InstanceState):
        raise NotAStructError(record)
    return state


def _constant(value: Any) -> Callable[[], Any]:
    return lambda: value


def _takes_no_arguments(fn: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return True
    return all(
        param.default is not param.empty
        or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
        for param in parameters
    )


def _default_loader(column: Column) -> Optional[Callable[[], Any]]:
    default = column.default
    if default is None:
        return None
    if default.is_scalar:
        return _constant(default.arg)
    if default.is_callable:
        # Zero-argument callables reach the column wrapped to accept an
        # execution context; ones that take the context are stored as given
        # and cannot run outside an INSERT.
        fn = getattr(default.arg, "__wrapped__", None)
        if fn is not None and _takes_no_arguments(fn):
            return fn
    return None


def _column_field(state: InstanceState, prop: ColumnProperty, table: Table) -> FieldInfo:
    value = state.dict.get(prop.key)
    column = prop.columns[0]
    if not isinstance(column, Column):
        return FieldInfo(name=prop.key, db_name=prop.key, value=value, is_ignored=True)

    ignored = bool(
        column.info.get(IGNORE_INFO_KEY)
        or prop.info.get(IGNORE_INFO_KEY)
        or column.computed is not None
    )
    has_default = column.default is not None or column.server_default is not None
    return FieldInfo(
        name=prop.key,
        db_name=column.name,
        value=value,
        is_primary_key=column.primary_key,
        is_auto_increment=column is table.autoincrement_column,
        is_ignored=ignored,
        has_default=has_default,
        default_loader=_default_loader(column),
    )


def resolve_scope(record: Any) -> Scope:
    """
    Resolve the table name and field metadata of a mapped instance.

    Raises
    ------
    NotAStructError
        If `record` is not an instance of a mapped class.
    """
    state = _instance_state(record)
    mapper = state.mapper
    table = mapper.local_table

    fields = [_column_field(state, prop, table) for prop in mapper.column_attrs]
    fields.extend(
        FieldInfo(name=rel.key, db_name=rel.key, is_relationship=True)
        for rel in mapper.relationships
    )
    return Scope(record=record, table_name=table.name, fields=fields, table=table)


def bind_processors(table: Table, dialect: Dialect) -> Dict[str, Callable[[Any], Any]]:
    """
    Map column names to the dialect's bind processors for their types.

    Columns whose type needs no conversion are left out.
    """
    processors: Dict[str, Callable[[Any], Any]] = {}
    for column in table.columns:
        processor = column.type.dialect_impl(dialect).bind_processor(dialect)
        if processor is not None:
            processors[column.name] = processor
    return processors


__all__ = ["IGNORE_INFO_KEY", "bind_processors", "resolve_scope"]
