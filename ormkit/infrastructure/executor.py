"""
Raw statement execution against SQLAlchemy binds.

Statements are built with `?` placeholders; `render_placeholders` rewrites
them into the driver's DBAPI paramstyle before `exec_driver_sql` hands the
text to the cursor untouched.
"""

from __future__ import annotations

import itertools
import re
from typing import Any, Callable, Dict, Sequence, Tuple, Union

from sqlalchemy.engine import Connection, Dialect, Engine
from sqlalchemy.orm import Session

from ormkit.domain.models import Statement

Bind = Union[Engine, Connection, Session]

# Quoted identifiers and string literals are matched first so a `?` inside
# them is left alone.
_PLACEHOLDER = re.compile(r"\"(?:[^\"]|\"\")*\"|`(?:[^`]|``)*`|'(?:[^']|'')*'|\?")


def _substitute(sql: str, render: Callable[[int], str]) -> str:
    counter = itertools.count(1)

    def _replace(match: re.Match) -> str:
        token = match.group(0)
        return render(next(counter)) if token == "?" else token

    return _PLACEHOLDER.sub(_replace, sql)


def dialect_of(bind: Bind) -> Dialect:
    """Return the dialect a bind will execute against."""
    if isinstance(bind, Session):
        return bind.get_bind().dialect
    return bind.dialect


def render_placeholders(
    sql: str, params: Sequence[Any], paramstyle: str
) -> Tuple[str, Union[Tuple[Any, ...], Dict[str, Any]]]:
    """
    Rewrite `?` placeholders for the given DBAPI paramstyle.

    Only bare `?` tokens are rewritten; a `?` inside a quoted identifier or a
    string literal is kept. Returns the SQL text and the parameters in the
    shape the driver expects: a tuple for positional styles, a dict for named
    styles.
    """
    if paramstyle == "qmark":
        return sql, tuple(params)
    if paramstyle in ("format", "pyformat"):
        return _substitute(sql.replace("%", "%%"), lambda _: "%s"), tuple(params)
    if paramstyle == "numeric":
        return _substitute(sql, lambda index: f":{index}"), tuple(params)
    if paramstyle == "numeric_dollar":
        return _substitute(sql, lambda index: f"${index}"), tuple(params)
    if paramstyle == "named":
        text = _substitute(sql, lambda index: f":p{index}")
        return text, {f"p{index}": value for index, value in enumerate(params, start=1)}
    raise ValueError(f"Unsupported paramstyle '{paramstyle}'")


def _execute_on_connection(connection: Connection, statement: Statement) -> int:
    sql, params = render_placeholders(
        statement.sql, statement.params, connection.dialect.paramstyle
    )
    result = connection.exec_driver_sql(sql, params)
    return result.rowcount


def execute_raw(bind: Bind, statement: Statement) -> int:
    """
    Execute a `?`-placeholder statement and return the driver's rowcount.

    - Engine: runs in its own transaction, committed on success.
    - Connection: runs in whatever transaction the connection has open.
    - Session: joins the session's current transaction.

    Driver errors propagate unchanged.
    """
    if isinstance(bind, Engine):
        with bind.begin() as connection:
            return _execute_on_connection(connection, statement)
    if isinstance(bind, Session):
        return _execute_on_connection(bind.connection(), statement)
    return _execute_on_connection(bind, statement)


__all__ = ["Bind", "dialect_of", "execute_raw", "render_placeholders"]
