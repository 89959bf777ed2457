"""
Infrastructure package for ormkit.

Holds everything that touches SQLAlchemy directly: scope resolution from
mapper metadata, raw statement execution, and the `Database` factory in
`ormkit.infrastructure.db_factory`. The factory is not re-exported here
because it depends on the bulk engine, which itself imports this package.
"""

from ormkit.infrastructure.executor import Bind, dialect_of, execute_raw, render_placeholders
from ormkit.infrastructure.scope import IGNORE_INFO_KEY, bind_processors, resolve_scope

__all__ = [
    "Bind",
    "IGNORE_INFO_KEY",
    "bind_processors",
    "dialect_of",
    "execute_raw",
    "render_placeholders",
    "resolve_scope",
]
