"""
Database factory for ormkit.

`Database` is the explicit configuration object: it owns the SQLAlchemy
engine and session factory, registers the pre-create interceptors, and hands
out transaction guards. `instantiate()` keeps one process-wide instance for
applications that want a default, failing on a second call rather than
silently replacing it.
"""

from __future__ import annotations

import atexit
import functools
import threading
from typing import Any, Callable, List, Optional, Sequence

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Mapper, Session, sessionmaker

from ormkit.bulk.engine import BulkInsertEngine
from ormkit.config import Settings, get_settings
from ormkit.domain.models import BulkInsertResult, Scope
from ormkit.errors import AlreadyInstantiatedError, NotInstantiatedError
from ormkit.identifiers import assign_identifier
from ormkit.infrastructure.scope import resolve_scope
from ormkit.transaction import TransactionGuard
from ormkit.utils.logging import get_logger

log = get_logger(__name__)

Interceptor = Callable[[Scope], None]

# Short dialect names accepted in `dialect://args` DSNs.
_SCHEME_ALIASES = {
    "postgres": "postgresql+psycopg",
    "postgresql": "postgresql+psycopg",
    "sqlite3": "sqlite",
}


def build_url(dsn: str) -> str:
    """
    Normalize a DSN into a SQLAlchemy URL.

    Bare dialect names are mapped to their driver (`postgres://` uses psycopg);
    URLs that already name a driver are returned unchanged.
    """
    scheme, sep, rest = dsn.partition("://")
    if not sep:
        raise ValueError(f"DSN must look like 'dialect://args', got '{dsn}'")
    return f"{_SCHEME_ALIASES.get(scheme, scheme)}://{rest}"


class Database:
    """
    Engine, session factory and create-hook registry for one database.

    Parameters
    ----------
    settings : Settings, optional
        Configuration; defaults to `get_settings()`.
    base : type, optional
        Declarative base whose mapped subclasses get the interceptors. When
        omitted, interceptors apply to every mapper in the process.
    engine : Engine, optional
        Pre-built engine, used instead of one created from `settings`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        base: Optional[type] = None,
        engine: Optional[Engine] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.engine = engine or create_engine(
            build_url(self.settings.database_url), echo=self.settings.log_sql
        )
        self.session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )
        self._base = base
        self._listeners: List[Callable[..., None]] = []
        self._closed = False

        self.register_before_create(
            functools.partial(
                assign_identifier,
                soft_delete_suffix=self.settings.soft_delete_suffix,
                id_field=self.settings.id_field,
                deleted_at_field=self.settings.deleted_at_field,
            )
        )
        log.info(
            "Database ready",
            extra={"url": self.engine.url.render_as_string(hide_password=True)},
        )

    def register_before_create(self, interceptor: Interceptor) -> None:
        """
        Run `interceptor` on the resolved scope of every record inserted through
        the ORM on this database's engine, just before its INSERT is emitted.
        Bulk inserts do not run interceptors.
        """

        def _before_insert(mapper: Mapper, connection: Any, target: Any) -> None:
            del mapper
            if connection.engine is not self.engine:
                return
            if self._base is None or isinstance(target, self._base):
                interceptor(resolve_scope(target))

        event.listen(Mapper, "before_insert", _before_insert)
        self._listeners.append(_before_insert)

    def session(self) -> Session:
        """New session bound to this database's engine."""
        return self.session_factory()

    def begin(self) -> TransactionGuard:
        """Open a session with a transaction and wrap it in a guard."""
        session = self.session_factory()
        session.begin()
        return TransactionGuard(session, chunk_size=self.settings.bulk_chunk_size)

    def create(self, record: Any) -> Any:
        """Insert a single record in its own transaction."""
        with self.session_factory() as session, session.begin():
            session.add(record)
        return record

    def bulk_create(self, records: Sequence[Any], **options: Any) -> BulkInsertResult:
        """
        Bulk insert through the engine; each chunk commits on its own.

        Options are those of `BulkInsertEngine`; `chunk_size` defaults to the
        configured `bulk_chunk_size`.
        """
        options.setdefault("chunk_size", self.settings.bulk_chunk_size)
        return BulkInsertEngine(**options).execute(self.engine, records)

    def close(self) -> None:
        """Remove registered interceptors and dispose of the engine."""
        if self._closed:
            return
        self._closed = True
        for listener in self._listeners:
            event.remove(Mapper, "before_insert", listener)
        self._listeners.clear()
        self.engine.dispose()


_instance: Optional[Database] = None
_lock = threading.Lock()


def instantiate(settings: Optional[Settings] = None, *, base: Optional[type] = None) -> Database:
    """
    Create the process-wide default database.

    Raises
    ------
    AlreadyInstantiatedError
        If a default database already exists.
    """
    global _instance
    with _lock:
        if _instance is not None:
            raise AlreadyInstantiatedError("database has already been instantiated")
        _instance = Database(settings, base=base)
        atexit.register(shutdown)
        return _instance


def get_database() -> Database:
    """Return the process-wide default database."""
    if _instance is None:
        raise NotInstantiatedError("call instantiate() before get_database()")
    return _instance


def shutdown() -> None:
    """Close the process-wide default database, allowing a new `instantiate()`."""
    global _instance
    with _lock:
        if _instance is not None:
            _instance.close()
            _instance = None


__all__ = [
    "Database",
    "build_url",
    "get_database",
    "instantiate",
    "shutdown",
]
