"""
ormkit - conveniences over SQLAlchemy for write-heavy services.

This package provides:

- Client-side, time-ordered string primary keys stamped by a pre-create hook
- Chunked multi-row INSERT / REPLACE of mapped records
- A transaction guard that rolls back unless explicitly committed

Usage:
    from ormkit import Database, Settings

    db = Database(Settings(database_url="sqlite:///app.db"), base=Base)
    with db.begin() as tx:
        tx.bulk_create(records, chunk_size=1000)
        tx.commit()
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from ormkit.bulk import BulkInsertEngine, build_batch_sql, bulk_insert, extract_field_mapping
from ormkit.config import Settings, get_settings
from ormkit.domain import BulkInsertOptions, BulkInsertResult, FieldInfo, Scope, Statement
from ormkit.errors import (
    AlreadyInstantiatedError,
    CommitError,
    ConfigurationError,
    EmptyBatchError,
    InconsistentAttributesError,
    NotAListError,
    NotAStructError,
    NotInstantiatedError,
    OrmError,
    TransactionClosedError,
    is_record_not_found,
)
from ormkit.identifiers import assign_identifier, new_id
from ormkit.infrastructure.db_factory import (
    Database,
    build_url,
    get_database,
    instantiate,
    shutdown,
)
from ormkit.infrastructure.scope import resolve_scope
from ormkit.transaction import TransactionGuard, TransactionState
from ormkit.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Database
    "Database",
    "build_url",
    "get_database",
    "instantiate",
    "shutdown",
    # Bulk insert
    "BulkInsertEngine",
    "BulkInsertOptions",
    "BulkInsertResult",
    "Statement",
    "build_batch_sql",
    "bulk_insert",
    "extract_field_mapping",
    # Scope and identifiers
    "FieldInfo",
    "Scope",
    "assign_identifier",
    "new_id",
    "resolve_scope",
    # Transactions
    "TransactionGuard",
    "TransactionState",
    # Errors
    "OrmError",
    "AlreadyInstantiatedError",
    "CommitError",
    "ConfigurationError",
    "EmptyBatchError",
    "InconsistentAttributesError",
    "NotAListError",
    "NotAStructError",
    "NotInstantiatedError",
    "TransactionClosedError",
    "is_record_not_found",
    # Logging
    "configure_logging",
    "get_logger",
]
