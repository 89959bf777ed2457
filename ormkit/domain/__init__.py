"""
Domain package for ormkit.

Exports the data definitions shared by scope resolution, the bulk-insert
pipeline and the identifier interceptor.
"""

from ormkit.domain.models import (
    NO_DEFAULT,
    BulkInsertOptions,
    BulkInsertResult,
    FieldInfo,
    FieldMapping,
    Scope,
    Statement,
    is_blank,
)

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
