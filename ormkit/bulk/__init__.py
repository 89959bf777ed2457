"""
Bulk-insert package for ormkit.

Re-exports the extractor, statement builder and engine so callers can import
from `ormkit.bulk` directly.
"""

from ormkit.bulk.builder import ansi_quote, build_batch_sql
from ormkit.bulk.engine import BulkInsertEngine, bulk_insert, split_chunks
from ormkit.bulk.extractor import TIMESTAMP_FIELDS, extract_field_mapping, extract_from_scope

__all__ = [
    "BulkInsertEngine",
    "TIMESTAMP_FIELDS",
    "ansi_quote",
    "build_batch_sql",
    "bulk_insert",
    "extract_field_mapping",
    "extract_from_scope",
    "split_chunks",
]
