"""
Chunked bulk insert of mapped records.

Splits the input into contiguous chunks, turns each chunk into a single
multi-row statement, and executes the chunks one after another. The first
failing chunk stops the call; chunks already executed stay executed, so wrap
the call in a `TransactionGuard` when the whole insert must be atomic.

Usage:
    from ormkit.bulk import bulk_insert

    with database.begin() as tx:
        bulk_insert(tx.session, records, chunk_size=500)
        tx.commit()
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, List, Optional

from pydantic import ValidationError

from ormkit.bulk.builder import build_batch_sql
from ormkit.bulk.extractor import extract_from_scope
from ormkit.config import DEFAULT_CHUNK_SIZE
from ormkit.domain.models import BulkInsertOptions, BulkInsertResult, Statement
from ormkit.errors import ConfigurationError, InconsistentAttributesError, NotAListError
from ormkit.infrastructure.executor import Bind, dialect_of, execute_raw
from ormkit.infrastructure.scope import bind_processors, resolve_scope
from ormkit.utils.logging import get_logger

log = get_logger(__name__)


def split_chunks(records: Sequence[Any], chunk_size: int) -> Iterator[Sequence[Any]]:
    """Yield contiguous slices of at most `chunk_size` records."""
    for start in range(0, len(records), chunk_size):
        yield records[start : start + chunk_size]


class BulkInsertEngine:
    """
    Insert many records with one statement per chunk.

    Parameters
    ----------
    chunk_size : int
        Records per statement. Large chunks run faster but every value is a
        bound parameter, and drivers cap the parameters of one statement;
        2000 to 3000 is a reasonable range.
    replace : bool
        Emit `REPLACE INTO` instead of `INSERT INTO`.
    exclude_columns : iterable of str, optional
        Attribute or column names to leave out of the insert. Use it for
        `NOT NULL` columns that rely on a server default.
    now : callable, optional
        Time source for `created_at` / `updated_at`.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        replace: bool = False,
        exclude_columns: Optional[Iterable[str]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        try:
            self.options = BulkInsertOptions(
                chunk_size=chunk_size,
                replace=replace,
                exclude_columns=list(exclude_columns or ()),
            )
        except ValidationError as exc:
            raise ConfigurationError(f"invalid bulk insert options: {exc}") from exc
        self._now = now

    def build_chunk(self, bind: Bind, records: Sequence[Any]) -> Statement:
        """
        Build the statement for one chunk without executing it.

        Raises
        ------
        NotAStructError
            If a record is not a mapped instance.
        InconsistentAttributesError
            If the records do not all produce the same set of columns.
        """
        scopes = [resolve_scope(record) for record in records]
        mappings = [
            extract_from_scope(scope, self.options.exclude_columns, self._now)
            for scope in scopes
        ]

        columns = mappings[0].keys()
        for index, mapping in enumerate(mappings):
            if len(mapping) != len(columns):
                raise InconsistentAttributesError(len(columns), len(mapping), index)
            mismatched = columns ^ mapping.keys()
            if mismatched:
                raise InconsistentAttributesError(
                    len(columns), len(mapping), index, mismatched=mismatched
                )

        dialect = dialect_of(bind)
        preparer = dialect.identifier_preparer
        return build_batch_sql(
            mappings,
            scopes[0].table_name,
            self.options.replace,
            quote_table=preparer.quote_identifier,
            quote_column=preparer.quote,
            processors=bind_processors(scopes[0].table, dialect),
        )

    def execute(self, bind: Bind, records: Sequence[Any]) -> BulkInsertResult:
        """
        Insert `records` through `bind`, one statement per chunk.

        Returns
        -------
        BulkInsertResult
            Rows written, chunks executed, duration and throughput.

        Raises
        ------
        NotAListError
            If `records` is not a list or tuple.
        """
        if not isinstance(records, (list, tuple)):
            raise NotAListError(records)

        chunk_size = self.options.chunk_size
        total_chunks = -(-len(records) // chunk_size)
        rows = 0
        chunks = 0
        start = time.perf_counter()

        for chunk in split_chunks(records, chunk_size):
            chunks += 1
            statement = self.build_chunk(bind, chunk)
            log.debug(
                f"[BULK CHUNK {chunks}/{total_chunks}] executing",
                extra={"chunk": chunks, "total_chunks": total_chunks, "rows": len(chunk)},
            )
            try:
                execute_raw(bind, statement)
            except Exception:
                log.error(
                    f"[BULK CHUNK {chunks}/{total_chunks}] failed",
                    extra={"chunk": chunks, "total_chunks": total_chunks, "rows_written": rows},
                )
                raise
            rows += len(chunk)

        duration = time.perf_counter() - start
        result = BulkInsertResult(
            rows=rows,
            chunks=chunks,
            duration_seconds=duration,
            throughput_rows_per_sec=rows / duration if duration > 0 else 0.0,
        )
        if rows:
            log.info("Bulk insert complete", extra=dict(result))
        return result


def bulk_insert(
    bind: Bind,
    records: Sequence[Any],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    replace: bool = False,
    exclude_columns: Optional[List[str]] = None,
) -> BulkInsertResult:
    """
    Insert multiple records at once.

    Parameters
    ----------
    bind : Engine | Connection | Session
        Where to execute. A Session or Connection keeps every chunk inside its
        open transaction; an Engine commits each chunk on its own.
    records : list
        Mapped instances of one class.
    chunk_size : int
        Number of records per statement.
    replace : bool
        Use `REPLACE INTO` instead of `INSERT INTO`.
    exclude_columns : list of str, optional
        Columns to leave out of the insert.
    """
    engine = BulkInsertEngine(
        chunk_size=chunk_size, replace=replace, exclude_columns=exclude_columns
    )
    return engine.execute(bind, records)


__all__ = ["BulkInsertEngine", "bulk_insert", "split_chunks"]
