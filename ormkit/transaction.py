"""
Transaction guard: roll back unless explicitly committed.

Usage:
    with database.begin() as tx:
        tx.bulk_create(records)
        tx.create(summary)
        tx.commit()
    # leaving the block without commit() rolls back

`commit()` raises `CommitError` when the commit fails, so a failed commit can
never pass unnoticed; call `commit(suppress_panic=True)` to receive the error
as a return value instead.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ormkit.bulk.engine import BulkInsertEngine
from ormkit.domain.models import BulkInsertResult
from ormkit.errors import CommitError, TransactionClosedError
from ormkit.utils.logging import get_logger

log = get_logger(__name__)


class TransactionState(str, enum.Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionGuard:
    """
    Wraps one session with an open transaction.

    The guard owns the session: `release()` rolls back if the transaction is
    still open and closes the session. `release()` runs on every exit from a
    `with` block and is safe to call again.
    """

    def __init__(self, session: Session, **bulk_defaults: Any) -> None:
        self.session = session
        self.state = TransactionState.OPEN
        self.error: Optional[BaseException] = None
        self._bulk_defaults = bulk_defaults
        self._released = False

    @property
    def is_open(self) -> bool:
        return self.state is TransactionState.OPEN

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise TransactionClosedError(f"transaction is already {self.state.value}")

    def commit(self, suppress_panic: bool = False) -> Optional[BaseException]:
        """
        Commit the transaction.

        Parameters
        ----------
        suppress_panic : bool
            Return the commit error instead of raising `CommitError`.

        Returns
        -------
        BaseException | None
            The captured error when `suppress_panic` is set and the commit
            failed, otherwise None.
        """
        if self.is_open:
            try:
                self.session.commit()
            except SQLAlchemyError as exc:
                self.error = exc
                self.session.rollback()
                self.state = TransactionState.ROLLED_BACK
            else:
                self.state = TransactionState.COMMITTED
                log.debug("Transaction committed")
                return None
        else:
            self.error = TransactionClosedError(
                f"cannot commit: transaction is already {self.state.value}"
            )

        log.error("Transaction commit failed", extra={"error": str(self.error)})
        if suppress_panic:
            return self.error
        raise CommitError(f"commit failed: {self.error}") from self.error

    def rollback(self) -> None:
        """Roll back explicitly; the guard is finished afterwards."""
        self._ensure_open()
        self.session.rollback()
        self.state = TransactionState.ROLLED_BACK
        log.debug("Transaction rolled back")

    def release(self) -> None:
        """Roll back if still open, then close the session. Idempotent."""
        if self._released:
            return
        self._released = True
        try:
            if self.is_open:
                self.session.rollback()
                self.state = TransactionState.ROLLED_BACK
                log.debug("Transaction released without commit; rolled back")
        finally:
            self.session.close()

    def create(self, record: Any) -> Any:
        """Add a single record and flush it, firing the pre-create interceptors."""
        self._ensure_open()
        self.session.add(record)
        self.session.flush()
        return record

    def bulk_create(self, records: Sequence[Any], **options: Any) -> BulkInsertResult:
        """Bulk insert inside this transaction; options override the guard defaults."""
        self._ensure_open()
        engine = BulkInsertEngine(**{**self._bulk_defaults, **options})
        return engine.execute(self.session, records)

    def __enter__(self) -> "TransactionGuard":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb
        self.release()


__all__ = ["TransactionGuard", "TransactionState"]
