"""
Exception hierarchy for ormkit.

Input-shape and consistency failures raise before any statement is sent for
the affected chunk. Driver errors (`sqlalchemy.exc.DBAPIError` and its
subclasses) are not wrapped and reach the caller unchanged.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.exc import NoResultFound


class OrmError(Exception):
    """Base class for every error raised by ormkit itself."""


class ConfigurationError(OrmError, ValueError):
    """Invalid bulk-insert options or database settings."""


class NotAListError(OrmError, TypeError):
    """Bulk insert input is not list-shaped."""

    def __init__(self, value: object) -> None:
        super().__init__(f"records must be a list, got {type(value).__name__}")


class NotAStructError(OrmError, TypeError):
    """A value handed to field extraction is not a mapped record instance."""

    def __init__(self, value: object) -> None:
        super().__init__(f"value must be a mapped record instance, got {type(value).__name__}")


class InconsistentAttributesError(OrmError):
    """
    Records in one chunk produced field mappings of different shapes.

    `mismatched` holds the column names present in only one of the two
    mappings when the sizes agree but the names do not.
    """

    def __init__(
        self, expected: int, actual: int, index: int, mismatched: Sequence[str] = ()
    ) -> None:
        if mismatched:
            message = (
                f"attribute names are inconsistent: record {index} differs from record 0 "
                f"in columns {sorted(mismatched)}"
            )
        else:
            message = (
                f"attribute sizes are inconsistent: record {index} has {actual} columns, "
                f"expected {expected}"
            )
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.index = index
        self.mismatched = list(mismatched)


class EmptyBatchError(OrmError, ValueError):
    """A statement was requested for zero field mappings."""


class AlreadyInstantiatedError(OrmError):
    """The process-wide database has already been created."""


class NotInstantiatedError(OrmError):
    """The process-wide database was requested before `instantiate()`."""


class TransactionClosedError(OrmError):
    """An operation was attempted on a guard that is no longer open."""


class CommitError(OrmError):
    """A commit failed and the caller did not ask to handle the error."""


def is_record_not_found(err: BaseException | None) -> bool:
    """
    Return True when `err` means a lookup matched no row.

    Exception groups are searched, so errors collected from several
    operations still classify correctly.
    """
    if err is None:
        return False
    if isinstance(err, NoResultFound):
        return True
    if isinstance(err, BaseExceptionGroup):
        return err.subgroup(NoResultFound) is not None
    return False


__all__ = [
    "OrmError",
    "ConfigurationError",
    "NotAListError",
    "NotAStructError",
    "InconsistentAttributesError",
    "EmptyBatchError",
    "AlreadyInstantiatedError",
    "NotInstantiatedError",
    "TransactionClosedError",
    "CommitError",
    "is_record_not_found",
]
