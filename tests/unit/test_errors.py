from __future__ import annotations

from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm.exc import NoResultFound as OrmNoResultFound

from ormkit.errors import (
    ConfigurationError,
    InconsistentAttributesError,
    NotAListError,
    is_record_not_found,
)


def test_no_result_found_is_record_not_found() -> None:
    assert is_record_not_found(NoResultFound("none"))
    assert is_record_not_found(OrmNoResultFound("none"))


def test_exception_group_containing_no_result_found() -> None:
    group = ExceptionGroup("many", [ValueError("x"), NoResultFound("none")])

    assert is_record_not_found(group)
    assert not is_record_not_found(ExceptionGroup("many", [ValueError("x")]))


def test_other_errors_are_not_record_not_found() -> None:
    assert not is_record_not_found(None)
    assert not is_record_not_found(ValueError("x"))


def test_error_messages_describe_the_failure() -> None:
    assert "records must be a list" in str(NotAListError("abc"))
    error = InconsistentAttributesError(expected=5, actual=3, index=2)
    assert "attribute sizes are inconsistent" in str(error)
    assert error.index == 2


def test_configuration_error_is_a_value_error() -> None:
    assert issubclass(ConfigurationError, ValueError)
