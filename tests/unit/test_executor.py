from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session

from ormkit.domain.models import Statement
from ormkit.infrastructure.executor import dialect_of, execute_raw, render_placeholders

SQL = 'INSERT INTO "t" (a, b) VALUES (?, ?), (?, ?)'
PARAMS = [1, 2, 3, 4]


def test_qmark_is_left_unchanged() -> None:
    assert render_placeholders(SQL, PARAMS, "qmark") == (SQL, (1, 2, 3, 4))


@pytest.mark.parametrize("style", ["format", "pyformat"])
def test_format_styles_use_percent_s(style: str) -> None:
    sql, params = render_placeholders("INSERT INTO \"100%\" (a) VALUES (?)", [1], style)

    assert sql == 'INSERT INTO "100%%" (a) VALUES (%s)'
    assert params == (1,)


def test_numeric_styles_number_placeholders() -> None:
    assert render_placeholders("VALUES (?, ?)", [1, 2], "numeric")[0] == "VALUES (:1, :2)"
    assert render_placeholders("VALUES (?, ?)", [1, 2], "numeric_dollar")[0] == "VALUES ($1, $2)"


def test_named_style_returns_a_dict() -> None:
    sql, params = render_placeholders("VALUES (?, ?)", ["x", "y"], "named")

    assert sql == "VALUES (:p1, :p2)"
    assert params == {"p1": "x", "p2": "y"}


@pytest.mark.parametrize(
    ("style", "expected"),
    [
        ("numeric", 'INSERT INTO "wh?t" ("a?", `b?`) VALUES (:1, :2)'),
        ("pyformat", 'INSERT INTO "wh?t" ("a?", `b?`) VALUES (%s, %s)'),
        ("named", 'INSERT INTO "wh?t" ("a?", `b?`) VALUES (:p1, :p2)'),
    ],
)
def test_question_marks_inside_quoted_identifiers_are_kept(style: str, expected: str) -> None:
    sql, params = render_placeholders(
        'INSERT INTO "wh?t" ("a?", `b?`) VALUES (?, ?)', [1, 2], style
    )

    assert sql == expected
    assert len(params) == 2


def test_unknown_paramstyle_is_rejected() -> None:
    with pytest.raises(ValueError):
        render_placeholders(SQL, PARAMS, "bogus")


def test_execute_raw_on_engine_commits(sqlite_engine) -> None:
    statement = Statement('INSERT INTO "book" (id, title) VALUES (?, ?), (?, ?)', ["a", "A", "b", "B"])

    assert execute_raw(sqlite_engine, statement) == 2

    with sqlite_engine.connect() as conn:
        assert conn.execute(text("SELECT count(*) FROM book")).scalar_one() == 2


def test_execute_raw_on_session_joins_its_transaction(sqlite_engine) -> None:
    statement = Statement('INSERT INTO "book" (id, title) VALUES (?, ?)', ["a", "A"])

    with Session(sqlite_engine) as session:
        execute_raw(session, statement)
        session.rollback()

    with sqlite_engine.connect() as conn:
        assert conn.execute(text("SELECT count(*) FROM book")).scalar_one() == 0


def test_dialect_of_resolves_session_binds(sqlite_engine) -> None:
    with Session(sqlite_engine) as session:
        assert dialect_of(session) is sqlite_engine.dialect
