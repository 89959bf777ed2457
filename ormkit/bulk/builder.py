"""
Multi-row INSERT / REPLACE statement construction.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

from ormkit.domain.models import FieldMapping, Statement
from ormkit.errors import EmptyBatchError, InconsistentAttributesError


def ansi_quote(identifier: str) -> str:
    """Double-quote an identifier, doubling embedded quotes."""
    return '"' + identifier.replace('"', '""') + '"'


def _bare(identifier: str) -> str:
    return identifier


def build_batch_sql(
    mappings: Sequence[FieldMapping],
    table_name: str,
    replace: bool = False,
    *,
    quote_table: Callable[[str], str] = ansi_quote,
    quote_column: Callable[[str], str] = _bare,
    processors: Optional[Dict[str, Callable[[Any], Any]]] = None,
) -> Statement:
    """
    Build one parameterized statement inserting every mapping as a row.

    Column order comes from the sorted keys of the first mapping and is reused
    for every row; a mapping with a different set of columns raises
    `InconsistentAttributesError`.

    Parameters
    ----------
    mappings : sequence of dict
        Column -> value mappings, one per row, in insert order.
    table_name : str
        Target table.
    replace : bool
        Emit `REPLACE INTO` instead of `INSERT INTO`.
    quote_table, quote_column : callable
        Identifier quoting for the table and the column list.
    processors : dict, optional
        Column name -> bind processor applied to each value.

    Returns
    -------
    Statement
        SQL with `len(mappings) * columns` `?` placeholders and the flat
        parameter list in matching order.
    """
    if not mappings:
        raise EmptyBatchError("cannot build an insert statement for zero records")

    columns = sorted(mappings[0])
    processors = processors or {}
    row_placeholder = "(" + ", ".join("?" for _ in columns) + ")"

    params = []
    for index, mapping in enumerate(mappings):
        mismatched = mapping.keys() ^ set(columns)
        if mismatched:
            raise InconsistentAttributesError(
                len(columns), len(mapping), index, mismatched=mismatched
            )
        for column in columns:
            value = mapping[column]
            processor = processors.get(column)
            params.append(processor(value) if processor is not None else value)

    operation = "REPLACE" if replace else "INSERT"
    sql = "{} INTO {} ({}) VALUES {}".format(
        operation,
        quote_table(table_name),
        ", ".join(quote_column(column) for column in columns),
        ", ".join(row_placeholder for _ in mappings),
    )
    return Statement(sql=sql, params=params)


__all__ = ["ansi_quote", "build_batch_sql"]
