from __future__ import annotations

import json
import random
import sys
from datetime import datetime
from decimal import Decimal
from typing import Optional

import typer
from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ormkit.config import get_settings
from ormkit.errors import OrmError
from ormkit.identifiers import new_id
from ormkit.infrastructure.db_factory import Database, build_url
from ormkit.reporter import print_result
from ormkit.utils.logging import configure_logging

app = typer.Typer(help="ormkit CLI.")

CATEGORIES = ["alpha", "beta", "gamma", "delta"]


class DemoBase(DeclarativeBase):
    pass


class DemoRecord(DemoBase):
    """Table written by `seed`."""

    __tablename__ = "demo_record"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    category: Mapped[str] = mapped_column(String(16))
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    source: Mapped[Optional[str]] = mapped_column(String(32), default="generator")
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


def _generate_records(rows: int, seed: int) -> list[DemoRecord]:
    rng = random.Random(seed)
    return [
        DemoRecord(
            id=new_id(),
            category=rng.choice(CATEGORIES),
            amount=Decimal(f"{rng.uniform(1, 10_000):.2f}"),
            quantity=rng.choice([0, 1, 2, 5]),
        )
        for _ in range(rows)
    ]


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    url = make_url(build_url(settings.database_url)).render_as_string(hide_password=True)
    typer.echo(
        f"url={url} log_sql={settings.log_sql} | "
        f"chunk_size={settings.bulk_chunk_size} id_field={settings.id_field} "
        f"soft_delete_suffix={settings.soft_delete_suffix}"
    )


@app.command()
def seed(
    rows: int = typer.Option(1000, "--rows", "-r", help="Number of demo rows to insert."),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", "-c", help="Records per statement (default from settings)."
    ),
    replace: bool = typer.Option(False, "--replace", help="Use REPLACE INTO instead of INSERT."),
    url: Optional[str] = typer.Option(None, "--url", help="Override ORM_DATABASE_URL."),
    random_seed: int = typer.Option(42, "--seed", help="Seed for deterministic row generation."),
    as_table: bool = typer.Option(False, "--table", help="Print a table instead of JSON."),
) -> None:
    """
    Create the demo table and bulk insert generated rows.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    if url:
        settings = settings.model_copy(update={"database_url": url})

    database = Database(settings, base=DemoBase)
    try:
        DemoBase.metadata.create_all(database.engine)
        records = _generate_records(rows, random_seed)
        options = {"replace": replace}
        if chunk_size is not None:
            options["chunk_size"] = chunk_size
        result = database.bulk_create(records, **options)
    except OrmError as exc:
        typer.echo(f"Seed failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        database.close()
    if as_table:
        print_result(result, DemoRecord.__tablename__)
    else:
        typer.echo(json.dumps(result, indent=2))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
