from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from ormkit.domain.models import BulkInsertResult


def print_result(
    result: BulkInsertResult, table_name: str, console: Optional[Console] = None
) -> None:
    """
    Render a bulk insert result as a rich table.
    """
    console = console or Console()

    table = Table(title=f"Bulk insert into {table_name}", box=box.ROUNDED)
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Chunks", justify="right", style="blue")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Throughput (rows/s)", justify="right", style="bold green")

    table.add_row(
        f"{result.get('rows', 0):,}",
        str(result.get("chunks", 0)),
        f"{result.get('duration_seconds', 0.0):.3f}",
        f"{result.get('throughput_rows_per_sec', 0.0):,.2f}",
    )
    console.print(table)
