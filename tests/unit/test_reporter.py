from rich.console import Console

from ormkit.domain.models import BulkInsertResult
from ormkit.reporter import print_result


def test_print_result_renders_counts() -> None:
    console = Console(record=True, width=120)
    result = BulkInsertResult(
        rows=12000, chunks=6, duration_seconds=1.5, throughput_rows_per_sec=8000.0
    )

    print_result(result, "demo_record", console=console)

    text = console.export_text()
    assert "Bulk insert into demo_record" in text
    assert "12,000" in text
    assert "8,000.00" in text


def test_print_result_tolerates_missing_keys() -> None:
    console = Console(record=True, width=120)

    print_result(BulkInsertResult(rows=0), "empty", console=console)

    assert "0.000" in console.export_text()
