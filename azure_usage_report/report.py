import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, Iterator, List, Sequence, Tuple

from rich.console import Console
from rich.table import Table

from .config import STORAGE_SHEET_NAME, DATABASE_SHEET_NAME, VM_SHEET_NAME, BATCH_SIZE
from .export import append_records, reset_output_file, RecordBatcher
from .inventory import collect_storage_accounts, collect_databases, collect_virtual_machines
from .models import ItemResult, Subscription

_console = Console()

Collector = Callable[..., Iterator[ItemResult]]

# Sheet order in the workbook follows this list
RESOURCE_KINDS: List[Tuple[str, Collector]] = [
    (STORAGE_SHEET_NAME, collect_storage_accounts),
    (DATABASE_SHEET_NAME, collect_databases),
    (VM_SHEET_NAME, collect_virtual_machines),
]


@dataclass
class ReportSummary:
    sheet_name: str
    rows_written: int = 0
    skipped: List[ItemResult] = field(default_factory=list)


def _collect_kind(credential, subscriptions: Sequence[Subscription], sheet_name: str, collector: Collector,
                  output_file: str, console: Console, batch_size: int) -> ReportSummary:
    logger = logging.getLogger()
    batcher = RecordBatcher(partial(append_records, output_file), sheet_name, batch_size=batch_size)
    summary = ReportSummary(sheet_name=sheet_name)

    for subscription in subscriptions:
        for result in collector(credential, subscription, console=console):
            if result.skipped:
                summary.skipped.append(result)
                logger.info(f"{sheet_name}: skipped {result.name}: {result.skip_reason}")
            else:
                batcher.add(result.record)

    batcher.flush()
    summary.rows_written = batcher.rows_written
    return summary


def _print_summary(summaries: Sequence[ReportSummary], output_file: str, console: Console):
    table = Table(title="Usage Report Summary")
    table.add_column("Sheet", style="cyan")
    table.add_column("Rows Written", justify="right", style="green")
    table.add_column("Skipped Items", justify="right", style="yellow")
    for summary in summaries:
        table.add_row(summary.sheet_name, str(summary.rows_written), str(len(summary.skipped)))
    console.print(table)
    console.print(f"Report written to [bold]{output_file}[/]")


def generate_report(credential, subscriptions: Sequence[Subscription], output_file: str,
                    console: Console = _console, batch_size: int = BATCH_SIZE) -> Dict[str, ReportSummary]:
    """Collects every resource kind across all subscriptions into one workbook.

    Any workbook already at ``output_file`` is removed first. Sheets with no
    qualifying rows are never created.
    """
    logger = logging.getLogger()
    if reset_output_file(output_file):
        console.print(f"[dim]Removed previous report at {output_file}[/]")

    summaries = {}
    for sheet_name, collector in RESOURCE_KINDS:
        console.print(f"\n[bold blue]--- Collecting {sheet_name} ---[/]")
        summary = _collect_kind(credential, subscriptions, sheet_name, collector, output_file, console, batch_size)
        summaries[sheet_name] = summary
        logger.info(f"{sheet_name}: {summary.rows_written} row(s) written, {len(summary.skipped)} item(s) skipped.")

    _print_summary(list(summaries.values()), output_file, console)
    return summaries
