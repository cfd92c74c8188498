# ==============================================================================
# Report Command
# ==============================================================================
"""
Report command: reads both day files and prints the loyal users.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from loyalty.cli.shared import C, I, setup_logging
from loyalty.utils.config import get_settings

EXIT_FAILED = 1
EXIT_TIMED_OUT = 2


class ParserChoice(str, Enum):
    """Line parser implementations."""

    SCAN = "scan"
    JSON = "json"


# ==============================================================================
# Commands
# ==============================================================================


def show_report(
    day1: Annotated[
        Optional[Path],
        typer.Argument(help="First day's log file (default from LOYALTY_PIPELINE_*)"),
    ] = None,
    day2: Annotated[
        Optional[Path],
        typer.Argument(help="Second day's log file (default from LOYALTY_PIPELINE_*)"),
    ] = None,
    min_pages: Annotated[
        Optional[int],
        typer.Option("--min-pages", "-m", min=0, help="Minimum distinct pages to count as loyal"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", min=0, help="Concurrent range readers (0 = CPU count)"),
    ] = None,
    parser: Annotated[
        Optional[ParserChoice], typer.Option("--parser", "-p", help="Line parser implementation")
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", min=0.0, help="Overall deadline in seconds"),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Identify loyal users across two daily log files.

    A user is loyal when they appear in both files and visited at least
    --min-pages distinct pages across the two days combined.

    Examples:
        loyalty report                                  # Files from configuration
        loyalty report day1.log day2.log --min-pages 5
        loyalty report --json                           # JSON output for scripting
    """
    from loyalty.core import (
        Cancelled,
        LoyaltyAggregator,
        LoyaltyError,
        ParallelFileReader,
    )
    from loyalty.pipeline import run_pipeline

    settings = get_settings()
    setup_logging(verbose=verbose, quiet=json_output)

    day1_path = day1 or settings.pipeline.day1_path
    day2_path = day2 or settings.pipeline.day2_path

    reader = ParallelFileReader(
        workers=workers if workers is not None else settings.reader.workers,
        parser=parser.value if parser is not None else settings.reader.parser,
        lookahead_bytes=settings.reader.lookahead_bytes,
        max_line_bytes=settings.reader.max_line_bytes,
    )
    aggregator = LoyaltyAggregator(
        min_pages=min_pages if min_pages is not None else settings.aggregator.min_pages
    )
    timeout_seconds = timeout if timeout is not None else settings.pipeline.timeout_seconds

    try:
        report = run_pipeline(
            day1_path,
            day2_path,
            reader=reader,
            aggregator=aggregator,
            timeout_seconds=timeout_seconds,
        )
    except Cancelled as e:
        _print_error(f"Timed out: {e}", json_output)
        raise typer.Exit(EXIT_TIMED_OUT)
    except LoyaltyError as e:
        _print_error(f"Failed to process logs: {e}", json_output)
        raise typer.Exit(EXIT_FAILED)

    if json_output:
        print(json.dumps(report.to_dict(), indent=2))
        return

    # Rich table output
    console = Console()
    table = Table(title="Loyal Users", show_header=True, header_style="bold")
    table.add_column("File", justify="left")
    table.add_column("Entries", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Ranges", justify="right")
    table.add_column("Read", justify="right")

    for day in (report.day1, report.day2):
        table.add_row(
            day.path,
            f"{day.lines_parsed:,}",
            f"{day.lines_skipped:,}",
            str(len(day.ranges)),
            f"{day.elapsed_seconds * 1000:.1f}ms",
        )

    print()
    console.print(table)
    skipped = report.day1.lines_skipped + report.day2.lines_skipped
    if skipped:
        print(f"{C.BRIGHT_YELLOW}{I.WARN} {skipped:,} malformed line(s) skipped{C.RESET}")
    print(f"{C.BRIGHT_GREEN}{I.CHECK} Loyal user count: {C.WHITE}{report.loyal_count}{C.RESET}")
    print(f"  Time elapsed: {report.elapsed_seconds * 1000:.1f}ms")
    print(f"  Loyal user IDs: {report.loyal_user_ids}")
    print()


def _print_error(message: str, json_output: bool) -> None:
    if json_output:
        print(json.dumps({"error": message}))
    else:
        print(f"\n{C.BRIGHT_RED}{I.CROSS} {message}{C.RESET}\n")
