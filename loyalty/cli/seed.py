# ==============================================================================
# Seed Command
# ==============================================================================
"""
Seed command: writes two synthetic day files for local runs and benchmarks.
"""

import random
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from loyalty.cli.shared import C, I, setup_logging
from loyalty.utils.config import get_settings


def seed_generate(
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory to write the day files into"),
    ] = None,
    users: Annotated[
        Optional[int], typer.Option("--users", "-u", min=1, help="Size of the user id space")
    ] = None,
    entries: Annotated[
        Optional[int], typer.Option("--entries", "-n", min=0, help="Minimum entries per day file")
    ] = None,
    loyal_rate: Annotated[
        Optional[float],
        typer.Option("--loyal-rate", min=0.0, max=1.0, help="Fraction of users made loyal"),
    ] = None,
    start_date: Annotated[
        Optional[datetime],
        typer.Option("--date", "-d", formats=["%Y-%m-%d"], help="Date of the first day file"),
    ] = None,
    seed: Annotated[
        Optional[int], typer.Option("--seed", "-s", help="Random seed for reproducible output")
    ] = None,
) -> None:
    """Generate two consecutive days of synthetic activity logs.

    Examples:
        loyalty seed                          # Defaults from LOYALTY_SEED_*
        loyalty seed -o /tmp/logs -n 100000   # Larger files elsewhere
    """
    from loyalty.seed import generate_log_files

    settings = get_settings()
    setup_logging()

    random_seed = seed if seed is not None else settings.seed.random_seed
    result = generate_log_files(
        output_dir=output_dir or settings.pipeline.data_dir_path,
        start_date=start_date.date() if start_date else settings.seed.start_date,
        total_users=users if users is not None else settings.seed.total_users,
        total_entries=entries if entries is not None else settings.seed.total_entries,
        loyal_rate=loyal_rate if loyal_rate is not None else settings.seed.loyal_rate,
        min_pages=settings.aggregator.min_pages,
        rng=random.Random(random_seed),
    )

    print()
    for path, count in zip(result.paths, result.entries_per_day):
        print(f"{C.BRIGHT_GREEN}{I.CHECK} Wrote {C.WHITE}{count:,}{C.RESET} entries to {path}")
    print(f"  Generated loyal users: {C.WHITE}{len(result.loyal_user_ids)}{C.RESET}")
    print()
