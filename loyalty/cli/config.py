# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the loyalty CLI.
"""

import json
from typing import Annotated

import typer

from loyalty.cli.shared import C
from loyalty.utils.config import get_settings


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration."""
    settings = get_settings()

    if json_output:
        print(json.dumps(settings.model_dump(mode="json"), indent=2))
        return

    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    print(f"{C.CYAN}Reader{C.RESET}")
    print(f"  Workers:         {C.WHITE}{settings.reader.workers}{C.RESET}")
    print(f"  Parser:          {C.WHITE}{settings.reader.parser}{C.RESET}")
    print(f"  Lookahead:       {C.WHITE}{settings.reader.lookahead_bytes} bytes{C.RESET}")
    print(f"  Max line:        {C.WHITE}{settings.reader.max_line_bytes} bytes{C.RESET}")
    print()

    print(f"{C.CYAN}Aggregator{C.RESET}")
    print(f"  Min pages:       {C.WHITE}{settings.aggregator.min_pages}{C.RESET}")
    print()

    print(f"{C.CYAN}Pipeline{C.RESET}")
    print(f"  Timeout:         {C.WHITE}{settings.pipeline.timeout_seconds}s{C.RESET}")
    print(f"  Day 1:           {C.WHITE}{settings.pipeline.day1_path}{C.RESET}")
    print(f"  Day 2:           {C.WHITE}{settings.pipeline.day2_path}{C.RESET}")
    print()

    print(f"{C.CYAN}Seed{C.RESET}")
    print(f"  Users:           {C.WHITE}{settings.seed.total_users}{C.RESET}")
    print(f"  Entries:         {C.WHITE}{settings.seed.total_entries}{C.RESET}")
    print(f"  Loyal rate:      {C.WHITE}{settings.seed.loyal_rate}{C.RESET}")
    print(f"  Start date:      {C.WHITE}{settings.seed.start_date}{C.RESET}")
    print()
