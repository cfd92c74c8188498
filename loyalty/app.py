# ==============================================================================
# Loyalty Log Analyzer CLI
# ==============================================================================
"""
Command-line interface for the loyalty log analyzer.

Usage:
    loyalty --help
    loyalty seed
    loyalty report
    loyalty report day1.log day2.log --min-pages 5 --json
    loyalty config show
"""

import typer

app = typer.Typer(
    name="loyalty",
    help="Loyal user analysis over daily activity logs",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

from loyalty.cli.report import show_report

app.command("report")(show_report)

from loyalty.cli.seed import seed_generate

app.command("seed")(seed_generate)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

from loyalty.cli.config import config_show

config_app.command("show")(config_show)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
