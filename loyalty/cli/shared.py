# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared helpers used across CLI command modules.

This module provides:
- ANSI color codes and status icons
- Logging setup for CLI runs
"""

import logging

from loyalty.utils.config import get_settings

# ==============================================================================
# ANSI Colors and Icons
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"
    WARN = "!"


# Module-level aliases for convenience
C, I = Colors, Icons


# ==============================================================================
# Logging
# ==============================================================================


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging from settings (DEBUG when verbose, WARNING when quiet)."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
