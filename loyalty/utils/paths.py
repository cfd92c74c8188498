# ==============================================================================
# Path Utilities
# ==============================================================================
"""
Project root detection and day-file naming.
"""

from datetime import date
from pathlib import Path


def get_project_root() -> Path:
    """
    Get the project root directory.

    Searches upward from the current file for a directory containing
    pyproject.toml. Falls back to current working directory if not found.

    Returns:
        Path to the project root directory
    """
    current = Path(__file__).parent.parent.parent  # utils/paths.py -> loyalty -> project
    if (current / "pyproject.toml").exists():
        return current

    return Path.cwd()


def day_file_name(day: date) -> str:
    """Log file name for a given day, e.g. logs_2024-10-01.log."""
    return f"logs_{day.isoformat()}.log"
