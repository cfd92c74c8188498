# ==============================================================================
# Loyalty Utilities
# ==============================================================================
"""
Shared utilities: configuration and paths.
"""

from loyalty.utils.config import (
    AggregatorSettings,
    PipelineSettings,
    ReaderSettings,
    SeedSettings,
    Settings,
    get_settings,
)
from loyalty.utils.paths import day_file_name, get_project_root

__all__ = [
    # Config
    "AggregatorSettings",
    "PipelineSettings",
    "ReaderSettings",
    "SeedSettings",
    "Settings",
    "get_settings",
    # Paths
    "day_file_name",
    "get_project_root",
]
