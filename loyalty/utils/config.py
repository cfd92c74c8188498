# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()


class ReaderSettings(BaseSettings):
    """Parallel file reader settings."""

    model_config = SettingsConfigDict(env_prefix="LOYALTY_READER_")

    workers: int = Field(
        default=4, ge=0, description="Byte ranges read concurrently per file (0 = CPU count)"
    )
    parser: Literal["scan", "json"] = Field(
        default="scan",
        description="Line parser (scan = byte scanning, json = pydantic validation)",
    )
    lookahead_bytes: int = Field(
        default=4096, ge=1, description="Initial newline search window at chunk boundaries"
    )
    max_line_bytes: int = Field(
        default=1024 * 1024, ge=1, description="Longest log line accepted before aborting"
    )


class AggregatorSettings(BaseSettings):
    """Loyalty aggregation settings."""

    model_config = SettingsConfigDict(env_prefix="LOYALTY_AGGREGATOR_")

    min_pages: int = Field(
        default=4, ge=0, description="Minimum distinct pages across both days to count as loyal"
    )


class PipelineSettings(BaseSettings):
    """Run settings for the two-day pipeline."""

    model_config = SettingsConfigDict(env_prefix="LOYALTY_PIPELINE_")

    timeout_seconds: float = Field(
        default=10.0, gt=0, description="Overall deadline for reading and aggregating"
    )
    data_dir: Path = Field(default=Path("seed/files"), description="Directory holding day files")
    day1_file: str = Field(default="logs_2024-10-01.log", description="First day's log file")
    day2_file: str = Field(default="logs_2024-10-02.log", description="Second day's log file")

    @property
    def data_dir_path(self) -> Path:
        """Resolve data directory to absolute path from project root."""
        if self.data_dir.is_absolute():
            return self.data_dir
        # Import here to avoid circular imports
        from loyalty.utils.paths import get_project_root

        return get_project_root() / self.data_dir

    @property
    def day1_path(self) -> Path:
        return self.data_dir_path / self.day1_file

    @property
    def day2_path(self) -> Path:
        return self.data_dir_path / self.day2_file


class SeedSettings(BaseSettings):
    """Synthetic log generator settings."""

    model_config = SettingsConfigDict(env_prefix="LOYALTY_SEED_")

    total_users: int = Field(default=10000, ge=1, description="Size of the user id space")
    total_entries: int = Field(default=10000, ge=0, description="Minimum entries per day file")
    loyal_rate: float = Field(
        default=0.18, ge=0.0, le=1.0, description="Fraction of users generated as loyal"
    )
    start_date: date = Field(default=date(2024, 10, 1), description="Date of the first day file")
    random_seed: Optional[int] = Field(
        default=None, description="Random seed for reproducible output"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    reader: ReaderSettings = Field(default_factory=ReaderSettings)
    aggregator: AggregatorSettings = Field(default_factory=AggregatorSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)

    # General settings
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
