# ==============================================================================
# Loyalty Pipeline
# ==============================================================================
"""
Runs the full two-day loyalty computation under one deadline:

    1. reader.read(day1)                     - parallel parse of day one
    2. reader.read(day2)                     - parallel parse of day two
    3. aggregator.identify_loyal_users(...)  - two-pass aggregation

Each stage is timed with time.monotonic() and summarized in one INFO log
line. Any fatal error propagates unchanged, so callers never see a partial
loyal-user list.
"""

import logging
import os
import time
from dataclasses import dataclass

from loyalty.core.aggregator import LoyaltyAggregator
from loyalty.core.deadline import Deadline
from loyalty.core.reader import ParallelFileReader, ReadResult
from loyalty.utils.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class LoyaltyReport:
    """
    Result of one pipeline run.

    Attributes:
        loyal_user_ids: Ascending loyal user ids
        day1: Read result for the first day's file
        day2: Read result for the second day's file
        aggregate_seconds: Time spent in the aggregator
        elapsed_seconds: Total wall time of the run
    """

    loyal_user_ids: list[int]
    day1: ReadResult
    day2: ReadResult
    aggregate_seconds: float
    elapsed_seconds: float

    @property
    def loyal_count(self) -> int:
        return len(self.loyal_user_ids)

    def to_dict(self) -> dict:
        """Summary suitable for JSON output."""
        return {
            "loyal_count": self.loyal_count,
            "loyal_user_ids": self.loyal_user_ids,
            "elapsed_ms": round(self.elapsed_seconds * 1000, 3),
            "days": [
                {
                    "path": day.path,
                    "entries": day.lines_parsed,
                    "skipped": day.lines_skipped,
                    "ranges": len(day.ranges),
                    "elapsed_ms": round(day.elapsed_seconds * 1000, 3),
                }
                for day in (self.day1, self.day2)
            ],
        }


def run_pipeline(
    day1_path: str | os.PathLike,
    day2_path: str | os.PathLike,
    reader: ParallelFileReader | None = None,
    aggregator: LoyaltyAggregator | None = None,
    timeout_seconds: float | None = None,
    deadline: Deadline | None = None,
) -> LoyaltyReport:
    """
    Read both day files and identify loyal users.

    Args:
        day1_path: First day's log file
        day2_path: Second day's log file
        reader: Reader to use (default ParallelFileReader())
        aggregator: Aggregator to use (default LoyaltyAggregator())
        timeout_seconds: Overall budget, ignored when deadline is given
        deadline: Existing deadline handle, e.g. to cancel from another thread

    Returns:
        LoyaltyReport for the run

    Raises:
        ReadError, SplitError: If either file cannot be read
        DeadlineExceeded, Cancelled: If the run does not finish in time
    """
    reader = reader or ParallelFileReader()
    aggregator = aggregator or LoyaltyAggregator()
    deadline = deadline or Deadline(timeout_seconds)

    start = time.monotonic()

    day1 = reader.read(day1_path, deadline)
    deadline.check()
    day2 = reader.read(day2_path, deadline)

    t0 = time.monotonic()
    loyal = aggregator.identify_loyal_users(day1.entries, day2.entries, deadline)
    t1 = time.monotonic()

    report = LoyaltyReport(
        loyal_user_ids=loyal,
        day1=day1,
        day2=day2,
        aggregate_seconds=t1 - t0,
        elapsed_seconds=t1 - start,
    )

    logger.info(
        "Pipeline: %d loyal users | day1=%.1fms day2=%.1fms aggregate=%.1fms | total=%.1fms",
        report.loyal_count,
        day1.elapsed_seconds * 1000,
        day2.elapsed_seconds * 1000,
        report.aggregate_seconds * 1000,
        report.elapsed_seconds * 1000,
    )
    return report


def run_from_settings(settings: Settings) -> LoyaltyReport:
    """Run the pipeline with paths, components and deadline taken from settings."""
    reader = ParallelFileReader(
        workers=settings.reader.workers,
        parser=settings.reader.parser,
        lookahead_bytes=settings.reader.lookahead_bytes,
        max_line_bytes=settings.reader.max_line_bytes,
    )
    aggregator = LoyaltyAggregator(min_pages=settings.aggregator.min_pages)
    return run_pipeline(
        settings.pipeline.day1_path,
        settings.pipeline.day2_path,
        reader=reader,
        aggregator=aggregator,
        timeout_seconds=settings.pipeline.timeout_seconds,
    )
