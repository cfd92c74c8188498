# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Log reading and loyalty aggregation.

This module contains:
- Domain models (LogEntry, ByteRange, UserVisitState)
- Line parsers and the line-aligned range splitter
- The parallel file reader
- The two-pass loyalty aggregator

Nothing here depends on configuration or the CLI.
"""

from loyalty.core.aggregator import LoyaltyAggregator, identify_loyal_users
from loyalty.core.deadline import Deadline
from loyalty.core.errors import (
    Cancelled,
    DeadlineExceeded,
    LogLineError,
    LoyaltyError,
    ReadError,
    SplitError,
)
from loyalty.core.models import ByteRange, LogEntry, UserVisitState
from loyalty.core.parser import parse_line, parse_line_json
from loyalty.core.reader import ParallelFileReader, ReadResult, read_file
from loyalty.core.splitter import compute_ranges, split_file

__all__ = [
    # Models
    "ByteRange",
    "LogEntry",
    "UserVisitState",
    # Errors
    "Cancelled",
    "DeadlineExceeded",
    "LogLineError",
    "LoyaltyError",
    "ReadError",
    "SplitError",
    # Processing
    "Deadline",
    "LoyaltyAggregator",
    "ParallelFileReader",
    "ReadResult",
    "compute_ranges",
    "identify_loyal_users",
    "parse_line",
    "parse_line_json",
    "read_file",
    "split_file",
]
