# ==============================================================================
# Loyalty Domain Models
# ==============================================================================
"""
Models for parsed log entries, file byte ranges and per-user visit state.

LogEntry is a frozen pydantic model so it can be validated straight from a
JSON line; ByteRange and UserVisitState are plain dataclasses since they are
only ever built internally.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from loyalty.core.errors import LogLineError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# date "T" time, optional fraction, then "Z" or a '+HH:MM' offset
RFC3339_PATTERN = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}"
    r"[Tt][0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?"
    r"([Zz]|[+-][0-9]{2}:[0-9]{2})"
)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC3339 instant.

    Requires a full date, a 'T' (or 't') separator, a time with seconds and
    either 'Z' or a '+HH:MM' offset. Fractional seconds of any length are
    accepted and truncated to microseconds.

    Raises:
        LogLineError: If value is not an RFC3339 timestamp
    """
    if RFC3339_PATTERN.fullmatch(value) is None:
        raise LogLineError(f"invalid RFC3339 timestamp: {value!r}")
    try:
        return datetime.fromisoformat(value.upper())
    except ValueError:
        raise LogLineError(f"invalid RFC3339 timestamp: {value!r}") from None


class LogEntry(BaseModel):
    """
    A single user activity record.

    Attributes:
        user_id: 64-bit user identifier
        page_name: Name of the page visited
        timestamp: Timezone-aware time of the visit
    """

    user_id: int = Field(
        ..., alias="userId", ge=INT64_MIN, le=INT64_MAX, strict=True, description="User identifier"
    )
    page_name: str = Field(..., alias="pageName", min_length=1, description="Page visited")
    timestamp: AwareDatetime = Field(..., strict=True, description="Visit time (RFC3339)")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("timestamp", mode="before")
    @classmethod
    def _rfc3339_timestamp(cls, value):
        # Same check as the byte scanner
        if isinstance(value, str):
            return parse_timestamp(value)
        return value

    def to_log_line(self) -> str:
        """Serialize to the compact one-line JSON format the parser reads."""
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True)
class ByteRange:
    """Half-open byte span [offset, offset + length) of a file."""

    offset: int
    length: int

    def __post_init__(self):
        if self.offset < 0 or self.length < 0:
            raise ValueError(f"invalid byte range: offset={self.offset} length={self.length}")

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass
class UserVisitState:
    """
    Visit accumulator for one user across the processing passes.

    Attributes:
        pages_seen: Distinct page names across all passes
        days_seen: Pass indices (1 = day one, 2 = day two) the user appeared in
    """

    pages_seen: set[str] = field(default_factory=set)
    days_seen: set[int] = field(default_factory=set)

    @property
    def days_present(self) -> int:
        """Highest pass index observed, 0 if never observed."""
        return max(self.days_seen, default=0)

    def observe(self, page_name: str, day: int) -> None:
        self.pages_seen.add(page_name)
        self.days_seen.add(day)
