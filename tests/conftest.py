# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- log_line(): build one log line in the on-disk format
- write_log: write lines to a file under tmp_path
- Fresh settings per test (get_settings cache cleared)
"""

from datetime import datetime, timedelta, timezone

import pytest

from loyalty.core.models import LogEntry
from loyalty.utils.config import get_settings

DAY1 = datetime(2024, 10, 1, tzinfo=timezone.utc)
DAY2 = DAY1 + timedelta(days=1)


def log_line(user_id: int, page: str, ts: datetime = DAY1) -> str:
    """One compact JSON log line, without the trailing newline."""
    return LogEntry(user_id=user_id, page_name=page, timestamp=ts).to_log_line()


def entries(pairs: list[tuple[int, str]], ts: datetime = DAY1) -> list[LogEntry]:
    """Build LogEntry objects from (user_id, page) pairs."""
    return [LogEntry(user_id=u, page_name=p, timestamp=ts) for u, p in pairs]


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def write_log(tmp_path):
    """Write lines (str or bytes) to a log file and return its path.

    Each line gets a trailing newline unless `trailing_newline=False`.
    """

    def _write(name: str, lines: list, trailing_newline: bool = True):
        data = b"\n".join(line.encode() if isinstance(line, str) else line for line in lines)
        if lines and trailing_newline:
            data += b"\n"
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
