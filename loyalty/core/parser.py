# ==============================================================================
# Record Parser
# ==============================================================================
"""
Parsers that turn one raw log line into a LogEntry.

Two strategies share the same contract (return a LogEntry or raise
LogLineError):

- parse_line: scans byte positions for the fixed line shape
      {"userId":123,"pageName":"blog","timestamp":"2024-10-01T08:15:00Z"}
  and skips generic JSON decoding. This is the per-record hot path.
- parse_line_json: validates the line with pydantic. Slower, but accepts any
  valid JSON object carrying the three fields in any order.

Callers treat LogLineError as a data-quality problem: the line is skipped and
counted, the surrounding read carries on.
"""

from collections.abc import Callable

from pydantic import ValidationError

from loyalty.core.errors import LogLineError
from loyalty.core.models import INT64_MAX, INT64_MIN, LogEntry, parse_timestamp

# Shortest line that could possibly hold all three fields
MIN_LINE_BYTES = 20

USER_ID_KEY = b'"userId"'
PAGE_NAME_KEY = b'"pageName"'
TIMESTAMP_KEY = b'"timestamp"'

_WHITESPACE = b" \t"

LineParser = Callable[[bytes], LogEntry]


def _value_start(line: bytes, key: bytes, pos: int) -> int:
    """Find `key` at or after pos and return the index of its value."""
    key_at = line.find(key, pos)
    if key_at == -1:
        raise LogLineError(f"missing {key.decode()} field")

    i = key_at + len(key)
    n = len(line)
    while i < n and line[i] in _WHITESPACE:
        i += 1
    if i >= n or line[i] != 0x3A:  # ':'
        raise LogLineError(f"missing ':' after {key.decode()}")
    i += 1
    while i < n and line[i] in _WHITESPACE:
        i += 1
    return i


def _quoted_value(line: bytes, start: int, key: bytes) -> tuple[bytes, int]:
    """Return the bytes of the string value opening at start, and the index past it."""
    if line[start : start + 1] != b'"':
        raise LogLineError(f"{key.decode()} value is not a string")
    close = line.find(b'"', start + 1)
    if close == -1:
        raise LogLineError(f"unterminated {key.decode()} value")
    return line[start + 1 : close], close + 1


def parse_line(raw: bytes) -> LogEntry:
    """
    Parse a log line by scanning byte positions.

    Args:
        raw: One line, with or without its trailing newline

    Returns:
        The parsed LogEntry

    Raises:
        LogLineError: If the line is too short, a field or delimiter is
            missing, the user id is not a 64-bit integer, the page name is
            empty or not UTF-8, or the timestamp is not RFC3339
    """
    line = raw.strip()
    if len(line) < MIN_LINE_BYTES:
        raise LogLineError(f"line too short ({len(line)} bytes)")

    # userId: bare integer terminated by ','
    start = _value_start(line, USER_ID_KEY, 0)
    end = line.find(b",", start)
    if end == -1:
        raise LogLineError("missing ',' after userId value")
    digits = line[start:end].strip()
    unsigned = digits[1:] if digits[:1] == b"-" else digits
    if not unsigned.isdigit():
        raise LogLineError(f"invalid userId: {digits!r}")
    user_id = int(digits)
    if not INT64_MIN <= user_id <= INT64_MAX:
        raise LogLineError(f"userId out of 64-bit range: {user_id}")

    # pageName: quoted string
    start = _value_start(line, PAGE_NAME_KEY, end + 1)
    page_bytes, end = _quoted_value(line, start, PAGE_NAME_KEY)
    if not page_bytes:
        raise LogLineError("empty pageName")
    try:
        page_name = page_bytes.decode("utf-8")
    except UnicodeDecodeError:
        raise LogLineError("pageName is not valid UTF-8") from None

    # timestamp: quoted RFC3339 string
    start = _value_start(line, TIMESTAMP_KEY, end)
    ts_bytes, _ = _quoted_value(line, start, TIMESTAMP_KEY)
    try:
        ts_text = ts_bytes.decode("ascii")
    except UnicodeDecodeError:
        raise LogLineError("timestamp is not ASCII") from None
    timestamp = parse_timestamp(ts_text)

    # Fields are already validated above
    return LogEntry.model_construct(user_id=user_id, page_name=page_name, timestamp=timestamp)


def parse_line_json(raw: bytes) -> LogEntry:
    """
    Parse a log line with full JSON validation.

    Raises:
        LogLineError: If the line is not a JSON object with valid userId,
            pageName and timestamp fields
    """
    line = raw.strip()
    if len(line) < MIN_LINE_BYTES:
        raise LogLineError(f"line too short ({len(line)} bytes)")
    try:
        return LogEntry.model_validate_json(line)
    except ValidationError as e:
        raise LogLineError(f"invalid log record: {e.error_count()} validation error(s)") from e


PARSERS: dict[str, LineParser] = {
    "scan": parse_line,
    "json": parse_line_json,
}


def get_parser(name: str) -> LineParser:
    """Look up a line parser by name ("scan" or "json")."""
    try:
        return PARSERS[name]
    except KeyError:
        raise ValueError(f"unknown parser {name!r}, expected one of {sorted(PARSERS)}") from None
