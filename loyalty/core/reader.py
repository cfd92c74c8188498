# ==============================================================================
# Parallel File Reader
# ==============================================================================
"""
Concurrent reader that turns a log file into a list of LogEntry records.

The file is split into line-aligned byte ranges (see splitter.py). Each range
is read on its own thread with its own file handle, parsed line by line into
a private list, and handed back through its future. The calling thread is the
only place results are merged, so no locking is needed.

Error policy:
- Malformed lines are skipped and counted (LogLineError never escapes)
- I/O faults abort the whole read with ReadError; no partial result
- Deadline expiry or cancellation raises DeadlineExceeded / Cancelled

Usage:
    reader = ParallelFileReader(workers=4)
    result = reader.read("logs_2024-10-01.log", deadline=Deadline(10))
    print(len(result.entries), result.lines_skipped)
"""

import logging
import os
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from loyalty.core.deadline import Deadline
from loyalty.core.errors import LogLineError, ReadError
from loyalty.core.models import ByteRange, LogEntry
from loyalty.core.parser import get_parser
from loyalty.core.splitter import DEFAULT_LOOKAHEAD_BYTES, split_file

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4
DEFAULT_MAX_LINE_BYTES = 1024 * 1024

# How often the fan-in loop wakes up to check for cancellation
POLL_INTERVAL_SECONDS = 0.05


@dataclass
class RangeResult:
    """Output of one worker for one byte range."""

    entries: list[LogEntry] = field(default_factory=list)
    lines_parsed: int = 0
    lines_skipped: int = 0


@dataclass
class ReadResult:
    """
    Merged output of a whole-file read.

    Attributes:
        path: File that was read
        entries: Parsed entries from all ranges, in no particular order
        ranges: Byte ranges the file was split into
        lines_parsed: Lines successfully parsed
        lines_skipped: Malformed lines skipped
        elapsed_seconds: Wall time for split, read and merge
    """

    path: str
    entries: list[LogEntry]
    ranges: list[ByteRange]
    lines_parsed: int
    lines_skipped: int
    elapsed_seconds: float


class ParallelFileReader:
    """
    Reads one log file using a pool of range workers.

    Args:
        workers: Number of ranges (and threads). 0 means os.cpu_count().
        parser: Line parser name, "scan" (byte scanning) or "json" (pydantic)
        lookahead_bytes: Initial newline search window at chunk boundaries
        max_line_bytes: Longest line accepted; longer lines abort the read
    """

    def __init__(
        self,
        workers: int = DEFAULT_WORKERS,
        parser: str = "scan",
        lookahead_bytes: int = DEFAULT_LOOKAHEAD_BYTES,
        max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
    ):
        if workers < 0:
            raise ValueError(f"workers must be non-negative, got {workers}")
        if max_line_bytes < 1:
            raise ValueError(f"max_line_bytes must be positive, got {max_line_bytes}")

        self.workers = workers or os.cpu_count() or DEFAULT_WORKERS
        self.parser_name = parser
        self._parse = get_parser(parser)
        self.lookahead_bytes = lookahead_bytes
        self.max_line_bytes = max_line_bytes

    def read(self, path: str | os.PathLike, deadline: Deadline | None = None) -> ReadResult:
        """
        Read and parse a whole file concurrently.

        Args:
            path: Log file to read
            deadline: Optional deadline polled before each range dispatch and
                while waiting for workers

        Returns:
            ReadResult with the merged entries and line counters

        Raises:
            ReadError: If the file cannot be opened, seeked or read, or a line
                exceeds max_line_bytes
            SplitError: If a chunk boundary has no newline nearby
            DeadlineExceeded: If the deadline expires mid-read
            Cancelled: If the deadline handle is cancelled mid-read
        """
        name = os.fspath(path)
        start = time.monotonic()

        if deadline is not None:
            deadline.check()

        try:
            ranges = split_file(
                name,
                self.workers,
                lookahead=self.lookahead_bytes,
                max_lookahead=max(self.max_line_bytes + 1, self.lookahead_bytes),
            )
        except OSError as e:
            raise ReadError("open", name, str(e)) from e

        entries: list[LogEntry] = []
        lines_parsed = 0
        lines_skipped = 0

        executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="range-reader")
        futures: list[Future] = []
        try:
            for byte_range in ranges:
                if deadline is not None:
                    deadline.check()
                futures.append(executor.submit(self._read_range, name, byte_range))

            pending = set(futures)
            while pending:
                timeout = None
                if deadline is not None:
                    timeout = POLL_INTERVAL_SECONDS
                    remaining = deadline.remaining()
                    if remaining is not None:
                        timeout = min(timeout, remaining)

                done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
                for future in done:
                    # Re-raises the worker's ReadError, if any
                    part = future.result()
                    entries.extend(part.entries)
                    lines_parsed += part.lines_parsed
                    lines_skipped += part.lines_skipped

                if pending and deadline is not None:
                    deadline.check()
        except BaseException:
            for future in futures:
                future.cancel()
            raise
        finally:
            # In-flight workers are abandoned on error; their results are dropped
            executor.shutdown(wait=False, cancel_futures=True)

        elapsed = time.monotonic() - start
        logger.info(
            "Read %s: %s entries from %d ranges in %.1fms",
            name,
            f"{lines_parsed:,}",
            len(ranges),
            elapsed * 1000,
        )
        if lines_skipped:
            logger.warning("Skipped %d malformed line(s) in %s", lines_skipped, name)

        return ReadResult(
            path=name,
            entries=entries,
            ranges=ranges,
            lines_parsed=lines_parsed,
            lines_skipped=lines_skipped,
            elapsed_seconds=elapsed,
        )

    def read_file(self, path: str | os.PathLike, deadline: Deadline | None = None) -> list[LogEntry]:
        """Read a file and return only its entries. See read()."""
        return self.read(path, deadline).entries

    def _read_range(self, path: str, byte_range: ByteRange) -> RangeResult:
        """Worker: read and parse the lines inside one byte range."""
        # Entries list grows as lines parse; byte_range.length is not used as a size hint
        result = RangeResult()
        if byte_range.length == 0:
            return result

        try:
            fh = open(path, "rb")
        except OSError as e:
            raise ReadError("open", path, str(e)) from e

        with fh:
            try:
                fh.seek(byte_range.offset)
            except OSError as e:
                raise ReadError("seek", path, str(e)) from e

            limit = self.max_line_bytes + 1
            remaining = byte_range.length
            while remaining > 0:
                try:
                    raw = fh.readline(min(remaining, limit))
                except OSError as e:
                    raise ReadError("read", path, str(e)) from e

                if not raw:
                    raise ReadError(
                        "read",
                        path,
                        f"unexpected end of file at offset {byte_range.end - remaining}",
                    )
                if len(raw) == limit and not raw.endswith(b"\n"):
                    raise ReadError(
                        "scan",
                        path,
                        f"line at offset {byte_range.end - remaining} exceeds "
                        f"{self.max_line_bytes} bytes",
                    )
                remaining -= len(raw)

                if not raw.strip():
                    continue
                try:
                    entry = self._parse(raw)
                except LogLineError as e:
                    result.lines_skipped += 1
                    logger.debug("Skipping malformed line in %s: %s", path, e)
                    continue

                result.entries.append(entry)
                result.lines_parsed += 1

        return result


def read_file(
    path: str | os.PathLike,
    deadline: Deadline | None = None,
    workers: int = DEFAULT_WORKERS,
    parser: str = "scan",
) -> list[LogEntry]:
    """Read a log file with a one-off ParallelFileReader."""
    return ParallelFileReader(workers=workers, parser=parser).read_file(path, deadline)
