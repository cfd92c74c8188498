# ==============================================================================
# Tests for the Parallel File Reader
# ==============================================================================
"""
Tests for ParallelFileReader and read_file().

Tests cover:
- Every valid line is read exactly once, regardless of worker count
- Malformed lines are skipped and counted, blank lines ignored
- Fatal I/O faults (open, scan, worker failure) raise ReadError
- Deadline expiry and cancellation are raised as distinct errors
"""

import logging
import os
from collections import Counter

import pytest

from loyalty.core.deadline import Deadline
from loyalty.core.errors import Cancelled, DeadlineExceeded, ReadError
from loyalty.core.reader import ParallelFileReader, read_file

from conftest import DAY2, log_line


def _pairs(entries) -> Counter:
    return Counter((e.user_id, e.page_name) for e in entries)


@pytest.fixture()
def day_file(write_log):
    lines = [log_line(user_id, f"page{user_id % 5}") for user_id in range(1, 201)]
    return write_log("day.log", lines)


# ==============================================================================
# Happy path
# ==============================================================================


class TestRead:
    """Reading well-formed files."""

    @pytest.mark.parametrize("workers", [1, 2, 4, 8])
    def test_reads_every_line_once(self, day_file, workers):
        result = ParallelFileReader(workers=workers).read(day_file)
        assert result.lines_parsed == 200
        assert result.lines_skipped == 0
        assert _pairs(result.entries) == Counter((u, f"page{u % 5}") for u in range(1, 201))
        assert len(result.ranges) == workers

    def test_ranges_cover_file(self, day_file):
        result = ParallelFileReader(workers=4).read(day_file)
        assert sum(r.length for r in result.ranges) == os.path.getsize(day_file)

    def test_json_parser(self, day_file):
        entries = ParallelFileReader(workers=3, parser="json").read_file(day_file)
        assert len(entries) == 200

    def test_timestamps_preserved(self, write_log):
        path = write_log("day2.log", [log_line(1, "home", DAY2)])
        (entry,) = read_file(path)
        assert entry.timestamp == DAY2

    def test_empty_file(self, write_log):
        path = write_log("empty.log", [])
        result = ParallelFileReader(workers=4).read(path)
        assert result.entries == []
        assert all(r.length == 0 for r in result.ranges)

    def test_final_line_without_newline(self, write_log):
        lines = [log_line(i, "home") for i in range(10)]
        path = write_log("day.log", lines, trailing_newline=False)
        assert len(read_file(path, workers=3)) == 10

    def test_more_workers_than_lines(self, write_log):
        path = write_log("day.log", [log_line(1, "home"), log_line(2, "shop")])
        assert _pairs(read_file(path, workers=16)) == Counter({(1, "home"): 1, (2, "shop"): 1})

    def test_zero_workers_uses_cpu_count(self):
        assert ParallelFileReader(workers=0).workers == (os.cpu_count() or 4)

    def test_negative_workers_rejected(self):
        with pytest.raises(ValueError):
            ParallelFileReader(workers=-1)

    def test_unknown_parser_rejected(self):
        with pytest.raises(ValueError, match="unknown parser"):
            ParallelFileReader(parser="xml")


# ==============================================================================
# Malformed input
# ==============================================================================


class TestMalformedLines:
    """Bad lines are skipped without aborting the read."""

    def test_missing_page_name_skipped(self, write_log):
        path = write_log(
            "day.log",
            [
                log_line(1, "home"),
                '{"userId":2,"timestamp":"2024-10-01T00:00:00Z"}',
                log_line(3, "shop"),
            ],
        )
        result = ParallelFileReader(workers=2).read(path)
        assert _pairs(result.entries) == Counter({(1, "home"): 1, (3, "shop"): 1})
        assert result.lines_skipped == 1

    def test_garbage_and_partial_writes(self, write_log):
        path = write_log(
            "day.log",
            [
                log_line(1, "home"),
                b"\x00\x01\x02 binary junk \xff",
                '{"userId":4,"pageName":"blog","timest',
                log_line(5, "faq"),
            ],
        )
        result = ParallelFileReader(workers=1).read(path)
        assert result.lines_parsed == 2
        assert result.lines_skipped == 2

    def test_blank_lines_not_counted(self, write_log):
        path = write_log("day.log", [log_line(1, "home"), "", "   ", log_line(2, "home")])
        result = ParallelFileReader(workers=1).read(path)
        assert result.lines_parsed == 2
        assert result.lines_skipped == 0

    def test_skipped_lines_logged(self, write_log, caplog):
        path = write_log("day.log", [log_line(1, "home"), "not a record, clearly broken"])
        with caplog.at_level(logging.WARNING, logger="loyalty.core.reader"):
            ParallelFileReader(workers=1).read(path)
        assert "Skipped 1 malformed line(s)" in caplog.text


# ==============================================================================
# Fatal errors
# ==============================================================================


class TestFatalErrors:
    """I/O faults abort the whole read."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReadError) as exc_info:
            read_file(tmp_path / "missing.log")
        assert exc_info.value.operation == "open"
        assert exc_info.value.path.endswith("missing.log")

    def test_line_longer_than_limit(self, write_log):
        path = write_log("day.log", [log_line(1, "home"), log_line(2, "x" * 200)])
        reader = ParallelFileReader(workers=1, max_line_bytes=100)
        with pytest.raises(ReadError) as exc_info:
            reader.read(path)
        assert exc_info.value.operation == "scan"

    def test_worker_error_propagates(self, day_file, monkeypatch):
        """One failing range fails the whole read, with no partial result."""
        reader = ParallelFileReader(workers=4)
        original = reader._read_range

        def flaky(path, byte_range):
            if byte_range.offset > 0:
                raise ReadError("read", path, "disk on fire")
            return original(path, byte_range)

        monkeypatch.setattr(reader, "_read_range", flaky)
        with pytest.raises(ReadError, match="disk on fire"):
            reader.read(day_file)

    def test_file_shrinks_during_read(self, day_file, monkeypatch):
        """A range past the current end of file is a read error."""
        reader = ParallelFileReader(workers=2)
        original = reader._read_range

        def truncate_then_read(path, byte_range):
            with open(path, "r+b") as fh:
                fh.truncate(10)
            return original(path, byte_range)

        monkeypatch.setattr(reader, "_read_range", truncate_then_read)
        with pytest.raises(ReadError) as exc_info:
            reader.read(day_file)
        assert exc_info.value.operation == "read"


# ==============================================================================
# Cancellation
# ==============================================================================


class TestDeadline:
    """Deadline expiry and cancellation."""

    def test_expired_deadline(self, day_file):
        with pytest.raises(DeadlineExceeded):
            ParallelFileReader().read(day_file, Deadline(timeout_seconds=0))

    def test_cancelled_deadline(self, day_file):
        deadline = Deadline()
        deadline.cancel()
        with pytest.raises(Cancelled) as exc_info:
            ParallelFileReader().read(day_file, deadline)
        assert not isinstance(exc_info.value, DeadlineExceeded)

    def test_no_dispatch_after_cancel(self, day_file, monkeypatch):
        """Cancelling mid-dispatch stops further ranges from being submitted."""

        class CancelAfterFirstDispatch(Deadline):
            checks = 0

            def check(self):
                # 1st check: start of read, 2nd: first range, 3rd: second range
                self.checks += 1
                if self.checks == 3:
                    self.cancel()
                super().check()

        reader = ParallelFileReader(workers=4)
        original = reader._read_range
        calls = []

        def record(path, byte_range):
            calls.append(byte_range)
            return original(path, byte_range)

        monkeypatch.setattr(reader, "_read_range", record)
        with pytest.raises(Cancelled):
            reader.read(day_file, CancelAfterFirstDispatch())
        assert len(calls) <= 1

    def test_generous_deadline(self, day_file):
        result = ParallelFileReader().read(day_file, Deadline(timeout_seconds=60))
        assert result.lines_parsed == 200
