# ==============================================================================
# Range Splitter
# ==============================================================================
"""
Divides a log file into contiguous, line-aligned byte ranges.

Each chunk starts where the previous one ended. Every boundary except end of
file is pushed forward past the next newline, so no record is ever split
between two workers. Ranges partition the file exactly.
"""

import logging
import os
from typing import BinaryIO

from loyalty.core.errors import SplitError
from loyalty.core.models import ByteRange

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_BYTES = 4096
MAX_LOOKAHEAD_BYTES = 1024 * 1024


def _find_line_end(
    fh: BinaryIO,
    boundary: int,
    file_size: int,
    lookahead: int,
    max_lookahead: int,
    name: str,
) -> int:
    """
    Return the offset just past the first newline at or after boundary.

    The window starts at lookahead bytes and doubles until a newline shows up
    or max_lookahead is reached. Hitting end of file returns file_size.

    Raises:
        SplitError: If max_lookahead bytes hold no newline
    """
    window = lookahead
    while True:
        fh.seek(boundary)
        buf = fh.read(window)
        idx = buf.find(b"\n")
        if idx != -1:
            return boundary + idx + 1
        if boundary + len(buf) >= file_size:
            return file_size
        if window >= max_lookahead:
            raise SplitError(name, boundary, window)
        window = min(window * 2, max_lookahead)
        logger.debug("No newline near offset %d, widening lookahead to %d", boundary, window)


def compute_ranges(
    fh: BinaryIO,
    file_size: int,
    parts: int,
    lookahead: int = DEFAULT_LOOKAHEAD_BYTES,
    max_lookahead: int = MAX_LOOKAHEAD_BYTES,
) -> list[ByteRange]:
    """
    Compute line-aligned byte ranges for an open binary file.

    Args:
        fh: Binary file handle positioned anywhere (it is seeked)
        file_size: Size of the file in bytes
        parts: Number of ranges to produce (>= 1)
        lookahead: Initial window scanned for a newline past each boundary
        max_lookahead: Largest window tried before giving up

    Returns:
        Exactly `parts` ranges in offset order. Some may be empty when lines
        are long relative to the chunk size or the file is empty.

    Raises:
        ValueError: If parts or lookahead is not positive
        SplitError: If a boundary has no newline within max_lookahead bytes
    """
    if parts < 1:
        raise ValueError(f"parts must be at least 1, got {parts}")
    if lookahead < 1:
        raise ValueError(f"lookahead must be positive, got {lookahead}")

    name = getattr(fh, "name", "<stream>")
    part_size = file_size // parts
    max_lookahead = max(max_lookahead, lookahead)

    ranges: list[ByteRange] = []
    cursor = 0

    for i in range(parts):
        if i == parts - 1:
            end = file_size
        else:
            boundary = (i + 1) * part_size
            if boundary <= cursor or boundary >= file_size:
                end = cursor
            else:
                end = _find_line_end(fh, boundary, file_size, lookahead, max_lookahead, name)

        ranges.append(ByteRange(offset=cursor, length=end - cursor))
        cursor = end

    return ranges


def split_file(
    path: str | os.PathLike,
    parts: int,
    lookahead: int = DEFAULT_LOOKAHEAD_BYTES,
    max_lookahead: int = MAX_LOOKAHEAD_BYTES,
) -> list[ByteRange]:
    """
    Open a file and compute its line-aligned byte ranges.

    Raises:
        OSError: If the file cannot be opened or stat'ed
        SplitError: See compute_ranges()
    """
    with open(path, "rb") as fh:
        file_size = os.fstat(fh.fileno()).st_size
        return compute_ranges(fh, file_size, parts, lookahead, max_lookahead)
