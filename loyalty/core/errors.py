# ==============================================================================
# Error Taxonomy
# ==============================================================================
"""
Exceptions raised by the log reading and loyalty aggregation pipeline.

Only LogLineError is recoverable: the reader catches it, skips the line and
keeps going. Everything else aborts the run.
"""


class LoyaltyError(Exception):
    """Base class for all pipeline errors."""


class LogLineError(LoyaltyError, ValueError):
    """A single log line could not be parsed."""


class SplitError(LoyaltyError):
    """No line terminator was found near a chunk boundary."""

    def __init__(self, path: str, boundary: int, lookahead: int):
        self.path = path
        self.boundary = boundary
        self.lookahead = lookahead
        super().__init__(
            f"no line terminator within {lookahead} bytes of offset {boundary} in {path}"
        )


class ReadError(LoyaltyError):
    """
    An I/O fault while reading a byte range.

    Attributes:
        operation: Failing step ("open", "seek", "read" or "scan")
        path: File being read
    """

    def __init__(self, operation: str, path: str, detail: str = ""):
        self.operation = operation
        self.path = path
        message = f"{operation} failed for {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class Cancelled(LoyaltyError):
    """The run was cancelled before it could finish."""


class DeadlineExceeded(Cancelled):
    """The processing deadline expired before the run finished."""
