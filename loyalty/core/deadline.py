# ==============================================================================
# Processing Deadline
# ==============================================================================
"""
Deadline and cancellation handle shared by the reader and the aggregator.

Workers never block on it; callers poll it at dispatch points:

    deadline = Deadline(timeout_seconds=10)
    for part in parts:
        deadline.check()      # raises DeadlineExceeded / Cancelled
        executor.submit(...)
"""

import threading
import time

from loyalty.core.errors import Cancelled, DeadlineExceeded


class Deadline:
    """Overall time budget for a run, with an explicit cancel switch.

    Args:
        timeout_seconds: Budget in seconds from construction. None means no
            time limit (the handle can still be cancelled).
    """

    def __init__(self, timeout_seconds: float | None = None) -> None:
        if timeout_seconds is not None and timeout_seconds < 0:
            raise ValueError(f"timeout_seconds must be non-negative, got {timeout_seconds}")

        self.timeout_seconds = timeout_seconds
        self._expires_at = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Cancel the run. Safe to call from any thread."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before expiry (never negative), or None if unbounded."""
        if self._expires_at is None:
            return None
        return max(self._expires_at - time.monotonic(), 0.0)

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def done(self) -> bool:
        """True once cancelled or expired."""
        return self.cancelled or self.expired()

    def check(self) -> None:
        """Raise if the run has been cancelled or the deadline has passed."""
        if self.cancelled:
            raise Cancelled("run cancelled")
        if self.expired():
            raise DeadlineExceeded(f"deadline of {self.timeout_seconds}s exceeded")
