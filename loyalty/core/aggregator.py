# ==============================================================================
# Loyalty Aggregator - Pure Domain Logic
# ==============================================================================
"""
Two-pass aggregation that turns two days of log entries into loyal user ids.

A user is loyal when they appear in both days' entries and visited at least
`min_pages` distinct pages across the two days combined.

Pass 1 walks the day-one entries and pass 2 the day-two entries, each
updating a per-user UserVisitState. Every state records the set of pass
indices it was seen in, so a user who only shows up on day two is never
mistaken for a two-day visitor. Entry order within a day does not matter.

All state lives in a local dict for the duration of one call; nothing is
shared between threads or kept between runs.
"""

import logging
from collections.abc import Iterable

from loyalty.core.deadline import Deadline
from loyalty.core.models import LogEntry, UserVisitState

logger = logging.getLogger(__name__)

DEFAULT_MIN_PAGES = 4

DAY_ONE = 1
DAY_TWO = 2


class LoyaltyAggregator:
    """
    Builds per-user visit state and selects loyal users.

    Args:
        min_pages: Minimum number of distinct pages across both days
    """

    def __init__(self, min_pages: int = DEFAULT_MIN_PAGES):
        if min_pages < 0:
            raise ValueError(f"min_pages must be non-negative, got {min_pages}")
        self.min_pages = min_pages

    def observe(
        self,
        states: dict[int, UserVisitState],
        entries: Iterable[LogEntry],
        day: int,
    ) -> dict[int, UserVisitState]:
        """
        Fold one day's entries into the per-user states.

        Mutates states in place and returns it.
        """
        for entry in entries:
            state = states.get(entry.user_id)
            if state is None:
                state = UserVisitState()
                states[entry.user_id] = state
            state.observe(entry.page_name, day)
        return states

    def is_loyal(self, state: UserVisitState) -> bool:
        """Seen on both days and visited enough distinct pages."""
        return (
            DAY_ONE in state.days_seen
            and DAY_TWO in state.days_seen
            and len(state.pages_seen) >= self.min_pages
        )

    def build_states(
        self,
        day1_entries: Iterable[LogEntry],
        day2_entries: Iterable[LogEntry],
        deadline: Deadline | None = None,
    ) -> dict[int, UserVisitState]:
        """Run both passes and return the per-user states."""
        states: dict[int, UserVisitState] = {}
        for day, entries in ((DAY_ONE, day1_entries), (DAY_TWO, day2_entries)):
            if deadline is not None:
                deadline.check()
            self.observe(states, entries, day)
        return states

    def identify_loyal_users(
        self,
        day1_entries: Iterable[LogEntry],
        day2_entries: Iterable[LogEntry],
        deadline: Deadline | None = None,
    ) -> list[int]:
        """
        Return loyal user ids in ascending order.

        Args:
            day1_entries: Entries parsed from the first day's file
            day2_entries: Entries parsed from the second day's file
            deadline: Optional deadline checked before each pass and before
                selection

        Raises:
            DeadlineExceeded: If the deadline expires between stages
            Cancelled: If the deadline handle is cancelled
        """
        states = self.build_states(day1_entries, day2_entries, deadline)

        if deadline is not None:
            deadline.check()

        loyal = {user_id for user_id, state in states.items() if self.is_loyal(state)}

        logger.debug(
            "Aggregated %d users, %d loyal (min_pages=%d)", len(states), len(loyal), self.min_pages
        )
        return sorted(loyal)


def identify_loyal_users(
    day1_entries: Iterable[LogEntry],
    day2_entries: Iterable[LogEntry],
    min_pages: int = DEFAULT_MIN_PAGES,
    deadline: Deadline | None = None,
) -> list[int]:
    """Identify loyal users with a one-off LoyaltyAggregator."""
    return LoyaltyAggregator(min_pages=min_pages).identify_loyal_users(
        day1_entries, day2_entries, deadline
    )
