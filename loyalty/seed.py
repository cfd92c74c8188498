# ==============================================================================
# Synthetic Log Generator
# ==============================================================================
"""
Writes two consecutive day files of synthetic user activity.

A fixed share of users is picked as loyal up front. Each day file first gets
every loyal user visiting between min_pages and min_pages + 2 distinct pages,
then is topped up to total_entries with random visits from the remaining
users. Random visits can occasionally make an extra user loyal, so the
generated loyal set is a lower bound on what the pipeline will find.

Lines use the same format the parser reads:
    {"userId":42,"pageName":"shop","timestamp":"2024-10-01T13:07:55Z"}
"""

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from loyalty.core.aggregator import DEFAULT_MIN_PAGES
from loyalty.core.models import LogEntry
from loyalty.utils.paths import day_file_name

logger = logging.getLogger(__name__)

PAGES = [
    "home", "blog", "shop", "about", "contact", "profile", "dashboard",
    "products", "services", "faq", "support", "news", "events", "gallery",
    "forum", "reviews", "careers", "partners", "pricing", "testimonials",
]  # fmt: skip

SECONDS_PER_DAY = 86400


@dataclass
class SeedResult:
    """Files written by the generator and the users generated as loyal."""

    paths: tuple[Path, Path]
    loyal_user_ids: set[int]
    entries_per_day: tuple[int, int]


def pick_loyal_users(total_users: int, loyal_rate: float, rng: random.Random) -> set[int]:
    """Choose int(total_users * loyal_rate) distinct ids from 1..total_users."""
    count = int(total_users * loyal_rate)
    return set(rng.sample(range(1, total_users + 1), count))


def _entry(user_id: int, page: str, day: datetime, rng: random.Random) -> LogEntry:
    return LogEntry(
        user_id=user_id,
        page_name=page,
        timestamp=day + timedelta(seconds=rng.randrange(SECONDS_PER_DAY)),
    )


def write_day_file(
    path: Path,
    day: date,
    loyal_users: set[int],
    total_users: int,
    total_entries: int,
    min_pages: int,
    rng: random.Random,
) -> int:
    """
    Write one day's log file.

    Returns:
        Number of lines written
    """
    day_start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    non_loyal = [u for u in range(1, total_users + 1) if u not in loyal_users]
    written = 0

    with open(path, "w", encoding="utf-8") as f:
        for user_id in sorted(loyal_users):
            page_count = min(rng.randint(min_pages, min_pages + 2), len(PAGES))
            for page in rng.sample(PAGES, page_count):
                f.write(_entry(user_id, page, day_start, rng).to_log_line())
                f.write("\n")
                written += 1

        while non_loyal and written < total_entries:
            user_id = rng.choice(non_loyal)
            f.write(_entry(user_id, rng.choice(PAGES), day_start, rng).to_log_line())
            f.write("\n")
            written += 1

    return written


def generate_log_files(
    output_dir: str | Path,
    start_date: date = date(2024, 10, 1),
    total_users: int = 10000,
    total_entries: int = 10000,
    loyal_rate: float = 0.18,
    min_pages: int = DEFAULT_MIN_PAGES,
    rng: random.Random | None = None,
) -> SeedResult:
    """
    Generate log files for start_date and the following day.

    Args:
        output_dir: Directory to write into (created if missing)
        start_date: Date of the first file
        total_users: User ids are drawn from 1..total_users
        total_entries: Minimum lines per file (loyal users may push it over)
        loyal_rate: Fraction of users generated as loyal
        min_pages: Fewest distinct pages a loyal user visits per day
        rng: Random source, for reproducible output

    Returns:
        SeedResult with both paths and the loyal user ids
    """
    if total_users < 1:
        raise ValueError(f"total_users must be at least 1, got {total_users}")
    if not 0.0 <= loyal_rate <= 1.0:
        raise ValueError(f"loyal_rate must be between 0 and 1, got {loyal_rate}")

    rng = rng or random.Random()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    loyal_users = pick_loyal_users(total_users, loyal_rate, rng)

    paths = []
    counts = []
    for offset in range(2):
        day = start_date + timedelta(days=offset)
        path = output_dir / day_file_name(day)
        counts.append(
            write_day_file(path, day, loyal_users, total_users, total_entries, min_pages, rng)
        )
        paths.append(path)
        logger.info("Wrote %s entries to %s", f"{counts[-1]:,}", path)

    return SeedResult(
        paths=(paths[0], paths[1]),
        loyal_user_ids=loyal_users,
        entries_per_day=(counts[0], counts[1]),
    )
