"""Week-key helpers.

A week key is the ISO date of the first day of a calendar week. Which weekday
starts the week is configurable (Monday = 0 ... Sunday = 6), matching
``date.weekday()``.
"""

from datetime import date, timedelta
from typing import Iterable


def week_start_of(d: date, week_starts_on: int = 0) -> date:
    """Return the first day of the week containing `d`.

    Example: week_start_of(date(2024, 1, 3)) -> date(2024, 1, 1)  (Monday)
             week_start_of(date(2024, 1, 3), 6) -> date(2023, 12, 31)  (Sunday)
    """
    return d - timedelta(days=(d.weekday() - week_starts_on) % 7)


def current_week(today: date | None = None, week_starts_on: int = 0) -> date:
    return week_start_of(today or date.today(), week_starts_on)


def shift_weeks(week: date, n: int) -> date:
    return week + timedelta(weeks=n)


def previous_week(week: date) -> date:
    return shift_weeks(week, -1)


def window_around(anchor: date, before: int, after: int) -> list[date]:
    """Weeks anchor-before .. anchor+after (inclusive), oldest first."""
    return [shift_weeks(anchor, i) for i in range(-before, after + 1)]


def trailing_weeks(anchor: date, count: int) -> list[date]:
    """The `count` weeks ending with (and including) `anchor`, oldest first."""
    if count <= 0:
        return []
    return window_around(anchor, count - 1, 0)


def parse_week_keys(raw: str) -> list[date]:
    """Parse a comma-separated list of ISO dates ("2024-01-01,2024-01-08").

    Blank items are skipped; raises ValueError on anything unparsable.
    """
    weeks = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            weeks.append(date.fromisoformat(part))
        except ValueError:
            raise ValueError(f"Invalid week key: {part!r} (expected YYYY-MM-DD)")
    return weeks


def format_week_label(week: date) -> str:
    """Short chart label, e.g. 'Jan 08'."""
    return week.strftime("%b %d")


def unique_sorted(weeks: Iterable[date]) -> list[date]:
    return sorted(set(weeks))
