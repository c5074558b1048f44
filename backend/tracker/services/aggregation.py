"""Set-membership lookups over the weekly tables and helpers to line the
results up against the weeks a caller asked for."""

from datetime import date
from typing import Iterable, Optional, Sequence

from tracker.services.stores import WeeklyEntryStore


def fetch_weekly(
    store: WeeklyEntryStore,
    metric_ids: Sequence[int],
    weeks: Sequence[date],
) -> list:
    """Every stored row whose metric is in `metric_ids` and week in `weeks`.

    Pure filter: no gap filling. Weeks with no row are simply absent.
    """
    return store.fetch(metric_ids, weeks)


def index_by_week(rows: Iterable) -> dict:
    # First row wins if the table ever holds duplicates
    out: dict = {}
    for row in rows:
        out.setdefault(row.week_start, row)
    return out


def align_to_weeks(rows: Iterable, weeks: Sequence[date]) -> list[Optional[object]]:
    """Row for each requested week, or None where nothing is stored."""
    by_week = index_by_week(rows)
    return [by_week.get(week) for week in weeks]


def group_by_metric(rows: Iterable) -> dict[int, list]:
    out: dict[int, list] = {}
    for row in rows:
        out.setdefault(row.metric_id, []).append(row)
    return out
