"""Read models for the UI: tiles, weekly grid, trend series, history table.

Everything here is composed from the stores; nothing is persisted.
"""

from datetime import date
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from tracker.core import weeks as wk
from tracker.core.constants import STATUS_COLORS, Y_AXIS_MAX_FACTOR, Y_AXIS_MIN_FACTOR
from tracker.services.aggregation import align_to_weeks, fetch_weekly, group_by_metric
from tracker.services.status import evaluate_status
from tracker.services.stores import MetricStore, goal_store, value_store


def _amount(row, field: str) -> Optional[float]:
    return getattr(row, field) if row is not None else None


def overview_tiles(
    db: Session,
    country: Optional[str] = None,
    team: Optional[str] = None,
    search: Optional[str] = None,
) -> list[dict]:
    """Latest value and latest goal per metric, each independently the most
    recent week on record, with the resulting status."""
    values, goals = value_store(db), goal_store(db)
    tiles = []
    for metric in MetricStore(db).list_all(country=country, team=team, search=search):
        latest_value = values.latest_for_metric(metric.id)
        latest_goal = goals.latest_for_metric(metric.id)
        status = evaluate_status(
            _amount(latest_value, "value"),
            _amount(latest_goal, "target_value"),
            metric.is_above_good,
        )
        tiles.append(
            {
                "metric": metric,
                "latest_value": _amount(latest_value, "value"),
                "latest_value_week": latest_value.week_start if latest_value else None,
                "latest_goal": _amount(latest_goal, "target_value"),
                "latest_goal_week": latest_goal.week_start if latest_goal else None,
                "status": status,
                "status_color": STATUS_COLORS[status.value],
            }
        )
    return tiles


def _weekly_rows(db: Session, metric, weeks: Sequence[date], current: Optional[date] = None) -> list[dict]:
    value_rows = align_to_weeks(fetch_weekly(value_store(db), [metric.id], weeks), weeks)
    goal_rows = align_to_weeks(fetch_weekly(goal_store(db), [metric.id], weeks), weeks)
    rows = []
    for week, v, g in zip(weeks, value_rows, goal_rows):
        value, goal = _amount(v, "value"), _amount(g, "target_value")
        rows.append(
            {
                "week_start": week,
                "value": value,
                "value_id": v.id if v is not None else None,
                "goal": goal,
                "goal_id": g.id if g is not None else None,
                "status": evaluate_status(value, goal, metric.is_above_good),
                "is_current": week == current,
            }
        )
    return rows


def weekly_grid(
    db: Session,
    metric_id: int,
    offset: int = 0,
    before: int = 4,
    after: int = 4,
    week_starts_on: int = 0,
    today: Optional[date] = None,
) -> Optional[dict]:
    """Editable grid of weeks centered on the current week shifted by `offset`."""
    metric = MetricStore(db).get(metric_id)
    if metric is None:
        return None
    anchor = wk.shift_weeks(wk.current_week(today, week_starts_on), offset)
    weeks = wk.window_around(anchor, before, after)
    return {
        "metric": metric,
        "anchor_week": anchor,
        "weeks": _weekly_rows(db, metric, weeks, current=anchor),
    }


def history_table(
    db: Session,
    metric_id: int,
    count: int = 8,
    week_starts_on: int = 0,
    today: Optional[date] = None,
) -> Optional[dict]:
    """Trailing `count` weeks up to and including the current one."""
    metric = MetricStore(db).get(metric_id)
    if metric is None:
        return None
    current = wk.current_week(today, week_starts_on)
    weeks = wk.trailing_weeks(current, count)
    return {
        "metric": metric,
        "anchor_week": current,
        "weeks": _weekly_rows(db, metric, weeks, current=current),
    }


def axis_bounds(series: Sequence[Optional[float]]) -> tuple[Optional[float], Optional[float]]:
    """Suggested y-axis range with some padding; (None, None) without data."""
    points = [p for p in series if p is not None]
    if not points:
        return None, None
    y_min = max(min(points) * Y_AXIS_MIN_FACTOR, 0.0)
    y_max = max(points) * Y_AXIS_MAX_FACTOR
    return y_min, y_max


def trend_series(
    db: Session,
    metric_id: int,
    count: Optional[int] = None,
    week_starts_on: int = 0,
    today: Optional[date] = None,
) -> Optional[dict]:
    """Value and goal series for a chart.

    Without `count` the x-axis is every week that has a value or a goal;
    with `count` it is the trailing window ending at the current week.
    """
    metric = MetricStore(db).get(metric_id)
    if metric is None:
        return None

    if count is None:
        value_rows = value_store(db).list_for_metric(metric_id)
        goal_rows = goal_store(db).list_for_metric(metric_id)
        weeks = wk.unique_sorted([r.week_start for r in value_rows + goal_rows])
    else:
        weeks = wk.trailing_weeks(wk.current_week(today, week_starts_on), count)
        value_rows = fetch_weekly(value_store(db), [metric_id], weeks)
        goal_rows = fetch_weekly(goal_store(db), [metric_id], weeks)

    values = [_amount(r, "value") for r in align_to_weeks(value_rows, weeks)]
    goals = [_amount(r, "target_value") for r in align_to_weeks(goal_rows, weeks)]
    y_min, y_max = axis_bounds(values + goals)
    return {
        "metric_id": metric_id,
        "weeks": weeks,
        "labels": [wk.format_week_label(w) for w in weeks],
        "values": values,
        "goals": goals,
        "y_min": y_min,
        "y_max": y_max,
    }


def missing_last_week(
    db: Session,
    week_starts_on: int = 0,
    today: Optional[date] = None,
) -> dict:
    """Metrics with no value recorded for the week before the current one."""
    last_week = wk.previous_week(wk.current_week(today, week_starts_on))
    metric_ids = [m.id for m in MetricStore(db).list_all()]
    reported = group_by_metric(fetch_weekly(value_store(db), metric_ids, [last_week]))
    return {
        "week_start": last_week,
        "metric_ids": [mid for mid in metric_ids if mid not in reported],
    }


def save_grid(db: Session, metric_id: int, values: Sequence, goals: Sequence) -> dict:
    """Apply value and goal edits for one metric in a single transaction."""
    try:
        value_outcomes = value_store(db).apply_batch(
            metric_id, [(i.week_start, i.value) for i in values], commit=False
        )
        goal_outcomes = goal_store(db).apply_batch(
            metric_id, [(i.week_start, i.target_value) for i in goals], commit=False
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    return {"metric_id": metric_id, "values": value_outcomes, "goals": goal_outcomes}
