#!/usr/bin/env python3
"""
Seed weekly values and goals for one metric through the Metric Tracker API.

Creates the metric if no metric with that name exists, then saves N weeks of
goals (a linear ramp) and values (goal +/- jitter, current week left empty)
with a single batch call per table.

Usage examples:
  - Against a local backend:
      python scripts/seed_weeks.py --base-url http://localhost:8000 --name NPS --start 40 --end 55
  - Lower-is-better metric:
      python scripts/seed_weeks.py --base-url http://localhost:8000 --name "Churn Rate %" \
          --start 4 --end 2.5 --below-is-good
"""

from __future__ import annotations

import argparse
import datetime as dt
import random
import sys
from typing import List

try:
    import requests  # type: ignore
except Exception:  # pragma: no cover
    print("This script requires the 'requests' package.\nInstall with: pip install requests", file=sys.stderr)
    raise


def week_start_of(d: dt.date, week_starts_on: int = 0) -> dt.date:
    return d - dt.timedelta(days=(d.weekday() - week_starts_on) % 7)


def ramp(start: float, end: float, n: int) -> List[float]:
    """n points from start to end inclusive."""
    if n == 1:
        return [round(end, 2)]
    step = (end - start) / (n - 1)
    return [round(start + step * i, 2) for i in range(n)]


def call(method: str, base_url: str, path: str, **kwargs):
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    r = requests.request(method, url, timeout=15, **kwargs)
    if r.status_code >= 300:
        raise RuntimeError(f"{method} {path} -> HTTP {r.status_code}: {r.text}")
    return r.json()


def ensure_metric(base_url: str, name: str, team: str | None, country: str | None, is_above_good: bool) -> int:
    for metric in call("GET", base_url, "api/metrics/"):
        if metric["name"] == name:
            return metric["id"]
    payload = {"name": name, "team": team, "country": country, "is_above_good": is_above_good}
    return call("POST", base_url, "api/metrics/", json=payload)["id"]


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed weekly values and goals for a metric")
    ap.add_argument("--base-url", required=True, help="API base URL (e.g., http://localhost:8000)")
    ap.add_argument("--name", required=True, help="Metric name (created if missing)")
    ap.add_argument("--team", default=None)
    ap.add_argument("--country", default=None)
    ap.add_argument("--below-is-good", action="store_true", help="Lower values are better")
    ap.add_argument("--weeks", type=int, default=16, help="Number of weeks ending with the current week")
    ap.add_argument("--start", type=float, required=True, help="Goal for the oldest week")
    ap.add_argument("--end", type=float, required=True, help="Goal for the current week")
    ap.add_argument("--jitter", type=float, default=0.1, help="Max relative deviation of values from goals")
    ap.add_argument("--week-starts-on", type=int, default=0, help="0 = Monday ... 6 = Sunday")
    args = ap.parse_args()

    metric_id = ensure_metric(args.base_url, args.name, args.team, args.country, not args.below_is_good)

    this_week = week_start_of(dt.date.today(), args.week_starts_on)
    week_starts = [this_week - dt.timedelta(weeks=args.weeks - 1 - i) for i in range(args.weeks)]
    goals = ramp(args.start, args.end, args.weeks)

    goal_items = [{"week_start": w.isoformat(), "target_value": g} for w, g in zip(week_starts, goals)]
    value_items = [
        {"week_start": w.isoformat(), "value": round(g * random.uniform(1 - args.jitter, 1 + args.jitter), 2)}
        for w, g in zip(week_starts[:-1], goals[:-1])
    ]

    call("POST", args.base_url, "api/goals/batch", json={"metric_id": metric_id, "items": goal_items})
    call("POST", args.base_url, "api/metric-values/batch", json={"metric_id": metric_id, "items": value_items})

    print(f"Seed complete: {args.weeks} weeks for metric {metric_id} ({args.name}).")


if __name__ == "__main__":
    main()
