from datetime import date
from typing import Optional

from fastapi import HTTPException

from tracker.core.weeks import parse_week_keys


def parse_bulk_params(metric_ids: Optional[str], weeks: Optional[str]) -> tuple[list[int], list[date]]:
    """Parse '?metric_ids=1,2&weeks=2024-01-01,2024-01-08'.

    Both parameters are required; anything missing or unparsable is a 400.
    """
    if not metric_ids or not weeks:
        raise HTTPException(status_code=400, detail="Missing required query parameters.")

    try:
        ids = [int(part) for part in metric_ids.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(status_code=400, detail="metric_ids must be a comma-separated list of integers")

    try:
        week_keys = parse_week_keys(weeks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not ids or not week_keys:
        raise HTTPException(status_code=400, detail="Missing required query parameters.")
    return ids, week_keys
