from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from tracker.db import get_db
from tracker.schemas.views import (
    FilterOptions,
    GridSave,
    GridSaveResult,
    MetricTile,
    MissingLastWeek,
    TrendSeries,
    WeeklyGrid,
)
from tracker.services import views
from tracker.services.stores import MetricStore

router = APIRouter(prefix="/api/views", tags=["views"])


def _settings(request: Request):
    return request.app.state.settings


@router.get("/overview", response_model=list[MetricTile])
def overview(
    country: Optional[str] = Query(None),
    team: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """One tile per metric: latest value vs latest goal."""
    return views.overview_tiles(db, country=country, team=team, search=search)


@router.get("/grid/{metric_id}", response_model=WeeklyGrid)
def weekly_grid(
    metric_id: int,
    request: Request,
    offset: int = Query(0, description="Shift the window by this many weeks"),
    db: Session = Depends(get_db),
):
    cfg = _settings(request)
    grid = views.weekly_grid(
        db,
        metric_id,
        offset=offset,
        before=cfg.grid_weeks_before,
        after=cfg.grid_weeks_after,
        week_starts_on=cfg.week_starts_on,
    )
    if grid is None:
        raise HTTPException(status_code=404, detail="Metric not found")
    return grid


@router.put("/grid/{metric_id}", response_model=GridSaveResult)
def save_weekly_grid(metric_id: int, payload: GridSave, db: Session = Depends(get_db)):
    """Save every edited cell of the grid at once. All or nothing."""
    return views.save_grid(db, metric_id, payload.values, payload.goals)


@router.get("/history/{metric_id}", response_model=WeeklyGrid)
def history(metric_id: int, request: Request, db: Session = Depends(get_db)):
    cfg = _settings(request)
    table = views.history_table(
        db, metric_id, count=cfg.history_weeks, week_starts_on=cfg.week_starts_on
    )
    if table is None:
        raise HTTPException(status_code=404, detail="Metric not found")
    return table


@router.get("/trend/{metric_id}", response_model=TrendSeries)
def trend(
    metric_id: int,
    request: Request,
    weeks: Optional[int] = Query(None, ge=1, le=260, description="Trailing window; all recorded weeks if omitted"),
    db: Session = Depends(get_db),
):
    series = views.trend_series(
        db, metric_id, count=weeks, week_starts_on=_settings(request).week_starts_on
    )
    if series is None:
        raise HTTPException(status_code=404, detail="Metric not found")
    return series


@router.get("/missing-last-week", response_model=MissingLastWeek)
def missing_last_week(request: Request, db: Session = Depends(get_db)):
    return views.missing_last_week(db, week_starts_on=_settings(request).week_starts_on)


@router.get("/filters", response_model=FilterOptions)
def filter_options(
    country: Optional[str] = Query(None, description="Only teams within this country"),
    db: Session = Depends(get_db),
):
    return MetricStore(db).filter_options(country=country)
