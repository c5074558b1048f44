from datetime import date
from typing import Optional

from pydantic import BaseModel, field_validator

from tracker.schemas.entry import BatchOutcome, GoalBatchItem, ValueBatchItem, no_duplicate_weeks
from tracker.schemas.metric import MetricRead
from tracker.services.status import Status


class MetricTile(BaseModel):
    metric: MetricRead
    latest_value: Optional[float] = None
    latest_value_week: Optional[date] = None
    latest_goal: Optional[float] = None
    latest_goal_week: Optional[date] = None
    status: Status
    status_color: str


class WeekRow(BaseModel):
    week_start: date
    value: Optional[float] = None
    value_id: Optional[int] = None
    goal: Optional[float] = None
    goal_id: Optional[int] = None
    status: Status
    is_current: bool = False


class WeeklyGrid(BaseModel):
    metric: MetricRead
    anchor_week: date
    weeks: list[WeekRow]


class GridSave(BaseModel):
    values: list[ValueBatchItem] = []
    goals: list[GoalBatchItem] = []

    @field_validator("values", "goals")
    @classmethod
    def _unique_weeks(cls, v):
        return no_duplicate_weeks(v)


class GridSaveResult(BaseModel):
    metric_id: int
    values: list[BatchOutcome]
    goals: list[BatchOutcome]


class TrendSeries(BaseModel):
    metric_id: int
    weeks: list[date]
    labels: list[str]
    values: list[Optional[float]]
    goals: list[Optional[float]]
    y_min: Optional[float] = None
    y_max: Optional[float] = None


class MissingLastWeek(BaseModel):
    week_start: date
    metric_ids: list[int]


class FilterOptions(BaseModel):
    countries: list[str]
    teams: list[str]
