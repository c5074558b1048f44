"""Schemas for the two per-week tables (values and goals)."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, FiniteFloat, field_validator


class MetricValueWrite(BaseModel):
    value: FiniteFloat
    week_start: date


class MetricValueRead(MetricValueWrite):
    id: int
    metric_id: int

    model_config = ConfigDict(from_attributes=True)


class GoalWrite(BaseModel):
    target_value: FiniteFloat
    week_start: date


class GoalRead(GoalWrite):
    id: int
    metric_id: int

    model_config = ConfigDict(from_attributes=True)


# --------- Batch save --------- #

class ValueBatchItem(BaseModel):
    week_start: date
    # None removes the week's value
    value: Optional[FiniteFloat] = None


class GoalBatchItem(BaseModel):
    week_start: date
    target_value: Optional[FiniteFloat] = None


def no_duplicate_weeks(items):
    seen = set()
    for item in items:
        if item.week_start in seen:
            raise ValueError(f"Duplicate week_start in batch: {item.week_start.isoformat()}")
        seen.add(item.week_start)
    return items


class ValueBatch(BaseModel):
    metric_id: int
    items: list[ValueBatchItem]

    @field_validator("items")
    @classmethod
    def _unique_weeks(cls, v):
        return no_duplicate_weeks(v)


class GoalBatch(BaseModel):
    metric_id: int
    items: list[GoalBatchItem]

    @field_validator("items")
    @classmethod
    def _unique_weeks(cls, v):
        return no_duplicate_weeks(v)


class BatchOutcome(BaseModel):
    week_start: date
    action: str  # created, updated, deleted, unchanged
    id: Optional[int] = None


class BatchResult(BaseModel):
    metric_id: int
    outcomes: list[BatchOutcome]
