from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tracker.api.params import parse_bulk_params
from tracker.db import get_db
from tracker.schemas.entry import BatchResult, MetricValueRead, MetricValueWrite, ValueBatch
from tracker.services.aggregation import fetch_weekly
from tracker.services.stores import value_store

router = APIRouter(prefix="/api/metric-values", tags=["metric-values"])


@router.get("/", response_model=list[MetricValueRead])
def list_values_for_weeks(
    metric_ids: Optional[str] = Query(None, description="Comma-separated metric ids"),
    weeks: Optional[str] = Query(None, description="Comma-separated week keys (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
):
    """
    Values for any of the metrics in any of the weeks, ordered by
    (metric_id, week_start):
      GET /api/metric-values?metric_ids=1,2&weeks=2024-01-01,2024-01-08
    """
    ids, week_keys = parse_bulk_params(metric_ids, weeks)
    return fetch_weekly(value_store(db), ids, week_keys)


@router.post("/batch", response_model=BatchResult)
def save_values_batch(payload: ValueBatch, db: Session = Depends(get_db)):
    outcomes = value_store(db).apply_batch(
        payload.metric_id, [(item.week_start, item.value) for item in payload.items]
    )
    return {"metric_id": payload.metric_id, "outcomes": outcomes}


@router.get("/{metric_id}", response_model=list[MetricValueRead])
def list_values(metric_id: int, db: Session = Depends(get_db)):
    return value_store(db).list_for_metric(metric_id)


@router.post("/{metric_id}", response_model=MetricValueRead, status_code=201)
def create_value(metric_id: int, payload: MetricValueWrite, db: Session = Depends(get_db)):
    return value_store(db).create(metric_id, payload.value, payload.week_start)


@router.put("/{value_id}", response_model=MetricValueRead)
def update_value(value_id: int, payload: MetricValueWrite, db: Session = Depends(get_db)):
    row = value_store(db).update(value_id, payload.value, payload.week_start)
    if row is None:
        raise HTTPException(status_code=404, detail="Metric value not found")
    return row


@router.delete("/{value_id}")
def delete_value(value_id: int, db: Session = Depends(get_db)):
    if not value_store(db).delete(value_id):
        raise HTTPException(status_code=404, detail="Metric value not found")
    return {"message": "Metric value deleted"}
