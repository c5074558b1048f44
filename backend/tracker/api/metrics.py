from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tracker.db import get_db
from tracker.schemas.metric import MetricCreate, MetricRead, MetricUpdate
from tracker.services.stores import MetricStore

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get("/", response_model=list[MetricRead])
def list_metrics(
    country: Optional[str] = Query(None),
    team: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive match on name"),
    db: Session = Depends(get_db),
):
    return MetricStore(db).list_all(country=country, team=team, search=search)


@router.post("/", response_model=MetricRead, status_code=201)
def create_metric(payload: MetricCreate, db: Session = Depends(get_db)):
    return MetricStore(db).create(**payload.model_dump())


@router.get("/{metric_id}", response_model=Optional[MetricRead])
def get_metric(metric_id: int, db: Session = Depends(get_db)):
    # Unknown ids are not an error: the body is simply null
    return MetricStore(db).get(metric_id)


@router.put("/{metric_id}", response_model=MetricRead)
def update_metric(metric_id: int, payload: MetricUpdate, db: Session = Depends(get_db)):
    metric = MetricStore(db).update(metric_id, **payload.model_dump())
    if metric is None:
        raise HTTPException(status_code=404, detail="Metric not found")
    return metric


@router.delete("/{metric_id}")
def delete_metric(metric_id: int, db: Session = Depends(get_db)):
    if not MetricStore(db).delete(metric_id):
        raise HTTPException(status_code=404, detail="Metric not found")
    return {"message": "Metric deleted"}
