from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tracker.api.params import parse_bulk_params
from tracker.db import get_db
from tracker.schemas.entry import BatchResult, GoalRead, GoalWrite, GoalBatch
from tracker.services.aggregation import fetch_weekly
from tracker.services.stores import goal_store

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("/", response_model=list[GoalRead])
def list_goals_for_weeks(
    metric_ids: Optional[str] = Query(None, description="Comma-separated metric ids"),
    weeks: Optional[str] = Query(None, description="Comma-separated week keys (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
):
    """
    Goals for any of the metrics in any of the weeks, ordered by
    (metric_id, week_start):
      GET /api/goals?metric_ids=1,2&weeks=2024-01-01,2024-01-08
    """
    ids, week_keys = parse_bulk_params(metric_ids, weeks)
    return fetch_weekly(goal_store(db), ids, week_keys)


@router.post("/batch", response_model=BatchResult)
def save_goals_batch(payload: GoalBatch, db: Session = Depends(get_db)):
    outcomes = goal_store(db).apply_batch(
        payload.metric_id, [(item.week_start, item.target_value) for item in payload.items]
    )
    return {"metric_id": payload.metric_id, "outcomes": outcomes}


@router.get("/{metric_id}", response_model=list[GoalRead])
def list_goals(metric_id: int, db: Session = Depends(get_db)):
    return goal_store(db).list_for_metric(metric_id)


@router.post("/{metric_id}", response_model=GoalRead, status_code=201)
def create_goal(metric_id: int, payload: GoalWrite, db: Session = Depends(get_db)):
    return goal_store(db).create(metric_id, payload.target_value, payload.week_start)


@router.put("/{goal_id}", response_model=GoalRead)
def update_goal(goal_id: int, payload: GoalWrite, db: Session = Depends(get_db)):
    row = goal_store(db).update(goal_id, payload.target_value, payload.week_start)
    if row is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return row


@router.delete("/{goal_id}")
def delete_goal(goal_id: int, db: Session = Depends(get_db)):
    if not goal_store(db).delete(goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"message": "Goal deleted"}
