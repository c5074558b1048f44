"""Row-level CRUD over the metrics, metric_values and goals tables.

Stores wrap a request-scoped Session. Single-row mutations commit immediately;
batch operations can be composed and committed by the caller.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from tracker.core.errors import ConflictError, InvalidInputError, NotFoundError
from tracker.models.goal import Goal
from tracker.models.metric import Metric
from tracker.models.metric_value import MetricValue

logger = logging.getLogger(__name__)

METRIC_FIELDS = ("name", "description", "team", "country", "is_above_good")


class MetricStore:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        name: str,
        description: Optional[str] = None,
        team: Optional[str] = None,
        country: Optional[str] = None,
        is_above_good: bool = True,
    ) -> Metric:
        if not name or not name.strip():
            raise InvalidInputError("Metric name is required.")
        metric = Metric(
            name=name,
            description=description,
            team=team,
            country=country,
            is_above_good=is_above_good,
        )
        self.db.add(metric)
        self.db.commit()
        self.db.refresh(metric)
        logger.info("Created metric %s (%s)", metric.id, metric.name)
        return metric

    def list_all(
        self,
        country: Optional[str] = None,
        team: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Metric]:
        query = self.db.query(Metric)
        if country:
            query = query.filter(Metric.country == country)
        if team:
            query = query.filter(Metric.team == team)
        if search:
            query = query.filter(func.lower(Metric.name).contains(search.lower(), autoescape=True))
        return query.order_by(Metric.id).all()

    def get(self, metric_id: int) -> Optional[Metric]:
        return self.db.get(Metric, metric_id)

    def require(self, metric_id: int) -> Metric:
        metric = self.get(metric_id)
        if metric is None:
            raise NotFoundError(f"Metric {metric_id} not found")
        return metric

    def update(self, metric_id: int, **fields) -> Optional[Metric]:
        metric = self.get(metric_id)
        if metric is None:
            return None
        if not fields.get("name") or not str(fields["name"]).strip():
            raise InvalidInputError("Metric name is required.")
        # Full replace: anything omitted goes back to its default
        fields.setdefault("is_above_good", True)
        for key in METRIC_FIELDS:
            setattr(metric, key, fields.get(key))
        self.db.commit()
        self.db.refresh(metric)
        logger.info("Updated metric %s", metric_id)
        return metric

    def delete(self, metric_id: int) -> bool:
        metric = self.get(metric_id)
        if metric is None:
            return False
        # Values and goals go with it (relationship cascade)
        self.db.delete(metric)
        self.db.commit()
        logger.info("Deleted metric %s with its values and goals", metric_id)
        return True

    def filter_options(self, country: Optional[str] = None) -> dict[str, list[str]]:
        countries = [
            c for (c,) in self.db.query(Metric.country)
            .filter(Metric.country.isnot(None))
            .distinct()
            .order_by(Metric.country)
            .all()
        ]
        team_query = self.db.query(Metric.team).filter(Metric.team.isnot(None))
        if country:
            team_query = team_query.filter(Metric.country == country)
        teams = [t for (t,) in team_query.distinct().order_by(Metric.team).all()]
        return {"countries": countries, "teams": teams}


class WeeklyEntryStore:
    """CRUD for a per-week table keyed by (metric_id, week_start).

    `amount_field` is the numeric column: 'value' for metric_values,
    'target_value' for goals.
    """

    def __init__(self, db: Session, model, amount_field: str, label: str):
        self.db = db
        self.model = model
        self.amount_field = amount_field
        self.label = label

    # --------- Lookups --------- #

    def get(self, row_id: int):
        return self.db.get(self.model, row_id)

    def find(self, metric_id: int, week_start: date):
        return (
            self.db.query(self.model)
            .filter(self.model.metric_id == metric_id)
            .filter(self.model.week_start == week_start)
            .first()
        )

    def list_for_metric(self, metric_id: int) -> list:
        return (
            self.db.query(self.model)
            .filter(self.model.metric_id == metric_id)
            .order_by(self.model.week_start)
            .all()
        )

    def latest_for_metric(self, metric_id: int):
        return (
            self.db.query(self.model)
            .filter(self.model.metric_id == metric_id)
            .order_by(self.model.week_start.desc())
            .first()
        )

    def fetch(self, metric_ids: Sequence[int], weeks: Sequence[date]) -> list:
        if not metric_ids or not weeks:
            return []
        return (
            self.db.query(self.model)
            .filter(self.model.metric_id.in_(set(metric_ids)))
            .filter(self.model.week_start.in_(set(weeks)))
            .order_by(self.model.metric_id, self.model.week_start)
            .all()
        )

    # --------- Mutations --------- #

    def _check_free(self, metric_id: int, week_start: date, row_id: Optional[int] = None):
        existing = self.find(metric_id, week_start)
        if existing is not None and existing.id != row_id:
            raise ConflictError(
                f"Metric {metric_id} already has a {self.label} for week "
                f"{week_start.isoformat()} (id {existing.id})"
            )

    def _add(self, metric_id: int, amount: float, week_start: date):
        row = self.model(metric_id=metric_id, week_start=week_start)
        setattr(row, self.amount_field, amount)
        self.db.add(row)
        return row

    def create(self, metric_id: int, amount: float, week_start: date):
        MetricStore(self.db).require(metric_id)
        self._check_free(metric_id, week_start)
        row = self._add(metric_id, amount, week_start)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Created %s %s for metric %s week %s", self.label, row.id, metric_id, week_start)
        return row

    def update(self, row_id: int, amount: float, week_start: date):
        row = self.get(row_id)
        if row is None:
            return None
        self._check_free(row.metric_id, week_start, row_id=row.id)
        setattr(row, self.amount_field, amount)
        row.week_start = week_start
        self.db.commit()
        self.db.refresh(row)
        logger.info("Updated %s %s", self.label, row_id)
        return row

    def delete(self, row_id: int) -> bool:
        row = self.get(row_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        logger.info("Deleted %s %s", self.label, row_id)
        return True

    def apply_batch(self, metric_id: int, items: Sequence[tuple], commit: bool = True) -> list[dict]:
        """Upsert or delete one row per (week_start, amount) pair.

        A None amount deletes the week's row. Runs in the session's current
        transaction; with commit=False the caller commits (or rolls back).
        """
        MetricStore(self.db).require(metric_id)
        existing = {row.week_start: row for row in self.list_for_metric(metric_id)}
        outcomes = []
        pending = []
        try:
            for week_start, amount in items:
                row = existing.get(week_start)
                if amount is None:
                    if row is None:
                        outcomes.append({"week_start": week_start, "action": "unchanged", "id": None})
                        continue
                    outcomes.append({"week_start": week_start, "action": "deleted", "id": row.id})
                    self.db.delete(row)
                elif row is None:
                    row = self._add(metric_id, amount, week_start)
                    pending.append(row)
                    outcomes.append({"week_start": week_start, "action": "created", "row": row})
                elif getattr(row, self.amount_field) == amount:
                    outcomes.append({"week_start": week_start, "action": "unchanged", "id": row.id})
                else:
                    setattr(row, self.amount_field, amount)
                    outcomes.append({"week_start": week_start, "action": "updated", "id": row.id})
            # Assigns ids to new rows and surfaces constraint errors inside the transaction
            self.db.flush()
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for outcome in outcomes:
            if "row" in outcome:
                outcome["id"] = outcome.pop("row").id
        logger.info(
            "Applied %s batch for metric %s: %s",
            self.label,
            metric_id,
            ", ".join(f"{o['week_start']}={o['action']}" for o in outcomes) or "no items",
        )
        return outcomes


def value_store(db: Session) -> WeeklyEntryStore:
    return WeeklyEntryStore(db, MetricValue, "value", "metric value")


def goal_store(db: Session) -> WeeklyEntryStore:
    return WeeklyEntryStore(db, Goal, "target_value", "goal")
