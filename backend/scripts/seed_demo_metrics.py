from datetime import date
import random

from tracker.core.config import Settings
from tracker.core.weeks import current_week, trailing_weeks
from tracker.db import Database
from tracker.services.stores import MetricStore, goal_store, value_store

DEMO_METRICS = [
    # name, team, country, is_above_good, baseline
    ("NPS", "Customer Success", "Germany", True, 45.0),
    ("Weekly Active Users", "Growth", "France", True, 12000.0),
    ("Churn Rate %", "Growth", "France", False, 3.0),
    ("Support Response Hours", "Customer Success", "Germany", False, 6.0),
]


def clear_metrics(db) -> None:
    """Delete every metric (values and goals cascade) so we can reseed cleanly."""
    store = MetricStore(db)
    for metric in store.list_all():
        store.delete(metric.id)


def seed_demo_metrics(db, weeks: int = 12, week_starts_on: int = 0) -> None:
    """Create the demo metrics with a value and a goal for each of the last N weeks."""
    store = MetricStore(db)
    values, goals = value_store(db), goal_store(db)
    week_keys = trailing_weeks(current_week(date.today(), week_starts_on), weeks)

    for name, team, country, is_above_good, baseline in DEMO_METRICS:
        metric = store.create(name, f"Demo metric: {name}", team, country, is_above_good)
        # Goals drift 1% per week in the favorable direction
        step = 0.01 if is_above_good else -0.01
        value_items, goal_items = [], []
        for i, week in enumerate(week_keys):
            goal = round(baseline * (1 + step * i), 2)
            goal_items.append((week, goal))
            # Leave the current week open for data entry
            if i < len(week_keys) - 1:
                value_items.append((week, round(goal * random.uniform(0.9, 1.1), 2)))
        values.apply_batch(metric.id, value_items)
        goals.apply_batch(metric.id, goal_items)


if __name__ == "__main__":
    settings = Settings()
    database = Database(settings.database_url)
    database.create_all()
    db = database.session()
    try:
        clear_metrics(db)
        seed_demo_metrics(db, week_starts_on=settings.week_starts_on)
        print("Seeded demo metrics.")
    finally:
        db.close()
        database.dispose()
