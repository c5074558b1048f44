from datetime import date

import pytest

from conftest import make_metric
from tracker.core.weeks import current_week, previous_week, shift_weeks


def iso(d: date) -> str:
    return d.isoformat()


def add_value(client, mid, week, value):
    r = client.post(f"/api/metric-values/{mid}", json={"value": value, "week_start": iso(week)})
    assert r.status_code == 201, r.text
    return r.json()


def add_goal(client, mid, week, target):
    r = client.post(f"/api/goals/{mid}", json={"target_value": target, "week_start": iso(week)})
    assert r.status_code == 201, r.text
    return r.json()


def test_nps_scenario_status_follows_polarity(client):
    metric = make_metric(client, "NPS", is_above_good=True)
    week = date(2024, 1, 1)
    add_value(client, metric["id"], week, 50)
    add_goal(client, metric["id"], week, 40)

    tile = client.get("/api/views/overview").json()[0]
    assert tile["status"] == "Good"
    assert tile["latest_value"] == 50
    assert tile["latest_goal"] == 40
    assert tile["status_color"] == "#386743"

    client.put(f"/api/metrics/{metric['id']}", json={"name": "NPS", "is_above_good": False})
    tile = client.get("/api/views/overview").json()[0]
    assert tile["status"] == "Bad"
    assert tile["metric"]["is_above_good"] is False


def test_overview_uses_latest_value_and_goal_independently(client):
    mid = make_metric(client, "Signups")["id"]
    add_value(client, mid, date(2024, 1, 1), 5)
    add_value(client, mid, date(2024, 1, 15), 12)
    add_goal(client, mid, date(2024, 1, 8), 10)
    empty = make_metric(client, "Empty")["id"]

    tiles = {t["metric"]["id"]: t for t in client.get("/api/views/overview").json()}
    assert tiles[mid]["latest_value"] == 12
    assert tiles[mid]["latest_value_week"] == "2024-01-15"
    assert tiles[mid]["latest_goal_week"] == "2024-01-08"
    assert tiles[mid]["status"] == "Good"
    assert tiles[empty]["status"] == "No Data"
    assert tiles[empty]["latest_value"] is None


def test_overview_filters(client):
    make_metric(client, "A", country="Germany", team="Support")
    make_metric(client, "B", country="France", team="Support")
    tiles = client.get("/api/views/overview", params={"country": "France"}).json()
    assert [t["metric"]["name"] for t in tiles] == ["B"]


def test_weekly_grid_window(client):
    mid = make_metric(client, "Churn", is_above_good=False)["id"]
    this_week = current_week()
    add_value(client, mid, this_week, 3)
    add_goal(client, mid, this_week, 4)
    add_value(client, mid, shift_weeks(this_week, -4), 9)
    # Outside the window
    add_value(client, mid, shift_weeks(this_week, -5), 1)

    r = client.get(f"/api/views/grid/{mid}")
    assert r.status_code == 200, r.text
    grid = r.json()
    assert grid["anchor_week"] == iso(this_week)
    weeks = grid["weeks"]
    assert len(weeks) == 9
    assert weeks[0]["week_start"] == iso(shift_weeks(this_week, -4))
    assert weeks[-1]["week_start"] == iso(shift_weeks(this_week, 4))

    current = weeks[4]
    assert current["is_current"] is True
    assert current["value"] == 3
    assert current["goal"] == 4
    assert current["status"] == "Good"
    assert current["value_id"] is not None

    assert weeks[0]["value"] == 9
    assert weeks[0]["goal"] is None
    assert weeks[0]["status"] == "No Data"
    assert sum(1 for w in weeks if w["is_current"]) == 1


def test_weekly_grid_offset(client):
    mid = make_metric(client)["id"]
    grid = client.get(f"/api/views/grid/{mid}", params={"offset": -2}).json()
    assert grid["anchor_week"] == iso(shift_weeks(current_week(), -2))
    assert grid["weeks"][4]["is_current"] is True


def test_grid_and_history_unknown_metric(client):
    assert client.get("/api/views/grid/999").status_code == 404
    assert client.get("/api/views/history/999").status_code == 404
    assert client.get("/api/views/trend/999").status_code == 404


def test_save_grid_applies_values_and_goals(client):
    mid = make_metric(client)["id"]
    this_week = current_week()
    last_week = previous_week(this_week)
    add_value(client, mid, last_week, 7)

    r = client.put(
        f"/api/views/grid/{mid}",
        json={
            "values": [
                {"week_start": iso(last_week), "value": None},
                {"week_start": iso(this_week), "value": 11},
            ],
            "goals": [{"week_start": iso(this_week), "target_value": 10}],
        },
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert [o["action"] for o in body["values"]] == ["deleted", "created"]
    assert [o["action"] for o in body["goals"]] == ["created"]

    grid = client.get(f"/api/views/grid/{mid}").json()
    by_week = {w["week_start"]: w for w in grid["weeks"]}
    assert by_week[iso(last_week)]["value"] is None
    assert by_week[iso(this_week)]["value"] == 11
    assert by_week[iso(this_week)]["status"] == "Good"


def test_save_grid_rejects_duplicate_weeks(client):
    mid = make_metric(client)["id"]
    week = iso(current_week())
    r = client.put(
        f"/api/views/grid/{mid}",
        json={"values": [{"week_start": week, "value": 1}, {"week_start": week, "value": 2}]},
    )
    assert r.status_code == 400
    assert client.get(f"/api/metric-values/{mid}").json() == []


def test_history_is_trailing_eight_weeks(client):
    mid = make_metric(client)["id"]
    this_week = current_week()
    add_value(client, mid, shift_weeks(this_week, -7), 1)
    add_value(client, mid, shift_weeks(this_week, -8), 2)

    table = client.get(f"/api/views/history/{mid}").json()
    weeks = table["weeks"]
    assert len(weeks) == 8
    assert weeks[-1]["week_start"] == iso(this_week)
    assert weeks[-1]["is_current"] is True
    assert weeks[0]["week_start"] == iso(shift_weeks(this_week, -7))
    assert weeks[0]["value"] == 1


def test_trend_defaults_to_recorded_weeks(client):
    mid = make_metric(client)["id"]
    add_value(client, mid, date(2024, 1, 8), 50)
    add_value(client, mid, date(2024, 1, 1), 40)
    add_goal(client, mid, date(2024, 1, 15), 100)

    series = client.get(f"/api/views/trend/{mid}").json()
    assert series["weeks"] == ["2024-01-01", "2024-01-08", "2024-01-15"]
    assert series["labels"] == ["Jan 01", "Jan 08", "Jan 15"]
    assert series["values"] == [40, 50, None]
    assert series["goals"] == [None, None, 100]
    assert series["y_min"] == pytest.approx(36.0)
    assert series["y_max"] == pytest.approx(110.0)


def test_trend_trailing_window(client):
    mid = make_metric(client)["id"]
    this_week = current_week()
    add_goal(client, mid, this_week, 5)
    add_goal(client, mid, shift_weeks(this_week, -10), 5)

    series = client.get(f"/api/views/trend/{mid}", params={"weeks": 4}).json()
    assert len(series["weeks"]) == 4
    assert series["weeks"][-1] == iso(this_week)
    assert series["goals"] == [None, None, None, 5]
    assert series["values"] == [None, None, None, None]


def test_trend_without_data(client):
    mid = make_metric(client)["id"]
    series = client.get(f"/api/views/trend/{mid}").json()
    assert series["weeks"] == []
    assert series["y_min"] is None
    assert series["y_max"] is None


def test_missing_last_week(client):
    reported = make_metric(client, "Reported")["id"]
    missing = make_metric(client, "Missing")["id"]
    only_current = make_metric(client, "Only current")["id"]
    last_week = previous_week(current_week())
    add_value(client, reported, last_week, 1)
    add_value(client, only_current, current_week(), 1)

    body = client.get("/api/views/missing-last-week").json()
    assert body["week_start"] == iso(last_week)
    assert body["metric_ids"] == [missing, only_current]


def test_filter_options_cascade(client):
    make_metric(client, "A", country="germany", team="support")
    make_metric(client, "B", country="France", team="Growth")
    make_metric(client, "C", country="France", team="Support")

    all_opts = client.get("/api/views/filters").json()
    assert all_opts == {"countries": ["France", "Germany"], "teams": ["Growth", "Support"]}
    germany = client.get("/api/views/filters", params={"country": "Germany"}).json()
    assert germany["teams"] == ["Support"]
