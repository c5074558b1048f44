import pytest

from conftest import make_metric

# (prefix, amount field, delete message)
TABLES = [
    ("/api/metric-values", "value", "Metric value deleted"),
    ("/api/goals", "target_value", "Goal deleted"),
]


@pytest.mark.parametrize("prefix,field,deleted_msg", TABLES)
def test_create_update_delete_round_trip(client, prefix, field, deleted_msg):
    metric = make_metric(client)
    mid = metric["id"]

    cr = client.post(f"{prefix}/{mid}", json={field: 50, "week_start": "2024-01-08"})
    assert cr.status_code == 201, cr.text
    row = cr.json()
    assert row[field] == 50
    assert row["week_start"] == "2024-01-08"
    assert row["metric_id"] == mid

    client.post(f"{prefix}/{mid}", json={field: 45.5, "week_start": "2024-01-01"})

    listed = client.get(f"{prefix}/{mid}").json()
    # Ordered by week ascending
    assert [(r["week_start"], r[field]) for r in listed] == [("2024-01-01", 45.5), ("2024-01-08", 50)]

    ur = client.put(f"{prefix}/{row['id']}", json={field: 60, "week_start": "2024-01-15"})
    assert ur.status_code == 200, ur.text
    listed = client.get(f"{prefix}/{mid}").json()
    assert [(r["week_start"], r[field]) for r in listed] == [("2024-01-01", 45.5), ("2024-01-15", 60)]

    dr = client.delete(f"{prefix}/{row['id']}")
    assert dr.status_code == 200
    assert dr.json() == {"message": deleted_msg}
    listed = client.get(f"{prefix}/{mid}").json()
    assert all(r["id"] != row["id"] for r in listed)
    assert len(listed) == 1


@pytest.mark.parametrize("prefix,field,_", TABLES)
def test_one_row_per_metric_and_week(client, prefix, field, _):
    mid = make_metric(client)["id"]
    first = client.post(f"{prefix}/{mid}", json={field: 1, "week_start": "2024-01-01"}).json()
    second = client.post(f"{prefix}/{mid}", json={field: 2, "week_start": "2024-01-08"}).json()

    dup = client.post(f"{prefix}/{mid}", json={field: 3, "week_start": "2024-01-01"})
    assert dup.status_code == 409
    assert "2024-01-01" in dup.json()["error"]

    # Moving a row onto an occupied week is a conflict too
    moved = client.put(f"{prefix}/{second['id']}", json={field: 2, "week_start": "2024-01-01"})
    assert moved.status_code == 409

    # Re-saving a row in its own week is fine
    same = client.put(f"{prefix}/{first['id']}", json={field: 9, "week_start": "2024-01-01"})
    assert same.status_code == 200

    # Another metric may use the same week
    other = make_metric(client, "Other")["id"]
    assert client.post(f"{prefix}/{other}", json={field: 3, "week_start": "2024-01-01"}).status_code == 201


@pytest.mark.parametrize("prefix,field,_", TABLES)
def test_create_for_unknown_metric_is_404(client, prefix, field, _):
    r = client.post(f"{prefix}/999", json={field: 1, "week_start": "2024-01-01"})
    assert r.status_code == 404
    assert "999" in r.json()["error"]


@pytest.mark.parametrize("prefix,field,_", TABLES)
def test_update_and_delete_unknown_row_is_404(client, prefix, field, _):
    assert client.put(f"{prefix}/999", json={field: 1, "week_start": "2024-01-01"}).status_code == 404
    assert client.delete(f"{prefix}/999").status_code == 404


@pytest.mark.parametrize("prefix,field,_", TABLES)
def test_invalid_payload_is_400(client, prefix, field, _):
    mid = make_metric(client)["id"]
    r = client.post(f"{prefix}/{mid}", json={field: "lots", "week_start": "2024-01-01"})
    assert r.status_code == 400
    assert "error" in r.json()

    r = client.post(f"{prefix}/{mid}", json={field: 1, "week_start": "last week"})
    assert r.status_code == 400

    r = client.post(f"{prefix}/{mid}", json={"week_start": "2024-01-01"})
    assert r.status_code == 400


def test_list_for_metric_without_rows_is_empty(client):
    assert client.get("/api/metric-values/42").json() == []
    assert client.get("/api/goals/42").json() == []


# --------- Bulk fetch --------- #

@pytest.fixture()
def three_metrics_three_weeks(client):
    ids = [make_metric(client, name)["id"] for name in ("A", "B", "C")]
    weeks = ["2024-01-01", "2024-01-08", "2024-01-15"]
    # Insert out of order to make sure the response is sorted
    for week in reversed(weeks):
        for n, mid in enumerate(reversed(ids)):
            client.post(f"/api/metric-values/{mid}", json={"value": n, "week_start": week})
            client.post(f"/api/goals/{mid}", json={"target_value": n, "week_start": week})
    return ids, weeks


@pytest.mark.parametrize("prefix", ["/api/metric-values", "/api/goals"])
def test_bulk_fetch_is_a_pure_filter(client, three_metrics_three_weeks, prefix):
    ids, weeks = three_metrics_three_weeks
    wanted_ids, wanted_weeks = ids[:2], weeks[:2]

    r = client.get(
        f"{prefix}/",
        params={"metric_ids": ",".join(map(str, wanted_ids)), "weeks": ",".join(wanted_weeks)},
    )
    assert r.status_code == 200, r.text
    rows = r.json()

    keys = [(row["metric_id"], row["week_start"]) for row in rows]
    assert keys == [
        (ids[0], "2024-01-01"),
        (ids[0], "2024-01-08"),
        (ids[1], "2024-01-01"),
        (ids[1], "2024-01-08"),
    ]
    assert len(set(keys)) == len(keys)


def test_bulk_fetch_ignores_unknown_ids_and_weeks(client, three_metrics_three_weeks):
    ids, _ = three_metrics_three_weeks
    r = client.get(
        "/api/metric-values/",
        params={"metric_ids": f"{ids[2]},999", "weeks": "2024-01-15,2030-01-07"},
    )
    assert [(row["metric_id"], row["week_start"]) for row in r.json()] == [(ids[2], "2024-01-15")]


@pytest.mark.parametrize("prefix", ["/api/metric-values", "/api/goals"])
@pytest.mark.parametrize(
    "params",
    [
        {},
        {"metric_ids": "1"},
        {"weeks": "2024-01-01"},
        {"metric_ids": "", "weeks": "2024-01-01"},
    ],
)
def test_bulk_fetch_requires_both_params(client, prefix, params):
    r = client.get(f"{prefix}/", params=params)
    assert r.status_code == 400
    assert r.json() == {"error": "Missing required query parameters."}


def test_bulk_fetch_rejects_malformed_params(client):
    r = client.get("/api/goals/", params={"metric_ids": "1,x", "weeks": "2024-01-01"})
    assert r.status_code == 400
    r = client.get("/api/goals/", params={"metric_ids": "1", "weeks": "2024-13-01"})
    assert r.status_code == 400
    assert "2024-13-01" in r.json()["error"]


@pytest.mark.parametrize("prefix,field,_", TABLES)
@pytest.mark.parametrize("number", ["1e999", "-1e999", "NaN", "Infinity"])
def test_non_finite_amount_is_400(client, prefix, field, _, number):
    mid = make_metric(client)["id"]
    # Raw body: these literals are parsed by the server's JSON decoder
    body = f'{{"{field}": {number}, "week_start": "2024-01-01"}}'
    r = client.post(f"{prefix}/{mid}", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 400, r.text
    assert client.get(f"{prefix}/{mid}").json() == []


@pytest.mark.parametrize("prefix,field,_", TABLES)
def test_non_finite_amount_in_batch_is_400(client, prefix, field, _):
    mid = make_metric(client)["id"]
    body = f'{{"metric_id": {mid}, "items": [{{"week_start": "2024-01-01", "{field}": 1e999}}]}}'
    r = client.post(f"{prefix}/batch", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 400, r.text
    assert client.get(f"{prefix}/{mid}").json() == []
