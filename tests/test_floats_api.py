def test_trajectory_in_time_order(client):
    r = client.get("/api/floats/5900004/trajectory")
    assert r.status_code == 200
    body = r.json()
    assert body["floatId"] == "5900004"
    assert body["dataPoints"] == 1
    (point,) = body["trajectory"]
    assert point["profile_id"] == 4
    assert point["latitude"] == -44.0
    assert point["date"] == "2023-12-08T00:00:00.000Z"


def test_trajectory_date_window(client):
    inside = client.get("/api/floats/5900004/trajectory", params={"start": "2023-12-01", "end": "2023-12-31"}).json()
    outside = client.get("/api/floats/5900004/trajectory", params={"start": "2024-01-01"}).json()
    assert inside["dataPoints"] == 1
    assert outside["dataPoints"] == 0
    assert outside["message"] == "No trajectory data available for this float"


def test_trajectory_rejects_reversed_window(client):
    r = client.get("/api/floats/5900004/trajectory", params={"start": "2024-02-01", "end": "2024-01-01"})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid date range"


def test_trajectory_rejects_placeholder_ids(client):
    r = client.get("/api/floats/undefined/trajectory")
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid float ID provided"


def test_unknown_float_is_empty_not_missing(client):
    r = client.get("/api/floats/1234567/trajectory")
    assert r.status_code == 200
    assert r.json()["trajectory"] == []


def test_timeseries_uses_surface_level(client):
    r = client.get("/api/floats/5900001/timeseries")
    assert r.status_code == 200
    body = r.json()
    assert body["dataPoints"] == 1
    assert body["timeSeries"] == [{
        "profile_id": 1,
        "cycle_number": 1,
        "juld": 27001.0,
        "date": "2023-12-05T00:00:00.000Z",
        "temperature": 18.3,
        "salinity": 35.0,
        "pressure": 5.0,
    }]


def test_timeseries_outside_window_is_not_found(client):
    r = client.get("/api/floats/5900001/timeseries", params={"start": "2024-01-01", "end": "2024-02-01"})
    assert r.status_code == 404
    assert r.json() == {"error": "Not found", "message": "No time series data found for this float"}


def test_timeseries_validates_window_and_id(client):
    assert client.get("/api/floats/5900001/timeseries", params={"start": "soon"}).status_code == 400
    assert client.get("/api/floats/null/timeseries").status_code == 400


def test_timeseries_binds_profile_ids(client, warehouse):
    client.get("/api/floats/5900002/timeseries")
    sql, params = warehouse.executed[-1]
    assert "profile_id IN (?)" in sql
    assert params == [2, 0]


def test_latest_profile_with_levels(client):
    r = client.get("/api/floats/5900001/profile")
    assert r.status_code == 200
    body = r.json()
    assert body["floatId"] == "5900001"
    assert body["profile"]["profile_id"] == 1
    assert body["profile"]["date"] == "2023-12-05T00:00:00.000Z"
    assert [m["level_index"] for m in body["measurements"]] == [0, 1, 2]
    assert body["measurements"][0]["temp_qc"] == "1"


def test_missing_float_profile(client):
    r = client.get("/api/floats/1234567/profile")
    assert r.status_code == 404
    assert r.json()["message"] == "Float profile not found"
