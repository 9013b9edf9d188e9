from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from sentra.main import app, create_app

client = TestClient(app)


def iso_minutes_ago(minutes: float) -> str:
    return (datetime.now(timezone.utc) - timedelta(minutes=minutes)).isoformat()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "prefix": ""}


def test_api_prefix(monkeypatch):
    monkeypatch.setenv("API_PREFIX", "api/")
    prefixed = TestClient(create_app())
    assert prefixed.get("/api/health").json()["prefix"] == "/api"
    assert prefixed.post("/api/priority", json={"severity": "Low"}).status_code == 200


def test_triage_feed():
    payload = {
        "incidents": [
            {"id": "A", "type": "Fire", "severity": "Critical", "createdAt": iso_minutes_ago(1),
             "location": {"lat": 17.40, "lng": 78.50}},
            {"id": "B", "type": "Fire", "severity": "Low", "createdAt": iso_minutes_ago(3),
             "location": {"lat": 17.405, "lng": 78.505}},
            {"id": "C", "type": "Medical", "severity": "Medium", "status": "Resolved",
             "createdAt": iso_minutes_ago(2), "location": {"lat": 17.45, "lng": 78.45}},
        ]
    }
    response = client.post("/triage", json=payload)
    assert response.status_code == 200
    body = response.json()

    assert [i["id"] for i in body["incidents"]] == ["A", "B", "C"]
    first = body["incidents"][0]
    assert first["priorityScore"] == 175
    assert first["isDuplicate"] is True
    assert first["reasons"][0] == "⚠️ Possible duplicate incident"
    assert first["region"] == "Hyderabad Region"
    assert body["incidents"][2]["isDuplicate"] is False
    assert body["counts"] == {"Critical": 1, "Medium": 1, "Low": 1}


def test_triage_filters():
    payload = {
        "incidents": [
            {"id": "new", "type": "Fire", "createdAt": iso_minutes_ago(1), "location": {"lat": 17.4, "lng": 78.5}},
            {"id": "old", "type": "Fire", "createdAt": iso_minutes_ago(90), "location": {"lat": 17.4, "lng": 78.5}},
        ],
        "filters": {"timeWindow": "1h", "incidentType": "Fire", "radiusKm": 50},
    }
    body = client.post("/triage", json=payload).json()
    assert [i["id"] for i in body["incidents"]] == ["new"]


def test_triage_rejects_unknown_time_window():
    response = client.post("/triage", json={"incidents": [], "filters": {"timeWindow": "2d"}})
    assert response.status_code == 422


def test_priority_endpoint():
    response = client.post(
        "/priority",
        json={"severity": "Critical", "status": "Reported", "createdAt": "garbage", "sensorVerified": False},
    )
    assert response.status_code == 200
    assert response.json() == {
        "score": 175,
        "reasons": [
            "Critical severity",
            "Incident unresolved",
            "Reported within last 5 minutes",
            "Awaiting sensor confirmation",
        ],
    }


def test_priority_endpoint_epoch_seconds():
    created = int((datetime.now(timezone.utc) - timedelta(minutes=40)).timestamp())
    response = client.post("/priority", json={"severity": "Critical", "createdAt": {"seconds": created}})
    assert response.json()["score"] == 230


def test_duplicate_endpoint():
    candidate = {"id": "a", "type": "Fire", "createdAt": iso_minutes_ago(0), "location": {"lat": 12.0, "lng": 77.0}}
    other = {"id": "b", "type": "Fire", "createdAt": iso_minutes_ago(3), "location": {"lat": 12.005, "lng": 77.005}}
    assert client.post("/duplicate", json={"candidate": candidate, "others": [other]}).json() == {"isDuplicate": True}

    other["location"] = {"lat": 12.02, "lng": 77.0}
    assert client.post("/duplicate", json={"candidate": candidate, "others": [other]}).json() == {"isDuplicate": False}


def test_report_incident():
    response = client.post(
        "/report_incident",
        json={"type": "Accident", "severity": "Medium", "location": {"lat": 19.07, "lng": 72.88}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Reported"
    assert body["confidence"] == 40
    assert body["sensorVerified"] is False
    # 70 + 40 + 25 - 10
    assert body["priorityScore"] == 125
    assert body["region"] == "Mumbai Metropolitan"


def test_report_incident_invalid_payload():
    response = client.post("/report_incident", json={"type": "Flood", "severity": "Low"})
    assert response.status_code == 422


def test_crowd_verify_endpoint():
    incident = {"id": "x", "type": "Smog", "severity": "Low", "status": "Reported"}
    response = client.post("/crowd_verify", json={"incident": incident, "voterId": "session-9"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Verified"
    assert body["crowdVerifyCount"] == 1
    assert body["crowdVerifiedBy"] == ["session-9"]


def test_crowd_verify_blank_voter():
    response = client.post("/crowd_verify", json={"incident": {"id": "x"}, "voterId": "   "})
    assert response.status_code == 400


def test_sensor_verify_endpoint():
    response = client.post("/sensor_verify", json={"incident": {"id": "x", "confidence": 40}})
    body = response.json()
    assert body["sensorVerified"] is True
    assert body["confidence"] == 65


def test_status_endpoint():
    ok = client.post("/status", json={"incident": {"id": "x"}, "status": "Assigned"})
    assert ok.json()["status"] == "Assigned"

    bad = client.post("/status", json={"incident": {"id": "x"}, "status": "Closed"})
    assert bad.status_code == 400


def test_priority_endpoint_null_sensor_flag():
    response = client.post("/priority", json={"severity": "Critical", "sensorVerified": None})
    assert response.status_code == 200
    assert response.json()["score"] == 175
    assert response.json()["reasons"][3] == "Awaiting sensor confirmation"


def test_router_failure_is_logged_and_app_still_starts(monkeypatch, caplog):
    import logging
    import sys

    monkeypatch.setitem(sys.modules, "sentra.routes.feed", None)
    with caplog.at_level(logging.ERROR, logger="uvicorn.error"):
        degraded = TestClient(create_app())

    assert "Failed to include triage router" in caplog.text
    assert degraded.get("/health").status_code == 200
    assert degraded.post("/triage", json={"incidents": []}).status_code == 404
    assert degraded.post("/crowd_verify", json={"incident": {"id": "x"}, "voterId": "v"}).status_code == 200
