from fastapi.testclient import TestClient

import main
from errors import SourceReadError

MUMBAI_CLUSTER = [
    {"latitude": 19.0760, "longitude": 72.8777, "severity": 5},
    {"latitude": 19.0765, "longitude": 72.8780, "severity": 3},
    {"latitude": 19.0770, "longitude": 72.8772},
]


def _log_accidents(client: TestClient, accidents) -> None:
    for accident in accidents:
        resp = client.post("/accidents", json=accident)
        assert resp.status_code == 201


def test_health_check(client: TestClient):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_log_and_list_accidents(client: TestClient):
    _log_accidents(client, MUMBAI_CLUSTER)

    resp = client.get("/accidents")
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 3
    assert body[0]["severity"] == 3  # default severity, most recent first


def test_out_of_range_accident_is_rejected(client: TestClient):
    resp = client.post("/accidents", json={"latitude": 95.0, "longitude": 72.8})
    assert resp.status_code == 422


def test_heatmap_weights_are_severities(client: TestClient):
    _log_accidents(client, MUMBAI_CLUSTER)

    resp = client.get("/heatmap")
    assert resp.status_code == 200
    assert sorted(p["weight"] for p in resp.json()) == [3, 3, 5]


def test_refresh_then_list_red_zones(client: TestClient):
    _log_accidents(client, MUMBAI_CLUSTER + [{"latitude": 19.3, "longitude": 73.0}])

    refresh = client.post("/red-zones/refresh")
    assert refresh.status_code == 200
    assert refresh.json()["data"]["red_zone_count"] == 1
    assert refresh.json()["data"]["accident_count"] == 4

    zones = client.get("/red-zones").json()
    assert zones["total"] == 1
    assert zones["red_zones"][0]["risk_score"] == 3
    assert 200 <= zones["red_zones"][0]["radius"] <= 800


def test_refresh_failure_returns_500(client: TestClient, monkeypatch):
    def fail(db):
        raise SourceReadError("Failed to fetch accidents: connection refused")

    monkeypatch.setattr(main, "update_red_zones", fail)

    resp = client.post("/red-zones/refresh")
    assert resp.status_code == 500
    assert "connection refused" in resp.json()["detail"]


def test_position_suggestion(client: TestClient):
    _log_accidents(client, MUMBAI_CLUSTER)
    client.post("/red-zones/refresh")

    near = client.get("/red-zones/suggestion", params={"latitude": 19.08, "longitude": 72.88})
    assert near.status_code == 200
    assert near.json()["type"] == "suggestion"
    assert near.json()["zone"]["risk_score"] == 3
    assert near.json()["nearby_count"] == 1

    far = client.get("/red-zones/suggestion", params={"latitude": 28.61, "longitude": 77.23})
    assert far.json()["type"] == "none"
    assert far.json()["nearby_count"] == 0
