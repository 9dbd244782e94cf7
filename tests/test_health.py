from unittest import mock


def test_health(client):
    res = client.get("/health")
    body = res.get_json()
    assert res.status_code == 200
    assert body["status"] == "healthy"
    assert body["version"] == "1.0.0"
    assert body["uptime"] >= 0


def test_liveness(client):
    res = client.get("/health/live")
    assert res.status_code == 200
    assert res.get_json()["status"] == "alive"


def test_readiness_reports_store(app, client):
    res = client.get("/health/ready")
    body = res.get_json()
    assert res.status_code == 200
    assert body["status"] == "ready"
    assert body["checks"][app.config["STORE_BACKEND"]]["healthy"] is True


def test_readiness_fails_when_store_is_down(app, client):
    store = app.extensions["garden_store"]
    with mock.patch.object(store, "ping", return_value=False):
        res = client.get("/health/ready")
    assert res.status_code == 503
    assert res.get_json()["status"] == "not ready"


def test_unknown_route(client):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.get_json() == {"success": False, "message": "Route not found"}


def test_security_headers(client):
    res = client.get("/health/live")
    assert res.headers["X-Content-Type-Options"] == "nosniff"
