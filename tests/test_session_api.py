"""Tests de los endpoints /api/session/*."""
from app.core.time import iso_from_ms

TIMEOUT = 300_000


def _claim(client, **headers):
    return client.get("/api/session/claim", headers=headers)


def test_claim_creates_session(client, clock):
    r = _claim(client)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert len(body["sessionKey"]) == 64
    assert body["expiresAt"] == iso_from_ms(clock.now + TIMEOUT)
    assert body["heartbeatInterval"] == 60000
    assert body["message"] == "Session created successfully"


def test_claim_reuses_for_same_client(client):
    first = _claim(client).json()
    second = _claim(client).json()
    assert second["sessionKey"] == first["sessionKey"]
    assert second["message"] == "Existing session reused"


def test_claim_distinguishes_user_agents(client):
    a = _claim(client, **{"User-Agent": "agent-a"}).json()
    b = _claim(client, **{"User-Agent": "agent-b"}).json()
    assert a["sessionKey"] != b["sessionKey"]


def test_claim_at_capacity_returns_429(app, client):
    app.state.session_store.max_sessions = 2
    assert _claim(client, **{"User-Agent": "a"}).status_code == 200
    assert _claim(client, **{"User-Agent": "b"}).status_code == 200
    r = _claim(client, **{"User-Agent": "c"})
    assert r.status_code == 429
    assert r.json()["error"] == "Session limit reached"
    assert "Too many active sessions" in r.json()["message"]


def test_requests_sweep_expired_sessions_first(app, client, clock):
    app.state.session_store.max_sessions = 1
    _claim(client, **{"User-Agent": "a"})
    clock.advance(TIMEOUT + 1)
    r = _claim(client, **{"User-Agent": "b"})
    assert r.status_code == 200
    assert len(app.state.session_store) == 1


def test_heartbeat_extends_from_heartbeat_time(client, clock):
    key = _claim(client).json()["sessionKey"]
    clock.advance(60_000)
    r = client.post("/api/session/heartbeat", headers={"X-Session-Key": key})
    assert r.status_code == 200
    assert r.json() == {"success": True, "expiresAt": iso_from_ms(clock.now + TIMEOUT)}


def test_heartbeat_requires_header(client):
    r = client.post("/api/session/heartbeat")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing X-Session-Key header"


def test_heartbeat_unknown_or_expired_is_404(client, clock):
    assert client.post("/api/session/heartbeat", headers={"X-Session-Key": "nope"}).status_code == 404
    key = _claim(client).json()["sessionKey"]
    clock.advance(TIMEOUT + 1)
    r = client.post("/api/session/heartbeat", headers={"X-Session-Key": key})
    assert r.status_code == 404
    assert r.json()["error"] == "Session not found or expired"


def test_heartbeat_from_other_machine_is_403(client):
    key = _claim(client, **{"User-Agent": "a"}).json()["sessionKey"]
    r = client.post("/api/session/heartbeat", headers={"X-Session-Key": key, "User-Agent": "b"})
    assert r.status_code == 403
    assert r.json()["error"] == "Session fingerprint mismatch"


def test_forwarded_for_changes_fingerprint(client):
    key = _claim(client, **{"X-Forwarded-For": "1.1.1.1"}).json()["sessionKey"]
    r = client.post("/api/session/heartbeat", headers={"X-Session-Key": key, "X-Forwarded-For": "2.2.2.2"})
    assert r.status_code == 403


def test_release_flow(app, client):
    key = _claim(client).json()["sessionKey"]
    r = client.post("/api/session/release", headers={"X-Session-Key": key, "User-Agent": "other"})
    assert r.status_code == 403
    assert r.json()["error"] == "Cannot release session from different machine"

    r = client.post("/api/session/release", headers={"X-Session-Key": key})
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Session released"}
    assert len(app.state.session_store) == 0

    r = client.post("/api/session/release", headers={"X-Session-Key": key})
    assert r.status_code == 404


def test_release_requires_header(client):
    assert client.post("/api/session/release").status_code == 400


def test_wrong_method_is_405(client):
    assert client.post("/api/session/claim").status_code == 405
    assert client.get("/api/session/heartbeat").status_code == 405


def test_cors_is_open(client):
    r = client.options(
        "/api/session/heartbeat",
        headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "X-Session-Key",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"
    r = _claim(client, Origin="https://example.com")
    assert r.headers["access-control-allow-origin"] == "*"
    assert "x-request-id" in r.headers
