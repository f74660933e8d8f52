import pytest
from fastapi.testclient import TestClient

from passwatch.api import EventStore, create_app
from passwatch.fingerprint import fingerprint

HASH = fingerprint("password123")


@pytest.fixture
def client():
    return TestClient(create_app())


def _post(client, body):
    return client.post("/events", json=body)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")


def test_event_roundtrip(client):
    r = _post(client, {"email": "bob.smith@culture.ai", "passwordHash": HASH,
                       "timestamp": "2024-01-01T00:00:00.000Z", "loginType": "form-based"})
    assert r.status_code == 200
    assert r.json()["success"] is True
    event_id = r.json()["eventId"]

    listing = client.get("/events").json()
    assert listing["count"] == 1
    stored = listing["events"][0]
    assert stored["id"] == event_id
    assert stored["email"] == "bob.smith@culture.ai"
    assert stored["passwordHash"] == HASH
    assert stored["loginType"] == "form-based"


@pytest.mark.parametrize("body", [
    {"passwordHash": HASH},
    {"email": "bob.smith@culture.ai"},
    {"email": "", "passwordHash": HASH},
    {},
    [],
])
def test_missing_fields_rejected(client, body):
    r = _post(client, body)
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Missing required fields: email and passwordHash"}
    assert client.get("/events").json()["count"] == 0


@pytest.mark.parametrize("bad", ["password123", HASH.upper(), HASH[:-1], HASH + "0"])
def test_non_fingerprint_hash_rejected(client, bad):
    r = _post(client, {"email": "bob.smith@culture.ai", "passwordHash": bad})
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert client.get("/events").json()["count"] == 0


def test_invalid_json(client):
    r = client.post("/events", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Invalid JSON"}


def test_delete_clears(client):
    _post(client, {"email": "bob.smith@culture.ai", "passwordHash": HASH})
    _post(client, {"email": "alice.jones@culture.ai", "passwordHash": HASH})
    assert client.get("/events").json()["count"] == 2

    r = client.delete("/events")
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert client.get("/events").json() == {"events": [], "count": 0}


def test_unknown_route_is_json_404(client):
    for r in (client.get("/nope"), client.put("/events")):
        assert r.status_code == 404
        assert r.json() == {"success": False, "error": "Not found"}


def test_cors(client):
    r = client.get("/health", headers={"Origin": "http://login.test"})
    assert r.headers["access-control-allow-origin"] == "*"
    assert client.options("/events").status_code == 200


def test_shared_store():
    store = EventStore()
    client = TestClient(create_app(store))
    _post(client, {"email": "bob.smith@culture.ai", "passwordHash": HASH})
    assert [e["email"] for e in store.all()] == ["bob.smith@culture.ai"]


def test_extra_fields_are_not_stored(client):
    r = _post(client, {"email": "bob.smith@culture.ai", "passwordHash": HASH, "password": "password123"})
    assert r.status_code == 200
    stored = client.get("/events").json()["events"][0]
    assert "password" not in stored
    assert set(stored) == {"email", "passwordHash", "timestamp", "id"}
