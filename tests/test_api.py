import pytest
from fastapi.testclient import TestClient

from livesync.core.config import Settings
from livesync.core.errors import SeedError
from livesync.db import seed
from livesync.main import create_app


@pytest.fixture()
def settings(database_url):
    return Settings(database_url=database_url, seed_on_startup=False, log_level="WARNING")


@pytest.fixture()
def client(settings):
    app = create_app(settings)
    with TestClient(app) as client:
        yield client


def call(client, name, *params):
    return client.post(f"/methods/{name}", json={"params": list(params)})


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_user_lifecycle_over_http(client):
    response = call(client, "Users.create", {"name": "Alice", "createdAt": "2025-01-15T00:00:00Z"})
    assert response.status_code == 200
    user_id = response.json()["result"]

    found = call(client, "Users.find", user_id).json()["result"]
    assert found["name"] == "Alice"
    assert found["createdAt"].startswith("2025-01-15T00:00:00")

    assert call(client, "Users.update", user_id, {"$set": {"name": "Alicia"}}).json() == {"result": 1}
    assert call(client, "Users.find", user_id).json()["result"]["name"] == "Alicia"

    assert call(client, "Users.remove", user_id).json() == {"result": 1}
    assert call(client, "Users.find", user_id).json() == {"result": None}
    assert call(client, "Users.remove", user_id).json() == {"result": 0}


def test_invalid_argument_is_reported(client):
    response = call(client, "Users.create", {"name": "Alice", "createdAt": 5})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "invalid-argument"
    assert body["reason"] == "timestamp_type"
    assert body["details"]["errors"][0]["loc"] == [0, "createdAt"]


def test_unknown_method_and_publication(client):
    assert call(client, "Users.drop").status_code == 404
    response = client.get("/publications/users.none")
    assert response.status_code == 404
    assert response.json()["error"] == "publication-not-found"


def test_publication_snapshot(client):
    call(client, "Users.create", {"name": "Alice", "createdAt": "2025-01-01T00:00:00Z"})
    call(client, "Users.create", {"name": "Natalie", "createdAt": "2025-02-01T00:00:00Z"})
    call(client, "Users.create", {"name": "Bob", "createdAt": "2025-03-01T00:00:00Z"})

    all_users = client.get("/publications/users.all").json()
    by_name = client.post("/publications/users.byName", json={"params": ["ALI"]}).json()

    assert [doc["name"] for doc in all_users["docs"]] == ["Bob", "Natalie", "Alice"]
    assert by_name["name"] == "users.byName"
    assert [doc["name"] for doc in by_name["docs"]] == ["Natalie", "Alice"]


def test_startup_seeds_database(database_url):
    app = create_app(Settings(database_url=database_url, log_level="WARNING"))

    with TestClient(app) as client:
        links = client.get("/publications/links").json()["docs"]
        users = client.get("/publications/users.all").json()["docs"]

    assert [link["title"] for link in links] == [
        "Do the Tutorial", "Follow the Guide", "Read the Docs", "Discussions",
    ]
    assert [user["name"] for user in users] == ["Carol White", "Bob Smith", "Alice Johnson"]


def test_startup_fails_when_seeding_fails(database_url, monkeypatch):
    async def broken_seed(session):
        raise RuntimeError("boom")

    monkeypatch.setitem(seed.SEEDERS, "users", broken_seed)
    app = create_app(Settings(database_url=database_url, log_level="WARNING"))

    with pytest.raises(SeedError):
        with TestClient(app):
            pass


def test_websocket_subscription_receives_changes(client):
    with client.websocket_connect("/sync") as ws:
        assert ws.receive_json()["type"] == "connected"

        ws.send_json({"type": "sub", "id": "s1", "name": "users.byName", "params": ["ali"]})
        ready = ws.receive_json()
        assert ready == {"type": "ready", "data": {"id": "s1", "docs": []}}

        # запись через HTTP тоже обновляет подписки
        call(client, "Users.create", {"name": "Alice", "createdAt": "2025-01-01T00:00:00Z"})
        changed = ws.receive_json()
        assert changed["type"] == "changed"
        assert [doc["name"] for doc in changed["data"]["docs"]] == ["Alice"]

        ws.send_json({
            "type": "method", "id": "m1", "method": "Users.create",
            "params": [{"name": "Natalie", "createdAt": "2025-02-01T00:00:00Z"}],
        })
        changed = ws.receive_json()
        assert [doc["name"] for doc in changed["data"]["docs"]] == ["Natalie", "Alice"]
        result = ws.receive_json()
        assert result["type"] == "result"
        assert result["data"]["id"] == "m1"
        assert isinstance(result["data"]["result"], str)


def test_websocket_errors(client):
    with client.websocket_connect("/sync") as ws:
        ws.receive_json()

        ws.send_json({"type": "sub", "id": "s1", "name": "users.byName", "params": [1]})
        nosub = ws.receive_json()
        assert nosub["type"] == "nosub"
        assert nosub["data"]["error"]["error"] == "invalid-argument"

        ws.send_json({"type": "method", "id": "m1", "method": "Users.remove", "params": []})
        result = ws.receive_json()
        assert result["data"]["error"]["reason"] == "missing_argument"

        ws.send_text("not json")
        assert ws.receive_json()["data"]["error"] == "malformed-message"

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        ws.send_json({"type": "sub", "id": "s2", "name": "users.all", "params": []})
        ws.receive_json()
        ws.send_json({"type": "unsub", "id": "s2"})
        assert ws.receive_json() == {"type": "nosub", "data": {"id": "s2"}}

        ws.send_json({"type": "sub", "id": "s3", "name": "users.all", "params": []})
        assert ws.receive_json()["type"] == "ready"
        ws.send_json({"type": "sub", "id": "s3", "name": "users.byName", "params": ["a"]})
        nosub = ws.receive_json()
        assert nosub["type"] == "nosub"
        assert nosub["data"]["error"]["reason"] == "duplicate_subscription"


def test_malformed_params_are_invalid_argument(client):
    response = client.post("/methods/Users.remove", json={"params": "abc"})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid-argument"
    assert response.json()["reason"] == "params_type"


def test_non_object_body_is_invalid_argument(client):
    response = client.post("/methods/Users.remove", json=["x"])

    assert response.status_code == 400
    assert response.json()["error"] == "invalid-argument"


def test_out_of_range_timestamp_is_invalid_argument(client):
    response = call(client, "Users.create", {"name": "Alice", "createdAt": {"$date": 1e20}})

    assert response.status_code == 400
    assert response.json()["reason"] == "timestamp_type"
    assert client.get("/publications/users.all").json()["docs"] == []
