from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from todo_api.errors import StorageError
from todo_api.main import create_app
from todo_api.repositories import InMemoryRepository
from todo_api.settings import Settings

BASE = "/api/todos"


def create_todo_payload(title="Test Task", description="Do something", completed=None):
    payload = {"title": title, "description": description}
    if completed is not None:
        payload["completed"] = completed
    return payload


def assert_todo_shape(todo: dict):
    # Basic structure validation
    for key in ["id", "title", "description", "completed", "createdAt", "updatedAt"]:
        assert key in todo
    assert "created_at" not in todo
    assert isinstance(todo["id"], int)
    assert isinstance(todo["title"], str)
    assert isinstance(todo["completed"], bool)
    created = datetime.fromisoformat(todo["createdAt"])
    updated = datetime.fromisoformat(todo["updatedAt"])
    # Timestamps carry no offset
    assert created.tzinfo is None and updated.tzinfo is None
    assert created <= updated


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] == "memory"


class TestScenarios:
    def test_empty_list(self, client):
        res = client.get(BASE)
        assert res.status_code == 200
        assert res.json() == []

    def test_create_and_read(self, client):
        res = client.post(BASE, json={"title": "A", "description": "d"})
        assert res.status_code == 201
        created = res.json()
        assert_todo_shape(created)
        assert created["id"] == 1
        assert created["completed"] is False
        assert created["createdAt"] == created["updatedAt"]

        res_get = client.get(f"{BASE}/1")
        assert res_get.status_code == 200
        assert res_get.json() == created

    def test_list_is_newest_first(self, client):
        for title in ["A", "B", "C"]:
            assert client.post(BASE, json={"title": title}).status_code == 201

        items = client.get(BASE).json()
        assert [t["title"] for t in items] == ["C", "B", "A"]
        created_ts = [datetime.fromisoformat(t["createdAt"]) for t in items]
        assert created_ts == sorted(created_ts, reverse=True)

    def test_update(self, client):
        created = client.post(BASE, json={"title": "A", "description": "d"}).json()

        res = client.put(f"{BASE}/1", json={"title": "A2", "description": "d", "completed": True})
        assert res.status_code == 200
        updated = res.json()
        assert_todo_shape(updated)
        assert updated["id"] == 1
        assert updated["title"] == "A2"
        assert updated["completed"] is True
        assert updated["createdAt"] == created["createdAt"]
        assert datetime.fromisoformat(updated["updatedAt"]) >= datetime.fromisoformat(created["updatedAt"])

    def test_delete(self, client):
        client.post(BASE, json={"title": "A", "description": "d"})

        res_del = client.delete(f"{BASE}/1")
        assert res_del.status_code == 204
        assert res_del.text == ""

        res_get = client.get(f"{BASE}/1")
        assert res_get.status_code == 404
        assert res_get.json()["message"] == "Todo not found with id: 1"

    def test_not_found_on_empty_db(self, client):
        res = client.get(f"{BASE}/9999")
        assert res.status_code == 404
        body = res.json()
        assert body["error"] == "NotFound"
        assert "9999" in body["message"]


class TestTodosCRUD:
    def test_create_with_completed_true(self, client):
        res = client.post(BASE, json=create_todo_payload(completed=True))
        assert res.status_code == 201
        assert res.json()["completed"] is True

    def test_create_without_description(self, client):
        res = client.post(BASE, json={"title": "Buy milk"})
        assert res.status_code == 201
        assert res.json()["description"] is None

    def test_create_ignores_client_id_and_timestamps(self, client):
        payload = {
            "id": 77,
            "title": "Sneaky",
            "createdAt": "2000-01-01T00:00:00",
            "updatedAt": "2000-01-01T00:00:00",
        }
        res = client.post(BASE, json=payload)
        assert res.status_code == 201
        todo = res.json()
        assert todo["id"] == 1
        assert not todo["createdAt"].startswith("2000-01-01")

    def test_collection_with_trailing_slash(self, client):
        assert client.post(f"{BASE}/", json={"title": "Slash"}).status_code == 201
        res = client.get(f"{BASE}/")
        assert res.status_code == 200
        assert len(res.json()) == 1

    def test_update_without_completed_keeps_flag(self, client):
        client.post(BASE, json=create_todo_payload(completed=True))

        res = client.put(f"{BASE}/1", json={"title": "Renamed"})
        assert res.status_code == 200
        updated = res.json()
        assert updated["completed"] is True
        assert updated["description"] is None

    def test_update_ignores_client_timestamps(self, client):
        created = client.post(BASE, json={"title": "A"}).json()

        res = client.put(f"{BASE}/1", json={"id": 5, "title": "A", "createdAt": "2000-01-01T00:00:00"})
        assert res.status_code == 200
        assert res.json()["id"] == 1
        assert res.json()["createdAt"] == created["createdAt"]

    def test_update_is_idempotent(self, client):
        client.post(BASE, json={"title": "A"})
        body = {"title": "B", "description": "x", "completed": True}

        first = client.put(f"{BASE}/1", json=body).json()
        second = client.put(f"{BASE}/1", json=body).json()
        first.pop("updatedAt")
        second.pop("updatedAt")
        assert first == second

    def test_update_not_found(self, client):
        res = client.put(f"{BASE}/424242", json={"title": "Nope"})
        assert res.status_code == 404
        assert res.json()["message"] == "Todo not found with id: 424242"

    def test_delete_twice(self, client):
        client.post(BASE, json={"title": "ToDelete"})
        assert client.delete(f"{BASE}/1").status_code == 204

        res = client.delete(f"{BASE}/1")
        assert res.status_code == 404
        assert res.json()["message"] == "Todo not found with id: 1"

    def test_ids_are_not_reused(self, client):
        client.post(BASE, json={"title": "first"})
        client.delete(f"{BASE}/1")
        res = client.post(BASE, json={"title": "second"})
        assert res.json()["id"] == 2

    def test_very_long_title_is_stored_fully(self, client):
        title = "x" * 10_000
        res = client.post(BASE, json={"title": title})
        assert res.status_code == 201
        assert client.get(f"{BASE}/{res.json()['id']}").json()["title"] == title


class TestValidationErrors:
    @pytest.mark.parametrize("path", [f"{BASE}/abc", f"{BASE}/1.5", f"{BASE}/9223372036854775808"])
    def test_malformed_id(self, client, path):
        res = client.get(path)
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "ValidationError"
        assert body["message"] == "Request validation failed"
        assert isinstance(body["detail"], list)

    def test_malformed_id_on_delete(self, client):
        assert client.delete(f"{BASE}/abc").status_code == 400

    def test_malformed_json(self, client):
        res = client.post(BASE, content='{"title": ', headers={"Content-Type": "application/json"})
        assert res.status_code == 400

    def test_non_json_content_type(self, client):
        res = client.post(BASE, content="title=A", headers={"Content-Type": "text/plain"})
        assert res.status_code == 400

    def test_non_utf8_body(self, client):
        res = client.post(BASE, content=b"\xff\xfe title", headers={"Content-Type": "text/plain"})
        assert res.status_code == 400
        assert res.headers["content-type"] == "application/json"
        assert res.json()["error"] == "ValidationError"

    def test_missing_title(self, client):
        res = client.post(BASE, json={"description": "no title"})
        assert res.status_code == 400
        assert res.json()["error"] == "ValidationError"

    def test_blank_title(self, client):
        res = client.post(BASE, json={"title": "   "})
        assert res.status_code == 400

    def test_put_missing_title(self, client):
        client.post(BASE, json={"title": "A"})
        res = client.put(f"{BASE}/1", json={"completed": True})
        assert res.status_code == 400

    def test_wrong_completed_type(self, client):
        res = client.post(BASE, json={"title": "A", "completed": {"nested": True}})
        assert res.status_code == 400


class TestCors:
    ORIGIN = "http://localhost:5173"

    def test_simple_request_carries_allowed_origin(self, client):
        res = client.get(BASE, headers={"Origin": self.ORIGIN})
        assert res.status_code == 200
        assert res.headers["access-control-allow-origin"] == self.ORIGIN

    def test_preflight(self, client):
        res = client.options(
            BASE,
            headers={
                "Origin": self.ORIGIN,
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert res.status_code == 200
        assert res.headers["access-control-allow-origin"] == self.ORIGIN
        methods = [m.strip() for m in res.headers["access-control-allow-methods"].split(",")]
        for method in ["GET", "POST", "PUT", "DELETE", "OPTIONS"]:
            assert method in methods
        assert "content-type" in res.headers["access-control-allow-headers"].lower()

    def test_other_origin_is_not_allowed(self, client):
        res = client.get(BASE, headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in res.headers

    def test_configured_origin(self):
        app = create_app(Settings(cors_allowed_origin="https://todo.example"), repository=InMemoryRepository())
        with TestClient(app) as c:
            res = c.get(BASE, headers={"Origin": "https://todo.example"})
        assert res.headers["access-control-allow-origin"] == "https://todo.example"


class _BrokenRepository(InMemoryRepository):
    def find_all_ordered_by_created_at_desc(self):
        raise StorageError("disk I/O error")


class TestStorageErrors:
    def test_storage_failure_is_500(self):
        app = create_app(Settings(), repository=_BrokenRepository())
        with TestClient(app) as c:
            res = c.get(BASE)
        assert res.status_code == 500
        assert res.json() == {"error": "StorageError", "message": "Storage failure"}


class _FailingRepository(InMemoryRepository):
    def find_all_ordered_by_created_at_desc(self):
        raise RuntimeError("unexpected")


class TestUnexpectedErrors:
    def test_unexpected_failure_is_json_500(self):
        app = create_app(Settings(), repository=_FailingRepository())
        with TestClient(app, raise_server_exceptions=False) as c:
            res = c.get(BASE)
        assert res.status_code == 500
        assert res.headers["content-type"] == "application/json"
        assert res.json() == {"error": "InternalError", "message": "Internal server error"}
