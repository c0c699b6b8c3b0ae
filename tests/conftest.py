import pytest
from fastapi.testclient import TestClient

from todo_api.db import SQLiteRepository
from todo_api.main import create_app
from todo_api.repositories import InMemoryRepository
from todo_api.settings import Settings


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def client(settings, repository):
    # Fresh app and storage per test so ids start at 1
    app = create_app(settings, repository=repository)
    with TestClient(app) as c:
        yield c


@pytest.fixture(params=["memory", "sqlite"])
def any_repository(request, tmp_path):
    """Each repository test runs once per storage backend."""
    if request.param == "sqlite":
        return SQLiteRepository(str(tmp_path / "todos.db"))
    return InMemoryRepository()
