"""Shared fixtures: settings from env, in-memory storage, HTTP client."""

import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from todo_api.config import get_settings  # noqa: E402
from todo_api.main import app  # noqa: E402
from todo_api.repositories import InMemoryTodoRepository, InMemoryUserRepository  # noqa: E402
from todo_api.services.todo_service import TodoService  # noqa: E402

TEST_SECRET = "test-secret-do-not-use-in-production"


@pytest.fixture(autouse=True)
def auth_env(monkeypatch) -> Iterator[None]:
    """Configure a signing secret and the in-memory store for every test."""
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.delenv("MONGODB_URI", raising=False)
    monkeypatch.delenv("JWT_EXPIRE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Provide a TestClient with a running lifespan and fresh storage."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def todo_repository() -> InMemoryTodoRepository:
    return InMemoryTodoRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def todo_service(todo_repository: InMemoryTodoRepository) -> TodoService:
    return TodoService(todo_repository)


@pytest.fixture
def register(client: TestClient) -> Callable[..., Dict[str, Any]]:
    """Register a user and return its id and auth headers."""

    def _register(username: str = "alice", email: str = "alice@x.com", password: str = "pw123") -> Dict[str, Any]:
        response = client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {"id": data["id"], "headers": {"Authorization": f"Bearer {data['token']}"}}

    return _register
