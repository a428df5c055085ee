from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

from mindspend.db.memory import MemoryRepository
from mindspend.db.repository import get_repository
from mindspend.main import app
from mindspend.utils.ai_client import CompletionError, get_completion_client
from mindspend.utils.storage import MemoryStorage, get_storage


class StubCompletionClient:
    """Stands in for the chat completion gateway; records every call."""

    def __init__(self, reply="Mind the weekend takeout."):
        self.reply = reply
        self.error_kind = None
        self.calls = []

    def generate_completion(self, messages):
        self.calls.append(messages)
        if self.error_kind:
            raise CompletionError(self.error_kind)
        return self.reply


def make_expense(amount, category="Food", mood="Neutral", note="", day=None, created_at=None, **extra):
    day = day or date(2024, 6, 15)
    expense = {
        "expense_id": extra.pop("expense_id", f"{category}-{amount}-{day.isoformat()}"),
        "user_id": "user-1",
        "amount": amount,
        "category": category,
        "mood": mood,
        "note": note,
        "date": day.isoformat(),
        "created_at": (created_at or datetime(day.year, day.month, day.day, 9, 0)).isoformat(),
    }
    expense.update(extra)
    return expense


@pytest.fixture
def expense_factory():
    return make_expense


@pytest.fixture
def repo():
    return MemoryRepository()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def completion():
    return StubCompletionClient()


@pytest.fixture
def client(repo, storage, completion):
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_completion_client] = lambda: completion
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_and_login(client, email="alice@example.com", password="s3cret-pass"):
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client)


@pytest.fixture
def other_headers(client):
    return register_and_login(client, email="bob@example.com")
