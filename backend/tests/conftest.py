"""
Notes API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests run against an in-memory store; no Firebase project is needed.

Fixtures (function-scoped):
    ├── memory_store: InMemoryStore fake with Realtime-Database-like behavior
    ├── mock_store: AsyncMock standing in for a DocumentStore
    └── test_client: HTTPX AsyncClient talking to create_app(store=memory_store)
"""

import copy
import itertools
import os
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "https://notes-test.firebaseio.com"
os.environ["NOTES_COLLECTION"] = "notes"
os.environ["LOG_LEVEL"] = "WARNING"

from app.exceptions import StoreError  # noqa: E402
from app.services.store_base import DocumentStore  # noqa: E402


class InMemoryStore(DocumentStore):
    """
    DocumentStore fake backed by a nested dict.

    Mirrors the Realtime Database behaviors the service relies on: push keys
    are unique and sort in creation order, a missing path reads as None, and
    deleting a missing path succeeds. Set `fail_with` to make every call
    raise StoreError with that message.
    """

    def __init__(self):
        self.tree: Dict[str, Any] = {}
        self.fail_with: Optional[str] = None
        self._counter = itertools.count(1)

    def _check(self, operation: str, path: str) -> None:
        if self.fail_with:
            raise StoreError(message=self.fail_with, operation=operation, path=path)

    @staticmethod
    def _parts(path: str):
        return [p for p in path.split("/") if p]

    def _node(self, path: str) -> Any:
        node: Any = self.tree
        for part in self._parts(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    async def generate_key(self, path: str) -> str:
        self._check("push", path)
        key = f"-N{next(self._counter):08d}"
        await self.set(f"{path}/{key}", "")
        return key

    async def get(self, path: str) -> Any:
        self._check("get", path)
        value = self._node(path)
        return copy.deepcopy(value) if value not in ({}, None) else None

    async def set(self, path: str, value: Any) -> None:
        self._check("set", path)
        parts = self._parts(path)
        node = self.tree
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = copy.deepcopy(value)

    async def delete(self, path: str) -> None:
        self._check("delete", path)
        parts = self._parts(path)
        parent = self._node("/".join(parts[:-1])) if len(parts) > 1 else self.tree
        if isinstance(parent, dict):
            parent.pop(parts[-1], None)

    async def health_check(self, path: str) -> bool:
        return self.fail_with is None


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def mock_store():
    """
    Provides a mock DocumentStore.

    Usage:
        async def test_get(mock_store):
            mock_store.get.return_value = {"id": "k", "title": "t", "content": "c"}
    """
    store = AsyncMock(spec=DocumentStore)
    store.generate_key = AsyncMock(return_value="-Nkey0001")
    store.get = AsyncMock(return_value=None)
    store.set = AsyncMock()
    store.delete = AsyncMock()
    store.health_check = AsyncMock(return_value=True)
    return store


@pytest_asyncio.fixture
async def test_client(memory_store):
    """
    Provides an async HTTP test client wired to an in-memory store.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import create_app
    app = create_app(store=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
