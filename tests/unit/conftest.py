"""Shared fixtures for unit tests."""

import copy
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest


class InMemoryDocumentStore:
    """Dict-backed document store; insertion order stands in for creation order."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.puts: list[tuple[str, str, dict[str, Any], bool]] = []

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self.collections.get(collection, {}).get(id)
        return copy.deepcopy(doc) if doc is not None else None

    async def put(
        self,
        collection: str,
        id: str,
        doc: dict[str, Any],
        merge: bool = False,
    ) -> None:
        self.puts.append((collection, id, copy.deepcopy(doc), merge))
        docs = self.collections.setdefault(collection, {})
        if merge and id in docs:
            docs[id] = {**docs[id], **copy.deepcopy(doc)}
        else:
            docs[id] = copy.deepcopy(doc)

    async def query(
        self,
        collection: str,
        field: str,
        value: Any,
        limit: int = 1,
    ) -> list[tuple[str, dict[str, Any]]]:
        matches = [
            (id, copy.deepcopy(doc))
            for id, doc in self.collections.get(collection, {}).items()
            if doc.get(field) == value
        ]
        return matches[:limit]

    def seed(self, collection: str, id: str, doc: dict[str, Any]) -> None:
        self.collections.setdefault(collection, {})[id] = copy.deepcopy(doc)


class FakeUnitOfWork:
    """Fake Unit of Work over an in-memory document store."""

    def __init__(self, documents: InMemoryDocumentStore | None = None) -> None:
        self.documents = documents or InMemoryDocumentStore()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class SteppingClock:
    """Clock returning scripted instants, then repeating the last one."""

    def __init__(self, *instants: datetime) -> None:
        self._instants = list(instants)

    def __call__(self) -> datetime:
        if len(self._instants) > 1:
            return self._instants.pop(0)
        return self._instants[0]


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def store(uow: FakeUnitOfWork) -> InMemoryDocumentStore:
    return uow.documents


@pytest.fixture
def base_time() -> datetime:
    return datetime(2026, 1, 28, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def later(base_time: datetime) -> datetime:
    return base_time + timedelta(minutes=5)
