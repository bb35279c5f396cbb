"""
Shared fixtures for the API tests.

Endpoint tests run against an in-memory stand-in for `DocumentCollection`
that evaluates the same predicate objects the SQL compiler consumes, wired
in through `app.dependency_overrides`.
"""

import copy
from typing import Any

import pytest
from fastapi.testclient import TestClient

from bids.dependencies import get_bid_collection
from cars.dependencies import get_car_collection
from core.db import DatabaseError
from core.documents import (
    ID_FIELD,
    AnyOf,
    Contains,
    DeleteResult,
    Equals,
    InsertResult,
    Predicate,
    Query,
    UpdateResult,
)
from main import app


# ============================================================================
# In-memory document collection
# ============================================================================

def _field_value(document: dict, path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _matches(document: dict, predicate: Predicate) -> bool:
    if isinstance(predicate, Equals):
        return _field_value(document, predicate.field) == predicate.value
    if isinstance(predicate, Contains):
        value = _field_value(document, predicate.field)
        return isinstance(value, str) and predicate.text.lower() in value.lower()
    if isinstance(predicate, AnyOf):
        return any(_matches(document, clause) for clause in predicate.clauses)
    raise TypeError(predicate)


class InMemoryCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.rows: list[tuple[str, dict]] = []
        self.fail = False
        self._next_id = 1

    def _check(self) -> None:
        if self.fail:
            raise DatabaseError("Database query failed.")

    def _documents(self, where: tuple[Predicate, ...]) -> list[dict]:
        return [
            {ID_FIELD: doc_id, **copy.deepcopy(doc)}
            for doc_id, doc in self.rows
            if all(_matches(doc, predicate) for predicate in where)
        ]

    async def find(self, query: Query = Query()) -> list[dict]:
        self._check()
        documents = self._documents(query.where)
        if query.sort is not None:
            present = [d for d in documents if _field_value(d, query.sort.field) is not None]
            missing = [d for d in documents if _field_value(d, query.sort.field) is None]
            present.sort(key=lambda d: _field_value(d, query.sort.field), reverse=query.sort.descending)
            documents = present + missing
        documents = documents[query.skip:]
        if query.limit is not None:
            documents = documents[: query.limit]
        return documents

    async def find_one(self, doc_id: str) -> dict | None:
        self._check()
        for row_id, doc in self.rows:
            if row_id == doc_id:
                return {ID_FIELD: row_id, **copy.deepcopy(doc)}
        return None

    async def count(self, where: tuple[Predicate, ...] = ()) -> int:
        self._check()
        return len(self._documents(where))

    async def insert_one(self, document: dict) -> InsertResult:
        self._check()
        doc_id = f"{self.name}-{self._next_id}"
        self._next_id += 1
        body = {k: v for k, v in document.items() if k != ID_FIELD}
        self.rows.append((doc_id, copy.deepcopy(body)))
        return InsertResult(inserted_id=doc_id)

    async def update_one(self, doc_id: str, fields: dict) -> UpdateResult:
        self._check()
        for index, (row_id, doc) in enumerate(self.rows):
            if row_id == doc_id:
                merged = {**doc, **copy.deepcopy(fields)}
                merged.pop(ID_FIELD, None)
                self.rows[index] = (row_id, merged)
                return UpdateResult(matched_count=1, modified_count=int(merged != doc))
        return UpdateResult(matched_count=0, modified_count=0)

    async def delete_one(self, doc_id: str) -> DeleteResult:
        self._check()
        before = len(self.rows)
        self.rows = [(row_id, doc) for row_id, doc in self.rows if row_id != doc_id]
        return DeleteResult(deleted_count=before - len(self.rows))

    def get(self, doc_id: str) -> dict | None:
        for row_id, doc in self.rows:
            if row_id == doc_id:
                return doc
        return None


# ============================================================================
# Environment and application fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Development cookie profile and a fixed signing secret."""
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "test-secret-key-for-testing-only")
    monkeypatch.delenv("SESSION_TTL_DAYS", raising=False)
    monkeypatch.delenv("JWT_ALG", raising=False)


@pytest.fixture
def cars_collection():
    return InMemoryCollection("cars")


@pytest.fixture
def bids_collection():
    return InMemoryCollection("bids")


@pytest.fixture
def client(cars_collection, bids_collection):
    app.dependency_overrides[get_car_collection] = lambda: cars_collection
    app.dependency_overrides[get_bid_collection] = lambda: bids_collection

    # No context manager: the lifespan (real Postgres pool) is not started.
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Sign in as `email`; the session cookie is kept on `client`."""

    def _login(email: str):
        response = client.post("/jwt", json={"email": email})
        assert response.status_code == 200
        return response

    return _login


@pytest.fixture
def make_car():
    def _make_car(**overrides) -> dict:
        car = {
            "brand_name": "Toyota",
            "model_name": "Corolla",
            "category": "Sedan",
            "deadline": "2026-11-01T12:00:00Z",
            "price": 12000,
        }
        car.update(overrides)
        return car

    return _make_car
