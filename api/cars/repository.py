"""
Car listing persistence (the `cars` document collection).
"""

from __future__ import annotations

from typing import Any

from core.documents import (
    AnyOf,
    DeleteResult,
    DocumentCollection,
    Equals,
    InsertResult,
    Predicate,
    Query,
    UpdateResult,
)

COLLECTION = "cars"

# A listing belongs to its seller, and is visible to the buyer once recorded.
PARTY_FIELDS = ("seller_email", "buyer.email")


class CarRepository:
    def __init__(self, collection: DocumentCollection) -> None:
        self._collection = collection

    async def find(self, query: Query) -> list[dict[str, Any]]:
        return await self._collection.find(query)

    async def count(self, where: tuple[Predicate, ...]) -> int:
        return await self._collection.count(where)

    async def find_all(self) -> list[dict[str, Any]]:
        return await self._collection.find(Query())

    async def get(self, car_id: str) -> dict[str, Any] | None:
        return await self._collection.find_one(car_id)

    async def find_for_party(self, email: str) -> list[dict[str, Any]]:
        party = AnyOf(tuple(Equals(field, email) for field in PARTY_FIELDS))
        return await self._collection.find(Query(where=(party,)))

    async def insert(self, document: dict[str, Any]) -> InsertResult:
        return await self._collection.insert_one(document)

    async def set_fields(self, car_id: str, fields: dict[str, Any]) -> UpdateResult:
        return await self._collection.update_one(car_id, fields)

    async def delete(self, car_id: str) -> DeleteResult:
        return await self._collection.delete_one(car_id)
