"""
Bid persistence (the `bids` document collection).
"""

from __future__ import annotations

from typing import Any

from core.documents import AnyOf, DocumentCollection, Equals, InsertResult, Query, UpdateResult

COLLECTION = "bids"

# `email` is the legacy spelling of `bidder_email`; old documents only carry it.
BIDDER_FIELDS = ("bidder_email", "email")


class BidRepository:
    def __init__(self, collection: DocumentCollection) -> None:
        self._collection = collection

    async def insert(self, document: dict[str, Any]) -> InsertResult:
        return await self._collection.insert_one(document)

    async def get(self, bid_id: str) -> dict[str, Any] | None:
        return await self._collection.find_one(bid_id)

    async def find_for_bidder(self, email: str) -> list[dict[str, Any]]:
        bidder = AnyOf(tuple(Equals(field, email) for field in BIDDER_FIELDS))
        return await self._collection.find(Query(where=(bidder,)))

    async def find_for_seller(self, email: str) -> list[dict[str, Any]]:
        return await self._collection.find(Query(where=(Equals("seller_email", email),)))

    async def set_status(self, bid_id: str, status: str) -> UpdateResult:
        return await self._collection.update_one(bid_id, {"status": status})
