"""
Bid ledger business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from auth.security import SessionIdentity
from cars.repository import CarRepository
from core.documents import InsertResult, UpdateResult

from . import schemas
from .repository import BidRepository

logger = logging.getLogger(__name__)


def _to_bids(rows: list[dict]) -> list[schemas.Bid]:
    return [schemas.Bid.model_validate(row) for row in rows]


class BidLedger:
    def __init__(self, repository: BidRepository, cars: CarRepository) -> None:
        self._repository = repository
        self._cars = cars

    async def _seller_of(self, car_id: str | None) -> str | None:
        if car_id is None:
            return None
        car = await self._cars.get(car_id)
        if car is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Car not found.")
        return car.get("seller_email")

    async def create(self, data: schemas.BidCreate, identity: SessionIdentity) -> InsertResult:
        document = data.model_dump(mode="json", exclude_none=True)
        document.pop("seller_email", None)
        seller_email = await self._seller_of(data.car_id)
        if seller_email:
            document["seller_email"] = seller_email
        # bidder_email is canonical; fall back to the legacy field, then the session.
        document["bidder_email"] = data.bidder_email or data.email or identity.email
        document["status"] = schemas.BidStatus.pending.value

        result = await self._repository.insert(document)
        logger.info("Bid %s placed by %s", result.inserted_id, document["bidder_email"])
        return result

    async def get(self, bid_id: str) -> schemas.Bid | None:
        row = await self._repository.get(bid_id)
        return schemas.Bid.model_validate(row) if row is not None else None

    async def list_for_party(self, email: str) -> list[schemas.Bid]:
        return _to_bids(await self._repository.find_for_bidder(email))

    async def list_for_seller(self, email: str) -> list[schemas.Bid]:
        return _to_bids(await self._repository.find_for_seller(email))

    async def set_status(self, bid_id: str, status: schemas.BidStatus) -> UpdateResult:
        """
        Record the seller's decision. Transitions are not checked: last write wins.
        """
        result = await self._repository.set_status(bid_id, status.value)
        logger.info("Bid %s status set to %s", bid_id, status.value)
        return result
