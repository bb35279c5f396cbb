"""
Car catalog business logic.

Scope:
- paginated/filtered listing and matching counts
- ownership stamping on create
- partial updates that never clear the gallery implicitly

Ownership checks for update/delete happen in the router, before these calls.
"""

from __future__ import annotations

import logging

from auth.security import SessionIdentity
from core.documents import DeleteResult, InsertResult, UpdateResult

from . import schemas
from .query import ListingQuery
from .repository import CarRepository

logger = logging.getLogger(__name__)

# Never writable through a patch: ownership is fixed at creation.
_PROTECTED_FIELDS = ("seller_email",)


def _to_cars(rows: list[dict]) -> list[schemas.Car]:
    return [schemas.Car.model_validate(row) for row in rows]


class CarCatalog:
    def __init__(self, repository: CarRepository) -> None:
        self._repository = repository

    async def list(self, query: ListingQuery) -> list[schemas.Car]:
        return _to_cars(await self._repository.find(query.to_query()))

    async def count(self, query: ListingQuery) -> int:
        return await self._repository.count(query.predicates())

    async def get_all(self) -> list[schemas.Car]:
        return _to_cars(await self._repository.find_all())

    async def get_by_id(self, car_id: str) -> schemas.Car | None:
        row = await self._repository.get(car_id)
        return schemas.Car.model_validate(row) if row is not None else None

    async def list_for_party(self, email: str) -> list[schemas.Car]:
        return _to_cars(await self._repository.find_for_party(email))

    async def create(self, data: schemas.CarCreate, identity: SessionIdentity) -> InsertResult:
        document = data.model_dump(mode="json", exclude_none=True)
        document["seller_email"] = identity.email
        result = await self._repository.insert(document)
        logger.info("Car %s listed by %s", result.inserted_id, identity.email)
        return result

    async def update(self, car_id: str, patch: schemas.CarPatch) -> UpdateResult:
        fields = patch.supplied_fields()
        if fields.get("gallery_images") is None:
            fields.pop("gallery_images", None)
        for name in _PROTECTED_FIELDS:
            fields.pop(name, None)
        if not fields:
            existing = await self._repository.get(car_id)
            return UpdateResult(matched_count=int(existing is not None), modified_count=0)

        result = await self._repository.set_fields(car_id, fields)
        logger.info("Car %s updated (%s)", car_id, ", ".join(sorted(fields)))
        return result

    async def delete(self, car_id: str) -> DeleteResult:
        result = await self._repository.delete(car_id)
        logger.info("Car %s deleted (%d)", car_id, result.deleted_count)
        return result
