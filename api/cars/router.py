"""
Car catalog API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies
from auth import guard
from auth.security import SessionIdentity
from core.documents import DeleteResult, UpdateResult

from . import query, schemas
from .dependencies import get_car_catalog
from .service import CarCatalog

router = APIRouter()

OWNER_FIELDS = ("seller_email",)


@router.get("/all-cars")
async def list_cars(
    brand: str | None = Query(default=None, alias="filter", max_length=200),
    search: str | None = Query(default=None, max_length=200),
    sort: str | None = Query(default=None),
    # Raw strings: malformed numbers fall back to defaults instead of a 422.
    page: str | None = Query(default=None),
    size: str | None = Query(default=None),
    catalog: CarCatalog = Depends(get_car_catalog),
) -> list[dict]:
    listing = query.compose_listing(brand=brand, search=search, sort=sort, page=page, size=size)
    cars = await catalog.list(listing)
    return [car.as_response() for car in cars]


@router.get("/cars-count")
async def count_cars(
    brand: str | None = Query(default=None, max_length=200),
    search: str | None = Query(default=None, max_length=200),
    catalog: CarCatalog = Depends(get_car_catalog),
) -> dict:
    count = await catalog.count(query.compose_count(brand=brand, search=search))
    return {"count": count}


@router.get("/cars")
async def all_cars(catalog: CarCatalog = Depends(get_car_catalog)) -> list[dict]:
    return [car.as_response() for car in await catalog.get_all()]


@router.get("/car/{car_id}")
async def get_car(
    car_id: str,
    _: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    catalog: CarCatalog = Depends(get_car_catalog),
) -> dict | None:
    car = await catalog.get_by_id(car_id)
    return car.as_response() if car is not None else None


@router.post("/car")
async def create_car(
    payload: schemas.CarCreate,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    catalog: CarCatalog = Depends(get_car_catalog),
) -> dict:
    result = await catalog.create(payload, identity)
    return result.as_response()


@router.get("/cars/{email}")
async def cars_for_party(
    email: str,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    catalog: CarCatalog = Depends(get_car_catalog),
) -> list[dict]:
    """
    Listings the caller sells or has bought.
    """
    guard.require_path_owner(identity, email)
    return [car.as_response() for car in await catalog.list_for_party(email)]


@router.put("/car/{car_id}")
async def update_car(
    car_id: str,
    patch: schemas.CarPatch,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    catalog: CarCatalog = Depends(get_car_catalog),
) -> dict:
    car = await catalog.get_by_id(car_id)
    if car is None:
        return UpdateResult(matched_count=0, modified_count=0).as_response()
    guard.require_owner_or_party(identity, car.as_response(), OWNER_FIELDS)

    result = await catalog.update(car_id, patch)
    return result.as_response()


@router.delete("/car/{car_id}")
async def delete_car(
    car_id: str,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    catalog: CarCatalog = Depends(get_car_catalog),
) -> dict:
    car = await catalog.get_by_id(car_id)
    if car is None:
        return DeleteResult(deleted_count=0).as_response()
    guard.require_owner_or_party(identity, car.as_response(), OWNER_FIELDS)

    result = await catalog.delete(car_id)
    return result.as_response()
