"""
Catalog wiring: store handle -> collection -> repository -> service.
"""

from __future__ import annotations

from fastapi import Depends

from core.db import Database, get_database
from core.documents import DocumentCollection

from .repository import COLLECTION, CarRepository
from .service import CarCatalog


def get_car_collection(database: Database = Depends(get_database)) -> DocumentCollection:
    return DocumentCollection(database, COLLECTION)


def get_car_catalog(collection: DocumentCollection = Depends(get_car_collection)) -> CarCatalog:
    return CarCatalog(CarRepository(collection))
