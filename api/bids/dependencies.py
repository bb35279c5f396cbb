"""
Bid ledger wiring: store handle -> collection -> repository -> service.
"""

from __future__ import annotations

from fastapi import Depends

from cars.dependencies import get_car_collection
from cars.repository import CarRepository
from core.db import Database, get_database
from core.documents import DocumentCollection

from .repository import COLLECTION, BidRepository
from .service import BidLedger


def get_bid_collection(database: Database = Depends(get_database)) -> DocumentCollection:
    return DocumentCollection(database, COLLECTION)


def get_bid_ledger(
    collection: DocumentCollection = Depends(get_bid_collection),
    car_collection: DocumentCollection = Depends(get_car_collection),
) -> BidLedger:
    # Bids take their seller from the car, so the ledger reads the catalog too.
    return BidLedger(BidRepository(collection), CarRepository(car_collection))
