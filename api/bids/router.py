"""
Bid API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth import guard
from auth.security import SessionIdentity
from core.documents import UpdateResult

from . import schemas
from .dependencies import get_bid_ledger
from .service import BidLedger

router = APIRouter()

# Only the seller decides on a bid.
DECIDER_FIELDS = ("seller_email",)


@router.post("/bid")
async def place_bid(
    payload: schemas.BidCreate,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    ledger: BidLedger = Depends(get_bid_ledger),
) -> dict:
    result = await ledger.create(payload, identity)
    return result.as_response()


@router.get("/my-bids/{email}")
async def my_bids(
    email: str,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    ledger: BidLedger = Depends(get_bid_ledger),
) -> list[dict]:
    guard.require_path_owner(identity, email)
    return [bid.as_response() for bid in await ledger.list_for_party(email)]


@router.get("/my-request/{email}")
async def bid_requests(
    email: str,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    ledger: BidLedger = Depends(get_bid_ledger),
) -> list[dict]:
    """
    Bids received on the caller's listings.
    """
    guard.require_path_owner(identity, email)
    return [bid.as_response() for bid in await ledger.list_for_seller(email)]


@router.patch("/bid/{bid_id}")
async def set_bid_status(
    bid_id: str,
    payload: schemas.BidStatusUpdate,
    identity: SessionIdentity = Depends(auth_dependencies.get_current_identity),
    ledger: BidLedger = Depends(get_bid_ledger),
) -> dict:
    bid = await ledger.get(bid_id)
    if bid is None:
        return UpdateResult(matched_count=0, modified_count=0).as_response()
    guard.require_owner_or_party(identity, bid.as_response(), DECIDER_FIELDS)

    result = await ledger.set_status(bid_id, payload.status)
    return result.as_response()
