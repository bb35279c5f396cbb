"""
Bid schemas.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BidStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class BidCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    amount: float = Field(..., gt=0)
    car_id: str | None = None
    bidder_email: str | None = None
    # Ignored on input: the seller is taken from the car being bid on.
    seller_email: str | None = None
    # Deprecated alias of bidder_email, still sent by older clients.
    email: str | None = None


class BidStatusUpdate(BaseModel):
    status: BidStatus


class Bid(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id")
    bidder_email: str | None = None
    seller_email: str | None = None
    status: BidStatus = BidStatus.pending
    amount: float | None = None
    car_id: str | None = None
    email: str | None = None

    def as_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
