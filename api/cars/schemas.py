"""
Car listing schemas.

Listings keep any extra seller-supplied fields (price, mileage, ...) next to
the named ones, so every model here allows extra keys.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_deadline(value: datetime) -> datetime:
    """
    UTC, second precision.

    Stored deadlines are compared as text when sorting, so they all need the
    same shape ("2026-11-01T12:00:00Z").
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


class Buyer(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str


class CarCreate(BaseModel):
    model_config = ConfigDict(extra="allow", protected_namespaces=())

    brand_name: str = Field(..., min_length=1, max_length=200)
    model_name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=200)
    deadline: datetime
    buyer: Buyer | None = None
    gallery_images: list[str] | None = None
    # Ignored on input: ownership always comes from the session.
    seller_email: str | None = None

    @field_validator("deadline")
    @classmethod
    def deadline_in_utc(cls, value: datetime) -> datetime:
        return normalize_deadline(value)


class CarPatch(BaseModel):
    """
    Partial update. Only fields present in the request body are applied.
    """

    model_config = ConfigDict(extra="allow", protected_namespaces=())

    brand_name: str | None = Field(default=None, min_length=1, max_length=200)
    model_name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=200)
    deadline: datetime | None = None
    buyer: Buyer | None = None
    gallery_images: list[str] | None = None

    @field_validator("deadline")
    @classmethod
    def deadline_in_utc(cls, value: datetime | None) -> datetime | None:
        return normalize_deadline(value) if value is not None else None

    def supplied_fields(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


class Car(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, protected_namespaces=())

    id: str = Field(..., alias="_id")
    brand_name: str | None = None
    model_name: str | None = None
    category: str | None = None
    deadline: datetime | None = None
    seller_email: str | None = None
    buyer: Buyer | None = None
    gallery_images: list[str] | None = None

    def as_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
