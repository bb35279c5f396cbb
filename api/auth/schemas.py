"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

Email = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=320)]


class SessionRequest(BaseModel):
    # Clients post their whole profile; only the email is signed.
    model_config = ConfigDict(extra="ignore")

    email: Email


class SuccessResponse(BaseModel):
    success: bool = True
