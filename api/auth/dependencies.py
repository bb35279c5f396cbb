"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

import logging

from fastapi import Cookie, Depends

from . import guard, security
from .service import SESSION_COOKIE

logger = logging.getLogger(__name__)


async def get_session_verification(
    token: str | None = Cookie(default=None, alias=SESSION_COOKIE),
) -> security.SessionVerification:
    verification = security.verify_session_token(token)
    if not verification.ok:
        logger.info("Rejected session token: %s", verification.error)
    return verification


async def get_current_identity(
    verification: security.SessionVerification = Depends(get_session_verification),
) -> security.SessionIdentity:
    return guard.require_authenticated(verification)
