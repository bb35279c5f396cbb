"""
Session issuing and cookie transport.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Response, status

from core import config

from . import schemas, security

SESSION_COOKIE = "token"

logger = logging.getLogger(__name__)


def _cookie_policy() -> dict:
    production = config.is_production()
    return {
        "httponly": True,
        "secure": production,
        "samesite": "none" if production else "lax",
    }


def issue_session(payload: schemas.SessionRequest, response: Response) -> schemas.SuccessResponse:
    try:
        token = security.issue_session_token(payload.email)
    except security.AuthSecurityError as exc:
        logger.error("Session token signing failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create token.",
        ) from exc

    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=security.session_ttl_seconds(),
        **_cookie_policy(),
    )
    logger.info("Issued session for %s", payload.email)
    return schemas.SuccessResponse()


def end_session(response: Response) -> schemas.SuccessResponse:
    response.delete_cookie(SESSION_COOKIE, **_cookie_policy())
    return schemas.SuccessResponse()
