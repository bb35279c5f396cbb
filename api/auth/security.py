"""
Session token helpers.

Tokens are HS256 JWTs carrying the caller's email plus issue/expiry times.
They are stateless: logging out only clears the client cookie, so a copied
token stays valid until it expires.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import jwt

from core import config

TOKEN_TYPE = "session"


class AuthSecurityError(RuntimeError):
    pass


@dataclass(frozen=True)
class SessionIdentity:
    email: str
    issued_at: int
    expires_at: int


@dataclass(frozen=True)
class SessionVerification:
    identity: SessionIdentity | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.identity is not None


def now_epoch_s() -> int:
    return int(time.time())


def session_ttl_seconds() -> int:
    return config.session_ttl_days() * 24 * 60 * 60


def issue_session_token(email: str, *, now: int | None = None) -> str:
    email = (email or "").strip()
    if not email:
        raise AuthSecurityError("Email is required to issue a session token.")

    issued_at = now_epoch_s() if now is None else now
    payload = {
        "email": email,
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + session_ttl_seconds(),
    }
    try:
        return jwt.encode(payload, config.access_token_secret(), algorithm=config.jwt_algorithm())
    except (jwt.PyJWTError, TypeError, ValueError) as exc:
        raise AuthSecurityError("Failed to sign session token.") from exc


def decode_session_token(token: str | None) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("No token found.")

    try:
        payload = jwt.decode(
            raw,
            config.access_token_secret(),
            algorithms=[config.jwt_algorithm()],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid token.") from exc

    if str(payload.get("type") or "").strip().lower() != TOKEN_TYPE:
        raise AuthSecurityError("Token is not a session token.")
    if not str(payload.get("email") or "").strip():
        raise AuthSecurityError("Token carries no email.")
    return payload


def verify_session_token(token: str | None) -> SessionVerification:
    try:
        payload = decode_session_token(token)
    except AuthSecurityError as exc:
        return SessionVerification(error=str(exc))

    return SessionVerification(
        identity=SessionIdentity(
            email=str(payload["email"]).strip(),
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
        )
    )
