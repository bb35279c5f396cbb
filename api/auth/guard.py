"""
Ownership checks for authenticated callers.

Comparisons are exact string equality: no case folding, no partial match.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fastapi import HTTPException, status

from .security import SessionIdentity, SessionVerification

logger = logging.getLogger(__name__)


def _field_value(resource: Mapping[str, Any], path: str) -> Any:
    value: Any = resource
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def require_authenticated(verification: SessionVerification) -> SessionIdentity:
    if not verification.ok or verification.identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unauthorized: {verification.error or 'invalid token.'}",
        )
    return verification.identity


def is_owner_or_party(
    identity: SessionIdentity,
    resource: Mapping[str, Any],
    ownership_fields: Iterable[str],
) -> bool:
    return any(_field_value(resource, path) == identity.email for path in ownership_fields)


def require_owner_or_party(
    identity: SessionIdentity,
    resource: Mapping[str, Any],
    ownership_fields: Iterable[str],
) -> None:
    fields = tuple(ownership_fields)
    if not is_owner_or_party(identity, resource, fields):
        logger.warning("Forbidden: %s is not %s of the resource", identity.email, "/".join(fields))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def require_path_owner(identity: SessionIdentity, email: str) -> None:
    """
    Gate for `/<resource>/{email}` routes: callers may only read their own data.
    """
    require_owner_or_party(identity, {"email": email}, ("email",))
