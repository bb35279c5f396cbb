"""
Environment-driven settings.

Every value is read on call so tests can monkeypatch the environment.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:5174",
    "https://carbid-server.vercel.app",
)


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def app_env() -> str:
    return _env_str("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def access_token_secret() -> str:
    # In production, set ACCESS_TOKEN_SECRET in environment.
    return _env_str("ACCESS_TOKEN_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return _env_str("JWT_ALG", "HS256")


def session_ttl_days() -> int:
    return max(1, _env_int("SESSION_TTL_DAYS", 3))


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def port() -> int:
    return _env_int("PORT", 3000)
