"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. `main.py` builds exactly one instance in
the FastAPI lifespan, stores it on `app.state.database`, and closes it on
shutdown. Request handlers reach it through the `get_database` dependency,
never through a module-level global.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request


class DatabaseError(RuntimeError):
    pass


# Errors raised by asyncpg or the socket layer while talking to Postgres.
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 30,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        except _DRIVER_ERRORS as exc:
            raise DatabaseError("Failed to connect to the database.") from exc

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DatabaseError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self.pool.fetchrow(sql, *args)
        except _DRIVER_ERRORS as exc:
            raise DatabaseError("Database query failed.") from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self.pool.fetch(sql, *args)
        except _DRIVER_ERRORS as exc:
            raise DatabaseError("Database query failed.") from exc
        return [_record_to_dict(r) for r in rows]

    async def fetch_value(self, sql: str, *args: Any) -> Any:
        try:
            return await self.pool.fetchval(sql, *args)
        except _DRIVER_ERRORS as exc:
            raise DatabaseError("Database query failed.") from exc

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
        """
        try:
            await self.pool.execute(sql, *args)
        except _DRIVER_ERRORS as exc:
            raise DatabaseError("Database statement failed.") from exc

    async def ping(self) -> bool:
        return await self.fetch_value("SELECT 1") == 1


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseError("Database is not configured for this application.")
    return database
