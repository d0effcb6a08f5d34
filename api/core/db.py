"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns one connection pool. The FastAPI lifespan opens it on startup
and closes it on shutdown (see `api/main.py`); request handlers receive it
through dependencies instead of reaching for a module global.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg


# Driver and connection failures, separable from "no row" results.
class StoreError(RuntimeError):
    pass


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


_STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class Database:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float | None = 30.0,
    ) -> None:
        if not (dsn or "").strip():
            raise StoreError("Database DSN is empty.")
        self._dsn = _sanitize_database_url(dsn.strip())
        self._min_size = min(min_size, max_size)
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    async def open(self) -> None:
        if self._pool is not None:
            return None
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        except _STORE_ERRORS as e:
            raise StoreError(f"Could not open database pool: {e}") from e

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreError("DB pool is not open. Call open() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self.pool().fetchrow(sql, *args)
        except _STORE_ERRORS as e:
            raise StoreError(str(e)) from e
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self.pool().fetch(sql, *args)
        except _STORE_ERRORS as e:
            raise StoreError(str(e)) from e
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the status tag, e.g. "DELETE 1".
        """
        try:
            return await self.pool().execute(sql, *args)
        except _STORE_ERRORS as e:
            raise StoreError(str(e)) from e
