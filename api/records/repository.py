"""
Record persistence (raw SQL).

Every statement is parameterized except `find_where`, whose predicate is
caller-supplied SQL by contract. Only trusted callers should reach it.
"""

from __future__ import annotations

from core.db import Database, StoreError

TABLE_NAME = "crudtest"

_COLUMNS = "id, first_name, last_name"


class RecordRepository:
    def __init__(self, database: Database) -> None:
        self.database = database

    async def ensure_table(self) -> None:
        await self.database.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                id BIGSERIAL PRIMARY KEY,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL
            )
            """
        )

    async def list_records(self) -> list[dict]:
        return await self.database.fetch_all(
            f"""
            SELECT {_COLUMNS}
            FROM {TABLE_NAME}
            ORDER BY id
            """
        )

    async def find_where(self, predicate: str) -> list[dict]:
        # asyncpg prepares the statement, so a predicate cannot smuggle in a second statement.
        return await self.database.fetch_all(
            f"SELECT {_COLUMNS} FROM {TABLE_NAME} WHERE " + predicate
        )

    async def get_by_id(self, record_id: int) -> dict | None:
        return await self.database.fetch_one(
            f"""
            SELECT {_COLUMNS}
            FROM {TABLE_NAME}
            WHERE id = $1
            """,
            record_id,
        )

    async def insert(self, *, first_name: str, last_name: str) -> dict:
        row = await self.database.fetch_one(
            f"""
            INSERT INTO {TABLE_NAME} (first_name, last_name)
            VALUES ($1, $2)
            RETURNING {_COLUMNS}
            """,
            first_name,
            last_name,
        )
        if row is None:
            raise StoreError("Insert returned no id.")
        return row

    async def update(self, record_id: int, *, first_name: str, last_name: str) -> dict | None:
        return await self.database.fetch_one(
            f"""
            UPDATE {TABLE_NAME}
            SET first_name = $2,
                last_name = $3
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            record_id,
            first_name,
            last_name,
        )

    async def delete(self, record_id: int) -> bool:
        row = await self.database.fetch_one(
            f"""
            DELETE FROM {TABLE_NAME}
            WHERE id = $1
            RETURNING id
            """,
            record_id,
        )
        return row is not None
