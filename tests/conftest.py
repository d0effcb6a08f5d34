from __future__ import annotations

import re

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.db import StoreError
from main import create_app
from records.dependencies import get_repository

_PREDICATE = re.compile(r"\s*(id|first_name|last_name)\s*=\s*(?:([0-9]+)|'([^']*)')\s*")


class InMemoryRecordRepository:
    """
    Stand-in for RecordRepository keeping rows in a dict.

    `find_where` understands `<column>=<int>` and `<column>='<text>'`; anything
    else fails the way a malformed SQL predicate would. Operation names added
    to `failing` raise StoreError.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self.failing: set[str] = set()
        self._next_id = 1

    def _check(self, op: str) -> None:
        if op in self.failing:
            raise StoreError(f"{op} failed")

    async def ensure_table(self) -> None:
        self._check("ensure_table")

    async def list_records(self) -> list[dict]:
        self._check("list_records")
        return [dict(self.rows[k]) for k in sorted(self.rows)]

    async def find_where(self, predicate: str) -> list[dict]:
        self._check("find_where")
        match = _PREDICATE.fullmatch(predicate)
        if match is None:
            raise StoreError(f"syntax error near {predicate!r}")
        column, number, text = match.groups()
        value = int(number) if number is not None else text
        if column == "id" and not isinstance(value, int):
            raise StoreError("invalid input syntax for type bigint")
        return [dict(r) for _, r in sorted(self.rows.items()) if r[column] == value]

    async def get_by_id(self, record_id: int) -> dict | None:
        self._check("get_by_id")
        row = self.rows.get(record_id)
        return dict(row) if row is not None else None

    async def insert(self, *, first_name: str, last_name: str) -> dict:
        self._check("insert")
        row = {"id": self._next_id, "first_name": first_name, "last_name": last_name}
        self.rows[self._next_id] = row
        self._next_id += 1
        return dict(row)

    async def update(self, record_id: int, *, first_name: str, last_name: str) -> dict | None:
        self._check("update")
        if record_id not in self.rows:
            return None
        row = {"id": record_id, "first_name": first_name, "last_name": last_name}
        self.rows[record_id] = row
        return dict(row)

    async def delete(self, record_id: int) -> bool:
        self._check("delete")
        return self.rows.pop(record_id, None) is not None


def make_settings(**overrides) -> Settings:
    values = dict(
        host="127.0.0.1",
        port=8080,
        database_url="postgresql://postgres@localhost:5432/cloudcake",
        pool_min_size=1,
        pool_max_size=5,
        command_timeout=30.0,
        route_prefix="/crudtest",
        raw_where_clause=True,
        log_level="INFO",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def repo() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(repo, settings):
    app = create_app(settings)
    app.dependency_overrides[get_repository] = lambda: repo
    # No context manager: the lifespan (which opens a real pool) is skipped.
    client = TestClient(app)
    client.repo = repo  # type: ignore[attr-defined]
    yield client
    client.close()


@pytest.fixture
def make_client(repo):
    """
    Build a client for an app with non-default settings, sharing `repo`.
    """
    clients = []

    def _make(**overrides) -> TestClient:
        app = create_app(make_settings(**overrides))
        app.dependency_overrides[get_repository] = lambda: repo
        c = TestClient(app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()
