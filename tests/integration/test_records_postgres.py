import os

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from main import create_app
from records.repository import TABLE_NAME

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not os.environ.get("TEST_DATABASE_URL"), reason="TEST_DATABASE_URL not set"),
]

API = "/crudtest/api"


@pytest.fixture
def pg_client():
    settings = Settings(
        host="127.0.0.1",
        port=8080,
        database_url=os.environ["TEST_DATABASE_URL"],
        pool_min_size=1,
        pool_max_size=2,
        command_timeout=10.0,
        route_prefix="/crudtest",
        raw_where_clause=True,
        log_level="DEBUG",
    )
    app = create_app(settings)
    with TestClient(app) as client:
        repo = app.state.record_repository
        client.portal.call(repo.database.execute, f"TRUNCATE {TABLE_NAME} RESTART IDENTITY")
        yield client


def _create(client, first, last):
    resp = client.post(API, json={"firstname": first, "lastname": last})
    assert resp.status_code == 201
    return resp.json()


def test_create_find_update_delete_roundtrip(pg_client):
    created = _create(pg_client, "Dennis", "Ritchie")
    assert created["id"] > 0

    found = pg_client.get(f"{API}/id={created['id']}")
    assert found.status_code == 200
    assert found.json() == [created]

    updated = pg_client.put(f"{API}/{created['id']}", json={"firstname": "John", "lastname": "Doe"})
    assert updated.status_code == 200
    assert updated.json() == {"id": created["id"], "firstname": "John", "lastname": "Doe"}
    assert pg_client.get(f"{API}/id={created['id']}").json() == [updated.json()]

    deleted = pg_client.delete(f"{API}/{created['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {f"id #{created['id']}": "deleted"}
    assert pg_client.get(f"{API}/id={created['id']}").json() == []
    assert pg_client.delete(f"{API}/{created['id']}").status_code == 404


def test_empty_fields_do_not_write(pg_client):
    resp = pg_client.post(API, json={"firstname": "", "lastname": "Pike"})
    assert resp.status_code == 422
    assert pg_client.get(API).json() == []


def test_update_missing_id_leaves_table_alone(pg_client):
    _create(pg_client, "Rob", "Pike")
    resp = pg_client.put(f"{API}/424242", json={"firstname": "John", "lastname": "Doe"})
    assert resp.status_code == 404
    assert len(pg_client.get(API).json()) == 1


def test_malformed_predicate_is_404(pg_client):
    resp = pg_client.get(f"{API}/id==")
    assert resp.status_code == 404
    assert resp.json() == {"error": "content not found"}


def test_second_statement_in_predicate_is_refused(pg_client):
    _create(pg_client, "Rob", "Pike")
    resp = pg_client.get(f"{API}/id=1; DELETE FROM {TABLE_NAME}")
    assert resp.status_code == 404
    assert len(pg_client.get(API).json()) == 1


def test_list_after_creates_and_deletes(pg_client):
    ids = [_create(pg_client, f"first{i}", f"last{i}")["id"] for i in range(4)]
    pg_client.delete(f"{API}/{ids[0]}")
    pg_client.put(f"{API}/{ids[3]}", json={"firstname": "Jane", "lastname": "Doe"})

    rows = pg_client.get(API).json()
    assert [r["id"] for r in rows] == ids[1:]
    assert rows[-1] == {"id": ids[3], "firstname": "Jane", "lastname": "Doe"}
