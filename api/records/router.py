"""
Record API endpoints.

Mounted under the configured route prefix (default `/crudtest`), e.g.:

    curl -i http://localhost:8080/crudtest/api
    curl -i http://localhost:8080/crudtest/api/id=1
    curl -i -X POST -H "Content-Type: application/json" \
        -d '{"firstname": "Dennis", "lastname": "Ritchie"}' http://localhost:8080/crudtest/api
    curl -i -X PUT -H "Content-Type: application/json" \
        -d '{"firstname": "John", "lastname": "Doe"}' http://localhost:8080/crudtest/api/1
    curl -i -X DELETE http://localhost:8080/crudtest/api/1
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from core.config import Settings

from . import schemas, service
from .dependencies import get_repository, get_settings
from .repository import RecordRepository

router = APIRouter()


@router.get("/api", response_model=list[schemas.RecordResponse])
async def list_records(
    repo: RecordRepository = Depends(get_repository),
) -> list[schemas.RecordResponse]:
    return await service.list_records(repo)


@router.get("/api/{whereclause}", response_model=list[schemas.RecordResponse])
async def find_records(
    whereclause: str,
    repo: RecordRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> list[schemas.RecordResponse]:
    """
    Run `SELECT ... WHERE <whereclause>`. The clause is raw SQL: trusted callers only.
    """
    return await service.find_records(
        repo,
        whereclause,
        allow_raw_predicate=settings.raw_where_clause,
    )


@router.post("/api", status_code=201, response_model=schemas.RecordResponse)
async def create_record(
    payload: schemas.RecordWrite,
    repo: RecordRepository = Depends(get_repository),
) -> schemas.RecordResponse:
    return await service.create_record(repo, payload)


@router.put("/api/{id}", response_model=schemas.RecordResponse)
async def update_record(
    id: str,
    request: Request,
    repo: RecordRepository = Depends(get_repository),
) -> schemas.RecordResponse:
    # The body is decoded by the service, after the id lookup.
    return await service.update_record(repo, id, request)


@router.delete("/api/{id}")
async def delete_record(
    id: str,
    repo: RecordRepository = Depends(get_repository),
) -> dict:
    return await service.delete_record(repo, id)
