"""
Record business logic.

Status-code policy lives here:
- empty name on create/update -> 422, nothing written
- unknown id, or any failed read -> 404 (logged differently for the two cases)
- failed write after validation -> 500, the process keeps serving
"""

from __future__ import annotations

import logging
import re

from fastapi import Request

from core.db import StoreError

from . import errors, schemas
from .errors import RecordError
from .repository import RecordRepository

logger = logging.getLogger(__name__)

# BIGSERIAL upper bound.
MAX_RECORD_ID = 2**63 - 1

_DIGITS = re.compile(r"[0-9]+")
_ID_PREDICATE = re.compile(r"\s*id\s*=\s*([0-9]+)\s*")


def _to_response(row: dict) -> schemas.RecordResponse:
    return schemas.RecordResponse(
        id=int(row["id"]),
        firstname=str(row["first_name"]),
        lastname=str(row["last_name"]),
    )


def parse_record_id(raw: str) -> int | None:
    """
    Return the id in a path segment, or None when it cannot name a row.
    """
    raw = (raw or "").strip()
    if not _DIGITS.fullmatch(raw):
        return None
    value = int(raw)
    if value > MAX_RECORD_ID:
        return None
    return value


def _names_present(payload: schemas.RecordWrite) -> bool:
    return bool(payload.first_name) and bool(payload.last_name)


async def _require_existing(repo: RecordRepository, raw_id: str) -> int:
    record_id = parse_record_id(raw_id)
    if record_id is None:
        logger.info("record_not_found id=%r reason=invalid_id", raw_id)
        raise RecordError.not_found()

    try:
        row = await repo.get_by_id(record_id)
    except StoreError:
        logger.warning("record_query_failed id=%s", record_id, exc_info=True)
        raise RecordError.not_found() from None

    if row is None:
        logger.info("record_not_found id=%s", record_id)
        raise RecordError.not_found()
    return record_id


async def read_record_body(request: Request) -> schemas.RecordWrite:
    """
    Decode a create/update body. Anything that is not a JSON object of names
    counts as empty fields.
    """
    try:
        return schemas.RecordWrite.model_validate(await request.json())
    except ValueError:
        # JSONDecodeError, UnicodeDecodeError and pydantic ValidationError.
        raise RecordError.fields_empty() from None


async def list_records(repo: RecordRepository) -> list[schemas.RecordResponse]:
    try:
        rows = await repo.list_records()
    except StoreError:
        logger.warning("record_list_failed", exc_info=True)
        raise RecordError(404, errors.TABLE_READ_FAILED) from None
    return [_to_response(r) for r in rows]


async def find_records(
    repo: RecordRepository,
    predicate: str,
    *,
    allow_raw_predicate: bool = True,
) -> list[schemas.RecordResponse]:
    """
    Rows matching a caller-supplied WHERE predicate (e.g. `id=1`).

    With `allow_raw_predicate` off, only `id=<integer>` is accepted and it is
    run as a parameterized lookup.
    """
    logger.debug("record_find predicate=%r", predicate)

    if not allow_raw_predicate:
        match = _ID_PREDICATE.fullmatch(predicate or "")
        record_id = parse_record_id(match.group(1)) if match else None
        if record_id is None:
            logger.info("record_find_rejected predicate=%r", predicate)
            raise RecordError.not_found()
        try:
            row = await repo.get_by_id(record_id)
        except StoreError:
            logger.warning("record_query_failed id=%s", record_id, exc_info=True)
            raise RecordError.not_found() from None
        return [_to_response(row)] if row is not None else []

    if not (predicate or "").strip():
        logger.info("record_find_rejected predicate=%r", predicate)
        raise RecordError.not_found()

    try:
        rows = await repo.find_where(predicate)
    except StoreError:
        logger.warning("record_query_failed predicate=%r", predicate, exc_info=True)
        raise RecordError.not_found() from None
    return [_to_response(r) for r in rows]


async def create_record(repo: RecordRepository, payload: schemas.RecordWrite) -> schemas.RecordResponse:
    if not _names_present(payload):
        raise RecordError.fields_empty()

    try:
        row = await repo.insert(first_name=payload.first_name, last_name=payload.last_name)
    except StoreError:
        logger.exception("record_insert_failed")
        raise RecordError.store_failed(errors.INSERT_FAILED) from None

    logger.info("record_created id=%s", row["id"])
    return _to_response(row)


async def update_record(
    repo: RecordRepository,
    raw_id: str,
    request: Request,
) -> schemas.RecordResponse:
    record_id = await _require_existing(repo, raw_id)
    payload = await read_record_body(request)

    if not _names_present(payload):
        raise RecordError.fields_empty()

    try:
        row = await repo.update(record_id, first_name=payload.first_name, last_name=payload.last_name)
    except StoreError:
        logger.exception("record_update_failed id=%s", record_id)
        raise RecordError.store_failed(errors.UPDATE_FAILED) from None

    if row is None:
        # Deleted between the lookup and the write.
        logger.info("record_not_found id=%s reason=gone_before_update", record_id)
        raise RecordError.not_found()

    logger.info("record_updated id=%s", record_id)
    return _to_response(row)


async def delete_record(repo: RecordRepository, raw_id: str) -> dict[str, str]:
    record_id = await _require_existing(repo, raw_id)

    try:
        deleted = await repo.delete(record_id)
    except StoreError:
        logger.exception("record_delete_failed id=%s", record_id)
        raise RecordError.store_failed(errors.DELETE_FAILED) from None

    if not deleted:
        logger.info("record_not_found id=%s reason=gone_before_delete", record_id)
        raise RecordError.not_found()

    logger.info("record_deleted id=%s", record_id)
    return {f"id #{raw_id}": "deleted"}
