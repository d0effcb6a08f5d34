"""
Record errors and the handlers that render them as `{"error": "..."}`.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

FIELDS_EMPTY = "fields are empty"
CONTENT_NOT_FOUND = "content not found"
TABLE_READ_FAILED = "not able to find in the table"
INSERT_FAILED = "insert failed"
UPDATE_FAILED = "update failed"
DELETE_FAILED = "delete failed"
STORE_UNAVAILABLE = "store unavailable"


class RecordError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @classmethod
    def not_found(cls) -> RecordError:
        return cls(404, CONTENT_NOT_FOUND)

    @classmethod
    def fields_empty(cls) -> RecordError:
        return cls(422, FIELDS_EMPTY)

    @classmethod
    def store_failed(cls, message: str) -> RecordError:
        return cls(500, message)


async def record_error_handler(_: Request, exc: RecordError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # A body that does not decode into names is treated as a body with empty names.
    return JSONResponse(
        status_code=422,
        content={"error": FIELDS_EMPTY},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordError, record_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
