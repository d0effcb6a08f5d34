"""
Record dependencies for FastAPI routes.

The repository and settings are built once in the app lifespan and stored on
`app.state`; tests swap them out through `app.dependency_overrides`.
"""

from __future__ import annotations

from fastapi import Request

from core.config import Settings

from . import errors
from .errors import RecordError
from .repository import RecordRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> RecordRepository:
    repo = getattr(request.app.state, "record_repository", None)
    if repo is None:
        # Lifespan not run (or already shut down): no pool to serve from.
        raise RecordError.store_failed(errors.STORE_UNAVAILABLE)
    return repo
