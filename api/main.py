from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from core.config import Settings, load_settings
from core.db import Database
from core.logging_config import setup_logging
from records import router as records_router
from records.errors import install_error_handlers
from records.repository import RecordRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # One pool per process, shared by all request handlers.
    database = Database(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        command_timeout=settings.command_timeout,
    )
    await database.open()
    try:
        repo = RecordRepository(database)
        await repo.ensure_table()
        app.state.record_repository = repo
        logger.info("record_store_ready pool_max_size=%s", settings.pool_max_size)
        yield
    finally:
        app.state.record_repository = None
        await database.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="crudtest-api", lifespan=lifespan)
    app.state.settings = settings
    app.state.record_repository = None

    install_error_handlers(app)
    app.include_router(records_router.router, prefix=settings.route_prefix, tags=["records"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
