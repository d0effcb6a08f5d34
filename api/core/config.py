"""
Environment-driven settings.

Everything is read from environment variables once, at app creation time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import quote

DEFAULT_PORT = 8080
DEFAULT_ROUTE_PREFIX = "/crudtest"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _normalize_prefix(prefix: str) -> str:
    prefix = "/" + prefix.strip().strip("/")
    return "" if prefix == "/" else prefix


def database_url() -> str:
    """
    DSN for the record store.

    `DATABASE_URL` wins; otherwise the DSN is assembled from `DB_*` parts.
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if url:
        return url

    host = _env_str("DB_HOST", "localhost")
    port = _env_int("DB_PORT", 5432)
    user = quote(_env_str("DB_USER", "postgres"), safe="")
    password = quote(os.environ.get("DB_PASSWORD", ""), safe="")
    name = _env_str("DB_NAME", "cloudcake")
    auth = f"{user}:{password}" if password else user
    return f"postgresql://{auth}@{host}:{port}/{name}"


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    database_url: str
    pool_min_size: int
    pool_max_size: int
    command_timeout: float
    route_prefix: str
    raw_where_clause: bool
    log_level: str


def load_settings() -> Settings:
    return Settings(
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", DEFAULT_PORT),
        database_url=database_url(),
        pool_min_size=max(_env_int("DB_POOL_MIN_SIZE", 1), 0),
        pool_max_size=max(_env_int("DB_POOL_MAX_SIZE", 5), 1),
        command_timeout=_env_float("DB_COMMAND_TIMEOUT", 30.0),
        route_prefix=_normalize_prefix(_env_str("ROUTE_PREFIX", DEFAULT_ROUTE_PREFIX)),
        raw_where_clause=_env_bool("RAW_WHERE_CLAUSE", True),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )
