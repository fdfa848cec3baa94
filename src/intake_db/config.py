"""Database configuration: connection parameters from the environment.

``DATABASE_URL`` wins when set; otherwise the URL is assembled from
``PG_HOST``, ``PG_PORT``, ``PG_USER``, ``PG_PASSWORD`` and ``PG_DATABASE``.

Alembic runs synchronously and gets ``get_sync_url()``; the application
engine uses the asyncpg flavour from ``get_async_url()``.
"""

import os

_ASYNC_PREFIX = "postgresql+asyncpg://"
_SYNC_PREFIX = "postgresql://"


def _url_from_parts() -> str:
    host = os.getenv("PG_HOST", "localhost")
    port = os.getenv("PG_PORT", "5432")
    user = os.getenv("PG_USER", "intake")
    password = os.getenv("PG_PASSWORD", "intake")
    database = os.getenv("PG_DATABASE", "intake")
    return f"{_SYNC_PREFIX}{user}:{password}@{host}:{port}/{database}"


def get_sync_url() -> str:
    """Connection URL for Alembic (libpq driver)."""
    url = os.getenv("DATABASE_URL") or _url_from_parts()
    return url.replace(_ASYNC_PREFIX, _SYNC_PREFIX, 1)


def get_async_url() -> str:
    """Connection URL for the async engine (asyncpg driver)."""
    url = os.getenv("DATABASE_URL") or _url_from_parts()
    if url.startswith(_SYNC_PREFIX):
        return url.replace(_SYNC_PREFIX, _ASYNC_PREFIX, 1)
    return url


def pool_settings() -> dict[str, int]:
    """Pool sizing, overridable with ``PG_POOL_SIZE`` / ``PG_MAX_OVERFLOW``."""
    return {
        "pool_size": int(os.getenv("PG_POOL_SIZE", "5")),
        "max_overflow": int(os.getenv("PG_MAX_OVERFLOW", "10")),
    }
