"""Database configuration - reads the store location from environment.

Supports two modes:
1. A single ``DATABASE_URL`` env var (takes precedence).
2. A ``DELPHI_DB_PATH`` env var naming the SQLite file (default
   ``delphi.db`` in the working directory).

The returned URL always uses the ``aiosqlite`` driver so it can back the
async SQLAlchemy engine.
"""

import os

_SYNC_PREFIX = "sqlite://"
_ASYNC_PREFIX = "sqlite+aiosqlite://"


def _build_url_from_path() -> str:
    """Construct an SQLite connection string from ``DELPHI_DB_PATH``."""
    path = os.getenv("DELPHI_DB_PATH", "delphi.db")
    return f"{_ASYNC_PREFIX}/{path}"


def get_async_url() -> str:
    """Return an aiosqlite connection URL for the async SQLAlchemy engine."""
    url = os.getenv("DATABASE_URL")
    if url:
        # Ensure the aiosqlite driver prefix is present
        if url.startswith(_SYNC_PREFIX):
            return url.replace(_SYNC_PREFIX, _ASYNC_PREFIX, 1)
        return url
    return _build_url_from_path()
