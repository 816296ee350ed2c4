"""Server configuration - reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field

from delphi_db.config import get_async_url


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 5000

    # CORS - comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    # Embedded store location (None → delphi_db.config default)
    database_url: str | None = None

    # Optional static file mount, e.g. a bundled web client.
    # Both must be set for the mount to happen.
    static_prefix: str | None = None
    static_path: str | None = None


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` / ``DATABASE_URL`` environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "5000")),
        cors_origins=origins,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        database_url=get_async_url(),
        static_prefix=os.getenv("SERVER_STATIC_PREFIX") or None,
        static_path=os.getenv("SERVER_STATIC_PATH") or None,
    )
