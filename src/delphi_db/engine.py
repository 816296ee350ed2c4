"""Async SQLAlchemy engine factory.

Unlike a lazily cached module-level engine, every call returns a new engine:
the caller (the server lifespan, a test fixture) owns it and must call
``dispose_engine()`` when done.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from delphi_db.config import get_async_url


def create_engine(url: str | None = None, *, echo: bool = False) -> AsyncEngine:
    """Build an async engine for ``url`` (default: from environment)."""
    return create_async_engine(url or get_async_url(), echo=echo)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Dispose the engine's connection pool (call on app shutdown)."""
    await engine.dispose()
