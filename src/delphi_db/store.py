"""Document store handle - the only way the repository talks to storage.

``DocumentStore`` is the minimal capability the repository needs: run a
statement (``exec``) and run a query returning documents (``query``).
Statements are SQLAlchemy Core executables, so any engine SQLAlchemy can
drive satisfies the contract.  Tests substitute an ``AsyncMock``.

``SQLAlchemyDocumentStore`` is the production handle over an embedded
SQLite database (``sqlite+aiosqlite``).  It does no error translation:
``SQLAlchemyError`` propagates and the repository wraps it.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.base import Executable


class DocumentStore(Protocol):
    """Capability interface for the session repository's storage."""

    async def exec(self, statement: Executable) -> None:
        """Run a DDL / insert / update / delete statement."""
        ...

    async def query(self, statement: Executable) -> list[dict[str, Any]]:
        """Run a select and return each row as a plain dict."""
        ...


class SQLAlchemyDocumentStore:
    """``DocumentStore`` backed by an async SQLAlchemy engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def exec(self, statement: Executable) -> None:
        # One transaction per statement; committed on exit, rolled back on error
        async with self.engine.begin() as conn:
            await conn.execute(statement)

    async def query(self, statement: Executable) -> list[dict[str, Any]]:
        async with self.engine.connect() as conn:
            result = await conn.execute(statement)
            return [dict(row) for row in result.mappings()]
