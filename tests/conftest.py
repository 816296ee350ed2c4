"""Shared fixtures - real SQLite stores under tmp_path and store doubles.

Invariants:
  - Every test that needs a store gets a fresh database file
  - ``mock_store`` is an AsyncMock: tests assert on its awaited calls
  - ``client`` overrides ``get_repository`` so no lifespan has to run
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from delphi_db.engine import create_engine, dispose_engine
from delphi_db.repository import SessionRepository
from delphi_db.store import SQLAlchemyDocumentStore
from delphi_server.app import create_app
from delphi_server.config import ServerSettings
from delphi_server.dependencies import get_repository


@pytest.fixture
async def engine(tmp_path):
    """Async engine on a throwaway SQLite file."""
    eng = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'delphi.db'}")
    yield eng
    await dispose_engine(eng)


@pytest.fixture
async def repo(engine):
    """SessionRepository with its table created."""
    repository = SessionRepository(SQLAlchemyDocumentStore(engine))
    await repository.create_tables()
    return repository


@pytest.fixture
async def token(repo):
    """Token of a freshly created, empty session."""
    return await repo.create_session()


@pytest.fixture
def mock_store():
    """AsyncMock standing in for a DocumentStore."""
    return AsyncMock()


@pytest.fixture
async def client(engine, repo):
    """HTTP client against the app, wired to the test repository."""
    app = create_app(ServerSettings())
    app.dependency_overrides[get_repository] = lambda: repo
    app.state.engine = engine

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
