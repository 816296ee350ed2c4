"""FastAPI dependency injection - provides the session repository.

The repository is built once in the lifespan handler and stashed on
``app.state``; tests can swap it with ``app.dependency_overrides``.
"""

from fastapi import Request

from delphi_db.repository import SessionRepository


def get_repository(request: Request) -> SessionRepository:
    """Return the repository owned by the running application."""
    return request.app.state.repository
