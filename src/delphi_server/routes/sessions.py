"""Session lifecycle endpoints - create and remove sessions.

A session is addressed only by its 32-character token; whoever holds the
token can act on the session.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from delphi_db.repository import SessionRepository

from delphi_server.dependencies import get_repository

router = APIRouter(tags=["sessions"])


# ------------------------------------------------------------------
# Response models
# ------------------------------------------------------------------

class RouteResponse(BaseModel):
    """Location of a newly created resource, relative to ``/api``."""
    route: str


class SessionCreated(RouteResponse):
    token: str


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
async def create_session(
    repo: SessionRepository = Depends(get_repository),
) -> SessionCreated:
    """Create a new, empty estimation session."""
    token = await repo.create_session()
    return SessionCreated(token=token, route=f"/sessions/{token}")


@router.delete("/sessions/{token}", status_code=204)
async def remove_session(
    token: str,
    repo: SessionRepository = Depends(get_repository),
) -> None:
    """Remove a session with all its users, work packages and estimates."""
    await repo.remove_session(token)
