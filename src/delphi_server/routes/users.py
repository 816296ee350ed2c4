"""Session membership endpoints - join, list and leave."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from delphi_db.repository import SessionRepository

from delphi_server.dependencies import get_repository
from delphi_server.routes.sessions import RouteResponse

router = APIRouter(tags=["users"])


class JoinRequest(BaseModel):
    """Body for POST /sessions/{token}/users."""
    name: str


@router.post("/sessions/{token}/users", status_code=201)
async def join_session(
    token: str,
    body: JoinRequest,
    repo: SessionRepository = Depends(get_repository),
) -> RouteResponse:
    """Add a user to the session.  Raises 409 if the name is taken."""
    await repo.join_session(token, body.name)
    return RouteResponse(route=f"/sessions/{token}/users/{body.name}")


@router.get("/sessions/{token}/users")
async def get_users(
    token: str,
    repo: SessionRepository = Depends(get_repository),
) -> list[str]:
    """List session members in join order."""
    return await repo.get_users(token)


@router.delete("/sessions/{token}/users/{name}", status_code=204)
async def leave_session(
    token: str,
    name: str,
    repo: SessionRepository = Depends(get_repository),
) -> None:
    await repo.leave_session(token, name)
