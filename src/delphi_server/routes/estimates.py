"""Per-user estimate endpoints plus the aggregations built on them.

Aggregations read the session's estimates once and compute in memory:

  - GET .../estimates/{id}                 - averaged Delphi estimate, with a
                                             warning when members are missing
  - GET .../estimates/{id}/users/distance  - users with highest/lowest effort
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from delphi_db.repository import SessionRepository
from delphi_estimation.models import Estimate, MaxDistance
from delphi_estimation.ranking import (
    average_estimate,
    extract_estimates_for_work_package,
    missing_users,
    users_with_max_distance,
)

from delphi_server.dependencies import get_repository
from delphi_server.routes.sessions import RouteResponse

router = APIRouter(tags=["estimates"])

MISSING_USERS_HINT = "not all users did provide estimates"


class AverageEstimateResponse(BaseModel):
    """Averaged estimate of one work package across all submitted estimates."""
    work_package_id: str
    effort: float
    standard_deviation: float
    # Members who have not estimated this work package yet
    missing_users: list[str]
    hint: str | None = None


@router.post("/sessions/{token}/estimates", status_code=201)
async def add_estimate(
    token: str,
    body: Estimate,
    repo: SessionRepository = Depends(get_repository),
) -> RouteResponse:
    """Submit one user's three-point estimate for one work package.

    Raises 404 if the user or work package is not part of the session and
    409 if the user already estimated this work package.
    """
    await repo.add_estimate(token, body)
    return RouteResponse(
        route=f"/sessions/{token}/estimates/{body.user_name}/{body.work_package_id}"
    )


@router.get("/sessions/{token}/estimates")
async def get_estimates(
    token: str,
    repo: SessionRepository = Depends(get_repository),
) -> list[Estimate]:
    return await repo.get_estimates(token)


@router.delete("/sessions/{token}/estimates/{user_name}/{work_package_id}", status_code=204)
async def remove_estimate(
    token: str,
    user_name: str,
    work_package_id: str,
    repo: SessionRepository = Depends(get_repository),
) -> None:
    await repo.remove_estimate(token, work_package_id, user_name)


@router.get("/sessions/{token}/estimates/{work_package_id}")
async def get_average_estimate(
    token: str,
    work_package_id: str,
    repo: SessionRepository = Depends(get_repository),
) -> AverageEstimateResponse:
    """Average all estimates for a work package.

    Raises 422 if nobody estimated the work package yet.
    """
    estimates = extract_estimates_for_work_package(
        await repo.get_estimates(token), work_package_id
    )
    users = await repo.get_users(token)
    average = average_estimate(estimates, work_package_id)
    missing = missing_users(users, estimates)

    return AverageEstimateResponse(
        work_package_id=work_package_id,
        effort=average.effort,
        standard_deviation=average.standard_deviation,
        missing_users=missing,
        hint=MISSING_USERS_HINT if missing else None,
    )


@router.get("/sessions/{token}/estimates/{work_package_id}/users/distance")
async def get_users_with_max_distance(
    token: str,
    work_package_id: str,
    repo: SessionRepository = Depends(get_repository),
) -> MaxDistance:
    """Return the users whose efforts for the work package diverge most."""
    return users_with_max_distance(await repo.get_estimates(token), work_package_id)
