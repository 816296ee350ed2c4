"""Work package endpoints - add, list, remove, and set the agreed estimate."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from delphi_db.repository import SessionRepository
from delphi_estimation.models import WorkPackage

from delphi_server.dependencies import get_repository
from delphi_server.routes.sessions import RouteResponse

router = APIRouter(tags=["work packages"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class AddWorkPackageRequest(BaseModel):
    """Body for POST /sessions/{token}/work-packages."""
    id: str
    summary: str = ""


class WorkPackageEstimateRequest(BaseModel):
    """Body for PUT /sessions/{token}/work-packages/{id}/estimate."""
    model_config = ConfigDict(allow_inf_nan=False)

    effort: float
    standard_deviation: float


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions/{token}/work-packages", status_code=201)
async def add_work_package(
    token: str,
    body: AddWorkPackageRequest,
    repo: SessionRepository = Depends(get_repository),
) -> RouteResponse:
    """Add a work package.  Raises 409 if the ID is already in use."""
    await repo.add_work_package(token, body.id, body.summary)
    return RouteResponse(route=f"/sessions/{token}/work-packages/{body.id}")


@router.get("/sessions/{token}/work-packages")
async def get_work_packages(
    token: str,
    repo: SessionRepository = Depends(get_repository),
) -> list[WorkPackage]:
    return await repo.get_work_packages(token)


@router.delete("/sessions/{token}/work-packages/{work_package_id}", status_code=204)
async def remove_work_package(
    token: str,
    work_package_id: str,
    repo: SessionRepository = Depends(get_repository),
) -> None:
    await repo.remove_work_package(token, work_package_id)


@router.put(
    "/sessions/{token}/work-packages/{work_package_id}/estimate", status_code=204
)
async def set_work_package_estimate(
    token: str,
    work_package_id: str,
    body: WorkPackageEstimateRequest,
    repo: SessionRepository = Depends(get_repository),
) -> None:
    """Record the agreed effort and standard deviation of a work package."""
    await repo.add_estimate_to_work_package(
        token, work_package_id, body.effort, body.standard_deviation
    )


@router.delete(
    "/sessions/{token}/work-packages/{work_package_id}/estimate", status_code=204
)
async def reset_work_package_estimate(
    token: str,
    work_package_id: str,
    repo: SessionRepository = Depends(get_repository),
) -> None:
    """Reset a work package's effort and standard deviation to 0."""
    await repo.remove_estimate_from_work_package(token, work_package_id)
