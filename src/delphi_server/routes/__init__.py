"""Route registration - mounts all routers under ``/api``."""

from fastapi import FastAPI

from delphi_server.routes.docs import router as docs_router
from delphi_server.routes.estimates import router as estimates_router
from delphi_server.routes.sessions import router as sessions_router
from delphi_server.routes.users import router as users_router
from delphi_server.routes.work_packages import router as work_packages_router

API_PREFIX = "/api"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the API prefix."""
    app.include_router(docs_router, prefix=API_PREFIX)
    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(work_packages_router, prefix=API_PREFIX)
    app.include_router(estimates_router, prefix=API_PREFIX)
