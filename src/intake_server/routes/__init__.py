"""Route registration: mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from intake_server.routes.admin import router as admin_router
from intake_server.routes.intakes import router as intakes_router
from intake_server.routes.reference import router as reference_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(intakes_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
