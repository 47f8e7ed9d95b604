"""Health check endpoints: liveness (no dependencies) and readiness (database probe)."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Not ready (database unavailable)", "model": ReadinessErrorResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers a probe query; 503 otherwise.

    Use for Kubernetes/orchestrator readiness probes.
    """
    data_access = getattr(request.app.state, "data_access", None)
    if data_access is None:
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(
                database="not_configured",
                message="DATABASE_URL is not set",
            ).model_dump(),
        )
    if await data_access.is_healthy():
        return ReadinessResponse()
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(
            database="unreachable",
            message="Database probe failed",
        ).model_dump(),
    )
