"""
Singers API — Welcome and Health Check Routes
===============================================

What:  GET / (plain-text welcome) and GET /health (dependency probe).
Who:   Browsers hitting the root, Docker health checks and load balancers.

Status levels:
    - healthy:   database answers SELECT 1
    - unhealthy: database unreachable (still HTTP 200; monitors read `status`)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from app import __version__
from app.schemas.singer import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Welcome message")
async def welcome() -> str:
    return "welcome"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    database = request.app.state.database
    settings = request.app.state.settings

    if await database.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        singer_model=settings.singer_model,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
