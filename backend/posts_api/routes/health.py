"""
Posts & Comments API — Liveness & Health Routes
=================================================

What:  `GET /` liveness payload and `GET /health` dependency check.
Who:   Called by clients checking the API is up, container health checks
       and monitoring.

Status levels (GET /health):
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from posts_api import __version__
from posts_api.schemas.common import HealthResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

LIVENESS_MESSAGE = "Posts & Comments API is running"

_start_time = time.time()


@router.get("/", response_model=MessageResponse, summary="Liveness probe")
async def root() -> MessageResponse:
    return MessageResponse(message=LIVENESS_MESSAGE)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(request: Request):
    """
    Run `SELECT 1` through the application's session factory.

    Returns:
        HealthResponse; HTTP 503 when the database cannot be reached.
    """
    session_factory = request.app.state.session_factory
    health = HealthResponse(
        status="healthy",
        version=__version__,
        database="connected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )

    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        health.status = "unhealthy"
        health.database = "disconnected"
        health.detail = str(e) or type(e).__name__
        return JSONResponse(status_code=503, content=health.model_dump())

    return health
