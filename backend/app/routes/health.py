"""
Back Office API - Health Check Route
=====================================

What:  GET /health for container health checks and load balancer probes.
How:   SELECT 1 against the database and a writability probe of blob
       storage.

Status levels:
    healthy     database and storage OK                 (HTTP 200)
    degraded    database OK, storage unavailable        (HTTP 200)
    unhealthy   database unreachable                    (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse
from app.services.blob_storage import blob_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check():
    db_status = "connected"
    storage_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e)

    try:
        if not await blob_storage.health_check():
            storage_status = "unavailable"
    except OSError as e:
        storage_status = "unavailable"
        logger.warning("Health check: storage probe failed: %s", e)
    if storage_status != "available" and overall == "healthy":
        overall = "degraded"

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=503 if overall == "unhealthy" else 200,
        content=body.model_dump(),
    )
