"""
École API — Status & Health Routes
===================================

What:  GET / (status snapshot) and GET /health (health check for orchestrators).
Why:   `/` is what the frontend pings to show "API opérationnelle"; `/health`
       is the richer check used by Docker and load balancers.
How:   Both report the state of the two provider clients without calling
       the providers: a health check must stay cheap and never block on them.

Status levels:
    healthy   → Supabase client present and Drive READY
    degraded  → the server answers but at least one gateway is disabled
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ecole_api import __version__
from ecole_api import database
from ecole_api.exceptions import ServiceUnavailableError
from ecole_api.schemas.common import HealthResponse, StatusResponse
from ecole_api.services.drive_service import DriveService, get_drive_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_model=StatusResponse, summary="Service status snapshot")
async def status(drive: DriveService = Depends(get_drive_service)) -> StatusResponse:
    return StatusResponse(
        status="running",
        message="API École opérationnelle",
        timestamp=datetime.now(timezone.utc),
        drive=drive.status.value,
    )


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(drive: DriveService = Depends(get_drive_service)) -> HealthResponse:
    try:
        await database.get_supabase()
        supabase_status = "connected"
    except ServiceUnavailableError:
        supabase_status = "not_configured"

    overall = "healthy"
    if supabase_status != "connected" or not drive.is_ready:
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        supabase=supabase_status,
        drive=drive.status.value,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
