"""
FitLog Backend - Health Check Route
=====================================

What:  Liveness endpoint for the hosting platform's health probe.
How:   Reports process uptime and whether the required configuration is
       present. It makes no calls to Google, so probes cost no API quota.
"""

import logging
import time

from fastapi import APIRouter, Depends

from app import __version__
from app.config import Settings, is_placeholder_key
from app.dependencies import get_settings_dep
from app.schemas.log import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(settings: Settings = Depends(get_settings_dep)) -> HealthResponse:
    spreadsheet_ok = bool(settings.spreadsheet_id)
    gemini_ok = not is_placeholder_key(settings.gemini_api_key)

    return HealthResponse(
        status="healthy" if spreadsheet_ok and gemini_ok else "misconfigured",
        version=__version__,
        spreadsheet_configured=spreadsheet_ok,
        gemini_configured=gemini_ok,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
