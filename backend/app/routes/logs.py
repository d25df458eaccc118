"""
FitLog Backend - Sheet Route Handlers
=======================================

What:  POST /submit, GET /data and POST /seed-schedule.
How:   Decodes the request, delegates to LogService, shapes the response.
       Sheets failures surface as SheetsServiceError and are mapped to the
       per-endpoint 500 message here, after logging the underlying error.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from app.dependencies import get_log_service, read_submission
from app.exceptions import SheetsServiceError
from app.schemas.log import ErrorResponse, SheetDataResponse, SheetRequest
from app.services.log_service import LogService, SeedScheduleError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Logs"])


@router.post(
    "/submit",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Row appended", "content": {"text/plain": {"example": "Saved Successfully"}}},
        400: {"description": "Body is not valid JSON", "model": ErrorResponse},
        500: {"description": "Sheets append failed", "model": ErrorResponse},
    },
    summary="Append a row to a sheet tab",
)
def submit(
    submission: SheetRequest = Depends(read_submission),
    service: LogService = Depends(get_log_service),
) -> str:
    """
    Append `row_data` to `target_sheet` (defaults to "Logs").

    Body:
        {"target_sheet": "Logs", "row_data": ["Strength", "2024-05-01", "Squat", "100"]}
    """
    try:
        service.submit_row(submission)
    except SheetsServiceError as e:
        logger.error("Save Error: %s", e.detail or e.message)
        raise SheetsServiceError(message="Failed to save", detail=e.detail) from e
    return "Saved Successfully"


@router.get(
    "/data",
    response_model=SheetDataResponse,
    responses={500: {"description": "Sheets read failed", "model": ErrorResponse}},
    summary="Read every row of a sheet tab",
)
def get_data(
    sheet: str = Query(
        default="",
        description='Tab to read, e.g. "Logs" or "Schedule". Empty means "Logs".',
    ),
    service: LogService = Depends(get_log_service),
) -> SheetDataResponse:
    """Return the A:Z range of the tab as {"data": [[...], ...]}."""
    try:
        rows = service.read_sheet(sheet)
    except SheetsServiceError as e:
        logger.error("Read Error: %s", e.detail or e.message)
        raise SheetsServiceError(message="Failed to read sheet", detail=e.detail) from e
    return SheetDataResponse(data=rows)


@router.post(
    "/seed-schedule",
    response_class=PlainTextResponse,
    responses={500: {"description": "A schedule row failed to save", "model": ErrorResponse}},
    summary="One-time setup: populate the Schedule tab",
)
def seed_schedule(service: LogService = Depends(get_log_service)) -> str:
    """
    Append the seven-day training plan to the Schedule tab.

    Not idempotent: each call appends another seven rows.
    """
    try:
        count = service.seed_schedule()
    except SeedScheduleError as e:
        logger.error("Seed Error on %s: %s", e.day, e.detail or e.message)
        raise
    return f"Schedule Seeded Successfully: {count} rows into 'Schedule' tab"
