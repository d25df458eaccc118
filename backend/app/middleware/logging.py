"""
FitLog Backend - Request Logging Middleware
=============================================

What:  One access-log line per request: method, path, status, duration,
       request ID and client IP.
How:   Times the downstream call and picks the level from the status class
       (5xx → ERROR, 4xx → WARNING, otherwise INFO). A request whose handler
       raised is logged as status 500 before the exception moves on to the
       server error handler.

Request bodies are never logged: row values and images stay out of the logs.

Typical durations:
    - GET /health: 1-5ms
    - POST /submit, GET /data: 300-1500ms (Sheets auth + call)
    - POST /analyze-image: 2000-8000ms (Gemini call dominates)
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.middleware.request_id import request_id_var

logger = logging.getLogger("fitlog.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each HTTP request with its outcome and latency."""

    def __init__(self, app: ASGIApp, quiet_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths) if quiet_paths is not None else QUIET_PATHS

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, start_time, outcome="unhandled error")
            raise

        self._log(request, response.status_code, start_time)
        return response

    def _log(
        self,
        request: Request,
        status: int,
        start_time: float,
        outcome: str = "",
    ) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        suffix = f" ({outcome})" if outcome else ""

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            suffix,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
