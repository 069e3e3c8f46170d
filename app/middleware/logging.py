"""
Inventory API - Request Logging Middleware
===========================================

What:  One access log line per HTTP request.
How:   Measures the time spent in the downstream app and logs method, path,
       status, duration, request ID and client IP on the `inventory.access`
       logger. Structured fields are attached through `extra`.
Who:   Applied to every request via Starlette middleware.
When:  After RequestIDMiddleware (uses the request ID for correlation).

Logged:  method, path, status, duration, IP, request ID
Skipped: request and response bodies, and requests to QUIET_PATHS

An exception that escapes the app is logged as a 500 before it propagates
to Starlette's server error handling.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("inventory.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def log_access(request: Request, status: int, started: float) -> None:
    """Emit the access line for a finished (or failed) request."""
    duration_ms = (time.perf_counter() - started) * 1000
    client_ip = request.client.host if request.client else "unknown"
    rid = request_id_var.get("")

    logger.log(
        level_for_status(status),
        "%s %s %d %.1fms [%s] from %s",
        request.method,
        request.url.path,
        status,
        duration_ms,
        rid,
        client_ip,
        extra={
            "request_id": rid,
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "client_ip": client_ip,
        },
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging around every request outside QUIET_PATHS."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log_access(request, 500, started)
            raise

        log_access(request, response.status_code, started)
        return response
