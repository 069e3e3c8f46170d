"""
Inventory API - Request ID Middleware
======================================

What:  Attaches a correlation ID to each request and returns it in the response.
How:   Reuses the client's X-Request-ID header when it is a short token of
       safe characters, otherwise generates a short UUID. The ID is stored in
       a ContextVar and request.state, and echoed back.
Who:   Applied to every request via Starlette middleware.
When:  Before RequestLoggingMiddleware, which reads the ContextVar.

Client IDs end up verbatim in log lines, so anything with spaces, control
characters or more than MAX_REQUEST_ID_LENGTH characters is replaced.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: each concurrent request sees its own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]+")


def resolve_request_id(header_value: Optional[str]) -> str:
    """Client-supplied ID if it is usable, else the first 8 chars of a UUID4."""
    if (
        header_value
        and len(header_value) <= MAX_REQUEST_ID_LENGTH
        and _VALID_REQUEST_ID.fullmatch(header_value)
    ):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns the request ID and restores the previous ContextVar value afterwards."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid

        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
