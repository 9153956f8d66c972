"""
Back Office API - Request ID Middleware
========================================

What:  Assigns a correlation ID to every request and echoes it in the
       X-Request-ID response header.
How:   Reuses a client-supplied X-Request-ID when it looks sane, otherwise
       generates a short one. The value is published through a ContextVar so
       loggers and exception handlers can include it without plumbing.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs end up in log lines; keep them short and printable
_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Per-request correlation ID (ContextVar + request.state + response header)."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        rid = supplied if _CLIENT_ID_RE.match(supplied) else new_request_id()

        # Left set after the response so the server-error handler, which runs
        # outside this middleware, can still read it
        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
