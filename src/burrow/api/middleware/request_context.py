"""Request-context middleware: request id, log context and wall time.

Every request gets an ``X-Request-ID`` (echoed when the client sent one).
The id, method and path are bound into the structlog context while the
request runs, so every engine event carries them. One ``request_completed``
event closes the request with its status and ``X-Elapsed-Ms``.
"""

from __future__ import annotations

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from burrow.core.logging import LogContext, get_logger

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag, time and log every request/response cycle."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()
        with LogContext(request_id=request_id, method=request.method, path=request.url.path):
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
            logger.info("request_completed", status=response.status_code, elapsed_ms=elapsed_ms)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Elapsed-Ms"] = str(elapsed_ms)
        return response
