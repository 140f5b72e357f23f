"""
Error mapping: resource error statuses to HTTP codes, and the RFC 7807
fallback for exceptions that escape the engine.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from burrow.api.schemas.common import ProblemDetail
from burrow.core.errors import ErrorStatus
from burrow.core.logging import get_logger

logger = get_logger(__name__)

# ── Error status → HTTP status mapping ──────────────────────────────────

ERROR_STATUS_TO_HTTP: dict[ErrorStatus, int] = {
    ErrorStatus.BAD_REQUEST: 400,
    ErrorStatus.NOT_FOUND: 404,
    ErrorStatus.CONFLICT: 409,
    ErrorStatus.INTERNAL: 500,
}


def http_status_for(status: ErrorStatus) -> int:
    """Resolve an error classification to an HTTP status, defaulting to 500."""
    return ERROR_STATUS_TO_HTTP.get(status, 500)


def problem_response(*, status: int, title: str, detail: str = "", instance: str = "") -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(title=title, status=status, detail=detail, instance=instance)
    return JSONResponse(status_code=status, content=body.model_dump(), media_type="application/problem+json")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: returns 500 with ProblemDetail."""
    logger.error("unhandled_exception", path=request.url.path, error=type(exc).__name__, exc_info=exc)
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if request.app.state.settings.debug else "An unexpected error occurred.",
        instance=str(request.url),
    )
