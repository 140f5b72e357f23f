"""
Common API schemas: the resource envelope and RFC 7807 errors.

Every resource endpoint returns :class:`ResourceBody`, whether the action
succeeded or not; the HTTP status carries the error classification.
Failures outside the engine (unhandled exceptions) use
:class:`ProblemDetail`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Structured error recorded on a resource."""

    name: str = Field(description="Stable error category (e.g. 'ancestor_not_found')")
    description: str = Field(description="Human-readable explanation")
    hint: str = Field(default="", description="How to fix a common mistake")
    debug: str = Field(default="", description="Text of the underlying failure")
    status: str = Field(description="Classification: bad_request, not_found, conflict, internal")


class ResourceBody(BaseModel):
    """Serialized resource tree.

    ``resources``, ``resources_count`` and ``next_cursor`` are present only
    on list responses.
    """

    path: str = Field(description="Resolved resource path")
    data: dict[str, Any] | None = Field(default=None, description="Payload, if any")
    created_at: str | None = Field(default=None, description="ISO timestamp of first storage write")
    resources: list[ResourceBody] | None = Field(default=None, description="Rows of a list page")
    resources_count: int | None = Field(default=None, description="Number of rows on this page")
    next_cursor: str | None = Field(default=None, description="Cursor for the next page, '' when exhausted")
    elapsed_ms: float | None = Field(default=None, description="Engine time in milliseconds")
    error: ErrorBody | None = Field(default=None, description="Recorded error, if the action failed")


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Example:
        {
            "type": "about:blank",
            "title": "Internal Server Error",
            "status": 500,
            "detail": "An unexpected error occurred.",
            "instance": "http://testserver/account/1"
        }
    """

    type: str = Field(default="about:blank", description="Error type URI (usually 'about:blank')")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")


class HealthBody(BaseModel):
    status: str = "ok"
    version: str
    storage: str
    kinds: list[str] = Field(default_factory=list)
