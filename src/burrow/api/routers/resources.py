"""
Resources router: one catch-all path mapped onto the action engine.

Endpoints:
    GET     /{path}    Read (complete key) or List / ListAny (bare kind leaf)
    POST    /{path}    Create (bare kind leaf gets a storage-assigned id)
    PUT     /{path}    Update (full overwrite)
    PATCH   /{path}    Patch (merge the fields present in the body)
    DELETE  /{path}    Delete

List parameters:
    l    page size
    n    cursor returned as ``next_cursor`` by the previous page
    a    ascending sort field (repeatable)
    z    descending sort field (repeatable)
    f    filter ``field<op>value`` (repeatable)
    d    depth, 0 returns row paths without data
    any  true to list every descendant of the parent (ListAny)

All ``a`` fields sort ahead of all ``z`` fields, each group in the order
given; ``?z=total&a=status`` sorts by status first. An interleaved
ascending/descending order cannot be expressed with these parameters.

The engine is synchronous; handlers run it in the threadpool after the
request body has been read.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from burrow.api.deps import Engine
from burrow.api.middleware.errors import http_status_for
from burrow.api.schemas.common import ResourceBody
from burrow.core.errors import BurrowError, RequestBodyUnreadableError
from burrow.engine.listing import ListRequest
from burrow.engine.resource import Resource

router = APIRouter()

_RESPONSES = {
    400: {"model": ResourceBody, "description": "Invalid path, hierarchy, body or query"},
    404: {"model": ResourceBody, "description": "Entity or ancestor not found"},
    500: {"model": ResourceBody, "description": "Storage or hook failure"},
}


def _respond(resource: Resource, success_status: int = 200) -> JSONResponse:
    status = http_status_for(resource.error.status) if resource.error is not None else success_status
    return JSONResponse(status_code=status, content=resource.to_dict())


async def _read_body(request: Request, resource: Resource) -> bytes | None:
    try:
        return await request.body()
    except ClientDisconnect as e:
        resource.mark_error(RequestBodyUnreadableError(cause=e))
        return None


@router.get("/{path:path}", response_model=ResourceBody, responses=_RESPONSES)
async def get_resource(
    path: str,
    engine: Engine,
    l: Annotated[str | None, Query(description="Page size")] = None,  # noqa: E741
    n: Annotated[str | None, Query(description="Continuation cursor")] = None,
    a: Annotated[list[str] | None, Query(description="Ascending sort field")] = None,
    z: Annotated[list[str] | None, Query(description="Descending sort field")] = None,
    f: Annotated[list[str] | None, Query(description="Filter field<op>value")] = None,
    d: Annotated[int | None, Query(description="Depth, 0 drops row data")] = None,
    any_depth: Annotated[bool, Query(alias="any", description="List every descendant")] = False,
) -> JSONResponse:
    """Read one resource, or list a page of a kind."""
    resource = engine.resource(f"/{path}")
    if resource.failed or resource.key.is_complete:
        return _respond(await run_in_threadpool(engine.read, resource))

    try:
        list_request = ListRequest.from_params(
            size=l,
            cursor=n,
            filters=f or (),
            ascending=a or (),
            descending=z or (),
            depth=d,
        )
    except BurrowError as e:
        resource.mark_error(e)
        return _respond(resource)

    action = engine.list_any if any_depth else engine.list
    return _respond(await run_in_threadpool(action, resource, list_request))


@router.post("/{path:path}", response_model=ResourceBody, status_code=201, responses=_RESPONSES)
async def create_resource(path: str, request: Request, engine: Engine) -> JSONResponse:
    """Create a resource; a path ending in a bare kind gets a new id."""
    resource = engine.resource(f"/{path}")
    body = await _read_body(request, resource)
    return _respond(await run_in_threadpool(engine.create, resource, body), success_status=201)


@router.put("/{path:path}", response_model=ResourceBody, responses=_RESPONSES)
async def update_resource(path: str, request: Request, engine: Engine) -> JSONResponse:
    """Overwrite a resource with the request body."""
    resource = engine.resource(f"/{path}")
    body = await _read_body(request, resource)
    return _respond(await run_in_threadpool(engine.update, resource, body))


@router.patch("/{path:path}", response_model=ResourceBody, responses=_RESPONSES)
async def patch_resource(path: str, request: Request, engine: Engine) -> JSONResponse:
    """Merge the fields present in the request body into a resource."""
    resource = engine.resource(f"/{path}")
    body = await _read_body(request, resource)
    return _respond(await run_in_threadpool(engine.patch, resource, body))


@router.delete("/{path:path}", response_model=ResourceBody, responses=_RESPONSES)
async def delete_resource(path: str, engine: Engine) -> JSONResponse:
    resource = engine.resource(f"/{path}")
    return _respond(await run_in_threadpool(engine.delete, resource))
