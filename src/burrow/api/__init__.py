"""
REST API layer for burrow.

Provides a FastAPI application factory that maps HTTP methods on resource
paths onto the action engine. All orchestration lives in ``burrow.engine``;
this package handles only HTTP transport concerns: body reading, query
parameters, status codes and request context.

Quick start::

    from burrow.api import create_app

    app = create_app()  # ready for uvicorn

Tags:
    burrow, api, REST, FastAPI, transport-layer
"""

from burrow.api.app import create_app

__all__ = ["create_app"]
