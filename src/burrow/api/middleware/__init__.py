from burrow.api.middleware.errors import http_status_for, problem_response, unhandled_exception_handler
from burrow.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
    "http_status_for",
    "problem_response",
    "unhandled_exception_handler",
]
