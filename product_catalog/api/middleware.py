"""HTTP middleware for the product catalog.

Every request gets a correlation id that is echoed in ``X-Request-ID``,
stored on ``request.state`` and bound into the structlog context. Any
exception that escapes the routes is turned into a generic 500 problem
detail.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from product_catalog.api.errors import problem_response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlate a request with its logs and write one access log line."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Answer unexpected failures with a problem detail that names no cause."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
            )
            return problem_response(
                request,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                title="Product service internal server error.",
            )


def setup_middleware(app: FastAPI) -> None:
    """Install the middleware stack on an application.

    The last middleware added runs first, so the request context wraps the
    error handler and failed requests still carry their id.
    """
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(RequestContextMiddleware)
