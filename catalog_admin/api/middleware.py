"""HTTP middleware for the catalog admin API.

``RequestContextMiddleware`` tags every request with a correlation ID and
writes one access log line per request. ``UnhandledErrorMiddleware`` turns
any exception no handler claimed into the standard 500 envelope.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalog_admin.api.schemas import ErrorResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to the log context and echo it to the client.

    The ID is taken from ``X-Request-ID`` when the client sends one and
    generated otherwise. Handlers read it from ``request.state.request_id``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                admin_id=getattr(request.state, "admin_id", None),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Return ``{success: false, error}`` with status 500 for stray exceptions.

    The exception type and message are added as ``details`` only when the
    app runs with ``debug`` enabled.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
            )
            details = None
            if request.app.state.settings.debug:
                details = f"{type(e).__name__}: {e}"
            body = ErrorResponse(error="Internal server error", details=details)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=body.model_dump(exclude_none=True),
            )


def setup_middleware(app: FastAPI) -> None:
    """Install the catalog middleware stack.

    Starlette runs the last added middleware first, so the request context
    wraps the error guard and 500 responses still carry the request ID.
    """
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(RequestContextMiddleware)
