"""
API Middleware

Binds a request id for every log line emitted while a request is served
and reports how long the request took.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with request id and duration"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            logger.debug("Request received", method=request.method, path=request.url.path)
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.info(
                "Request served",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query) or None,
                status_code=response.status_code,
                duration_ms=elapsed_ms,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"
        return response
