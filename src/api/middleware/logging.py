"""
Request logging middleware.

Every request gets an ``X-Request-ID`` (taken from the caller when sent)
that is bound to structlog's context, so stock movements and reparation
events logged while serving it can be traced back to the request.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.config import get_logger

logger = get_logger(__name__)

# Probes hit these every few seconds
UNLOGGED_PATHS = frozenset({"/health", "/api/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one completion event per request with status and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "method", "path")

        duration_ms = (time.perf_counter() - start) * 1000
        if request.url.path not in UNLOGGED_PATHS:
            log = logger.warning if response.status_code >= 400 else logger.info
            log(
                "request_completed",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
