"""
Logging Middleware for Correlation ID and Request Tracking

Generates or extracts correlation IDs for every request, enabling
end-to-end request tracing across the search pipeline.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to inject correlation IDs and request context into all logs.

    - Accepts correlation_id from the X-Correlation-ID header or generates one
    - Binds correlation_id, method, path and client IP to contextvars
    - Echoes correlation_id in the response headers
    - Logs request timing
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        clear_contextvars()

        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        client_ip = request.client.host if request.client else "unknown"

        bind_contextvars(
            correlation_id=correlation_id,
            request_method=request.method,
            request_path=request.url.path,
            client_ip=client_ip,
        )

        start_time = time.time()

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
        )

        try:
            response = await call_next(request)

            duration_ms = int((time.time() - start_time) * 1000)
            response.headers[CORRELATION_HEADER] = correlation_id

            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            return response

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)

            logger.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
                exc_info=True,
            )

            raise

        finally:
            clear_contextvars()
