"""FastAPI middleware for request tracing and logging."""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Binds a request id to the structlog context of every request.

    - Reuses an incoming X-Request-ID header, otherwise generates a UUID4
    - Echoes the id in the X-Request-ID response header
    - Logs request completion with status and duration
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        logger.debug(
            "Request started",
            query_params=dict(request.query_params) if request.query_params else None,
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as exc:
            logger.error(
                "Request failed",
                exc_info=exc,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise
        finally:
            # Prevent context leaking into the next request on this worker
            structlog.contextvars.clear_contextvars()
