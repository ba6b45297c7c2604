"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes. Every body is an ApiResponse
error envelope: ``{"status": "error", "data": null, "message": "..."}``.
"""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from content_gateway.documents.exceptions import RenderError, UnsupportedFormat
from content_gateway.exceptions import GatewayError, NotFoundError
from content_gateway.models.envelope import ApiResponse
from content_gateway.resilience.exceptions import (
    RetriesExhausted,
    TransportError,
    UpstreamError,
    UpstreamTimeoutError,
)

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build an error envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.error(message).model_dump(mode="json"),
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    Handle missing upstream resources.

    Maps to 404 Not Found.
    """
    logger.info("Resource not found", message=exc.message, details=exc.details)
    return error_response(status.HTTP_404_NOT_FOUND, exc.message)


async def unsupported_format_handler(request: Request, exc: UnsupportedFormat) -> JSONResponse:
    """
    Handle unknown document formats.

    Maps to 400 Bad Request (client error, nothing was rendered).
    """
    logger.warning("Unsupported document format", details=exc.details)
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def upstream_timeout_handler(request: Request, exc: UpstreamTimeoutError) -> JSONResponse:
    """
    Handle a single upstream timeout that was not retried.

    Maps to 504 Gateway Timeout.
    """
    logger.error("Upstream timeout", message=exc.message, details=exc.details)
    return error_response(status.HTTP_504_GATEWAY_TIMEOUT, "Upstream request timed out")


async def retries_exhausted_handler(request: Request, exc: RetriesExhausted) -> JSONResponse:
    """
    Handle exhausted retry budgets.

    Maps to 503 Service Unavailable (temporary failure).
    """
    logger.error(
        "Retries exhausted",
        attempts=exc.attempts,
        last_error=str(exc.last_error),
        details=exc.details,
    )
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        f"Upstream unavailable after {exc.attempts} attempts",
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """
    Handle non-retryable upstream HTTP errors.

    Maps to 502 Bad Gateway.
    """
    logger.error("Upstream error", status_code=exc.status_code, details=exc.details)
    return error_response(status.HTTP_502_BAD_GATEWAY, exc.message)


async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
    """
    Handle connection failures.

    Maps to 502 Bad Gateway (upstream service unreachable).
    """
    logger.error("Upstream unreachable", message=exc.message, details=exc.details)
    return error_response(status.HTTP_502_BAD_GATEWAY, "Unable to connect to upstream service")


async def render_error_handler(request: Request, exc: RenderError) -> JSONResponse:
    """
    Handle document rendering failures.

    Maps to 500 Internal Server Error.
    """
    logger.error("Document rendering failed", message=exc.message, details=exc.details)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle invalid request parameters or bodies.

    Maps to 400 Bad Request (client error).
    """
    logger.warning("Invalid request format", errors=exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "Request validation failed")


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.error("Gateway error", error_type=type(exc).__name__, message=exc.message)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    NotFoundError: not_found_handler,
    UnsupportedFormat: unsupported_format_handler,
    UpstreamTimeoutError: upstream_timeout_handler,
    RetriesExhausted: retries_exhausted_handler,
    UpstreamError: upstream_error_handler,
    TransportError: transport_error_handler,
    RenderError: render_error_handler,
    RequestValidationError: request_validation_error_handler,
    GatewayError: gateway_error_handler,
    Exception: generic_error_handler,
}
