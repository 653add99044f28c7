"""
Exception Handlers.

The relay routes answer their own fetch failures with the proxy_error
body. What reaches these handlers is everything else, most often a
ConfigurationError for a missing API_KEY raised while the upstream client
dependency is built. Both handlers answer 500 with the ErrorResponse
envelope.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from flightstack.backend.core.exceptions import ApplicationError
from flightstack.backend.core.logging import get_logger
from flightstack.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)


def _error_response(request: Request, code: str, message: str) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message),
        metadata=ResponseMetadata(request_id=request_id),
    )
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    logger.error("Request aborted", code=exc.code, message=exc.message, path=request.url.path)
    return _error_response(request, exc.code, exc.message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Generic 500; the exception itself stays in the log."""
    logger.exception("Unhandled exception", path=request.url.path, exception_type=type(exc).__name__)
    return _error_response(request, "SYS_INTERNAL_ERROR", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
