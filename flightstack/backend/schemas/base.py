"""
Base Schemas.

Standard error envelope returned by the application's exception handlers.
Relay responses are forwarded verbatim and never wrapped in these.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ResponseMetadata(BaseModel):
    """Metadata included in all error responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ProxyErrorResponse(BaseModel):
    """Body the relay builds when it could not reach upstream at all."""

    error: str = "proxy_error"
    message: str
