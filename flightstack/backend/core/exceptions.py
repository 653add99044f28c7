"""
Custom Exceptions.

The relay answers ConfigurationError with the error envelope; the query
CLI prints any of these to stderr and exits 1.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when a required setting or secret is missing."""

    def __init__(self, message: str = "Configuration error") -> None:
        super().__init__(message, code="SYS_CONFIGURATION_ERROR")


class UpstreamError(ApplicationError):
    """Raised when Aviationstack answers with a non-success status."""

    def __init__(self, endpoint: str, status_code: int, body: str) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Aviationstack {endpoint} endpoint error {status_code}: {body}",
            code="SYS_UPSTREAM_ERROR",
        )
