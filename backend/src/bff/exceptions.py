"""Custom exception classes for the application.

This module provides exception classes that carry an HTTP status code
and structured error information. They are raised by handlers at
request time and by the infrastructure settings loader at synth time.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    All application-specific exceptions should inherit from this class.
    Each exception carries an HTTP status code and optional details.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (default 500).
        detail: Optional additional context.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        result: dict[str, Any] = {"error": self.message}
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when input validation fails.

    Use for malformed configuration values, such as an external API
    registry entry with an invalid identifier.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        detail = f"Field: {field}" if field else None
        super().__init__(message, status_code=400, detail=detail)
        self.field = field


class ConfigurationError(AppError):
    """Raised when required configuration is missing.

    Use when environment variables or CDK context values are not
    properly configured.
    """

    def __init__(self, config_name: str):
        super().__init__(
            f"Missing required configuration: {config_name}",
            status_code=500,
        )
        self.config_name = config_name
