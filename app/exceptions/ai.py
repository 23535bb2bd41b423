# ruff: noqa: D107
"""AI service exceptions."""

from typing import Any

from .base import BaseAppException


class AIServiceError(BaseAppException):
    """Base exception for AI service errors."""

    def __init__(
        self,
        message: str = "AI service error occurred",
        error_code: str = "AI_SERVICE_ERROR",
        details: dict[str, Any] | None = None,
        status_code: int = 502,
    ):
        super().__init__(message, status_code=status_code, error_code=error_code, details=details)


class AIServiceUnavailableError(AIServiceError):
    """Exception raised when AI service is unavailable."""

    def __init__(
        self,
        message: str = "AI service is temporarily unavailable",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_SERVICE_UNAVAILABLE", details, status_code=503)


class AITimeoutError(AIServiceError):
    """Exception raised when AI service request times out."""

    def __init__(
        self,
        message: str = "AI service request timed out",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_TIMEOUT", details, status_code=504)


class AIConfigurationError(AIServiceError):
    """Exception raised when AI service is not properly configured."""

    def __init__(
        self,
        message: str = "AI service is not properly configured",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_CONFIGURATION_ERROR", details, status_code=503)


class AIContentFilterError(AIServiceError):
    """Exception raised when content is blocked by AI safety filters."""

    def __init__(
        self,
        message: str = "Content was blocked by AI safety filters",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_CONTENT_FILTERED", details)


# Map common error patterns to exceptions
AI_ERROR_MAPPING = {
    "service_unavailable": AIServiceUnavailableError,
    "timeout": AITimeoutError,
    "configuration_error": AIConfigurationError,
    "content_filtered": AIContentFilterError,
}


def map_ai_error(error: Exception) -> AIServiceError:
    """Map a provider exception to the closest application exception."""
    if isinstance(error, AIServiceError):
        return error
    error_msg = str(error).lower()
    if "safety" in error_msg or "blocked" in error_msg:
        error_type = "content_filtered"
    elif "unavailable" in error_msg or "503" in error_msg:
        error_type = "service_unavailable"
    elif "api key" in error_msg or "permission" in error_msg:
        error_type = "configuration_error"
    else:
        return AIServiceError(f"AI generation failed: {error}")
    return AI_ERROR_MAPPING[error_type](f"AI generation failed: {error}")
