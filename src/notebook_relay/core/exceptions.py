"""
Custom exception classes for the Notebook Relay service.
"""

from typing import Any, Dict, Optional

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class BaseRelayException(Exception):
    """Base exception for all relay errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class RequestValidationError(BaseRelayException):
    """Raised when a required request field is missing."""
    pass


class ConfigurationError(BaseRelayException):
    """Raised when a required setting is absent or malformed."""
    pass


class WebhookTransportError(BaseRelayException):
    """Raised when the outbound webhook call could not be made."""
    pass


class WebhookResponseError(BaseRelayException):
    """Raised when the webhook answers with a non-success status."""

    @property
    def status_code(self) -> Optional[int]:
        return self.details.get("status")

    @property
    def status_text(self) -> str:
        return self.details.get("statusText", "")


class StatusUpdateError(BaseRelayException):
    """Raised when a status record could not be written."""
    pass


class HTTPStatusMapper:
    """Maps relay exceptions to the HTTP status returned to the caller."""

    EXCEPTION_MAP = {
        RequestValidationError: HTTP_400_BAD_REQUEST,
        ConfigurationError: HTTP_500_INTERNAL_SERVER_ERROR,
        WebhookTransportError: HTTP_500_INTERNAL_SERVER_ERROR,
        WebhookResponseError: HTTP_500_INTERNAL_SERVER_ERROR,
        StatusUpdateError: HTTP_500_INTERNAL_SERVER_ERROR,
    }

    @classmethod
    def status_for(cls, exc: Exception) -> int:
        """HTTP status for an exception; anything unknown is a 500."""
        return cls.EXCEPTION_MAP.get(type(exc), HTTP_500_INTERNAL_SERVER_ERROR)


def create_missing_fields_error(missing: list[str]) -> RequestValidationError:
    """Create an input error listing the missing request fields."""
    return RequestValidationError(
        message="sourceId, filePath, and sourceType are required",
        error_code="MISSING_FIELDS",
        details={"missing": missing},
    )


def create_invalid_url_error(variable: str, url: str) -> ConfigurationError:
    """Create a configuration error for a malformed webhook URL."""
    return ConfigurationError(
        message=(
            f"Invalid {variable} format: {url}. Please ensure the URL includes "
            "the protocol (https://) and is properly formatted."
        ),
        error_code="INVALID_WEBHOOK_URL",
        details={"variable": variable, "webhookUrl": url},
    )
