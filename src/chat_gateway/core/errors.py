"""
Gateway error types.

Every error raised out of the gateway is a GatewayError carrying an
ErrorKind, so callers can display a category plus message without
inspecting transport exceptions.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from ..models.message import ApiError


class ErrorKind(str, Enum):
    """Categories of gateway failures."""
    NETWORK = "network"
    HTTP = "http"
    DECODE = "decode"
    UNKNOWN_PROVIDER = "unknown_provider"
    NO_VALID_PROVIDERS = "no_valid_providers"
    ALL_PROVIDERS_FAILED = "all_providers_failed"
    INVALID_REQUEST = "invalid_request"


class GatewayError(Exception):
    """Base exception for gateway errors."""

    kind: ErrorKind = ErrorKind.NETWORK

    def __init__(self, message: str, gateway: str = None):
        self.message = message
        self.gateway = gateway
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Displayable payload for the UI layer."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "gateway": self.gateway,
        }


class GatewayNotFoundError(GatewayError):
    """Raised when a provider id is not registered."""
    kind = ErrorKind.UNKNOWN_PROVIDER


class GatewayConnectionError(GatewayError):
    """Raised when the transport fails (connect, send or receive)."""
    kind = ErrorKind.NETWORK


class GatewayTimeoutError(GatewayConnectionError):
    """Raised when request times out."""
    pass


class GatewayHTTPError(GatewayError):
    """Raised on a non-2xx response; carries the decoded vendor error."""

    kind = ErrorKind.HTTP

    def __init__(
        self,
        message: str,
        gateway: str = None,
        status_code: int = None,
        api_error: Optional[ApiError] = None,
    ):
        super().__init__(message, gateway)
        self.status_code = status_code
        self.api_error = api_error

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        if self.api_error is not None:
            data["category"] = self.api_error.category
        return data


class GatewayAuthenticationError(GatewayHTTPError):
    """Raised when the vendor rejects the credentials (401/403)."""
    pass


class GatewayRateLimitError(GatewayHTTPError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        message: str,
        gateway: str = None,
        status_code: int = 429,
        api_error: Optional[ApiError] = None,
        retry_after: float = None,
    ):
        super().__init__(message, gateway, status_code=status_code, api_error=api_error)
        self.retry_after = retry_after


class GatewayDecodeError(GatewayError):
    """Raised when a successful response body cannot be decoded."""
    kind = ErrorKind.DECODE


class GatewayInvalidRequestError(GatewayError):
    """Raised when request is invalid."""
    kind = ErrorKind.INVALID_REQUEST


class NoValidProvidersError(GatewayError):
    """Raised when no selection resolves to a configured provider."""
    kind = ErrorKind.NO_VALID_PROVIDERS


class AllProvidersFailedError(GatewayError):
    """Raised when every target of a turn failed."""

    kind = ErrorKind.ALL_PROVIDERS_FAILED

    def __init__(self, message: str, errors: List[GatewayError] = None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data


def redact(text: str, secret: Optional[str]) -> str:
    """Remove a secret from text destined for an error message."""
    if not text or not secret:
        return text
    return text.replace(secret, "***")
