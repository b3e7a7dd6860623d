"""
Exceptions for the Scale Dynamix API client.

Every error raised by this package is a ScaleDynamixError carrying a
human-readable message and an ErrorKind. Nothing is retried or suppressed
internally; errors propagate to the caller as soon as they happen.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Closed set of error categories."""
    NOT_AUTHENTICATED = "not_authenticated"
    UNAUTHORIZED = "unauthorized"
    INVALID_ARGUMENT = "invalid_argument"
    MALFORMED_RESPONSE = "malformed_response"
    REQUEST_FAILED = "request_failed"
    UNIMPLEMENTED = "unimplemented"
    SITE_DELETED = "site_deleted"


class ScaleDynamixError(Exception):
    """Base exception for all Scale Dynamix client errors."""

    kind: ErrorKind = ErrorKind.REQUEST_FAILED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Any = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class NotAuthenticatedError(ScaleDynamixError):
    """Raised when an operation needs a session and login() has not succeeded."""
    kind = ErrorKind.NOT_AUTHENTICATED


class AuthenticationError(ScaleDynamixError):
    """Raised when the API answers with HTTP 401."""
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("status_code", 401)
        super().__init__(message, **kwargs)


class LoginFailedError(AuthenticationError):
    """Raised when the API key is rejected during login()."""


class ValidationError(ScaleDynamixError):
    """Raised for a bad site id, domain id, site name, hostname or site type."""
    kind = ErrorKind.INVALID_ARGUMENT


class MalformedResponseError(ScaleDynamixError):
    """Raised when the API response does not have the expected shape."""
    kind = ErrorKind.MALFORMED_RESPONSE


class APIError(ScaleDynamixError):
    """Raised when the API reports failure or the request could not be sent."""
    kind = ErrorKind.REQUEST_FAILED


class UnimplementedError(ScaleDynamixError):
    """Raised for operations this client does not support."""
    kind = ErrorKind.UNIMPLEMENTED


class SiteDeletedError(ScaleDynamixError):
    """Raised on any access to a Site that has been deleted."""
    kind = ErrorKind.SITE_DELETED
