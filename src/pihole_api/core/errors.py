"""
Pi-hole API Client - Error Taxonomy

This module defines the closed set of error kinds carried by every failed
result and the lookup functions that classify HTTP statuses and Pi-hole
error keys into it.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Stable error codes for programmatic handling."""

    # Authentication
    UNAUTHORIZED = "unauthorized"
    TOTP_REQUIRED = "totp_required"
    INVALID_TOTP = "invalid_totp"
    SESSION_EXPIRED = "session_expired"

    # Transport
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    CONNECTION_REFUSED = "connection_refused"
    CERTIFICATE_ERROR = "certificate_error"

    # Client side
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION_ERROR = "validation_error"

    # Server side
    SERVER_ERROR = "server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Other
    PARSE_ERROR = "parse_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PiholeError:
    """A classified failure.

    Attributes:
        code: Error kind for programmatic handling
        message: Human-readable message
        status: HTTP status code (0 for transport-level failures)
        hint: Optional hint supplied by the API
        api_key: Raw error key from the Pi-hole API, if any
    """

    code: ErrorKind
    message: str
    status: int = 0
    hint: Optional[str] = None
    api_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["code"] = self.code.value
        return data


_STATUS_KINDS = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.UNAUTHORIZED,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.VALIDATION_ERROR,
    500: ErrorKind.SERVER_ERROR,
    502: ErrorKind.SERVICE_UNAVAILABLE,
    503: ErrorKind.SERVICE_UNAVAILABLE,
    504: ErrorKind.SERVICE_UNAVAILABLE,
}

_API_KEY_KINDS = {
    "unauthorized": ErrorKind.UNAUTHORIZED,
    "auth_failed": ErrorKind.UNAUTHORIZED,
    "totp_required": ErrorKind.TOTP_REQUIRED,
    "bad_totp": ErrorKind.INVALID_TOTP,
    "session_expired": ErrorKind.SESSION_EXPIRED,
    "not_found": ErrorKind.NOT_FOUND,
    "conflict": ErrorKind.CONFLICT,
    "bad_request": ErrorKind.BAD_REQUEST,
}

RETRYABLE_KINDS = frozenset({
    ErrorKind.NETWORK_ERROR,
    ErrorKind.TIMEOUT,
    ErrorKind.SERVICE_UNAVAILABLE,
    ErrorKind.SERVER_ERROR,
})

AUTH_KINDS = frozenset({
    ErrorKind.UNAUTHORIZED,
    ErrorKind.SESSION_EXPIRED,
    ErrorKind.TOTP_REQUIRED,
})


def create_error(
    code: ErrorKind,
    message: str,
    status: int = 0,
    hint: Optional[str] = None,
    api_key: Optional[str] = None,
) -> PiholeError:
    """Build a PiholeError."""
    return PiholeError(code=code, message=message, status=status, hint=hint, api_key=api_key)


def from_status(status: int) -> ErrorKind:
    """Map an HTTP status code to an error kind."""
    if status in _STATUS_KINDS:
        return _STATUS_KINDS[status]
    if 400 <= status < 500:
        return ErrorKind.BAD_REQUEST
    return ErrorKind.SERVER_ERROR


def from_api_key(key: str) -> ErrorKind:
    """Map a Pi-hole ``error.key`` value to an error kind."""
    return _API_KEY_KINDS.get(key, ErrorKind.UNKNOWN)


def is_retryable(kind: ErrorKind) -> bool:
    """Whether another attempt could change the outcome."""
    return kind in RETRYABLE_KINDS


def is_auth_error(kind: ErrorKind) -> bool:
    """Whether the session is no longer usable."""
    return kind in AUTH_KINDS
