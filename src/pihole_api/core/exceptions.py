"""
Pi-hole API Client - Exception Hierarchy

Expected API failures travel as ``Err`` results. The exceptions here cover
the remaining cases: bad configuration and unwrapping a failed result.
"""

from datetime import datetime, timezone
from typing import Any


class PiholeClientError(Exception):
    """Base exception for all client errors with structured context."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class ConfigurationError(PiholeClientError):
    """Client not configured or invalid configuration."""


class UnwrapError(PiholeClientError):
    """Raised when ``unwrap()`` is called on a failed result."""

    def __init__(self, error: Any):
        code = getattr(error, "code", None)
        context = error.to_dict() if hasattr(error, "to_dict") else {"error": repr(error)}
        super().__init__(
            getattr(error, "message", None) or str(error),
            error_code=getattr(code, "value", None),
            context=context,
        )
        self.error = error
