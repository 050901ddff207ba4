"""
Pi-hole API Client - Core Infrastructure

This package contains the request/session reliability layer.
"""

from .client import PiholeClient
from .config_loader import ConfigLoader
from .errors import (
    ErrorKind,
    PiholeError,
    create_error,
    from_api_key,
    from_status,
    is_auth_error,
    is_retryable,
)
from .exceptions import ConfigurationError, PiholeClientError, UnwrapError
from .models import AuthResponse, AuthSession, PiholeConfig, RequestDescriptor
from .result import Err, Ok, Result
from .retry import RetryConfig, RetryOrchestrator, retry_with_backoff
from .session import SessionManager, SessionState
from .transport import RequestResponseLogger, Transport

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    # Errors
    "ErrorKind",
    "PiholeError",
    "create_error",
    "from_status",
    "from_api_key",
    "is_retryable",
    "is_auth_error",
    # Exceptions
    "PiholeClientError",
    "ConfigurationError",
    "UnwrapError",
    # Models
    "PiholeConfig",
    "AuthSession",
    "AuthResponse",
    "RequestDescriptor",
    # Transport
    "Transport",
    "RequestResponseLogger",
    # Retry
    "RetryConfig",
    "RetryOrchestrator",
    "retry_with_backoff",
    # Session
    "SessionManager",
    "SessionState",
    # Client
    "PiholeClient",
    # Config
    "ConfigLoader",
]
