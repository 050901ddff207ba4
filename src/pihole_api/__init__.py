"""
Pi-hole API Client

An async client for the Pi-hole v6 REST API with automatic login, session
refresh, retry with backoff and typed results instead of exceptions.
"""

__version__ = "1.0.0"
__license__ = "AGPL-3.0"

from .core.client import PiholeClient
from .core.config_loader import ConfigLoader
from .core.errors import ErrorKind, PiholeError, is_auth_error, is_retryable
from .core.exceptions import ConfigurationError, PiholeClientError, UnwrapError
from .core.models import PiholeConfig, RequestDescriptor
from .core.result import Err, Ok, Result

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    # Errors
    "ErrorKind",
    "PiholeError",
    "is_retryable",
    "is_auth_error",
    # Exceptions
    "PiholeClientError",
    "ConfigurationError",
    "UnwrapError",
    # Core classes
    "PiholeConfig",
    "RequestDescriptor",
    "PiholeClient",
    "ConfigLoader",
]
