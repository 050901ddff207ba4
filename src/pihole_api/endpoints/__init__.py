"""
Pi-hole API Client - Endpoint Wrappers

Each group builds paths and bodies and delegates to ``PiholeClient.request``.
"""

from .auth import AuthEndpoints
from .dns import DnsEndpoints
from .info import InfoEndpoints

__all__ = [
    "AuthEndpoints",
    "DnsEndpoints",
    "InfoEndpoints",
]
