"""
Pi-hole API Client - Authentication Endpoints

Login and logout live on the session manager (``client.connect`` and
``client.disconnect``); this module covers the rest of ``/api/auth``.
"""

from typing import TYPE_CHECKING, Any, Dict, List

from ..core.errors import PiholeError
from ..core.result import Result
from ..shared.constants import API_AUTH, API_AUTH_APP, API_AUTH_SESSION, API_AUTH_SESSIONS, API_AUTH_TOTP

if TYPE_CHECKING:
    from ..core.client import PiholeClient


class AuthEndpoints:
    """Authentication endpoint methods."""

    def __init__(self, client: "PiholeClient"):
        self.client = client

    async def check(self) -> Result[Dict[str, Any], PiholeError]:
        """Check current authentication status."""
        return await self.client.request("GET", API_AUTH)

    async def get_sessions(self) -> Result[List[Dict[str, Any]], PiholeError]:
        """Get all active sessions."""
        result = await self.client.request("GET", API_AUTH_SESSIONS)
        return result.map(lambda data: data.get("sessions", []))

    async def delete_session(self, session_id: int) -> Result[None, PiholeError]:
        """Delete a specific session.

        Args:
            session_id: Numeric session id as listed by ``get_sessions``
        """
        return await self.client.request("DELETE", f"{API_AUTH_SESSION}/{session_id}")

    async def generate_totp(self) -> Result[Dict[str, Any], PiholeError]:
        """Generate a TOTP secret and URI for setting up an authenticator app."""
        return await self.client.request("GET", API_AUTH_TOTP)

    async def enable_totp(self, totp: str) -> Result[Any, PiholeError]:
        """Enable two-factor authentication.

        Args:
            totp: Code from the authenticator app confirming the setup
        """
        return await self.client.request("POST", API_AUTH_TOTP, body={"totp": totp})

    async def disable_totp(self) -> Result[Any, PiholeError]:
        return await self.client.request("DELETE", API_AUTH_TOTP)

    async def create_app_password(self) -> Result[Dict[str, Any], PiholeError]:
        """Generate a new application password."""
        return await self.client.request("GET", API_AUTH_APP)
