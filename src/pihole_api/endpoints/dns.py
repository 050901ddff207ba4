"""
Pi-hole API Client - DNS Blocking Endpoints
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.errors import PiholeError
from ..core.result import Result
from ..shared.constants import API_DNS_BLOCKING

if TYPE_CHECKING:
    from ..core.client import PiholeClient


class DnsEndpoints:
    """DNS blocking control."""

    def __init__(self, client: "PiholeClient"):
        self.client = client

    async def get_status(self) -> Result[Dict[str, Any], PiholeError]:
        """Get current blocking status."""
        return await self.client.request("GET", API_DNS_BLOCKING)

    async def enable(self) -> Result[Dict[str, Any], PiholeError]:
        return await self.set_blocking(True)

    async def disable(self, seconds: Optional[int] = None) -> Result[Dict[str, Any], PiholeError]:
        """Disable DNS blocking.

        Args:
            seconds: Re-enable automatically after this many seconds; indefinite when omitted or 0
        """
        return await self.set_blocking(False, timer=seconds)

    async def set_blocking(
        self, enabled: bool, timer: Optional[int] = None
    ) -> Result[Dict[str, Any], PiholeError]:
        """Set DNS blocking state.

        Args:
            enabled: Whether blocking should be on
            timer: Seconds until the state reverts; only sent when positive
        """
        body: Dict[str, Any] = {"blocking": enabled}
        if timer is not None and timer > 0:
            body["timer"] = timer

        return await self.client.request("POST", API_DNS_BLOCKING, body=body)
