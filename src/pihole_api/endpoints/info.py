"""
Pi-hole API Client - System Info Endpoints
"""

from typing import TYPE_CHECKING, Any, Dict

from ..core.errors import PiholeError
from ..core.result import Result
from ..shared.constants import (
    API_INFO_CLIENT,
    API_INFO_FTL,
    API_INFO_HOST,
    API_INFO_SYSTEM,
    API_INFO_VERSION,
)

if TYPE_CHECKING:
    from ..core.client import PiholeClient


class InfoEndpoints:
    """System info endpoint methods."""

    def __init__(self, client: "PiholeClient"):
        self.client = client

    async def get_version(self) -> Result[Dict[str, Any], PiholeError]:
        """Get versions of the core, web interface and FTL components."""
        return await self.client.request("GET", API_INFO_VERSION)

    async def get_system(self) -> Result[Dict[str, Any], PiholeError]:
        """Get memory, CPU and uptime figures."""
        return await self.client.request("GET", API_INFO_SYSTEM)

    async def get_host(self) -> Result[Dict[str, Any], PiholeError]:
        return await self.client.request("GET", API_INFO_HOST)

    async def get_ftl(self) -> Result[Dict[str, Any], PiholeError]:
        return await self.client.request("GET", API_INFO_FTL)

    async def get_client(self) -> Result[Dict[str, Any], PiholeError]:
        """Get information about the requesting client."""
        return await self.client.request("GET", API_INFO_CLIENT)
