"""
Pi-hole API Client - Main Client

This module provides the client class that composes transport, retry and
session handling into a single request entry point.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..endpoints import AuthEndpoints, DnsEndpoints, InfoEndpoints
from ..shared.constants import API_AUTH, API_ENDPOINTS
from .errors import ErrorKind, PiholeError, create_error
from .models import HttpMethod, PiholeConfig, RequestDescriptor
from .result import Err, Ok, Result
from .retry import RetryConfig, RetryOrchestrator
from .session import SessionManager
from .transport import Transport

logger = logging.getLogger("pihole-api")


class PiholeClient:
    """Client for the Pi-hole v6 REST API.

    Example:
        async with PiholeClient(PiholeConfig(url="http://pi.hole", password="secret")) as client:
            status = await client.dns.get_status()
            if status.is_ok():
                print(status.value["blocking"])
    """

    def __init__(self, config: PiholeConfig, http_client: Optional[httpx.AsyncClient] = None):
        """Initialize the Pi-hole API client.

        Args:
            config: Connection, retry and session settings
            http_client: Pre-built httpx client; one is created when omitted
        """
        self.config = config
        self.transport = Transport(
            base_url=config.url,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            client=http_client,
        )
        self.retry = RetryOrchestrator(
            self.transport,
            RetryConfig(
                max_retries=config.max_retries,
                retry_delay_base=config.retry_delay_base,
                retry_delay_max=config.retry_delay_max,
                backoff_multiplier=config.backoff_multiplier,
            ),
        )
        self.session = SessionManager(
            self.retry,
            password=config.password,
            sid=config.sid,
            csrf=config.csrf,
            auto_refresh=config.auto_refresh,
            refresh_threshold=config.refresh_threshold,
        )

        self.auth = AuthEndpoints(self)
        self.dns = DnsEndpoints(self)
        self.info = InfoEndpoints(self)

        logger.info(
            f"Initialized Pi-hole client for {self.transport.base_url or '<unconfigured>'} "
            f"(SSL verification: {'enabled' if config.verify_ssl else 'DISABLED'})"
        )

    async def close(self):
        """Close the underlying HTTP client."""
        await self.transport.close()

    async def __aenter__(self) -> "PiholeClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def connect(self, totp: Optional[str] = None) -> Result[None, PiholeError]:
        """Authenticate explicitly, optionally with a TOTP code.

        Args:
            totp: TOTP code for two-factor authentication
        """
        if await self.session.authenticate(totp):
            return Ok(None)

        if self.session.is_totp_required():
            return Err(create_error(ErrorKind.TOTP_REQUIRED, "TOTP code required", 401))

        return Err(
            self.session.last_error
            or create_error(ErrorKind.UNAUTHORIZED, "Authentication failed", 401)
        )

    async def disconnect(self) -> Result[None, PiholeError]:
        """Log out from the Pi-hole."""
        if await self.session.logout():
            return Ok(None)
        return Err(create_error(ErrorKind.UNKNOWN, "Logout failed", 0))

    def is_connected(self) -> bool:
        return self.session.has_session()

    def is_totp_required(self) -> bool:
        return self.session.is_totp_required()

    def set_password(self, password: str):
        """Change the password used for future logins."""
        self.session.set_password(password)

    async def test_connection(self) -> Result[None, PiholeError]:
        """Check the server is reachable without authenticating."""
        result = await self.retry.execute(
            RequestDescriptor(method="GET", path=API_AUTH, no_retry=True)
        )

        # 401 means the server is reachable and only wants credentials
        if result.is_err() and result.error.status == 401:
            return Ok(None)

        return result.map(lambda _: None)

    async def request(
        self,
        method: HttpMethod,
        path: str,
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Result[Any, PiholeError]:
        """Make an authenticated request.

        Logs in when needed, retries transient failures and re-authenticates
        once if the server rejects the session with a 401.

        Args:
            method: HTTP method
            path: API path, e.g. "/api/dns/blocking"
            body: JSON body
            params: Query string parameters

        Returns:
            Ok with the decoded response body, or Err with a PiholeError
        """
        not_configured = self.transport.check_configured()
        if not_configured:
            return Err(not_configured)

        if not await self.session.ensure_session():
            return Err(create_error(ErrorKind.UNAUTHORIZED, "Not authenticated", 401))

        descriptor = RequestDescriptor(method=method, path=path, body=body, params=params)
        result = await self.retry.execute(descriptor, self.session.get_auth_headers())

        # One re-authentication per request, never more
        if result.is_err() and result.error.status == 401:
            if await self.session.handle_unauthorized():
                return await self.retry.execute(descriptor, self.session.get_auth_headers())

        return result

    async def get_endpoints(self) -> Result[Dict[str, Any], PiholeError]:
        """List the API endpoints the server offers."""
        return await self.request("GET", API_ENDPOINTS)
