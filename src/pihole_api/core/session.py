"""
Pi-hole API Client - Session Management

This module owns the authentication state: login, logout, expiry and
refresh tracking, and the single in-flight login shared by concurrent
callers.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from ..shared.constants import API_AUTH, HEADER_CSRF, HEADER_SID, PRESET_SESSION_VALIDITY
from .errors import ErrorKind, PiholeError, create_error
from .models import AuthResponse, RequestDescriptor
from .retry import RetryOrchestrator

logger = logging.getLogger("pihole-api")


@dataclass(frozen=True)
class SessionState:
    """Authenticated session, or the inert TOTP-pending placeholder."""

    sid: str
    csrf: str
    expires_at: float
    totp_required: bool = False

    @classmethod
    def totp_pending(cls) -> "SessionState":
        return cls(sid="", csrf="", expires_at=0.0, totp_required=True)


class SessionManager:
    """Manages Pi-hole session authentication.

    All reads and writes of the session state and the pending login go
    through this class.
    """

    def __init__(
        self,
        retry: RetryOrchestrator,
        password: Optional[str] = None,
        sid: Optional[str] = None,
        csrf: Optional[str] = None,
        auto_refresh: bool = True,
        refresh_threshold: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the session manager.

        Args:
            retry: Request executor used for login and logout
            password: Password for authentication
            sid: Pre-existing session id
            csrf: Pre-existing CSRF token (used only together with sid)
            auto_refresh: Re-login shortly before the session expires
            refresh_threshold: Seconds before expiry that trigger a refresh
            clock: Returns the current time as epoch seconds
        """
        self.retry = retry
        self.auto_refresh = auto_refresh
        self.refresh_threshold = refresh_threshold
        self._clock = clock
        self._password = password or None
        self._state: Optional[SessionState] = None
        self._pending: Optional[asyncio.Task] = None
        self._last_error: Optional[PiholeError] = None
        # Bumped by clear(); a login started under an older value is discarded
        self._generation = 0

        if sid and csrf:
            self._state = SessionState(
                sid=sid,
                csrf=csrf,
                expires_at=self._clock() + PRESET_SESSION_VALIDITY,
            )

    @property
    def state(self) -> Optional[SessionState]:
        return self._state

    @property
    def last_error(self) -> Optional[PiholeError]:
        """The error of the most recent failed login, if any."""
        return self._last_error

    def has_session(self) -> bool:
        """Check if a session exists and has not expired."""
        return self._state is not None and not self.is_expired()

    def is_expired(self) -> bool:
        if self._state is None:
            return True
        return self._clock() >= self._state.expires_at

    def needs_refresh(self) -> bool:
        """Check if the session is within ``refresh_threshold`` of expiry."""
        if self._state is None or not self.auto_refresh:
            return False
        return self._clock() >= self._state.expires_at - self.refresh_threshold

    def is_totp_required(self) -> bool:
        return self._state is not None and self._state.totp_required

    def get_auth_headers(self) -> Optional[Dict[str, str]]:
        """Session headers for authenticated requests, or None without a session."""
        if self._state is None:
            return None
        return {
            HEADER_SID: self._state.sid,
            HEADER_CSRF: self._state.csrf,
        }

    def set_password(self, password: str):
        self._password = password or None

    def clear(self):
        """Drop the local session and forget any pending login.

        A login still in flight when this is called finishes without
        touching the session.
        """
        self._generation += 1
        self._state = None
        self._pending = None

    async def ensure_session(self) -> bool:
        """Ensure a usable session exists, logging in if necessary.

        Returns:
            True if a valid session is available afterwards
        """
        if self.has_session() and not self.needs_refresh():
            return True

        return await self._shared_authenticate()

    async def _shared_authenticate(self) -> bool:
        """Join the in-flight login, or start one that later callers can join."""
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._run_pending())
        # shield: a cancelled caller must not cancel the login for the others
        return await asyncio.shield(self._pending)

    async def _run_pending(self) -> bool:
        try:
            return await self.authenticate()
        finally:
            if self._pending is asyncio.current_task():
                self._pending = None

    async def authenticate(self, totp: Optional[str] = None) -> bool:
        """Log in with the configured password.

        Args:
            totp: Optional TOTP code for two-factor authentication

        Returns:
            True if a new session was established
        """
        if not self._password:
            logger.warning("Cannot authenticate: no password configured")
            self._last_error = create_error(ErrorKind.UNAUTHORIZED, "No password configured", 0)
            return False

        body = {"password": self._password}
        if totp:
            body["totp"] = totp

        generation = self._generation
        result = await self.retry.execute(
            RequestDescriptor(method="POST", path=API_AUTH, body=body, no_retry=True)
        )

        if generation != self._generation:
            logger.info("Session cleared while logging in, discarding login result")
            return False

        if result.is_err():
            self._last_error = result.error
            if result.error.code is ErrorKind.TOTP_REQUIRED:
                logger.info("Authentication requires a TOTP code")
                self._state = SessionState.totp_pending()
            else:
                logger.warning(f"Authentication failed: {result.error.message}")
                self._state = None
            return False

        try:
            auth = AuthResponse.model_validate(result.value)
        except ValidationError as e:
            logger.warning(f"Authentication response malformed: {e.error_count()} error(s)")
            self._last_error = create_error(
                ErrorKind.PARSE_ERROR, "Malformed authentication response", 200
            )
            self._state = None
            return False

        self._state = SessionState(
            sid=auth.session.sid,
            csrf=auth.session.csrf,
            expires_at=self._clock() + auth.session.validity,
        )
        self._last_error = None
        logger.info(f"Authenticated, session valid for {auth.session.validity}s")
        return True

    async def logout(self) -> bool:
        """Log out and clear local state whatever the server answers.

        Returns:
            True if the server confirmed the logout or the session was already gone
        """
        if self._state is None:
            return True

        result = await self.retry.execute(
            RequestDescriptor(method="DELETE", path=API_AUTH, no_retry=True),
            self.get_auth_headers(),
        )

        self.clear()

        if result.is_ok():
            return True

        # Already logged out server-side
        if result.error.status == 401:
            return True

        logger.warning(f"Logout failed: {result.error.message}")
        return False

    async def handle_unauthorized(self) -> bool:
        """Discard the rejected session and log in again."""
        logger.info("Session rejected by server, re-authenticating")
        self._state = None
        return await self._shared_authenticate()
