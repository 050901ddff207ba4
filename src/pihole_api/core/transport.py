"""
Pi-hole API Client - HTTP Transport

This module performs single HTTP attempts against the Pi-hole API and turns
every outcome, including transport exceptions, into a Result.
"""

import asyncio
import json
import logging
import ssl
import time
from typing import Any, Dict, Mapping, Optional

import certifi
import httpx

from ..shared.constants import REDACTED_HEADERS
from .errors import ErrorKind, PiholeError, create_error, from_api_key, from_status
from .models import SUPPORTED_METHODS, RequestDescriptor
from .result import Err, Ok, Result

logger = logging.getLogger("pihole-api")

DEFAULT_TIMEOUT = 10.0
DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}
CERTIFICATE_HINT = "Accept the certificate in your browser first, or disable SSL verification"


class RequestResponseLogger:
    """Logs API requests and responses with session headers redacted."""

    def __init__(self, logger: logging.Logger):
        """Initialize request/response logger.

        Args:
            logger: Logger instance to use for logging
        """
        self.logger = logger

    def log_request(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        data: Any = None,
    ):
        """Log API request details.

        The body is never logged since login requests carry the password.

        Args:
            method: HTTP method
            url: Request URL
            headers: Request headers
            data: Request payload
        """
        safe_headers = {}
        if headers:
            for key, value in headers.items():
                if key.lower() in REDACTED_HEADERS:
                    safe_headers[key] = "[REDACTED]"
                else:
                    safe_headers[key] = value

        log_data = {
            "request": {
                "method": method,
                "url": url,
                "headers": safe_headers,
                "has_data": data is not None,
            }
        }

        self.logger.info(f"API Request: {json.dumps(log_data)}")

    def log_response(
        self,
        status_code: int,
        response_size: Optional[int] = None,
        duration_ms: Optional[float] = None,
        error: Optional[PiholeError] = None,
    ):
        """Log API response details.

        Args:
            status_code: HTTP status code (0 when no response was received)
            response_size: Size of response in bytes
            duration_ms: Request duration in milliseconds
            error: Classified error if the attempt failed
        """
        log_data = {
            "response": {
                "status_code": status_code,
                "response_size": response_size,
                "duration_ms": duration_ms,
                "success": error is None and 200 <= status_code < 300,
                "has_error": bool(error),
            }
        }

        if error:
            log_data["error"] = {"code": error.code.value, "message": error.message}

        level = logging.INFO if log_data["response"]["success"] else logging.WARNING
        self.logger.log(level, f"API Response: {json.dumps(log_data)}")


request_logger = RequestResponseLogger(logger)


def _text(value: Any) -> Optional[str]:
    """Return ``value`` if it is a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


def _has_body(body: Any) -> bool:
    """Whether ``body`` is sent. Empty containers are sent; None, False, 0 and "" are not."""
    if isinstance(body, (dict, list)):
        return True
    return bool(body)


class Transport:
    """Executes exactly one HTTP attempt per call."""

    def _create_ssl_context(self, verify_ssl: bool) -> ssl.SSLContext:
        """
        Create SSL context.

        Pi-hole ships with a self-signed certificate, so unverified
        connections are allowed but reported loudly.

        Args:
            verify_ssl: Whether to verify SSL certificates

        Returns:
            Configured SSL context
        """
        if not verify_ssl:
            logger.warning(
                "SSL CERTIFICATE VERIFICATION IS DISABLED. "
                "Connections to the Pi-hole are vulnerable to man-in-the-middle attacks."
            )
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            return context

        context = ssl.create_default_context(cafile=certifi.where())
        context.check_hostname = True
        context.verify_mode = ssl.CERT_REQUIRED
        context.minimum_version = ssl.TLSVersion.TLSv1_2

        logger.debug("SSL verification enabled with TLS 1.2+ enforcement")
        return context

    def __init__(
        self,
        base_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the transport.

        Args:
            base_url: Pi-hole base URL; empty means not configured
            timeout: Default per-attempt timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            client: Pre-built httpx client (tests inject a mock transport here)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        if client is None:
            client = httpx.AsyncClient(
                verify=self._create_ssl_context(verify_ssl),
                timeout=httpx.Timeout(timeout),
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=10,
                    keepalive_expiry=30.0,
                ),
            )
        self.client = client

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, url: str):
        self._base_url = (url or "").rstrip("/")

    def check_configured(self) -> Optional[PiholeError]:
        """Return an error when no base URL is set, else None."""
        if not self.base_url:
            return create_error(ErrorKind.BAD_REQUEST, "Base URL not configured", 0)
        return None

    async def close(self):
        """Close the httpx client."""
        await self.client.aclose()

    def _build_headers(
        self,
        descriptor: RequestDescriptor,
        auth_headers: Optional[Mapping[str, str]],
    ) -> Dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        if auth_headers:
            headers.update(auth_headers)
        if descriptor.headers:
            headers.update(descriptor.headers)
        return headers

    async def attempt(
        self,
        descriptor: RequestDescriptor,
        auth_headers: Optional[Mapping[str, str]] = None,
    ) -> Result[Any, PiholeError]:
        """Make a single request attempt.

        Args:
            descriptor: What to send
            auth_headers: Session headers, if authenticated

        Returns:
            Ok with the decoded JSON body (None for 204), or Err with a
            classified PiholeError. Never raises for network or HTTP failures.
        """
        not_configured = self.check_configured()
        if not_configured:
            return Err(not_configured)

        method = descriptor.method.upper()
        if method not in SUPPORTED_METHODS:
            return Err(create_error(ErrorKind.BAD_REQUEST, f"Unsupported HTTP method: {method}", 0))

        url = f"{self.base_url}{descriptor.path}"
        headers = self._build_headers(descriptor, auth_headers)
        timeout = descriptor.timeout if descriptor.timeout is not None else self.timeout
        content = json.dumps(descriptor.body) if _has_body(descriptor.body) else None

        request_logger.log_request(method, url, headers, content)
        start_time = time.monotonic()

        try:
            response = await asyncio.wait_for(
                self.client.request(
                    method,
                    url,
                    headers=headers,
                    params=descriptor.params,
                    content=content,
                    timeout=timeout,
                ),
                timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            error = create_error(ErrorKind.TIMEOUT, f"Request timed out after {timeout}s", 0)
            request_logger.log_response(0, 0, self._elapsed_ms(start_time), error)
            return Err(error)
        except (httpx.TransportError, OSError) as e:
            error = self._classify_transport_error(e)
            request_logger.log_response(0, 0, self._elapsed_ms(start_time), error)
            return Err(error)
        except Exception as e:
            logger.exception("Unexpected error during request to %s", url)
            error = create_error(ErrorKind.UNKNOWN, f"Unknown error occurred: {e}", 0)
            request_logger.log_response(0, 0, self._elapsed_ms(start_time), error)
            return Err(error)

        result = self._handle_response(response)
        request_logger.log_response(
            response.status_code,
            len(response.content) if response.content else 0,
            self._elapsed_ms(start_time),
            result.error if result.is_err() else None,
        )
        return result

    def _handle_response(self, response: httpx.Response) -> Result[Any, PiholeError]:
        if not response.is_success:
            return Err(self._parse_error_response(response))

        if response.status_code == 204:
            return Ok(None)

        try:
            return Ok(response.json())
        except ValueError:
            return Err(create_error(
                ErrorKind.PARSE_ERROR, "Failed to parse response", response.status_code
            ))

    def _parse_error_response(self, response: httpx.Response) -> PiholeError:
        """Classify a non-2xx response, preferring the API's error key."""
        error_data: Dict[str, Any] = {}
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error_data = body["error"]

        api_key = _text(error_data.get("key"))
        code = from_api_key(api_key) if api_key else from_status(response.status_code)

        return create_error(
            code,
            _text(error_data.get("message")) or f"HTTP {response.status_code}",
            response.status_code,
            hint=_text(error_data.get("hint")),
            api_key=api_key,
        )

    def _classify_transport_error(self, error: Exception) -> PiholeError:
        """Match a transport exception's text against known failure modes."""
        message = str(error) or error.__class__.__name__
        lowered = message.lower()

        if any(token in lowered for token in ("ssl", "certificate", "cert_", "sec_error")):
            return create_error(
                ErrorKind.CERTIFICATE_ERROR, "SSL certificate error", 0, hint=CERTIFICATE_HINT
            )

        if "econnrefused" in lowered or "connection refused" in lowered:
            return create_error(ErrorKind.CONNECTION_REFUSED, "Connection refused", 0)

        return create_error(ErrorKind.NETWORK_ERROR, message, 0)

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.monotonic() - start_time) * 1000, 2)
