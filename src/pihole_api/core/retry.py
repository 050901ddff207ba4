"""
Pi-hole API Client - Retry Mechanism

This module retries transient failures with capped exponential backoff.
Failures arrive as ``Err`` results rather than exceptions.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from .errors import PiholeError, is_retryable
from .models import RequestDescriptor
from .result import Result
from .transport import Transport

logger = logging.getLogger("pihole-api")


class RetryConfig:
    """Configuration for retry mechanism with exponential backoff."""

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay_base: float = 1.0,
        retry_delay_max: float = 10.0,
        backoff_multiplier: float = 2.0,
    ):
        """Initialize retry configuration.

        Args:
            max_retries: Retries after the first attempt
            retry_delay_base: Delay in seconds before the first retry
            retry_delay_max: Ceiling for any single delay in seconds
            backoff_multiplier: Growth factor between consecutive delays
        """
        self.max_retries = max(0, max_retries)
        self.retry_delay_base = retry_delay_base
        self.retry_delay_max = retry_delay_max
        self.backoff_multiplier = backoff_multiplier

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after the failed attempt with 0-based index ``attempt``."""
        delay = self.retry_delay_base * (self.backoff_multiplier ** attempt)
        return min(delay, self.retry_delay_max)


async def retry_with_backoff(
    func: Callable[..., Awaitable[Result[Any, PiholeError]]],
    *args,
    retry_config: Optional[RetryConfig] = None,
    **kwargs
) -> Result[Any, PiholeError]:
    """Call ``func`` until it succeeds, fails permanently or attempts run out.

    Args:
        func: Async function returning a Result
        *args: Positional arguments to pass to the function
        retry_config: Configuration for retry mechanism
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The first successful result, the first non-retryable failure, or
        the last failure once all attempts are used.
    """
    if retry_config is None:
        retry_config = RetryConfig()

    for attempt in range(retry_config.max_attempts):
        result = await func(*args, **kwargs)

        if result.is_ok() or not is_retryable(result.error.code):
            return result

        # Don't wait after the last attempt
        if attempt == retry_config.max_attempts - 1:
            break

        delay = retry_config.delay_for(attempt)
        logger.info(f"Attempt {attempt + 1} failed, retrying in {delay}s: {result.error.message}")
        await asyncio.sleep(delay)

    return result


class RetryOrchestrator:
    """Wraps a Transport with bounded retry."""

    def __init__(self, transport: Transport, retry_config: Optional[RetryConfig] = None):
        self.transport = transport
        self.retry_config = retry_config or RetryConfig()

    async def execute(
        self,
        descriptor: RequestDescriptor,
        auth_headers: Optional[Mapping[str, str]] = None,
    ) -> Result[Any, PiholeError]:
        """Run ``descriptor``, retrying transient failures unless it opts out."""
        if descriptor.no_retry:
            return await self.transport.attempt(descriptor, auth_headers)

        return await retry_with_backoff(
            self.transport.attempt,
            descriptor,
            auth_headers,
            retry_config=self.retry_config,
        )
