"""
Shared pytest configuration and fixtures for the Pi-hole API client tests.

This module provides:
- The fake Pi-hole backend fixture (see fixtures/mock_responses.py)
- Factories for clients and lower-level components wired to that backend
"""

from typing import Any

import pytest
import pytest_asyncio

from pihole_api.core import (
    PiholeClient,
    PiholeConfig,
    RetryConfig,
    RetryOrchestrator,
    SessionManager,
    Transport,
)
from fixtures.mock_responses import BASE_URL, FakePihole, mock_http_client


# ========== Fake Backend ==========


@pytest.fixture
def fake_pihole() -> FakePihole:
    """Provide an empty fake backend."""
    return FakePihole()


# ========== Component Factories ==========


@pytest.fixture
def pihole_config() -> PiholeConfig:
    """Provide a configuration pointing at the fake backend."""
    return PiholeConfig(url=BASE_URL, password="x")


@pytest_asyncio.fixture
async def make_client(fake_pihole):
    """Factory for PiholeClient instances wired to the fake backend."""
    clients: list[PiholeClient] = []

    def _make(**overrides) -> PiholeClient:
        values = {"url": BASE_URL, "password": "x", "retry_delay_base": 0.0}
        values.update(overrides)
        client = PiholeClient(PiholeConfig(**values), http_client=mock_http_client(fake_pihole))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.close()


@pytest_asyncio.fixture
async def make_session(fake_pihole):
    """Factory for SessionManager instances with a controllable clock.

    The returned manager exposes the clock list as ``now``; set ``now[0]``
    to move time.
    """
    transports: list[Transport] = []

    def _make(**overrides) -> SessionManager:
        now = [1_000_000.0]
        transport = Transport(base_url=BASE_URL, client=mock_http_client(fake_pihole))
        transports.append(transport)
        retry = RetryOrchestrator(transport, RetryConfig(retry_delay_base=0.0))
        values: dict[str, Any] = {"password": "x", "clock": lambda: now[0]}
        values.update(overrides)
        manager = SessionManager(retry, **values)
        manager.now = now
        return manager

    yield _make

    for transport in transports:
        await transport.close()


@pytest_asyncio.fixture
async def transport(fake_pihole):
    """Provide a Transport wired to the fake backend."""
    transport = Transport(base_url=BASE_URL, client=mock_http_client(fake_pihole))
    yield transport
    await transport.close()


# ========== Pytest Configuration ==========


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "slow: mark test as slow running")

