"""Shared fixtures for the healthili test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from healthili.models import HealthCheck
from healthili.server import HealthEndpoint, create_endpoint
from tests.helpers import EndpointFactory


@pytest.fixture
async def endpoints() -> AsyncIterator[EndpointFactory]:
    """Start endpoints on an ephemeral loopback port and close them afterwards."""
    started: list[HealthEndpoint] = []

    async def _create(check: HealthCheck, **options: Any) -> HealthEndpoint:
        options.setdefault("host", "127.0.0.1")
        options.setdefault("port", 0)
        endpoint = await create_endpoint(check, **options)
        started.append(endpoint)
        return endpoint

    yield _create

    for endpoint in started:
        if not endpoint.closed:
            await endpoint.close()


@pytest.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=5.0) as http_client:
        yield http_client
