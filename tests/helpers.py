"""Helpers shared by the endpoint integration tests."""

from __future__ import annotations

import asyncio
import socket
from collections.abc import Awaitable, Callable

from healthili.server import HealthEndpoint

EndpointFactory = Callable[..., Awaitable[HealthEndpoint]]


def endpoint_url(endpoint: HealthEndpoint, path: str | None = None) -> str:
    """Build a loopback URL for *endpoint*, defaulting to its configured path."""
    return f"http://127.0.0.1:{endpoint.port}{endpoint.path if path is None else path}"


def free_port() -> int:
    """Return a loopback port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def raw_request(port: int, data: bytes) -> bytes:
    """Send *data* verbatim, half-close, and return everything the server sends back."""
    reader, writer = await asyncio.open_connection("127.0.0.1", port)
    writer.write(data)
    await writer.drain()
    writer.write_eof()
    response = await reader.read()
    writer.close()
    await writer.wait_closed()
    return response
