"""Tests for the ``python -m healthili`` entry point."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from healthili.__main__ import serve
from healthili.config import ServiceSettings
from tests.helpers import free_port


async def test_serve_until_stopped(monkeypatch: pytest.MonkeyPatch) -> None:
    port = free_port()
    monkeypatch.setenv("HEALTHILI_HOST", "127.0.0.1")
    monkeypatch.setenv("HEALTHILI_PORT", str(port))
    monkeypatch.setenv("HEALTHILI_SERVICE_ID", "standalone")
    monkeypatch.delenv("HEALTHILI_CHECK", raising=False)

    stop = asyncio.Event()
    task = asyncio.create_task(serve(ServiceSettings(), stop))

    async with httpx.AsyncClient(timeout=5.0) as client:
        for _ in range(50):
            try:
                res = await client.get(f"http://127.0.0.1:{port}/health")
                break
            except httpx.ConnectError:
                await asyncio.sleep(0.02)
        else:
            pytest.fail("standalone endpoint never came up")

        assert res.status_code == 200
        assert res.json() == {"status": "pass", "serviceId": "standalone"}

        stop.set()
        await asyncio.wait_for(task, timeout=5)

        with pytest.raises(httpx.ConnectError):
            await client.get(f"http://127.0.0.1:{port}/health")
