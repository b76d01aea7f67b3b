"""Run a standalone health endpoint configured from the environment."""

from __future__ import annotations

import asyncio
import signal

from healthili.config import ServiceSettings, load_check
from healthili.logger import get_logger, setup_logging, stop_logging
from healthili.server import HealthEndpoint

logger = get_logger()


async def serve(settings: ServiceSettings, stop: asyncio.Event) -> None:
    """Serve the configured check until *stop* is set, then close the endpoint."""
    endpoint = HealthEndpoint(load_check(settings.check), settings.to_endpoint_settings())
    await endpoint.start()
    try:
        await stop.wait()
        logger.info("shutting down health endpoint")
    finally:
        await endpoint.close()


async def main() -> None:
    """Entry point for ``python -m healthili``."""
    settings = ServiceSettings()
    setup_logging(service=settings.log_service, level=settings.log_level)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    try:
        await serve(settings, stop)
    finally:
        stop_logging()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
