"""Invoke a user-supplied health check, optionally racing it against a timeout."""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, NoReturn

from healthili.errors import HealthCheckTimeoutError
from healthili.logger import get_logger

if TYPE_CHECKING:
    from healthili.models import HealthCheck, HealthOutcome

logger = get_logger()

# Checks that lost the race against their timeout. Held until they settle so
# the event loop does not garbage-collect them mid-flight.
_late_checks: set[asyncio.Future[HealthOutcome]] = set()


async def timeout_guard(timeout_ms: int) -> NoReturn:
    """Sleep for *timeout_ms* milliseconds, then raise ``HealthCheckTimeoutError``."""
    await asyncio.sleep(timeout_ms / 1000)
    raise HealthCheckTimeoutError(timeout_ms)


def _discard_late_result(task: asyncio.Future[HealthOutcome]) -> None:
    _late_checks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("late health check result discarded", error=str(exc))
    else:
        logger.debug("late health check result discarded", result=task.result())


async def run_check(check: HealthCheck, timeout: int | None = None) -> HealthOutcome:
    """Call *check* once and return its outcome.

    Synchronous checks return (or raise) immediately. Asynchronous checks are
    awaited, and when *timeout* (milliseconds) is given they are raced against
    :func:`timeout_guard`; whichever settles first decides the result. A check
    that loses the race keeps running but its outcome is dropped.
    """
    outcome = check()
    if not inspect.isawaitable(outcome):
        return outcome
    if timeout is None:
        return await outcome

    check_task = asyncio.ensure_future(outcome)
    guard_task = asyncio.create_task(timeout_guard(timeout))
    try:
        done, _ = await asyncio.wait({check_task, guard_task}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        guard_task.cancel()
        check_task.cancel()
        raise

    if check_task in done:
        guard_task.cancel()
        return check_task.result()

    _late_checks.add(check_task)
    check_task.add_done_callback(_discard_late_result)
    return guard_task.result()
