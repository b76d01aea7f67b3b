"""Map check outcomes to a canonical status and build the response payload."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from healthili.checks import run_check
from healthili.errors import HealthCheckTimeoutError
from healthili.logger import get_logger
from healthili.models import HealthPayload, HealthStatus

if TYPE_CHECKING:
    from healthili.models import EndpointSettings, HealthCheck

logger = get_logger()


def classify(outcome: object, failed: bool) -> tuple[HealthStatus, HTTPStatus]:
    """Return the canonical status and HTTP status for a check outcome.

    Anything that is not ``True``, ``"pass"`` or ``"warn"`` fails, as does
    every outcome accompanied by a failure.
    """
    if failed:
        return HealthStatus.FAIL, HTTPStatus.INTERNAL_SERVER_ERROR
    if outcome is True or outcome == HealthStatus.PASS:
        return HealthStatus.PASS, HTTPStatus.OK
    if outcome == HealthStatus.WARN:
        return HealthStatus.WARN, HTTPStatus.OK
    return HealthStatus.FAIL, HTTPStatus.INTERNAL_SERVER_ERROR


def _present(value: object) -> bool:
    return value is not None and value != ""


def build_payload(
    status: HealthStatus,
    settings: EndpointSettings,
    error: BaseException | None = None,
) -> HealthPayload:
    """Assemble the response body from *status*, endpoint metadata and *error*."""
    payload = HealthPayload(status=status)
    metadata = {
        "service_id": settings.service_id,
        "version": settings.version,
        "release_id": settings.release_id,
        "description": settings.description,
    }
    updates = {key: value for key, value in metadata.items() if _present(value)}
    if error is not None and not settings.hide_error:
        updates["output"] = str(error)
    return payload.model_copy(update=updates)


async def evaluate(check: HealthCheck, settings: EndpointSettings) -> tuple[HTTPStatus, HealthPayload]:
    """Run *check* under *settings* and return the HTTP status and payload."""
    outcome: object = None
    error: Exception | None = None
    try:
        outcome = await run_check(check, timeout=settings.timeout)
    except HealthCheckTimeoutError as exc:
        logger.warning("health check timed out", timeout_ms=exc.timeout_ms)
        error = exc
    except Exception as exc:
        logger.warning("health check failed", error=str(exc), error_type=type(exc).__name__)
        error = exc

    status, http_status = classify(outcome, failed=error is not None)
    return http_status, build_payload(status, settings, error)
