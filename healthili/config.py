"""Process configuration loaded from ``HEALTHILI_*`` environment variables."""

from __future__ import annotations

import importlib
import os
from typing import TYPE_CHECKING

from healthili.constants import DEFAULT_PATH, DEFAULT_PORT, ENV_PREFIX
from healthili.models import EndpointSettings

if TYPE_CHECKING:
    from healthili.models import HealthCheck, HealthOutcome

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _always_pass() -> HealthOutcome:
    return "pass"


def load_check(import_path: str | None) -> HealthCheck:
    """Resolve a ``module:attribute`` import path to a health check callable.

    Without an import path the returned check always passes, which turns the endpoint
    into a plain liveness probe.
    """
    if not import_path:
        return _always_pass
    module_name, sep, attr_path = import_path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"health check must be given as 'module:attribute', got {import_path!r}")

    target: object = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        target = getattr(target, attr)
    if not callable(target):
        raise TypeError(f"health check {import_path!r} is not callable")
    return target  # type: ignore[return-value]


class ServiceSettings:
    """Configuration for ``python -m healthili``, read from the environment.

    Prefix: HEALTHILI_ for every setting. Unset or empty metadata variables
    are left out of the payload.
    """

    host: str | None
    port: int
    path: str
    timeout_ms: int | None
    hide_error: bool
    service_id: str | None
    description: str | None
    version: str | None
    release_id: str | None
    check: str | None
    log_level: str
    log_service: str

    def __init__(self) -> None:
        timeout = os.environ.get(f"{ENV_PREFIX}TIMEOUT_MS", "")

        self.host = os.environ.get(f"{ENV_PREFIX}HOST") or None
        self.port = int(os.environ.get(f"{ENV_PREFIX}PORT", str(DEFAULT_PORT)))
        self.path = os.environ.get(f"{ENV_PREFIX}PATH", DEFAULT_PATH)
        self.timeout_ms = int(timeout) if timeout else None
        self.hide_error = os.environ.get(f"{ENV_PREFIX}HIDE_ERROR", "").lower() in _TRUTHY
        self.service_id = os.environ.get(f"{ENV_PREFIX}SERVICE_ID") or None
        self.description = os.environ.get(f"{ENV_PREFIX}DESCRIPTION") or None
        self.version = os.environ.get(f"{ENV_PREFIX}VERSION") or None
        self.release_id = os.environ.get(f"{ENV_PREFIX}RELEASE_ID") or None
        self.check = os.environ.get(f"{ENV_PREFIX}CHECK") or None
        self.log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", "info")
        self.log_service = os.environ.get(f"{ENV_PREFIX}LOG_SERVICE", "healthili")

    def to_endpoint_settings(self) -> EndpointSettings:
        return EndpointSettings(
            service_id=self.service_id,
            description=self.description,
            version=self.version,
            release_id=self.release_id,
            host=self.host,
            port=self.port,
            hide_error=self.hide_error,
            path=self.path,
            timeout=self.timeout_ms,
        )
