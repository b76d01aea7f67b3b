"""Serve a pass/warn/fail health check over HTTP as ``application/health+json``."""

from __future__ import annotations

from healthili.checks import run_check, timeout_guard
from healthili.errors import EndpointCloseError, HealthCheckError, HealthCheckTimeoutError, HealthiliError
from healthili.models import EndpointSettings, HealthCheck, HealthOutcome, HealthPayload, HealthStatus
from healthili.server import HealthEndpoint, create_endpoint
from healthili.status import build_payload, classify, evaluate

__all__ = [
    "EndpointCloseError",
    "EndpointSettings",
    "HealthCheck",
    "HealthCheckError",
    "HealthCheckTimeoutError",
    "HealthEndpoint",
    "HealthOutcome",
    "HealthPayload",
    "HealthStatus",
    "HealthiliError",
    "build_payload",
    "classify",
    "create_endpoint",
    "evaluate",
    "run_check",
    "timeout_guard",
]
