"""Exception hierarchy for health endpoints."""

from __future__ import annotations


class HealthiliError(Exception):
    """Base class for all errors raised by healthili."""


class HealthCheckError(HealthiliError):
    """The user-supplied health check failed."""


class HealthCheckTimeoutError(HealthCheckError):
    """The health check did not settle within the configured timeout."""

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Health function timed out after {timeout_ms} ms!")


class EndpointCloseError(HealthiliError):
    """The listening socket could not be released."""
