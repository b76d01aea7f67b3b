"""Domain models for health endpoints: canonical status, settings and payload."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from healthili.constants import DEFAULT_PATH, DEFAULT_PORT

HealthOutcome = bool | Literal["pass", "warn", "fail"]
HealthCheck = Callable[[], HealthOutcome | Awaitable[HealthOutcome]]
MetadataValue = str | int | float


class HealthStatus(StrEnum):
    """Canonical status reported by a health endpoint."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class EndpointSettings(BaseModel):
    """Immutable configuration of a single health endpoint.

    Fields accept both their Python names and the camelCase names used in the
    response payload (``serviceId``, ``releaseId``, ``hideError``). Unknown
    fields are rejected so a misspelled option cannot be silently dropped.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    service_id: MetadataValue | None = Field(default=None, alias="serviceId")
    description: str | None = None
    version: MetadataValue | None = None
    release_id: MetadataValue | None = Field(default=None, alias="releaseId")
    host: str | None = None
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    hide_error: bool = Field(default=False, alias="hideError")
    path: str = DEFAULT_PATH
    timeout: int | None = Field(default=None, gt=0)

    @field_validator("path")
    @classmethod
    def _ensure_leading_slash(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"


class HealthPayload(BaseModel):
    """JSON body of a health response (``application/health+json``)."""

    model_config = ConfigDict(populate_by_name=True)

    status: HealthStatus
    service_id: MetadataValue | None = Field(default=None, alias="serviceId")
    version: MetadataValue | None = None
    release_id: MetadataValue | None = Field(default=None, alias="releaseId")
    description: str | None = None
    output: str | None = None

    def to_json(self) -> bytes:
        """Serialize with camelCase keys, omitting unset fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
