"""Defaults shared across the healthili modules."""

from __future__ import annotations

# -- Endpoint ----------------------------------------------------------------
DEFAULT_PORT = 3000
DEFAULT_PATH = "/health"
HEALTH_CONTENT_TYPE = "application/health+json"

# -- HTTP parsing ------------------------------------------------------------
MAX_REQUEST_LINE_BYTES = 8192  # Longer request lines are answered with 400.
MAX_HEADER_LINES = 100  # Header lines accepted per request, not counting the blank terminator.
HEADER_TIMEOUT_SECONDS = 10.0  # Connections that send no complete request head in time get 408.

# -- Environment -------------------------------------------------------------
ENV_PREFIX = "HEALTHILI_"
