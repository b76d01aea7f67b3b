"""Logging for healthili.

Library code logs through :func:`get_logger`, which routes structlog events to
the stdlib ``healthili`` logger. An application embedding an endpoint keeps
its own handlers and only tunes the library's verbosity with
:func:`set_level`. ``python -m healthili`` owns the process and calls
:func:`setup_logging` to render one JSON object per line on stdout:
  {timestamp, level, logger, service, event, ...bound fields}
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

LOGGER_NAME = "healthili"

_handler: logging.Handler | None = None


def get_logger(**initial_values: Any) -> Any:
    """Return a structlog logger bound to the ``healthili`` stdlib logger."""
    return structlog.get_logger(LOGGER_NAME, **initial_values)


def parse_level(level: str) -> int:
    """Translate a level name such as ``"debug"`` to its numeric value."""
    try:
        return logging.getLevelNamesMapping()[level.upper()]
    except KeyError:
        raise ValueError(f"unknown log level {level!r}") from None


def set_level(level: str) -> None:
    """Set the threshold of the ``healthili`` logger without touching the root logger."""
    logging.getLogger(LOGGER_NAME).setLevel(parse_level(level))


def setup_logging(service: str = "healthili", level: str = "info") -> None:
    """Send healthili events to stdout as JSON, tagged with *service*.

    Only the ``healthili`` logger gets a handler, and it stops propagating so
    host handlers on the root logger do not print the same event twice.
    Calling it again replaces the previous setup.
    """
    global _handler
    stop_logging()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    library_logger = logging.getLogger(LOGGER_NAME)
    library_logger.addHandler(handler)
    library_logger.propagate = False
    set_level(level)
    _handler = handler

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _add_service(service),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def stop_logging() -> None:
    """Undo :func:`setup_logging`. Safe to call repeatedly."""
    global _handler
    if _handler is None:
        return

    library_logger = logging.getLogger(LOGGER_NAME)
    library_logger.removeHandler(_handler)
    library_logger.propagate = True
    _handler.flush()
    _handler.close()
    _handler = None
    structlog.reset_defaults()


def _add_service(service: str) -> structlog.types.Processor:
    def processor(
        _logger: structlog.types.WrappedLogger,
        _method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> structlog.types.EventDict:
        event_dict["service"] = service
        return event_dict

    return processor
