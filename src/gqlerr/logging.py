"""Logging configuration helpers with Structlog integration.

Key Responsibilities:
    - Configure standard library logging and Structlog for JSON output
    - Scrub sensitive fields and render embedded exceptions as text

Collaborators:
    - Upstream: Service entry-points call :func:`configure_logging` once
    - Downstream: Relies on ``logging`` and ``structlog``

Side Effects:
    - Configures global logging handlers and the Structlog pipeline

Thread Safety:
    - Configuration should be invoked once during process startup
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import Any, Callable

import structlog

from .config import LoggingSettings

__all__ = ["configure_logging", "get_logger"]

Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]

# ==============================================================================
# STRUCTLOG PROCESSORS
# ==============================================================================


def _structlog_scrubber(scrub_fields: Iterable[str] | None) -> Processor:
    """Create a Structlog processor that replaces configured fields with ``***``."""
    lower_fields = {field.lower() for field in scrub_fields or ()}

    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key in list(event_dict.keys()):
            if key.lower() in lower_fields:
                event_dict[key] = "***"
        return event_dict

    return processor


def _render_exceptions(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Render exception-valued fields (error causes) as their message."""
    for key, value in event_dict.items():
        if isinstance(value, BaseException):
            event_dict[key] = str(value)
    return event_dict


# ==============================================================================
# CONFIGURATION
# ==============================================================================


def configure_logging(
    level: int | str | None = None,
    *,
    settings: LoggingSettings | None = None,
) -> None:
    """Configure global logging for the application.

    Args:
        level: Optional logging level or level name. When ``settings`` is
            provided this argument is ignored.
        settings: Optional logging settings object providing level and scrub
            configuration.
    """
    scrub_fields: Iterable[str] | None = None
    if settings is not None:
        level = settings.level
        scrub_fields = settings.scrub_fields

    if isinstance(level, str):
        level_value = getattr(logging, level.upper(), logging.INFO)
    elif isinstance(level, int):
        level_value = level
    else:
        level_value = logging.INFO

    root_logger = logging.getLogger()
    preserved_handlers = [
        existing
        for existing in root_logger.handlers
        if getattr(existing.__class__, "__module__", "").startswith("_pytest.")
    ]
    logging.basicConfig(
        level=level_value,
        format="%(message)s",
        handlers=[*preserved_handlers, logging.StreamHandler(sys.stdout)],
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _structlog_scrubber(scrub_fields),
            _render_exceptions,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return a Structlog logger bound to ``name``."""
    return structlog.get_logger(name)
