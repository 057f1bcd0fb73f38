"""Convert resolver errors into client responses and log entries.

Key Responsibilities:
    - Resolve any exception reaching the response boundary to a
      :class:`~gqlerr.errors.GQLError`, coercing unknown errors to ``internal``
    - Write exactly one structured log entry per error at its resolved level
    - Return the client-safe ``graphql.GraphQLError`` for the response

Collaborators:
    - Upstream: :class:`gqlerr.extensions.ErrorPresenterExtension` or any
      other hosting code calls the presenter once per error
    - Downstream: a Structlog logger records the entries

Side Effects:
    - Emits log entries

Thread Safety:
    - Stateless aside from the captured logger; safe for concurrent requests
"""

from __future__ import annotations

from typing import Any, Callable

import structlog
from graphql import GraphQLError

from . import fields
from .codes import Level
from .config import get_settings
from .errors import GQLError, find_error, internal

__all__ = ["DevelopmentPanic", "Presenter", "error_presenter", "log_error"]

Presenter = Callable[[BaseException | None], GraphQLError | None]

# Parameter names of structlog's logging methods.
_RESERVED_KEYS = frozenset({"event", "self"})

_LOG_METHODS: dict[Level, str] = {
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warning",
    Level.ERROR: "error",
    Level.PANIC: "critical",
}


class DevelopmentPanic(RuntimeError):
    """Raised after a panic-level entry is logged in development mode."""

    def __init__(self, error: GQLError) -> None:
        super().__init__(str(error))
        self.error = error


def _type_name(err: BaseException) -> str:
    cls = type(err)
    return f"{cls.__module__}.{cls.__qualname__}"


def log_error(logger: Any, err: GQLError) -> Level:
    """Log ``err`` at its resolved level and return that level.

    The request path is prepended as ``gql_path`` when one was captured. Field
    keys that clash with the logger call's own parameters or with earlier
    entries are renamed, never dropped.
    """
    level = err.log_level()
    # Unknown levels still get logged rather than dropped.
    log_fn = getattr(logger, _LOG_METHODS.get(level, "error"))

    path = str(err.path)
    event = fields.as_event_dict(
        err.fields,
        initial={"gql_path": path} if path else None,
        reserved=_RESERVED_KEYS,
    )

    log_fn(err.message, **event)
    return level


def error_presenter(logger: Any | None = None, *, development: bool | None = None) -> Presenter:
    """Build a presenter that logs to ``logger``.

    Args:
        logger: Structlog logger; defaults to the configured ``logger_name``.
        development: Raise :class:`DevelopmentPanic` after logging panic-level
            errors. Defaults to the ``development`` setting.

    Returns:
        Callable mapping an exception (or ``None``) to the client error.
    """
    settings = get_settings()
    if logger is None:
        logger = structlog.get_logger(settings.logger_name)
    if development is None:
        development = settings.development

    def present(err: BaseException | None) -> GraphQLError | None:
        if err is None:
            return None

        gql_err = find_error(err)
        if gql_err is None:
            logger.error(
                "received error that was not of type GQLError",
                type=_type_name(err),
                error=err,
            )
            return internal(str(err), fields.error(err)).to_graphql_error()

        level = log_error(logger, gql_err)
        if development and level is Level.PANIC:
            raise DevelopmentPanic(gql_err)
        return gql_err.to_graphql_error()

    return present
