"""Structured errors for GraphQL resolvers.

Key Responsibilities:
    - Provide :class:`GQLError`, an exception carrying a classification code,
      an internal message, structured log fields and client-facing overrides
    - Expose one constructor per :class:`~gqlerr.codes.Code`
    - Walk cause chains so callers can find the error a failure wraps

Collaborators:
    - Upstream: Resolver code raises errors built by :func:`new` and the code
      specific helpers
    - Downstream: :mod:`gqlerr.presenter` logs them and converts them into
      ``graphql.GraphQLError`` responses

Side Effects:
    - None; construction reads the ambient request path only

Thread Safety:
    - An error belongs to the call chain that builds it. Decorate it before it
      is raised; the presenter treats it as read-only afterwards.

Example:
    >>> from gqlerr import errors, fields
    >>> err = errors.invalid_argument(
    ...     "muffin count must be positive", fields.integer("muffin_count", -1)
    ... ).with_message("bad input given").with_error_id("muffins_must_be_positive")
    >>> str(err)
    '[invalid_argument] muffin count must be positive'
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from graphql import GraphQLError

from .codes import Code, Level, default_level, default_message
from .context import RequestPath, get_request_path
from .fields import Field, FieldType

__all__ = [
    "GQLError",
    "already_exists",
    "failed_precondition",
    "find_error",
    "internal",
    "invalid_argument",
    "is_caused_by",
    "iter_chain",
    "new",
    "not_found",
    "permission_denied",
    "resource_exhausted",
    "to_client_error",
    "unauthenticated",
    "unimplemented",
]

# ==============================================================================
# ERROR TYPE
# ==============================================================================


class GQLError(Exception):
    """Exception raised by resolvers to report a classified failure.

    ``code``, ``message`` and ``path`` are fixed at construction. Everything
    else is set through the chainable decorators, which return the error
    itself. A default log level and client message are chosen from the code
    when none is given.
    """

    def __init__(
        self,
        code: Code,
        message: str,
        *fields: Field,
        path: RequestPath | None = None,
    ) -> None:
        super().__init__(message)
        self._code = code
        self._message = message
        self._path = path if path is not None else RequestPath()
        self._fields: tuple[Field, ...] = tuple(fields)
        self._level = Level.UNSET
        self._client_message = ""
        self._error_id = ""
        cause = self.cause()
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        cause = self.cause()
        if cause is None:
            return f"[{self._code}] {self._message}"
        return f"[{self._code}] {self._message}: {cause}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={str(self._code)!r}, message={self._message!r})"

    @property
    def code(self) -> Code:
        return self._code

    @property
    def message(self) -> str:
        """Internal message; logged, never shown to clients."""
        return self._message

    @property
    def path(self) -> RequestPath:
        return self._path

    @property
    def fields(self) -> tuple[Field, ...]:
        return self._fields

    @property
    def level(self) -> Level:
        """Explicit level override, ``Level.UNSET`` when none was given."""
        return self._level

    @property
    def client_message(self) -> str:
        return self._client_message

    @property
    def error_id(self) -> str:
        return self._error_id

    # ------------------------------------------------------------------
    # Decoration
    # ------------------------------------------------------------------
    def with_message(self, message: str) -> GQLError:
        """Set the message clients see in the response ``errors`` entry."""
        self._client_message = message
        return self

    def with_error_id(self, error_id: str) -> GQLError:
        """Set a domain specific reason, like ``admin_only``.

        It is returned to clients as ``extensions.error_reason``.
        """
        self._error_id = error_id
        return self

    def with_fields(self, *fields: Field) -> GQLError:
        """Append structured fields for the log entry."""
        self._fields = (*self._fields, *fields)
        cause = self.cause()
        if self.__cause__ is None and cause is not None:
            self.__cause__ = cause
        return self

    def at_debug(self) -> GQLError:
        """Log at DEBUG instead of the code's default level."""
        self._level = Level.DEBUG
        return self

    def at_info(self) -> GQLError:
        """Log at INFO instead of the code's default level."""
        self._level = Level.INFO
        return self

    def at_warn(self) -> GQLError:
        """Log at WARN instead of the code's default level."""
        self._level = Level.WARN
        return self

    def at_error(self) -> GQLError:
        """Log at ERROR instead of the code's default level."""
        self._level = Level.ERROR
        return self

    def at_panic(self) -> GQLError:
        """Log at the highest level.

        Only aborts when the presenter runs in development mode.
        """
        self._level = Level.PANIC
        return self

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def log_level(self) -> Level:
        """Return the level the presenter logs this error at.

        Returns:
            The explicit override when one was set, otherwise the default for
            the error's code.
        """
        if self._level is not Level.UNSET:
            return self._level
        return default_level(self._code)

    def client_message_text(self) -> str:
        """Return the message shown to clients.

        Returns:
            The message given to :meth:`with_message`, or the code's default
            message when none was given.
        """
        if self._client_message:
            return self._client_message
        return default_message(self._code)

    def cause(self) -> BaseException | None:
        """Return the first embedded error field, if any."""
        for field in self._fields:
            if field.type is FieldType.ERROR and isinstance(field.value, BaseException):
                return field.value
        return None

    def client_extensions(self) -> dict[str, Any]:
        extensions: dict[str, Any] = {"code": str(self._code)}
        if self._error_id:
            extensions["error_reason"] = self._error_id
        return extensions

    def to_graphql_error(self) -> GraphQLError:
        """Build the client-safe response error."""
        return GraphQLError(
            self.client_message_text(),
            path=self._path.as_list(),
            extensions=self.client_extensions(),
        )


def to_client_error(err: GQLError | None) -> GraphQLError | None:
    """Return the client error for ``err``, or ``None`` when there is no error."""
    if err is None:
        return None
    return err.to_graphql_error()


# ==============================================================================
# CONSTRUCTORS
# ==============================================================================


def new(code: Code, message: str, *fields: Field) -> GQLError:
    """Return an error with the given code.

    ``message`` and ``fields`` are used for logging and are never shown to
    clients. See :meth:`GQLError.with_message` and
    :meth:`GQLError.with_error_id` for client-visible details.
    """
    return GQLError(code, message, *fields, path=get_request_path())


def invalid_argument(message: str, *fields: Field) -> GQLError:
    """Return an error for arguments that are invalid regardless of system state.

    Args:
        message: Internal message, logged but never shown to clients.
        *fields: Structured fields for the log entry.

    Returns:
        Error with code :attr:`Code.INVALID_ARGUMENT`, logged at WARN by default.
    """
    return new(Code.INVALID_ARGUMENT, message, *fields)


def not_found(message: str, *fields: Field) -> GQLError:
    """Return an error for a requested entity that does not exist."""
    return new(Code.NOT_FOUND, message, *fields)


def already_exists(message: str, *fields: Field) -> GQLError:
    """Return an error for a create that collided with an existing entity."""
    return new(Code.ALREADY_EXISTS, message, *fields)


def permission_denied(message: str, *fields: Field) -> GQLError:
    """Return an error for an identified caller lacking permission.

    Use :func:`unauthenticated` when the caller cannot be identified and
    :func:`resource_exhausted` for exhausted quotas.
    """
    return new(Code.PERMISSION_DENIED, message, *fields)


def resource_exhausted(message: str, *fields: Field) -> GQLError:
    """Return an error for an exhausted quota or resource."""
    return new(Code.RESOURCE_EXHAUSTED, message, *fields)


def failed_precondition(message: str, *fields: Field) -> GQLError:
    """Return an error for a system not in the state the operation requires."""
    return new(Code.FAILED_PRECONDITION, message, *fields)


def unimplemented(message: str, *fields: Field) -> GQLError:
    """Return an error for an operation that is not supported or enabled."""
    return new(Code.UNIMPLEMENTED, message, *fields)


def internal(message: str, *fields: Field) -> GQLError:
    """Return an error for a broken invariant or backend failure.

    Args:
        message: Internal message, logged but never shown to clients.
        *fields: Structured fields; attach the underlying exception with
            :func:`gqlerr.fields.error`.

    Returns:
        Error with code :attr:`Code.INTERNAL`, logged at ERROR by default.
    """
    return new(Code.INTERNAL, message, *fields)


def unauthenticated(message: str, *fields: Field) -> GQLError:
    """Return an error for a request without valid credentials."""
    return new(Code.UNAUTHENTICATED, message, *fields)


# ==============================================================================
# CAUSE CHAINS
# ==============================================================================


def _unwrap(err: BaseException) -> BaseException | None:
    if isinstance(err, GraphQLError) and err.original_error is not None:
        return err.original_error
    if isinstance(err, GQLError):
        cause = err.cause()
        if cause is not None:
            return cause
    return err.__cause__


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and every error it wraps, outermost first."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = _unwrap(current)


def find_error(err: BaseException | None) -> GQLError | None:
    """Return the outermost :class:`GQLError` in the chain of ``err``."""
    for candidate in iter_chain(err):
        if isinstance(candidate, GQLError):
            return candidate
    return None


def is_caused_by(err: BaseException | None, target: BaseException | type[BaseException]) -> bool:
    """Report whether ``target`` appears in the chain of ``err``.

    ``target`` may be an exception instance, matched by identity or equality,
    or an exception class, matched with ``isinstance``.
    """
    for candidate in iter_chain(err):
        if isinstance(target, type):
            if isinstance(candidate, target):
                return True
        elif candidate is target or candidate == target:
            return True
    return False
