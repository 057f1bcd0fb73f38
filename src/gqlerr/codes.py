"""Classification codes and severity defaults for GraphQL errors.

Key Responsibilities:
    - Enumerate the closed set of classification codes, modeled on gRPC status
      codes for consistency across the stack
    - Provide the default log severity and client message for every code

Collaborators:
    - Upstream: :mod:`gqlerr.errors` resolves levels and client messages here
    - Downstream: ``grpc`` for the status code mapping

Side Effects:
    - None; the lookup tables are read-only mappings built at import time

Thread Safety:
    - Thread-safe; tables are never mutated after import
"""

from __future__ import annotations

from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping

import grpc

__all__ = [
    "Code",
    "Level",
    "default_level",
    "default_message",
    "grpc_status",
]


class Code(str, Enum):
    """Error classification codes, copied from ``grpc.StatusCode`` semantics."""

    # Arguments that are problematic regardless of the state of the system
    # (e.g., a malformed identifier). Differs from FAILED_PRECONDITION.
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    # Must not be used when the caller cannot be identified (UNAUTHENTICATED)
    # or for exhausted quotas (RESOURCE_EXHAUSTED).
    PERMISSION_DENIED = "permission_denied"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    # The system is not in a state required for the operation's execution.
    FAILED_PRECONDITION = "failed_precondition"
    UNIMPLEMENTED = "unimplemented"
    # Invariants expected by the underlying system have been broken.
    INTERNAL = "internal"
    UNAUTHENTICATED = "unauthenticated"

    def __str__(self) -> str:
        return self.value


class Level(IntEnum):
    """Log severities, ordered from least to most severe."""

    UNSET = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    PANIC = 5


# Anything a client could plausibly trigger is a warning, to cut down on
# pager noise. Errors are reserved for programmer error or backend failure.
_DEFAULT_LEVELS: Mapping[Code, Level] = MappingProxyType(
    {
        Code.INVALID_ARGUMENT: Level.WARN,
        Code.NOT_FOUND: Level.WARN,
        Code.ALREADY_EXISTS: Level.WARN,
        Code.PERMISSION_DENIED: Level.WARN,
        Code.RESOURCE_EXHAUSTED: Level.WARN,
        Code.FAILED_PRECONDITION: Level.WARN,
        Code.UNIMPLEMENTED: Level.WARN,
        Code.INTERNAL: Level.ERROR,
        Code.UNAUTHENTICATED: Level.WARN,
    }
)

_DEFAULT_MESSAGES: Mapping[Code, str] = MappingProxyType(
    {
        Code.INVALID_ARGUMENT: "invalid argument",
        Code.NOT_FOUND: "not found",
        Code.ALREADY_EXISTS: "already exists",
        Code.PERMISSION_DENIED: "permission denied",
        Code.RESOURCE_EXHAUSTED: "resource exhausted",
        Code.FAILED_PRECONDITION: "failed precondition",
        Code.UNIMPLEMENTED: "unimplemented",
        Code.INTERNAL: "internal error",
        Code.UNAUTHENTICATED: "unauthenticated",
    }
)

_GRPC_STATUS: Mapping[Code, grpc.StatusCode] = MappingProxyType(
    {
        Code.INVALID_ARGUMENT: grpc.StatusCode.INVALID_ARGUMENT,
        Code.NOT_FOUND: grpc.StatusCode.NOT_FOUND,
        Code.ALREADY_EXISTS: grpc.StatusCode.ALREADY_EXISTS,
        Code.PERMISSION_DENIED: grpc.StatusCode.PERMISSION_DENIED,
        Code.RESOURCE_EXHAUSTED: grpc.StatusCode.RESOURCE_EXHAUSTED,
        Code.FAILED_PRECONDITION: grpc.StatusCode.FAILED_PRECONDITION,
        Code.UNIMPLEMENTED: grpc.StatusCode.UNIMPLEMENTED,
        Code.INTERNAL: grpc.StatusCode.INTERNAL,
        Code.UNAUTHENTICATED: grpc.StatusCode.UNAUTHENTICATED,
    }
)


def default_level(code: Code) -> Level:
    """Return the severity errors with ``code`` are logged at by default.

    Codes missing from the table indicate drift between the registry and the
    constructors; they resolve to ``Level.ERROR`` rather than failing.
    """
    return _DEFAULT_LEVELS.get(code, Level.ERROR)


def default_message(code: Code) -> str:
    """Return the client-facing message used when none was provided."""
    return _DEFAULT_MESSAGES.get(code, _DEFAULT_MESSAGES[Code.INTERNAL])


def grpc_status(code: Code) -> grpc.StatusCode:
    """Return the gRPC status code ``code`` mirrors."""
    return _GRPC_STATUS.get(code, grpc.StatusCode.INTERNAL)
