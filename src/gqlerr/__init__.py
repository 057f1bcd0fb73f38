"""Structured errors for GraphQL servers.

Key Responsibilities:
    - Give resolvers classified, decoratable errors (:mod:`gqlerr.errors`)
    - Log every error at the response boundary and hand clients a safe
      response (:mod:`gqlerr.presenter`)

Example:
    >>> from gqlerr import errors, fields
    >>> raise errors.not_found("no muffin with that id", fields.string("id", muffin_id))
"""

from .codes import Code, Level
from .errors import (
    GQLError,
    already_exists,
    failed_precondition,
    find_error,
    internal,
    invalid_argument,
    is_caused_by,
    new,
    not_found,
    permission_denied,
    resource_exhausted,
    to_client_error,
    unauthenticated,
    unimplemented,
)
from .presenter import error_presenter
from .recovery import recover_errors, recover_to_error


__all__ = [
    "Code",
    "GQLError",
    "Level",
    "already_exists",
    "error_presenter",
    "failed_precondition",
    "find_error",
    "internal",
    "invalid_argument",
    "is_caused_by",
    "new",
    "not_found",
    "permission_denied",
    "recover_errors",
    "recover_to_error",
    "resource_exhausted",
    "to_client_error",
    "unauthenticated",
    "unimplemented",
]
