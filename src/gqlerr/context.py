"""Ambient GraphQL request path tracking.

Key Responsibilities:
    - Represent the path of the field currently being resolved
    - Bind that path to the current execution context so errors constructed
      deep in a resolver's call chain can capture it

Collaborators:
    - Upstream: :class:`gqlerr.extensions.RequestPathExtension` binds the path
      for every resolver call
    - Downstream: :func:`gqlerr.errors.new` reads it at construction time

Thread Safety:
    - Relies on ``contextvars`` and is safe for threads and asyncio tasks
"""

from __future__ import annotations

from collections.abc import Iterable
from contextvars import ContextVar, Token

__all__ = [
    "RequestPath",
    "bind_request_path",
    "get_request_path",
    "reset_request_path",
]


class RequestPath(tuple):
    """Ordered path segments: field names (``str``) and list indices (``int``)."""

    __slots__ = ()

    def __new__(cls, segments: Iterable[str | int] = ()) -> RequestPath:
        return super().__new__(cls, segments)

    def __str__(self) -> str:
        rendered: list[str] = []
        for index, segment in enumerate(self):
            if isinstance(segment, int):
                rendered.append(f"[{segment}]")
                continue
            if index != 0:
                rendered.append(".")
            rendered.append(segment)
        return "".join(rendered)

    def as_list(self) -> list[str | int] | None:
        """Return the path as a GraphQL response ``path``, or ``None`` if empty."""
        return list(self) or None


_EMPTY_PATH = RequestPath()

_request_path: ContextVar[RequestPath] = ContextVar("gql_request_path", default=_EMPTY_PATH)


def bind_request_path(path: Iterable[str | int]) -> Token[RequestPath]:
    """Bind ``path`` as the request path for the current execution context.

    Returns:
        Token to pass to :func:`reset_request_path` once the field resolves.
    """
    return _request_path.set(RequestPath(path))


def reset_request_path(token: Token[RequestPath] | None) -> None:
    if token is not None:
        _request_path.reset(token)


def get_request_path() -> RequestPath:
    """Return the bound request path, empty outside of a resolver."""
    return _request_path.get()
