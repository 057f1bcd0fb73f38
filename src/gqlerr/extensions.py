"""Strawberry schema extensions wiring error presentation into a schema.

Key Responsibilities:
    - Bind the path of the field being resolved so errors capture it
    - Replace execution errors with the presenter's client-safe output

Collaborators:
    - Upstream: ``strawberry.Schema`` runs the extensions for each operation
    - Downstream: :mod:`gqlerr.context` and :mod:`gqlerr.presenter`

Side Effects:
    - Emits one log entry per presented error

Thread Safety:
    - Path binding uses ``contextvars``; the presenter is stateless

Example:
    >>> schema = PresentedSchema(
    ...     query=Query,
    ...     extensions=[RequestPathExtension, ErrorPresenterExtension],
    ... )
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Iterator
from typing import Any, Callable, ClassVar

import strawberry
from graphql import GraphQLError
from strawberry.extensions import SchemaExtension
from strawberry.types import Info

from .context import bind_request_path, reset_request_path
from .presenter import Presenter, error_presenter

__all__ = ["ErrorPresenterExtension", "PresentedSchema", "RequestPathExtension"]


class RequestPathExtension(SchemaExtension):
    """Bind ``info.path`` as the ambient request path around every resolver."""

    def resolve(
        self,
        _next: Callable[..., Any],
        root: Any,
        info: Info,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        path = info.path.as_list()
        token = bind_request_path(path)
        try:
            result = _next(root, info, *args, **kwargs)
        finally:
            reset_request_path(token)
        if inspect.isawaitable(result):
            return self._await_with_path(result, path)
        return result

    @staticmethod
    async def _await_with_path(result: Awaitable[Any], path: list[str | int]) -> Any:
        token = bind_request_path(path)
        try:
            return await result
        finally:
            reset_request_path(token)


class ErrorPresenterExtension(SchemaExtension):
    """Log resolver errors and swap them for their client-safe form.

    Register the class, or a subclass from :meth:`configure`, never an
    instance: Strawberry builds one extension per operation, so each
    operation reads only its own result.

    Errors graphql-core raised itself (syntax, validation) have no original
    error and are left as they are.
    """

    presenter: ClassVar[Presenter | None] = None
    logger: ClassVar[Any | None] = None

    @classmethod
    def configure(
        cls,
        presenter: Presenter | None = None,
        *,
        logger: Any | None = None,
    ) -> type[ErrorPresenterExtension]:
        """Return an extension class bound to ``presenter`` or ``logger``.

        Args:
            presenter: Presenter to use; built from ``logger`` when omitted.
            logger: Structlog logger for the default presenter.

        Returns:
            Subclass to pass in the schema's ``extensions`` list.
        """
        return type(
            cls.__name__,
            (cls,),
            {"presenter": staticmethod(presenter) if presenter else None, "logger": logger},
        )

    def _build_presenter(self) -> Presenter:
        cls = type(self)
        if cls.presenter is not None:
            return cls.presenter
        return error_presenter(cls.logger)

    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        if result is None or not getattr(result, "errors", None):
            return
        presenter = self._build_presenter()
        result.errors = [self._present(presenter, error) for error in result.errors]

    @staticmethod
    def _present(presenter: Presenter, error: GraphQLError) -> GraphQLError:
        if error.original_error is None:
            return error

        token = bind_request_path(error.path or ())
        try:
            presented = presenter(error.original_error)
        finally:
            reset_request_path(token)
        if presented is None:  # pragma: no cover - presenter only returns None for None
            return error
        return GraphQLError(
            presented.message,
            nodes=error.nodes,
            source=error.source,
            positions=error.positions,
            path=presented.path or error.path,
            original_error=error.original_error,
            extensions=presented.extensions,
        )


class PresentedSchema(strawberry.Schema):
    """Schema that leaves error logging to :class:`ErrorPresenterExtension`.

    The default ``process_errors`` would log every error a second time.
    """

    def process_errors(self, errors: list[GraphQLError], execution_context: Any = None) -> None:
        return None
