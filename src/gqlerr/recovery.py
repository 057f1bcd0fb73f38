"""Turn crashes inside resolvers into panic-level internal errors."""

from __future__ import annotations

import functools
import inspect
import traceback
from typing import Any, Callable, TypeVar

from . import fields
from .errors import GQLError, internal

__all__ = ["recover_errors", "recover_to_error"]

F = TypeVar("F", bound=Callable[..., Any])


def _stack_text(value: Any) -> str:
    if isinstance(value, BaseException) and value.__traceback__ is not None:
        return "".join(traceback.format_exception(type(value), value, value.__traceback__))
    return "Stack (most recent call last):\n" + "".join(traceback.format_stack())


def recover_to_error(value: Any) -> BaseException:
    """Wrap a recovered value in an internal error logged at panic level.

    The captured stack trace becomes the internal message; ``value`` itself is
    recorded in the ``recover`` field.
    """
    return internal(_stack_text(value), fields.string("recover", str(value))).at_panic()


def recover_errors(func: F) -> F:
    """Decorate a resolver so unexpected exceptions become recovered errors.

    :class:`GQLError` instances raised by the resolver pass through untouched.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except GQLError:
                raise
            except Exception as exc:
                raise recover_to_error(exc) from exc

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except GQLError:
            raise
        except Exception as exc:
            raise recover_to_error(exc) from exc

    return wrapper  # type: ignore[return-value]
