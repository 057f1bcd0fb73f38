"""Typed key/value fields attached to errors for structured logging."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = [
    "Field",
    "FieldType",
    "as_event_dict",
    "error",
    "integer",
    "string",
    "value",
]


class FieldType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    ANY = "any"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Field:
    """A single structured log field.

    Fields of type ``FieldType.ERROR`` carry an underlying exception. The first
    such field is treated as the cause of the error it is attached to.
    """

    key: str
    type: FieldType
    value: Any


def string(key: str, value: str) -> Field:
    return Field(key, FieldType.STRING, str(value))


def integer(key: str, value: int) -> Field:
    return Field(key, FieldType.INTEGER, int(value))


def value(key: str, obj: Any) -> Field:
    """Attach an arbitrary object, rendered by the log processors."""
    return Field(key, FieldType.ANY, obj)


def error(err: BaseException, key: str = "error") -> Field:
    """Attach ``err`` as the embedded cause under ``key``."""
    return Field(key, FieldType.ERROR, err)


def as_event_dict(
    fields: Iterable[Field],
    *,
    initial: Mapping[str, Any] | None = None,
    reserved: Collection[str] = (),
) -> dict[str, Any]:
    """Return ``fields`` as keyword arguments for a structlog logger.

    Args:
        fields: Fields to render, in order.
        initial: Entries placed first; fields never overwrite them.
        reserved: Keys the logger call itself uses (``event``, ``self``).
            Fields with these keys are logged as ``field_<key>``.

    Returns:
        Ordered mapping with one entry per field. A key that is already taken
        gets a numeric suffix (``key_2``, ``key_3``, ...) instead of replacing
        the earlier value.
    """
    event: dict[str, Any] = dict(initial or {})
    for field in fields:
        key = f"field_{field.key}" if field.key in reserved else field.key
        candidate = key
        suffix = 2
        while candidate in event or candidate in reserved:
            candidate = f"{key}_{suffix}"
            suffix += 1
        event[candidate] = field.value
    return event
