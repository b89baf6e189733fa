"""Boundary checks that raise InvalidArgumentError."""

from enum import Enum
from typing import Any, TypeVar

from src.core.exceptions import InvalidArgumentError

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: Any, field: str) -> E:
    """Coerce a raw value into ``enum_cls`` or fail with the allowed values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise InvalidArgumentError(field, f"must be one of: {allowed}", value) from None


def require_positive_int(value: Any, field: str) -> int:
    """Reject bools, non-integers and values <= 0."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(field, "must be a positive integer", value)
    return value


def validate_sort(sort: str, allowed: frozenset[str], field: str = "sort") -> str:
    """Accept ``name`` or ``-name`` where name is a whitelisted column."""
    if sort.lstrip("-") not in allowed:
        raise InvalidArgumentError(
            field, f"unknown sort field; use one of: {', '.join(sorted(allowed))}", sort
        )
    return sort
