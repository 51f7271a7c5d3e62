"""Helpers shared by the schema field validators."""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


def optional_validator(validate_fn: Callable[[T], T]) -> Callable[[T | None], T | None]:
    """Return a version of ``validate_fn`` that lets ``None`` through.

    Example:
        validate_rrule_optional = optional_validator(validate_rrule_string)
    """

    @wraps(validate_fn)
    def wrapper(value: T | None) -> T | None:
        return None if value is None else validate_fn(value)

    return wrapper


__all__ = ["optional_validator"]
