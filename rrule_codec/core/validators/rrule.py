"""RRULE validators for schema fields.

This module provides validation functions for iCalendar RRULE strings
received as plain text in Pydantic models.
"""

from __future__ import annotations

from rrule_codec.core.exceptions import ParseError
from rrule_codec.core.validators.common import optional_validator


def validate_rrule_string(value: str) -> str:
    """Validate an iCalendar RRULE string.

    Args:
        value: RRULE string to validate.

    Returns:
        The validated RRULE string, unchanged.

    Raises:
        ValueError: If the RRULE string does not parse.
    """
    # Lazy import to avoid circular dependencies
    from rrule_codec.rules.codec import parse

    try:
        parse(value)
    except ParseError as exc:
        msg = f"Invalid RRULE: {exc.detail}"
        raise ValueError(msg) from exc
    return value


# Optional version that passes None through
validate_rrule_optional = optional_validator(validate_rrule_string)


__all__ = [
    "validate_rrule_optional",
    "validate_rrule_string",
]
