"""Reusable Pydantic validators for schema classes.

Usage with Pydantic v2:
    from rrule_codec.core.validators import validate_rrule_optional

    class EventCreate(BaseModel):
        recurrence_rule: str | None = None

        @field_validator("recurrence_rule")
        @classmethod
        def validate_rule(cls, v: str | None) -> str | None:
            return validate_rrule_optional(v)
"""

from __future__ import annotations

from rrule_codec.core.validators.common import optional_validator
from rrule_codec.core.validators.rrule import (
    validate_rrule_optional,
    validate_rrule_string,
)

__all__ = [
    "optional_validator",
    "validate_rrule_optional",
    "validate_rrule_string",
]
