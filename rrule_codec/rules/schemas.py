"""Pydantic schemas for the language-neutral rule mapping.

``RuleFieldsSchema`` is the struct form other runtimes exchange: frequency
as a label ("Weekly"), weekdays as codes and ``[ordinal, code]`` pairs,
``until`` as RFC 3339 text. It converts to and from ``RuleFields``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rrule_codec.core.validators import validate_rrule_optional
from rrule_codec.rules.codec import parse, serialize
from rrule_codec.rules.models import Frequency, RuleFields, Weekday, nweekday_from_value


class RuleFieldsSchema(BaseModel):
    """Schema mirroring ``RuleFields`` field for field.

    Values are checked for shape only (types, known names). Range and
    consistency checks belong to the validator.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    frequency: str = Field(..., description="Frequency label or token, e.g. 'Weekly'")
    interval: int = Field(default=1, ge=1, le=65535, description="Step multiplier")
    count: int | None = Field(default=None, ge=0, description="Occurrence cap")
    until: datetime | None = Field(default=None, description="End timestamp, stored as UTC")
    week_start: str = Field(default="MO", description="Weekday code starting the week")
    by_set_pos: list[int] = Field(default_factory=list)
    by_month: list[int] = Field(default_factory=list)
    by_month_day: list[int] = Field(default_factory=list)
    by_year_day: list[int] = Field(default_factory=list)
    by_week_no: list[int] = Field(default_factory=list)
    by_weekday: list[str | tuple[int, str]] = Field(
        default_factory=list,
        description="Weekday codes ('MO') or (ordinal, code) pairs ((-1, 'FR'))",
    )
    by_hour: list[int] = Field(default_factory=list)
    by_minute: list[int] = Field(default_factory=list)
    by_second: list[int] = Field(default_factory=list)

    @field_validator("frequency")
    @classmethod
    def _known_frequency(cls, v: str) -> str:
        return Frequency.coerce(v).label

    @field_validator("week_start")
    @classmethod
    def _known_week_start(cls, v: str) -> str:
        return Weekday.coerce(v).value

    @field_validator("by_weekday")
    @classmethod
    def _known_weekdays(cls, v: list[Any]) -> list[Any]:
        for entry in v:
            nweekday_from_value(entry)
        return v

    @classmethod
    def from_fields(cls, fields: RuleFields) -> RuleFieldsSchema:
        """Build the schema from a ``RuleFields`` value."""
        data = fields.to_dict()
        data["by_weekday"] = [tuple(entry) if isinstance(entry, list) else entry for entry in data["by_weekday"]]
        return cls.model_validate(data)

    @classmethod
    def from_rrule(cls, text: str) -> RuleFieldsSchema:
        """Parse RRULE text straight into the schema."""
        return cls.from_fields(parse(text))

    def to_fields(self) -> RuleFields:
        """Convert back to ``RuleFields``."""
        return RuleFields.build(self.frequency, **self.model_dump(exclude={"frequency"}))

    def to_rrule(self) -> str:
        """Serialize to canonical RRULE text."""
        return serialize(self.to_fields())


class RecurrencePayload(BaseModel):
    """Payload carrying an optional RRULE string, checked at the boundary."""

    recurrence_rule: str | None = Field(
        default=None,
        max_length=4096,
        description="iCalendar RRULE string, e.g. 'FREQ=WEEKLY;BYDAY=MO,WE,FR'",
    )

    @field_validator("recurrence_rule")
    @classmethod
    def validate_rule(cls, v: str | None) -> str | None:
        return validate_rrule_optional(v)


__all__ = ["RecurrencePayload", "RuleFieldsSchema"]
