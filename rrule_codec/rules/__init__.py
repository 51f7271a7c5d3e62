"""Recurrence rule codec, validator and occurrence helpers."""

from rrule_codec.rules.codec import parse, parse_timestamp, serialize
from rrule_codec.rules.models import (
    Every,
    Frequency,
    Nth,
    NWeekday,
    RuleFields,
    Weekday,
    format_timestamp,
    nweekday_from_value,
)
from rrule_codec.rules.validator import is_valid, validate

__all__ = [
    "Every",
    "Frequency",
    "NWeekday",
    "Nth",
    "RuleFields",
    "Weekday",
    "format_timestamp",
    "is_valid",
    "nweekday_from_value",
    "parse",
    "parse_timestamp",
    "serialize",
    "validate",
]
