"""Bidirectional RFC 5545 RRULE codec with start-date validation.

Example:
    >>> from rrule_codec import parse, serialize, validate
    >>> fields = parse("FREQ=WEEKLY;BYDAY=MO,WE,FR")
    >>> serialize(fields.replace(interval=2))
    'FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE,FR'
    >>> validate(fields, "2023-04-01T00:00:00Z")
"""

from rrule_codec.core.exceptions import ParseError, RRuleError, ValidationError
from rrule_codec.rules import (
    Every,
    Frequency,
    Nth,
    NWeekday,
    RuleFields,
    Weekday,
    is_valid,
    parse,
    serialize,
    validate,
)

__version__ = "1.0.0"

__all__ = [
    "Every",
    "Frequency",
    "NWeekday",
    "Nth",
    "ParseError",
    "RRuleError",
    "RuleFields",
    "ValidationError",
    "Weekday",
    "__version__",
    "is_valid",
    "parse",
    "serialize",
    "validate",
]
