"""Semantic validation of a rule against a start timestamp.

``validate`` is a predicate with diagnostics: it returns ``None`` for a
usable rule and raises a ``ValidationError`` subclass otherwise. Checks run
in a fixed order and the first failure wins:

    1. the start timestamp must parse
    2. construction checks on the field values themselves
    3. construction of the engine rule
    4. the engine's legality and feasibility checks against the start
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from rrule_codec.core.exceptions import (
    FieldRangeError,
    InvalidCountValueError,
    InvalidFrequencyValueError,
    InvalidIntervalValueError,
    InvalidMonthError,
    InvalidStartError,
    InvalidWeekdayCodeError,
    InvalidWeekStartValueError,
    RuleInvalidError,
    ValidationError,
)
from rrule_codec.rules import engine
from rrule_codec.rules.codec import parse_timestamp
from rrule_codec.rules.models import Every, Frequency, Nth, Weekday

if TYPE_CHECKING:
    from rrule_codec.rules.engine import EngineRule
    from rrule_codec.rules.models import RuleFields

logger = logging.getLogger(__name__)


def validate(fields: RuleFields, start: datetime | str) -> None:
    """Validate ``fields`` as a rule starting at ``start``.

    Args:
        fields: Rule to validate, parsed or hand-built
        start: Start timestamp as an aware datetime or RFC 3339 text;
            naive values are taken as UTC

    Raises:
        InvalidStartError: If ``start`` is not a timestamp.
        ValidationError: If the rule is inconsistent or can never occur.
            Field problems raise a field-specific subclass; engine
            diagnostics raise ``RuleInvalidError``.

    Example:
        >>> validate(RuleFields(Frequency.DAILY), "2023-04-01T00:00:00Z")
    """
    try:
        moment = coerce_start(start)
        rule = to_engine_rule(fields)
        engine.check(rule, moment)
    except engine.EngineValidationError as exc:
        error = RuleInvalidError(exc.message, code=exc.code, field=exc.field, value=exc.value)
        _log_rejection(error)
        raise error from exc
    except ValidationError as exc:
        _log_rejection(exc)
        raise


def is_valid(fields: RuleFields, start: datetime | str) -> bool:
    """Return whether ``validate`` accepts the rule."""
    try:
        validate(fields, start)
    except ValidationError:
        return False
    return True


def coerce_start(value: datetime | str) -> datetime:
    """Return ``value`` as an aware datetime.

    Raises:
        InvalidStartError: If the value is neither a datetime nor timestamp text.
    """
    if isinstance(value, datetime):
        return engine.ensure_aware(value)
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except ValueError:
            raise InvalidStartError(value) from None
    raise InvalidStartError(value)


def to_engine_rule(fields: RuleFields) -> EngineRule:
    """Run construction checks and build the engine's rule.

    Raises:
        ValidationError: Field-specific subclass for the first bad value.
        RuleInvalidError: If the engine still refuses to construct the rule.
    """
    frequency = _coerce(Frequency.coerce, fields.frequency, InvalidFrequencyValueError)

    interval = fields.interval
    if not _is_int(interval) or interval < 1:
        raise InvalidIntervalValueError(interval)

    count = fields.count
    if count is not None and (not _is_int(count) or count < 0):
        raise InvalidCountValueError(count)

    week_start = _coerce(Weekday.coerce, fields.week_start, InvalidWeekStartValueError)

    for month in fields.by_month:
        if not _is_int(month) or not 1 <= month <= 12:
            raise InvalidMonthError(month)

    weekdays = tuple(_coerce_weekday(entry) for entry in fields.by_weekday)

    for name, (low, high, zero_ok) in engine.FIELD_RANGES.items():
        if name == "by_month":
            continue
        for value in getattr(fields, name):
            if not _is_int(value) or not low <= value <= high or (value == 0 and not zero_ok):
                raise FieldRangeError(name, value, low, high)

    until = fields.until
    if until is not None and not isinstance(until, datetime):
        raise ValidationError(
            f"Invalid until: {until!r}, expected a datetime",
            field="until",
            value=until,
            type="invalid-until",
        )

    try:
        return engine.construct(
            frequency=frequency,
            interval=interval,
            count=count,
            until=until,
            week_start=week_start,
            by_set_pos=fields.by_set_pos,
            by_month=fields.by_month,
            by_month_day=fields.by_month_day,
            by_year_day=fields.by_year_day,
            by_week_no=fields.by_week_no,
            by_weekday=weekdays,
            by_hour=fields.by_hour,
            by_minute=fields.by_minute,
            by_second=fields.by_second,
        )
    except engine.ConstructionError as exc:
        raise RuleInvalidError(exc.message, code=exc.code, field=exc.field, value=exc.value) from exc


def _coerce(convert: Any, value: Any, error: type[ValidationError]) -> Any:
    try:
        return convert(value)
    except ValueError:
        raise error(value) from None


def _coerce_weekday(entry: Any) -> Every | Nth:
    if isinstance(entry, Nth):
        ordinal, day = entry.ordinal, entry.weekday
    elif isinstance(entry, Every):
        ordinal, day = None, entry.weekday
    elif isinstance(entry, tuple | list) and len(entry) == 2:
        ordinal, day = entry
    else:
        ordinal, day = None, entry

    weekday = _coerce(Weekday.coerce, day, InvalidWeekdayCodeError)
    if ordinal is None:
        return Every(weekday)
    if not _is_int(ordinal):
        raise FieldRangeError("by_weekday", ordinal, -53, 53)
    return Nth(ordinal, weekday)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _log_rejection(error: ValidationError) -> None:
    logger.debug(
        "Rule failed validation",
        extra={"error_type": error.type, **error.extra, "operation": "validator.validate"},
    )


__all__ = ["coerce_start", "is_valid", "to_engine_rule", "validate"]
