"""Conversion between RRULE text and ``RuleFields``.

``parse`` turns ``FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE,FR`` into a
``RuleFields`` value and ``serialize`` turns it back into canonical text.
Both are pure functions; parse is atomic and raises the first
``ParseError`` it meets, serialize never raises.

Example RRULE strings:
    - "FREQ=DAILY;COUNT=10" - Ten days in a row
    - "FREQ=WEEKLY;BYDAY=MO,WE,FR" - Monday, Wednesday, Friday
    - "FREQ=MONTHLY;BYDAY=-1FR" - Last Friday of every month
    - "FREQ=YEARLY;BYMONTH=1;BYMONTHDAY=1" - Every January 1st
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from dateutil.parser import isoparse

from rrule_codec.core.exceptions import (
    DuplicateKeyError,
    InputTooLongError,
    InvalidCountError,
    InvalidFieldValueError,
    InvalidFrequencyError,
    InvalidIntervalError,
    InvalidUntilError,
    InvalidWeekdayError,
    InvalidWeekStartError,
    MalformedSegmentError,
    MissingFrequencyError,
    ParseError,
    TooManyValuesError,
    UnknownKeyError,
)
from rrule_codec.core.settings import get_rrule_settings
from rrule_codec.infra.logging import get_lazy_logger
from rrule_codec.rules.models import (
    Every,
    Frequency,
    Nth,
    RuleFields,
    Weekday,
    format_timestamp,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from rrule_codec.core.settings import RRuleSettings

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

# ASCII digits only, at most ten of them: every part fits in 32 bits.
_INTEGER = re.compile(r"[+-]?[0-9]{1,10}")
_UNSIGNED = re.compile(r"[0-9]{1,10}")
_NWEEKDAY = re.compile(r"(?P<ordinal>[+-]?[0-9]{1,3})?(?P<code>MO|TU|WE|TH|FR|SA|SU)")
_RRULE_PREFIX = "RRULE:"


@dataclass(frozen=True, slots=True)
class _NumericPart:
    """Grammar of one comma-separated integer list part."""

    key: str
    attr: str
    low: int
    high: int

    @property
    def signed(self) -> bool:
        return self.low < 0


def _width(bits: int, *, signed: bool) -> tuple[int, int]:
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


# Bounds are storage widths, not RFC ranges; the validator checks the latter.
_NUMERIC_PARTS: dict[str, _NumericPart] = {
    part.key: part
    for part in (
        _NumericPart("BYSETPOS", "by_set_pos", *_width(32, signed=True)),
        _NumericPart("BYMONTH", "by_month", *_width(8, signed=False)),
        _NumericPart("BYMONTHDAY", "by_month_day", *_width(8, signed=True)),
        _NumericPart("BYYEARDAY", "by_year_day", *_width(16, signed=True)),
        _NumericPart("BYWEEKNO", "by_week_no", *_width(8, signed=True)),
        _NumericPart("BYHOUR", "by_hour", *_width(8, signed=False)),
        _NumericPart("BYMINUTE", "by_minute", *_width(8, signed=False)),
        _NumericPart("BYSECOND", "by_second", *_width(8, signed=False)),
    )
}

_MAX_INTERVAL = (1 << 16) - 1
_MAX_COUNT = (1 << 32) - 1
_ORDINAL_LOW, _ORDINAL_HIGH = _width(16, signed=True)


# ──────────────────────────────────────────────────────────────
# Parsing
# ──────────────────────────────────────────────────────────────


def parse(text: str, *, settings: RRuleSettings | None = None) -> RuleFields:
    """Parse an RRULE string into ``RuleFields``.

    Args:
        text: iCalendar RRULE string, optionally prefixed with ``RRULE:``
        settings: Limits to apply; defaults to the cached settings

    Returns:
        RuleFields instance

    Raises:
        ParseError: If the RRULE string is malformed. The concrete subclass
            names the problem and carries the offending key and token.

    Example:
        >>> parse("FREQ=DAILY;INTERVAL=2;COUNT=10").interval
        2
    """
    settings = settings or get_rrule_settings()
    try:
        fields = _parse(text, settings)
    except ParseError as exc:
        logger.debug(
            "RRULE rejected",
            extra={"error_type": exc.type, **exc.extra, "operation": "codec.parse"},
        )
        raise

    lazy_logger.debug(lambda: f"codec.parse({text!r}) -> {fields.to_dict()}")
    return fields


def _parse(text: str, settings: RRuleSettings) -> RuleFields:
    if len(text) > settings.max_input_length:
        raise InputTooLongError(len(text), settings.max_input_length)

    body = text.strip()
    if settings.accept_rrule_prefix and body[: len(_RRULE_PREFIX)].upper() == _RRULE_PREFIX:
        body = body[len(_RRULE_PREFIX) :]

    parts: dict[str, str] = {}
    for segment in body.split(";"):
        if not segment.strip():
            continue
        if "=" not in segment:
            raise MalformedSegmentError(segment)
        key, value = segment.split("=", 1)
        key = key.strip().upper()
        if key in parts:
            raise DuplicateKeyError(key)
        if key not in _PART_PARSERS:
            raise UnknownKeyError(key)
        parts[key] = value.strip()

    if "FREQ" not in parts:
        raise MissingFrequencyError

    # Collected first and applied in one constructor call so a failure
    # never leaves a half-built rule behind.
    values: dict[str, Any] = {}
    for key, value in parts.items():
        attr, parsed = _PART_PARSERS[key](key, value, settings)
        values[attr] = parsed
    return RuleFields(**values)


def _parse_frequency(key: str, value: str, settings: RRuleSettings) -> tuple[str, Frequency]:
    try:
        return "frequency", Frequency.coerce(value)
    except ValueError:
        raise InvalidFrequencyError(value) from None


def _parse_interval(key: str, value: str, settings: RRuleSettings) -> tuple[str, int]:
    if not _UNSIGNED.fullmatch(value):
        raise InvalidIntervalError(value)
    interval = int(value)
    if not 1 <= interval <= _MAX_INTERVAL:
        raise InvalidIntervalError(value)
    return "interval", interval


def _parse_count(key: str, value: str, settings: RRuleSettings) -> tuple[str, int]:
    if not _UNSIGNED.fullmatch(value) or int(value) > _MAX_COUNT:
        raise InvalidCountError(value)
    return "count", int(value)


def _parse_until(key: str, value: str, settings: RRuleSettings) -> tuple[str, datetime]:
    try:
        return "until", parse_timestamp(value)
    except ValueError:
        raise InvalidUntilError(value) from None


def _parse_week_start(key: str, value: str, settings: RRuleSettings) -> tuple[str, Weekday]:
    code = value.upper()
    if len(code) != 2:
        raise InvalidWeekStartError(value)
    try:
        return "week_start", Weekday(code)
    except ValueError:
        raise InvalidWeekStartError(value) from None


def _split_list(key: str, value: str, settings: RRuleSettings) -> list[str]:
    tokens = [token.strip() for token in value.split(",")]
    if len(tokens) > settings.max_list_items:
        raise TooManyValuesError(key, len(tokens), settings.max_list_items)
    return tokens


def _parse_weekdays(key: str, value: str, settings: RRuleSettings) -> tuple[str, tuple[Every | Nth, ...]]:
    weekdays: list[Every | Nth] = []
    for token in _split_list(key, value, settings):
        match = _NWEEKDAY.fullmatch(token.upper())
        if match is None:
            raise InvalidWeekdayError(token)
        weekday = Weekday(match["code"])
        if match["ordinal"] is None:
            weekdays.append(Every(weekday))
            continue
        ordinal = int(match["ordinal"])
        if ordinal == 0 or not _ORDINAL_LOW <= ordinal <= _ORDINAL_HIGH:
            raise InvalidWeekdayError(token)
        weekdays.append(Nth(ordinal, weekday))
    return "by_weekday", tuple(weekdays)


def _parse_numeric(key: str, value: str, settings: RRuleSettings) -> tuple[str, tuple[int, ...]]:
    part = _NUMERIC_PARTS[key]
    pattern = _INTEGER if part.signed else _UNSIGNED
    numbers: list[int] = []
    for token in _split_list(key, value, settings):
        if not pattern.fullmatch(token):
            raise InvalidFieldValueError(key, token)
        number = int(token)
        if not part.low <= number <= part.high:
            raise InvalidFieldValueError(key, token)
        numbers.append(number)
    return part.attr, tuple(numbers)


_PART_PARSERS: dict[str, Callable[[str, str, RRuleSettings], tuple[str, Any]]] = {
    "FREQ": _parse_frequency,
    "INTERVAL": _parse_interval,
    "COUNT": _parse_count,
    "UNTIL": _parse_until,
    "WKST": _parse_week_start,
    "BYDAY": _parse_weekdays,
    **{key: _parse_numeric for key in _NUMERIC_PARTS},
}


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 or basic ISO 8601 timestamp into aware UTC.

    Accepts ``2025-12-31T23:59:59Z``, ``2025-12-31T23:59:59.250+02:00``,
    ``20251231T235959Z`` and the date-only forms. Values without an offset
    are taken as UTC.

    Raises:
        ValueError: If the value is not a timestamp.
    """
    text = value.strip()
    if not text:
        msg = "Empty timestamp"
        raise ValueError(msg)
    try:
        parsed = isoparse(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    except OverflowError as exc:
        msg = f"Timestamp out of range in UTC: {text}"
        raise ValueError(msg) from exc


# ──────────────────────────────────────────────────────────────
# Serialization
# ──────────────────────────────────────────────────────────────


def serialize(fields: RuleFields, *, settings: RRuleSettings | None = None) -> str:
    """Convert ``RuleFields`` to canonical RRULE text.

    Parts are emitted in a fixed order and any part at its default value
    (INTERVAL=1, WKST=MO, absent COUNT/UNTIL, empty lists) is left out.

    Args:
        fields: Rule to serialize
        settings: Selects the UNTIL form; defaults to the cached settings

    Returns:
        RRULE string like "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE,FR"
    """
    settings = settings or get_rrule_settings()

    parts = [f"FREQ={_token(fields.frequency)}"]

    if fields.interval != 1:
        parts.append(f"INTERVAL={fields.interval}")

    if fields.count is not None:
        parts.append(f"COUNT={fields.count}")

    if fields.until is not None:
        parts.append(f"UNTIL={_until_text(fields.until, settings)}")

    if _token(fields.week_start) != Weekday.MONDAY.value:
        parts.append(f"WKST={_token(fields.week_start)}")

    for key, attr in _SERIALIZED_LISTS:
        values = getattr(fields, attr)
        if not values:
            continue
        if attr == "by_weekday":
            parts.append(f"{key}={','.join(_weekday_token(entry) for entry in values)}")
        else:
            parts.append(f"{key}={','.join(str(value) for value in values)}")

    return ";".join(parts)


_SERIALIZED_LISTS = (
    ("BYSETPOS", "by_set_pos"),
    ("BYMONTH", "by_month"),
    ("BYMONTHDAY", "by_month_day"),
    ("BYYEARDAY", "by_year_day"),
    ("BYWEEKNO", "by_week_no"),
    ("BYDAY", "by_weekday"),
    ("BYHOUR", "by_hour"),
    ("BYMINUTE", "by_minute"),
    ("BYSECOND", "by_second"),
)


def _token(value: Any) -> str:
    if isinstance(value, Frequency | Weekday):
        return value.value
    return str(value).upper()


def _weekday_token(entry: Any) -> str:
    if isinstance(entry, Nth):
        return f"{entry.ordinal}{_token(entry.weekday)}"
    if isinstance(entry, Every):
        return _token(entry.weekday)
    if isinstance(entry, tuple | list) and len(entry) == 2:
        ordinal, day = entry
        return f"{ordinal}{_token(day)}"
    return _token(entry)


def _until_text(until: Any, settings: RRuleSettings) -> str:
    if isinstance(until, datetime):
        return format_timestamp(until, basic=settings.until_format == "basic")
    return str(until)


__all__ = ["parse", "parse_timestamp", "serialize"]
