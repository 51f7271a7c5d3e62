"""Structured representation of an RFC 5545 recurrence rule.

``RuleFields`` is the canonical, field-for-field form of an RRULE. It is a
pure value: two instances with the same fields are equal and hash alike, and
nothing in it points back to the text it was parsed from.

Example:
    >>> rule = RuleFields.build("weekly", interval=2, by_weekday=["MO", "FR"])
    >>> rule.by_weekday
    (Every(weekday=<Weekday.MONDAY: 'MO'>), Every(weekday=<Weekday.FRIDAY: 'FR'>))
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TypeAlias


class Frequency(str, Enum):
    """Supported recurrence frequencies."""

    SECONDLY = "SECONDLY"
    MINUTELY = "MINUTELY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    @property
    def label(self) -> str:
        """Capitalized name used by the language-neutral mapping ("Daily")."""
        return self.value.capitalize()

    @classmethod
    def coerce(cls, value: Any) -> Frequency:
        """Return the member for an enum, token or label, case-insensitively.

        Raises:
            ValueError: If the value names no frequency.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        msg = f"Unknown frequency: {value!r}"
        raise ValueError(msg)


class Weekday(str, Enum):
    """Days of the week, valued by their RFC 5545 two-letter codes."""

    MONDAY = "MO"
    TUESDAY = "TU"
    WEDNESDAY = "WE"
    THURSDAY = "TH"
    FRIDAY = "FR"
    SATURDAY = "SA"
    SUNDAY = "SU"

    @property
    def index(self) -> int:
        """Zero-based position, Monday first (matches ``datetime.weekday()``)."""
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def coerce(cls, value: Any) -> Weekday:
        """Return the member for a code, short name or full name.

        Accepts ``"MO"``, ``"Mon"`` and ``"Monday"`` in any case.

        Raises:
            ValueError: If the value names no weekday.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().upper()
            member = _WEEKDAY_ALIASES.get(token)
            if member is not None:
                return member
        msg = f"Unknown weekday: {value!r}"
        raise ValueError(msg)


_WEEKDAY_ORDER = tuple(Weekday)
_WEEKDAY_ALIASES: dict[str, Weekday] = {}
for _day in Weekday:
    _WEEKDAY_ALIASES[_day.value] = _day
    _WEEKDAY_ALIASES[_day.name] = _day
    _WEEKDAY_ALIASES[_day.name[:3]] = _day


@dataclass(frozen=True, slots=True)
class Every:
    """Every occurrence of a weekday in the period ("every Monday")."""

    weekday: Weekday

    def __str__(self) -> str:
        return _code(self.weekday)


@dataclass(frozen=True, slots=True)
class Nth:
    """The n-th occurrence of a weekday in the period ("2nd Tuesday").

    Negative ordinals count from the end of the period, so ``Nth(-1, FR)``
    is the last Friday.
    """

    ordinal: int
    weekday: Weekday

    def __str__(self) -> str:
        return f"{self.ordinal}{_code(self.weekday)}"


NWeekday: TypeAlias = Every | Nth


def _code(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).upper()


def nweekday_from_value(value: Any) -> NWeekday:
    """Convert the language-neutral weekday shapes into an NWeekday.

    ``"MO"`` becomes ``Every(MO)`` and ``(2, "TU")`` or ``[2, "TU"]``
    becomes ``Nth(2, TU)``. NWeekday values pass through unchanged.

    Raises:
        ValueError: If the value has neither shape or names no weekday.
    """
    if isinstance(value, Every | Nth):
        return value
    if isinstance(value, str | Weekday):
        return Every(Weekday.coerce(value))
    if isinstance(value, tuple | list) and len(value) == 2:
        ordinal, day = value
        if isinstance(ordinal, int) and not isinstance(ordinal, bool):
            return Nth(ordinal, Weekday.coerce(day))
    msg = f"Unrecognized weekday shape: {value!r}"
    raise ValueError(msg)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


_SEQUENCE_FIELDS = (
    "by_set_pos",
    "by_month",
    "by_month_day",
    "by_year_day",
    "by_week_no",
    "by_weekday",
    "by_hour",
    "by_minute",
    "by_second",
)


@dataclass(frozen=True)
class RuleFields:
    """Structured representation of a recurrence rule.

    Every sequence field defaults to empty, meaning "unconstrained on this
    axis". ``count`` and ``until`` use ``None`` for "absent", so a count of
    zero is never confused with no count.

    Construction only normalizes shape: lists become tuples and ``until``
    becomes an aware UTC datetime truncated to milliseconds. Values are not
    range-checked here; that is the validator's job.
    """

    frequency: Frequency
    interval: int = 1
    count: int | None = None
    until: datetime | None = None
    week_start: Weekday = Weekday.MONDAY
    by_set_pos: tuple[int, ...] = field(default_factory=tuple)
    by_month: tuple[int, ...] = field(default_factory=tuple)
    by_month_day: tuple[int, ...] = field(default_factory=tuple)
    by_year_day: tuple[int, ...] = field(default_factory=tuple)
    by_week_no: tuple[int, ...] = field(default_factory=tuple)
    by_weekday: tuple[NWeekday, ...] = field(default_factory=tuple)
    by_hour: tuple[int, ...] = field(default_factory=tuple)
    by_minute: tuple[int, ...] = field(default_factory=tuple)
    by_second: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in _SEQUENCE_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value or ()))
        if isinstance(self.until, datetime):
            object.__setattr__(self, "until", _as_utc(self.until))

    @classmethod
    def build(cls, frequency: Frequency | str, **options: Any) -> RuleFields:
        """Create a rule from a frequency and keyword options.

        Weekday options accept codes and names as well as enum members;
        ``by_weekday`` entries may be ``"MO"`` or ``(n, "MO")``.

        Args:
            frequency: Frequency member or name ("weekly", "Weekly", ...).
            **options: Any other RuleFields field.

        Returns:
            RuleFields instance

        Raises:
            ValueError: If the frequency or a weekday is unknown.
            TypeError: If an option names no field.

        Example:
            >>> RuleFields.build("monthly", count=10, by_weekday=[(-1, "FR")])
        """
        unknown = set(options) - {f.name for f in dataclasses.fields(cls)}
        if unknown:
            msg = f"Unknown rule options: {', '.join(sorted(unknown))}"
            raise TypeError(msg)

        if "week_start" in options:
            options["week_start"] = Weekday.coerce(options["week_start"])
        if "by_weekday" in options:
            options["by_weekday"] = tuple(
                nweekday_from_value(value) for value in options["by_weekday"] or ()
            )
        return cls(frequency=Frequency.coerce(frequency), **options)

    def replace(self, **changes: Any) -> RuleFields:
        """Return a copy with whole fields replaced."""
        return dataclasses.replace(self, **changes)

    @property
    def is_bounded(self) -> bool:
        """Whether the rule ends on its own (COUNT or UNTIL present)."""
        return self.count is not None or self.until is not None

    def to_dict(self) -> dict[str, Any]:
        """Return the language-neutral mapping of the rule.

        Frequency is given as its label ("Daily"), weekdays as codes, Nth
        weekdays as ``[ordinal, code]`` and ``until`` as RFC 3339 text.
        """
        frequency = self.frequency
        return {
            "frequency": frequency.label if isinstance(frequency, Frequency) else frequency,
            "interval": self.interval,
            "count": self.count,
            "until": format_timestamp(self.until) if isinstance(self.until, datetime) else self.until,
            "week_start": _code(self.week_start),
            "by_set_pos": list(self.by_set_pos),
            "by_month": list(self.by_month),
            "by_month_day": list(self.by_month_day),
            "by_year_day": list(self.by_year_day),
            "by_week_no": list(self.by_week_no),
            "by_weekday": [
                [entry.ordinal, _code(entry.weekday)] if isinstance(entry, Nth) else _weekday_value(entry)
                for entry in self.by_weekday
            ],
            "by_hour": list(self.by_hour),
            "by_minute": list(self.by_minute),
            "by_second": list(self.by_second),
        }


def _weekday_value(entry: Any) -> Any:
    if isinstance(entry, Every):
        return _code(entry.weekday)
    return entry


def format_timestamp(value: datetime, *, basic: bool = False) -> str:
    """Format an aware datetime as UTC text ending in ``Z``.

    The extended form is RFC 3339 (``2025-12-31T23:59:59Z``) and carries
    milliseconds only when they are non-zero. The basic form is the compact
    RFC 5545 shape (``20251231T235959Z``) with a four-digit year. It has no
    fractional seconds, so a value with milliseconds keeps the extended form.
    """
    value = _as_utc(value)
    if basic and not value.microsecond:
        return (
            f"{value.year:04d}{value.month:02d}{value.day:02d}"
            f"T{value.hour:02d}{value.minute:02d}{value.second:02d}Z"
        )
    timespec = "milliseconds" if value.microsecond else "seconds"
    return value.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


__all__ = [
    "Every",
    "Frequency",
    "NWeekday",
    "Nth",
    "RuleFields",
    "Weekday",
    "format_timestamp",
    "nweekday_from_value",
]
