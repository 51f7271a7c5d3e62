"""Adapter over python-dateutil's recurrence engine.

The codec and validator never do calendar arithmetic themselves. They talk
to ``dateutil.rrule`` through this module, which offers a small surface:

    - ``construct(...)`` builds an ``EngineRule`` from typed values
    - ``check(rule, start)`` applies the RFC 5545 legality rules that
      dateutil itself accepts silently (wrong BYxxx for the frequency,
      BYSETPOS on its own, dates that never occur...)
    - ``expand``, ``occurrence_before`` and ``occurrence_after`` produce
      concrete timestamps

Errors raised here are engine diagnostics (``EngineError`` subclasses); the
validator wraps them into its own taxonomy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from dateutil.rrule import (
    DAILY,
    FR,
    HOURLY,
    MINUTELY,
    MO,
    MONTHLY,
    SA,
    SECONDLY,
    SU,
    TH,
    TU,
    WE,
    WEEKLY,
    YEARLY,
    rrule,
)

from rrule_codec.rules.models import Every, Frequency, Nth, Weekday

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from dateutil.rrule import weekday

logger = logging.getLogger(__name__)

# Mapping from Frequency enum to dateutil frequency constants
_FREQ_MAP = {
    Frequency.YEARLY: YEARLY,
    Frequency.MONTHLY: MONTHLY,
    Frequency.WEEKLY: WEEKLY,
    Frequency.DAILY: DAILY,
    Frequency.HOURLY: HOURLY,
    Frequency.MINUTELY: MINUTELY,
    Frequency.SECONDLY: SECONDLY,
}

# Mapping from Weekday enum to dateutil weekday constants
_WEEKDAY_MAP: dict[Weekday, weekday] = {
    Weekday.MONDAY: MO,
    Weekday.TUESDAY: TU,
    Weekday.WEDNESDAY: WE,
    Weekday.THURSDAY: TH,
    Weekday.FRIDAY: FR,
    Weekday.SATURDAY: SA,
    Weekday.SUNDAY: SU,
}

# Longest month length, February counted with its leap day.
_MONTH_MAX_DAYS = {1: 31, 2: 29, 3: 31, 4: 30, 5: 31, 6: 30, 7: 31, 8: 31, 9: 30, 10: 31, 11: 30, 12: 31}

# (low, high, zero allowed) per rule part, as RFC 5545 defines them.
FIELD_RANGES: dict[str, tuple[int, int, bool]] = {
    "by_set_pos": (-366, 366, False),
    "by_month": (1, 12, False),
    "by_month_day": (-31, 31, False),
    "by_year_day": (-366, 366, False),
    "by_week_no": (-53, 53, False),
    "by_hour": (0, 23, True),
    "by_minute": (0, 59, True),
    "by_second": (0, 59, True),
}

_MAX_INTERVAL = (1 << 16) - 1


class EngineError(Exception):
    """Base class for engine diagnostics.

    Attributes:
        code: Machine-readable diagnostic name.
        field: Rule field the diagnostic is about, when there is one.
        value: Offending value, when there is one.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.field = field
        self.value = value
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, field={self.field!r}, value={self.value!r})"


class ConstructionError(EngineError):
    """Raised when typed values cannot form an engine rule."""


class EngineValidationError(EngineError):
    """Raised when a constructed rule is illegal or can never occur."""


@dataclass(frozen=True)
class EngineRule:
    """A rule in the engine's terms, independent of any start timestamp.

    dateutil binds a rule to its DTSTART at construction, so the start is
    supplied later through ``to_dateutil``.
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
    by_weekday: tuple[Every | Nth, ...] = field(default_factory=tuple)
    by_hour: tuple[int, ...] = field(default_factory=tuple)
    by_minute: tuple[int, ...] = field(default_factory=tuple)
    by_second: tuple[int, ...] = field(default_factory=tuple)

    def has_by_rule(self) -> bool:
        """Whether any BYxxx part other than BYSETPOS is set."""
        return any(
            (
                self.by_month,
                self.by_month_day,
                self.by_year_day,
                self.by_week_no,
                self.by_weekday,
                self.by_hour,
                self.by_minute,
                self.by_second,
            )
        )

    def to_dateutil(self, start: datetime) -> rrule:
        """Bind the rule to ``start`` and return a ``dateutil.rrule.rrule``.

        Empty parts are passed as ``None`` so dateutil fills them in from
        the start timestamp the way RFC 5545 describes.
        """
        return rrule(
            _FREQ_MAP[self.frequency],
            dtstart=ensure_aware(start),
            interval=self.interval,
            wkst=_WEEKDAY_MAP[self.week_start],
            count=self.count,
            until=self.until,
            bysetpos=self.by_set_pos or None,
            bymonth=self.by_month or None,
            bymonthday=self.by_month_day or None,
            byyearday=self.by_year_day or None,
            byweekno=self.by_week_no or None,
            byweekday=[_to_dateutil_weekday(entry) for entry in self.by_weekday] or None,
            byhour=self.by_hour or None,
            byminute=self.by_minute or None,
            bysecond=self.by_second or None,
            cache=False,
        )


def _to_dateutil_weekday(entry: Every | Nth) -> weekday:
    base = _WEEKDAY_MAP[entry.weekday]
    if isinstance(entry, Nth):
        return base(entry.ordinal)
    return base


def ensure_aware(value: datetime) -> datetime:
    """Return ``value`` with UTC attached when it carries no offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# ──────────────────────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────────────────────


def construct(
    frequency: Frequency,
    interval: int = 1,
    count: int | None = None,
    until: datetime | None = None,
    week_start: Weekday = Weekday.MONDAY,
    by_set_pos: Iterable[int] = (),
    by_month: Iterable[int] = (),
    by_month_day: Iterable[int] = (),
    by_year_day: Iterable[int] = (),
    by_week_no: Iterable[int] = (),
    by_weekday: Iterable[Every | Nth] = (),
    by_hour: Iterable[int] = (),
    by_minute: Iterable[int] = (),
    by_second: Iterable[int] = (),
) -> EngineRule:
    """Build an ``EngineRule`` from typed values.

    Raises:
        ConstructionError: If a value has the wrong type for the engine
            (unknown frequency or weekday, month outside 1..12, interval
            outside 1..65535).
    """
    if not isinstance(frequency, Frequency):
        raise ConstructionError(
            "invalid-frequency",
            f"Invalid frequency: {frequency!r}",
            field="frequency",
            value=frequency,
        )
    if not isinstance(week_start, Weekday):
        raise ConstructionError(
            "invalid-week-start",
            f"Invalid week start: {week_start!r}",
            field="week_start",
            value=week_start,
        )
    if not isinstance(interval, int) or not 1 <= interval <= _MAX_INTERVAL:
        raise ConstructionError(
            "invalid-interval",
            f"Invalid interval: {interval!r}",
            field="interval",
            value=interval,
        )

    months = tuple(by_month)
    for month in months:
        if month not in _MONTH_MAX_DAYS:
            raise ConstructionError(
                "invalid-month",
                f"Invalid month: {month!r}",
                field="by_month",
                value=month,
            )

    weekdays = tuple(by_weekday)
    for entry in weekdays:
        if not isinstance(entry, Every | Nth) or not isinstance(entry.weekday, Weekday):
            raise ConstructionError(
                "invalid-weekday",
                f"Invalid weekday: {entry!r}",
                field="by_weekday",
                value=entry,
            )

    return EngineRule(
        frequency=frequency,
        interval=interval,
        count=count,
        until=ensure_aware(until).astimezone(UTC) if until is not None else None,
        week_start=week_start,
        by_set_pos=tuple(by_set_pos),
        by_month=months,
        by_month_day=tuple(by_month_day),
        by_year_day=tuple(by_year_day),
        by_week_no=tuple(by_week_no),
        by_weekday=weekdays,
        by_hour=tuple(by_hour),
        by_minute=tuple(by_minute),
        by_second=tuple(by_second),
    )


# ──────────────────────────────────────────────────────────────
# Validation
# ──────────────────────────────────────────────────────────────


def check(rule: EngineRule, start: datetime) -> None:
    """Check ``rule`` for legality and feasibility against ``start``.

    Raises:
        EngineValidationError: On the first problem found.
    """
    start = ensure_aware(start)
    _check_ranges(rule)
    _check_frequency_parts(rule)
    if rule.by_set_pos and not rule.has_by_rule():
        raise EngineValidationError(
            "by-set-pos-without-by-rule",
            "BYSETPOS must be combined with another BYxxx rule part",
            field="by_set_pos",
            value=list(rule.by_set_pos),
        )
    if rule.count is not None and rule.until is not None:
        raise EngineValidationError(
            "count-with-until",
            "COUNT and UNTIL must not both be set",
            field="count",
            value=rule.count,
        )
    if rule.until is not None and rule.until < start:
        raise EngineValidationError(
            "until-before-start",
            f"UNTIL {rule.until.isoformat()} is before start {start.isoformat()}",
            field="until",
            value=rule.until.isoformat(),
        )
    _check_reachable(rule)


def _check_ranges(rule: EngineRule) -> None:
    for name, (low, high, zero_ok) in FIELD_RANGES.items():
        for value in getattr(rule, name):
            if not low <= value <= high or (value == 0 and not zero_ok):
                raise EngineValidationError(
                    "invalid-field-value-range",
                    f"{name} value {value} is outside {low}..{high}",
                    field=name,
                    value=value,
                )


def _check_frequency_parts(rule: EngineRule) -> None:
    frequency = rule.frequency
    if rule.by_week_no and frequency is not Frequency.YEARLY:
        raise EngineValidationError(
            "invalid-by-rule-and-frequency",
            f"BYWEEKNO can only be used with YEARLY, not {frequency.value}",
            field="by_week_no",
            value=list(rule.by_week_no),
        )
    if rule.by_year_day and frequency in (Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY):
        raise EngineValidationError(
            "invalid-by-rule-and-frequency",
            f"BYYEARDAY cannot be used with {frequency.value}",
            field="by_year_day",
            value=list(rule.by_year_day),
        )
    if rule.by_month_day and frequency is Frequency.WEEKLY:
        raise EngineValidationError(
            "invalid-by-rule-and-frequency",
            "BYMONTHDAY cannot be used with WEEKLY",
            field="by_month_day",
            value=list(rule.by_month_day),
        )

    for entry in rule.by_weekday:
        if not isinstance(entry, Nth):
            continue
        if frequency is Frequency.MONTHLY:
            limit = 5
        elif frequency is Frequency.YEARLY and not rule.by_week_no:
            limit = 53
        else:
            raise EngineValidationError(
                "invalid-by-rule-and-frequency",
                f"BYDAY ordinal {entry} needs MONTHLY, or YEARLY without BYWEEKNO",
                field="by_weekday",
                value=str(entry),
            )
        if entry.ordinal == 0 or abs(entry.ordinal) > limit:
            raise EngineValidationError(
                "invalid-field-value-range",
                f"BYDAY ordinal {entry.ordinal} is outside -{limit}..{limit}",
                field="by_weekday",
                value=str(entry),
            )


def _check_reachable(rule: EngineRule) -> None:
    if not (rule.by_month_day and rule.by_month):
        return
    for month in rule.by_month:
        if any(abs(day) <= _MONTH_MAX_DAYS[month] for day in rule.by_month_day):
            return
    raise EngineValidationError(
        "unreachable",
        f"BYMONTHDAY {list(rule.by_month_day)} never occurs in BYMONTH {list(rule.by_month)}",
        field="by_month_day",
        value=list(rule.by_month_day),
    )


# ──────────────────────────────────────────────────────────────
# Expansion
# ──────────────────────────────────────────────────────────────


def iter_occurrences(
    rule: EngineRule,
    start: datetime,
    *,
    after: datetime | None = None,
    before: datetime | None = None,
    inclusive: bool = True,
) -> Iterator[datetime]:
    """Yield occurrences of ``rule`` started at ``start`` inside the window.

    ``after`` and ``before`` bound the window; ``inclusive`` decides whether
    occurrences equal to a bound are kept.
    """
    bound = rule.to_dateutil(start)
    source = bound.xafter(ensure_aware(after), inc=inclusive) if after is not None else iter(bound)
    before = ensure_aware(before) if before is not None else None
    for occurrence in source:
        if before is not None and (occurrence > before or (occurrence == before and not inclusive)):
            break
        yield occurrence


def expand(
    rule: EngineRule,
    start: datetime,
    *,
    after: datetime | None = None,
    before: datetime | None = None,
    inclusive: bool = True,
    limit: int | None = None,
) -> list[datetime]:
    """Return occurrences in the window, at most ``limit`` of them."""
    occurrences: list[datetime] = []
    for occurrence in iter_occurrences(rule, start, after=after, before=before, inclusive=inclusive):
        if limit is not None and len(occurrences) >= limit:
            break
        occurrences.append(occurrence)
    return occurrences


def occurrence_before(rule: EngineRule, start: datetime, moment: datetime, *, inclusive: bool = False) -> datetime | None:
    """Return the last occurrence before ``moment``, or None."""
    return rule.to_dateutil(start).before(ensure_aware(moment), inc=inclusive)


def occurrence_after(rule: EngineRule, start: datetime, moment: datetime, *, inclusive: bool = False) -> datetime | None:
    """Return the first occurrence after ``moment``, or None."""
    return rule.to_dateutil(start).after(ensure_aware(moment), inc=inclusive)


__all__ = [
    "FIELD_RANGES",
    "ConstructionError",
    "EngineError",
    "EngineRule",
    "EngineValidationError",
    "check",
    "construct",
    "ensure_aware",
    "expand",
    "iter_occurrences",
    "occurrence_after",
    "occurrence_before",
]
