"""Unit tests for the dateutil engine adapter."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

pytest.importorskip("dateutil.rrule", reason="Engine tests require python-dateutil")

from rrule_codec.rules import engine
from rrule_codec.rules.engine import ConstructionError, EngineValidationError
from rrule_codec.rules.models import Every, Frequency, Nth, Weekday

pytestmark = pytest.mark.unit


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


class TestConstruct:
    """Tests for engine.construct."""

    def test_minimal(self):
        rule = engine.construct(Frequency.DAILY)

        assert rule.frequency is Frequency.DAILY
        assert rule.interval == 1
        assert rule.week_start is Weekday.MONDAY
        assert not rule.has_by_rule()

    def test_until_becomes_aware_utc(self):
        rule = engine.construct(Frequency.DAILY, until=datetime(2025, 1, 1, 12))

        assert rule.until == _utc(2025, 1, 1, 12)

    def test_rejects_untyped_frequency(self):
        with pytest.raises(ConstructionError) as exc:
            engine.construct("DAILY")  # type: ignore[arg-type]

        assert exc.value.code == "invalid-frequency"
        assert exc.value.field == "frequency"

    def test_rejects_month_13(self):
        with pytest.raises(ConstructionError) as exc:
            engine.construct(Frequency.YEARLY, by_month=[13])

        assert exc.value.code == "invalid-month"
        assert exc.value.value == 13

    @pytest.mark.parametrize("interval", [0, 65536])
    def test_rejects_interval(self, interval: int):
        with pytest.raises(ConstructionError, match="interval"):
            engine.construct(Frequency.DAILY, interval=interval)

    def test_rejects_raw_weekday(self):
        with pytest.raises(ConstructionError) as exc:
            engine.construct(Frequency.WEEKLY, by_weekday=["MO"])  # type: ignore[list-item]

        assert exc.value.code == "invalid-weekday"

    def test_rejects_untyped_week_start(self):
        with pytest.raises(ConstructionError) as exc:
            engine.construct(Frequency.WEEKLY, week_start="SU")  # type: ignore[arg-type]

        assert exc.value.code == "invalid-week-start"
        assert exc.value.field == "week_start"
        assert exc.value.value == "SU"


class TestCheck:
    """Tests for engine.check."""

    def test_accepts_plain_daily(self, start: datetime):
        engine.check(engine.construct(Frequency.DAILY), start)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("by_hour", 24),
            ("by_minute", 60),
            ("by_second", 60),
            ("by_month_day", 0),
            ("by_month_day", -32),
            ("by_year_day", 367),
            ("by_week_no", 54),
            ("by_set_pos", 0),
        ],
    )
    def test_range(self, start: datetime, field: str, value: int):
        rule = engine.construct(Frequency.YEARLY, **{field: [value]})

        with pytest.raises(EngineValidationError) as exc:
            engine.check(rule, start)

        assert exc.value.code == "invalid-field-value-range"
        assert exc.value.field == field

    @pytest.mark.parametrize(
        ("frequency", "parts"),
        [
            (Frequency.MONTHLY, {"by_week_no": [1]}),
            (Frequency.DAILY, {"by_year_day": [1]}),
            (Frequency.WEEKLY, {"by_year_day": [1]}),
            (Frequency.MONTHLY, {"by_year_day": [1]}),
            (Frequency.WEEKLY, {"by_month_day": [1]}),
            (Frequency.WEEKLY, {"by_weekday": [Nth(1, Weekday.MONDAY)]}),
            (Frequency.YEARLY, {"by_week_no": [1], "by_weekday": [Nth(1, Weekday.MONDAY)]}),
        ],
    )
    def test_part_not_allowed_with_frequency(self, start: datetime, frequency: Frequency, parts: dict):
        rule = engine.construct(frequency, **parts)

        with pytest.raises(EngineValidationError) as exc:
            engine.check(rule, start)

        assert exc.value.code == "invalid-by-rule-and-frequency"

    @pytest.mark.parametrize(
        ("frequency", "parts"),
        [
            (Frequency.YEARLY, {"by_week_no": [20]}),
            (Frequency.YEARLY, {"by_year_day": [100]}),
            (Frequency.HOURLY, {"by_year_day": [100]}),
            (Frequency.MONTHLY, {"by_month_day": [-1]}),
            (Frequency.MONTHLY, {"by_weekday": [Nth(-1, Weekday.FRIDAY)]}),
            (Frequency.YEARLY, {"by_weekday": [Nth(20, Weekday.MONDAY)]}),
            (Frequency.WEEKLY, {"by_weekday": [Every(Weekday.MONDAY)]}),
        ],
    )
    def test_part_allowed_with_frequency(self, start: datetime, frequency: Frequency, parts: dict):
        engine.check(engine.construct(frequency, **parts), start)

    def test_monthly_ordinal_limit(self, start: datetime):
        rule = engine.construct(Frequency.MONTHLY, by_weekday=[Nth(6, Weekday.MONDAY)])

        with pytest.raises(EngineValidationError) as exc:
            engine.check(rule, start)

        assert exc.value.code == "invalid-field-value-range"
        assert exc.value.value == "6MO"

    def test_set_pos_needs_another_by_rule(self, start: datetime):
        rule = engine.construct(Frequency.MONTHLY, by_set_pos=[-1])

        with pytest.raises(EngineValidationError) as exc:
            engine.check(rule, start)

        assert exc.value.code == "by-set-pos-without-by-rule"

    def test_count_with_until(self, start: datetime):
        rule = engine.construct(Frequency.DAILY, count=3, until=_utc(2026, 1, 1))

        with pytest.raises(EngineValidationError) as exc:
            engine.check(rule, start)

        assert exc.value.code == "count-with-until"

    def test_until_before_start(self, start: datetime):
        rule = engine.construct(Frequency.DAILY, until=_utc(2024, 12, 31))

        with pytest.raises(EngineValidationError) as exc:
            engine.check(rule, start)

        assert exc.value.code == "until-before-start"

    def test_until_equal_to_start_is_fine(self, start: datetime):
        engine.check(engine.construct(Frequency.DAILY, until=start), start)

    def test_february_31_is_unreachable(self):
        rule = engine.construct(Frequency.YEARLY, by_month=[2], by_month_day=[31])

        with pytest.raises(EngineValidationError) as exc:
            engine.check(rule, _utc(2023, 2, 1))

        assert exc.value.code == "unreachable"
        assert "BYMONTHDAY" in exc.value.message

    def test_february_29_is_reachable(self):
        rule = engine.construct(Frequency.YEARLY, by_month=[2], by_month_day=[29])

        engine.check(rule, _utc(2023, 2, 1))

    def test_one_reachable_month_is_enough(self):
        rule = engine.construct(Frequency.YEARLY, by_month=[2, 3], by_month_day=[31])

        engine.check(rule, _utc(2023, 2, 1))


class TestExpansion:
    """Tests for occurrence expansion through dateutil."""

    def test_daily_count(self, start: datetime):
        rule = engine.construct(Frequency.DAILY, count=3)

        assert engine.expand(rule, start) == [
            _utc(2025, 1, 6, 9),
            _utc(2025, 1, 7, 9),
            _utc(2025, 1, 8, 9),
        ]

    def test_empty_parts_default_from_start(self, start: datetime):
        """A bare WEEKLY rule repeats on the start's weekday and time."""
        rule = engine.construct(Frequency.WEEKLY, count=2)

        assert engine.expand(rule, start) == [_utc(2025, 1, 6, 9), _utc(2025, 1, 13, 9)]

    def test_last_friday(self, start: datetime):
        rule = engine.construct(Frequency.MONTHLY, count=3, by_weekday=[Nth(-1, Weekday.FRIDAY)])

        assert [dt.date().isoformat() for dt in engine.expand(rule, start)] == [
            "2025-01-31",
            "2025-02-28",
            "2025-03-28",
        ]

    def test_window_exclusive(self, start: datetime):
        rule = engine.construct(Frequency.DAILY)

        result = engine.expand(rule, start, after=_utc(2025, 1, 7, 9), before=_utc(2025, 1, 10, 9), inclusive=False)

        assert result == [_utc(2025, 1, 8, 9), _utc(2025, 1, 9, 9)]

    def test_window_inclusive(self, start: datetime):
        rule = engine.construct(Frequency.DAILY)

        result = engine.expand(rule, start, after=_utc(2025, 1, 7, 9), before=_utc(2025, 1, 8, 9))

        assert result == [_utc(2025, 1, 7, 9), _utc(2025, 1, 8, 9)]

    def test_limit(self, start: datetime):
        rule = engine.construct(Frequency.HOURLY)

        assert len(engine.expand(rule, start, limit=5)) == 5

    def test_count_zero_yields_nothing(self, start: datetime):
        assert engine.expand(engine.construct(Frequency.DAILY, count=0), start) == []

    def test_until_is_inclusive(self, start: datetime):
        rule = engine.construct(Frequency.DAILY, until=_utc(2025, 1, 8, 9))

        assert engine.expand(rule, start)[-1] == _utc(2025, 1, 8, 9)

    def test_occurrence_after_and_before(self, start: datetime):
        rule = engine.construct(Frequency.WEEKLY)

        assert engine.occurrence_after(rule, start, _utc(2025, 1, 6, 9)) == _utc(2025, 1, 13, 9)
        assert engine.occurrence_after(rule, start, _utc(2025, 1, 6, 9), inclusive=True) == start
        assert engine.occurrence_before(rule, start, _utc(2025, 1, 20, 9)) == _utc(2025, 1, 13, 9)
        assert engine.occurrence_before(rule, start, start) is None

    def test_naive_bounds_are_utc(self, start: datetime):
        rule = engine.construct(Frequency.DAILY)

        assert engine.occurrence_after(rule, start, datetime(2025, 1, 6, 10)) == _utc(2025, 1, 7, 9)
