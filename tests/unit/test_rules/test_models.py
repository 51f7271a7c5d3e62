"""Unit tests for the rule value types."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from rrule_codec.rules.models import (
    Every,
    Frequency,
    Nth,
    RuleFields,
    Weekday,
    format_timestamp,
    nweekday_from_value,
)

pytestmark = pytest.mark.unit


class TestFrequency:
    """Tests for the Frequency enum."""

    def test_values_are_rrule_tokens(self):
        assert [f.value for f in Frequency] == [
            "SECONDLY",
            "MINUTELY",
            "HOURLY",
            "DAILY",
            "WEEKLY",
            "MONTHLY",
            "YEARLY",
        ]

    def test_label(self):
        assert Frequency.DAILY.label == "Daily"

    @pytest.mark.parametrize("value", ["weekly", "Weekly", " WEEKLY ", Frequency.WEEKLY])
    def test_coerce(self, value):
        assert Frequency.coerce(value) is Frequency.WEEKLY

    @pytest.mark.parametrize("value", ["fortnightly", "", 3, None])
    def test_coerce_rejects_unknown(self, value):
        with pytest.raises(ValueError, match="Unknown frequency"):
            Frequency.coerce(value)


class TestWeekday:
    """Tests for the Weekday enum."""

    def test_index_matches_datetime_weekday(self):
        assert Weekday.MONDAY.index == 0
        assert Weekday.SUNDAY.index == 6
        assert Weekday.FRIDAY.index == datetime(2025, 1, 10).weekday()

    @pytest.mark.parametrize("value", ["TU", "tu", "Tue", "TUESDAY", "tuesday", Weekday.TUESDAY])
    def test_coerce_aliases(self, value):
        assert Weekday.coerce(value) is Weekday.TUESDAY

    @pytest.mark.parametrize("value", ["XX", "T", 1, None])
    def test_coerce_rejects_unknown(self, value):
        with pytest.raises(ValueError, match="Unknown weekday"):
            Weekday.coerce(value)


class TestNWeekday:
    """Tests for Every, Nth and nweekday_from_value."""

    def test_str(self):
        assert str(Every(Weekday.MONDAY)) == "MO"
        assert str(Nth(-1, Weekday.FRIDAY)) == "-1FR"
        assert str(Nth(2, Weekday.TUESDAY)) == "2TU"

    def test_variants_are_distinct_values(self):
        assert Every(Weekday.MONDAY) == Every(Weekday.MONDAY)
        assert Every(Weekday.MONDAY) != Nth(1, Weekday.MONDAY)
        assert len({Nth(1, Weekday.MONDAY), Nth(1, Weekday.MONDAY)}) == 1

    def test_from_code(self):
        assert nweekday_from_value("we") == Every(Weekday.WEDNESDAY)

    @pytest.mark.parametrize("value", [(-1, "FR"), [-1, "FR"], (-1, Weekday.FRIDAY)])
    def test_from_pair(self, value):
        assert nweekday_from_value(value) == Nth(-1, Weekday.FRIDAY)

    def test_passthrough(self):
        entry = Nth(3, Weekday.SUNDAY)

        assert nweekday_from_value(entry) is entry

    @pytest.mark.parametrize("value", [("1", "MO"), (True, "MO"), (1, "XX"), 5, ("MO",)])
    def test_rejects_bad_shapes(self, value):
        with pytest.raises(ValueError):
            nweekday_from_value(value)


class TestRuleFields:
    """Tests for the RuleFields dataclass."""

    def test_defaults(self):
        rule = RuleFields(frequency=Frequency.DAILY)

        assert rule.interval == 1
        assert rule.count is None
        assert rule.until is None
        assert rule.week_start is Weekday.MONDAY
        assert rule.by_weekday == ()
        assert not rule.is_bounded

    def test_lists_become_tuples(self):
        rule = RuleFields(frequency=Frequency.MONTHLY, by_month_day=[1, 15], by_hour=None)

        assert rule.by_month_day == (1, 15)
        assert rule.by_hour == ()
        assert hash(rule) == hash(RuleFields(frequency=Frequency.MONTHLY, by_month_day=(1, 15)))

    def test_until_normalized_to_utc_milliseconds(self):
        until = datetime(2025, 6, 1, 12, 0, 0, 123_456, tzinfo=timezone(timedelta(hours=-4)))

        rule = RuleFields(frequency=Frequency.DAILY, until=until)

        assert rule.until == datetime(2025, 6, 1, 16, 0, 0, 123_000, tzinfo=UTC)
        assert rule.until.tzinfo is UTC

    def test_naive_until_taken_as_utc(self):
        rule = RuleFields(frequency=Frequency.DAILY, until=datetime(2025, 1, 1))

        assert rule.until == datetime(2025, 1, 1, tzinfo=UTC)

    def test_is_frozen(self):
        rule = RuleFields(frequency=Frequency.DAILY)

        with pytest.raises(AttributeError):
            rule.interval = 2  # type: ignore[misc]

    def test_replace(self, weekly_rule: RuleFields):
        changed = weekly_rule.replace(interval=2, count=4)

        assert changed.interval == 2
        assert changed.count == 4
        assert changed.by_weekday == weekly_rule.by_weekday
        assert weekly_rule.interval == 1

    def test_is_bounded(self):
        assert RuleFields(frequency=Frequency.DAILY, count=0).is_bounded
        assert RuleFields(frequency=Frequency.DAILY, until=datetime(2025, 1, 1, tzinfo=UTC)).is_bounded


class TestRuleFieldsBuild:
    """Tests for RuleFields.build."""

    def test_coerces_names(self):
        rule = RuleFields.build("weekly", week_start="Sunday", by_weekday=["MO", (-1, "fr")])

        assert rule.frequency is Frequency.WEEKLY
        assert rule.week_start is Weekday.SUNDAY
        assert rule.by_weekday == (Every(Weekday.MONDAY), Nth(-1, Weekday.FRIDAY))

    def test_unknown_option(self):
        with pytest.raises(TypeError, match="by_easter"):
            RuleFields.build("yearly", by_easter=[0])

    def test_unknown_frequency(self):
        with pytest.raises(ValueError):
            RuleFields.build("often")


class TestToDict:
    """Tests for the language-neutral mapping."""

    def test_shape(self):
        rule = RuleFields.build(
            "monthly",
            count=3,
            until=None,
            by_weekday=["MO", (-1, "FR")],
            by_month_day=[1],
        )

        data = rule.to_dict()

        assert data["frequency"] == "Monthly"
        assert data["interval"] == 1
        assert data["count"] == 3
        assert data["until"] is None
        assert data["week_start"] == "MO"
        assert data["by_weekday"] == ["MO", [-1, "FR"]]
        assert data["by_month_day"] == [1]
        assert data["by_second"] == []

    def test_until_as_text(self):
        rule = RuleFields(frequency=Frequency.DAILY, until=datetime(2025, 12, 31, 23, 59, 59, tzinfo=UTC))

        assert rule.to_dict()["until"] == "2025-12-31T23:59:59Z"


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_extended_without_fraction(self):
        assert format_timestamp(datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)) == "2025-01-02T03:04:05Z"

    def test_extended_with_milliseconds(self):
        value = datetime(2025, 1, 2, 3, 4, 5, 7_999, tzinfo=UTC)

        assert format_timestamp(value) == "2025-01-02T03:04:05.007Z"

    def test_basic(self):
        value = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=1)))

        assert format_timestamp(value, basic=True) == "20250102T020405Z"

    def test_basic_pads_year(self):
        assert format_timestamp(datetime(999, 1, 1, tzinfo=UTC), basic=True) == "09990101T000000Z"

    def test_basic_with_milliseconds_uses_extended(self):
        value = datetime(2025, 1, 2, 3, 4, 5, 250_000, tzinfo=UTC)

        assert format_timestamp(value, basic=True) == "2025-01-02T03:04:05.250Z"
