"""Occurrence helpers for recurrence rules.

These functions let callers go from a rule to concrete timestamps without
touching the engine directly. Each one accepts either ``RuleFields`` or
RRULE text, validates the rule against its start and then asks the engine
for occurrences.

Example:
    >>> start = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)
    >>> [dt.day for dt in generate_occurrences(WEEKDAYS, start, count=3)]
    [6, 7, 8]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dateutil.rrule import rruleset

from rrule_codec.core.settings import get_rrule_settings
from rrule_codec.rules import engine
from rrule_codec.rules.codec import parse
from rrule_codec.rules.models import RuleFields
from rrule_codec.rules.validator import coerce_start, to_engine_rule, validate

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from datetime import datetime

    from rrule_codec.core.settings import RRuleSettings

logger = logging.getLogger(__name__)

RuleInput = RuleFields | str


def _resolve(rule: RuleInput, start: datetime | str, settings: RRuleSettings | None) -> tuple[engine.EngineRule, datetime]:
    fields = rule if isinstance(rule, RuleFields) else parse(rule, settings=settings)
    moment = coerce_start(start)
    validate(fields, moment)
    return to_engine_rule(fields), moment


def generate_occurrences(
    rule: RuleInput,
    start: datetime | str,
    *,
    after: datetime | None = None,
    before: datetime | None = None,
    count: int | None = None,
    include_start: bool = True,
    settings: RRuleSettings | None = None,
) -> Iterator[datetime]:
    """Generate occurrence datetimes for a rule.

    Args:
        rule: RuleFields or RRULE string (e.g., "FREQ=DAILY;INTERVAL=2")
        start: The start datetime for the recurrence series
        after: Only return occurrences after this datetime
        before: Only return occurrences before this datetime
        count: Maximum number of occurrences to return
        include_start: Whether to include the start datetime if it matches
        settings: Caps unbounded series at ``max_occurrences``

    Yields:
        datetime objects for each occurrence

    Raises:
        ParseError: If ``rule`` is text that does not parse.
        ValidationError: If the rule is not valid for ``start``.
    """
    settings = settings or get_rrule_settings()
    engine_rule, moment = _resolve(rule, start, settings)

    limit = count
    if limit is None and before is None and engine_rule.count is None and engine_rule.until is None:
        limit = settings.max_occurrences

    generated = 0
    for dt in engine.iter_occurrences(engine_rule, moment, after=after, before=before, inclusive=False):
        if not include_start and dt == moment:
            continue
        if limit is not None and generated >= limit:
            break
        yield dt
        generated += 1


def occurrences_between(
    rule: RuleInput,
    start: datetime | str,
    after: datetime,
    before: datetime,
    *,
    inclusive: bool = False,
    settings: RRuleSettings | None = None,
) -> list[datetime]:
    """Return every occurrence between ``after`` and ``before``.

    Args:
        rule: RuleFields or RRULE string
        start: The start datetime for the recurrence series
        after: Window start
        before: Window end
        inclusive: Keep occurrences equal to a window bound

    Returns:
        Occurrences in ascending order
    """
    engine_rule, moment = _resolve(rule, start, settings)
    return engine.expand(engine_rule, moment, after=after, before=before, inclusive=inclusive)


def get_next_occurrence(
    rule: RuleInput,
    start: datetime | str,
    after: datetime,
    *,
    inclusive: bool = False,
    settings: RRuleSettings | None = None,
) -> datetime | None:
    """Get the first occurrence after a given datetime.

    Returns:
        The next occurrence datetime, or None if no more occurrences
    """
    engine_rule, moment = _resolve(rule, start, settings)
    return engine.occurrence_after(engine_rule, moment, after, inclusive=inclusive)


def get_previous_occurrence(
    rule: RuleInput,
    start: datetime | str,
    before: datetime,
    *,
    inclusive: bool = False,
    settings: RRuleSettings | None = None,
) -> datetime | None:
    """Get the last occurrence before a given datetime.

    Returns:
        The previous occurrence datetime, or None if the series has not started
    """
    engine_rule, moment = _resolve(rule, start, settings)
    return engine.occurrence_before(engine_rule, moment, before, inclusive=inclusive)


def build_ruleset(
    rule: RuleInput,
    start: datetime | str,
    *,
    rdates: Iterable[datetime] = (),
    exrules: Iterable[RuleInput] = (),
    exdates: Iterable[datetime] = (),
    settings: RRuleSettings | None = None,
) -> rruleset:
    """Combine a rule with extra and excluded dates into a dateutil ``rruleset``.

    Every exclusion rule is validated against the same start as ``rule``.

    Args:
        rule: Including rule
        start: The start datetime shared by all rules
        rdates: Extra occurrences to add
        exrules: Rules whose occurrences are removed
        exdates: Occurrences to remove

    Returns:
        dateutil rruleset
    """
    engine_rule, moment = _resolve(rule, start, settings)
    result = rruleset()
    result.rrule(engine_rule.to_dateutil(moment))
    for exrule in exrules:
        excluded, _ = _resolve(exrule, moment, settings)
        result.exrule(excluded.to_dateutil(moment))
    for rdate in rdates:
        result.rdate(engine.ensure_aware(rdate))
    for exdate in exdates:
        result.exdate(engine.ensure_aware(exdate))
    return result


# Common recurrence presets for convenience
DAILY = "FREQ=DAILY"
WEEKDAYS = "FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR"
WEEKLY = "FREQ=WEEKLY"
BIWEEKLY = "FREQ=WEEKLY;INTERVAL=2"
MONTHLY = "FREQ=MONTHLY"
YEARLY = "FREQ=YEARLY"


__all__ = [
    "BIWEEKLY",
    "DAILY",
    "MONTHLY",
    "WEEKDAYS",
    "WEEKLY",
    "YEARLY",
    "build_ruleset",
    "generate_occurrences",
    "get_next_occurrence",
    "get_previous_occurrence",
    "occurrences_between",
]
