"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: cache isolation and explicit settings objects
    - Rule Fixtures: common rules and start timestamps
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

import pytest

# Keep a developer's .env or shell from leaking into the suite
for _name in list(os.environ):
    if _name.startswith(("RRULE_", "LOG_")):
        del os.environ[_name]


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _clear_settings_caches():
    """Reset cached settings before and after every test."""
    from rrule_codec.core.settings import clear_all_caches

    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def rrule_settings():
    """Default codec settings built explicitly (not from the cache)."""
    from rrule_codec.core.settings import RRuleSettings

    return RRuleSettings()


# ============================================================================
# Rule Fixtures
# ============================================================================


@pytest.fixture
def start() -> datetime:
    """A Monday morning in UTC used as DTSTART across tests."""
    return datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


@pytest.fixture
def weekly_rule():
    """Every Monday, Wednesday and Friday."""
    from rrule_codec.rules.models import Every, Frequency, RuleFields, Weekday

    return RuleFields(
        frequency=Frequency.WEEKLY,
        by_weekday=(Every(Weekday.MONDAY), Every(Weekday.WEDNESDAY), Every(Weekday.FRIDAY)),
    )
