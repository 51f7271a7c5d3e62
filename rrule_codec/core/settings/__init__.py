"""Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from rrule_codec.core.settings import get_rrule_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import clear_all_caches, get_logging_settings, get_rrule_settings
from .logs import LoggingSettings
from .rrule import RRuleSettings

__all__ = [
    "LoggingSettings",
    "RRuleSettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_rrule_settings",
]
