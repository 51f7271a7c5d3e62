"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from rrule_codec.core.settings.loader import get_rrule_settings

    settings = get_rrule_settings()  # First call: loads and validates
    settings = get_rrule_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    clear_all_caches()

    Or pass an explicit instance to the operation:
    parse(text, settings=RRuleSettings(max_input_length=64))
"""

from __future__ import annotations

from functools import lru_cache

from .logs import LoggingSettings
from .rrule import RRuleSettings


@lru_cache(maxsize=1)
def get_rrule_settings() -> RRuleSettings:
    """Get cached codec and validator settings.

    Returns:
        Validated and frozen RRuleSettings instance.
    """
    return RRuleSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when you need to force reload settings.
    """
    get_rrule_settings.cache_clear()
    get_logging_settings.cache_clear()
