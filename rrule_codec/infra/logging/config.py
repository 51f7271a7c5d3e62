"""Logging configuration setup.

Configures the root logger with ``logging.config.dictConfig``. Library
modules only create loggers with ``logging.getLogger(__name__)``; handlers
are installed here, by the embedding application, never at import time.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rrule_codec.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False


def setup_logging(log_settings: LoggingSettings | None = None, *, force: bool = False, **overrides: Any) -> None:
    """Configure logging from settings, once per process.

    Later calls are no-ops unless ``force`` is set. ``overrides`` win over
    the values taken from ``log_settings`` (or the cached settings).
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from rrule_codec.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **overrides})
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    console_enabled: bool = True,
    service_name: str | None = None,
    include_process_info: bool = False,
    include_thread_info: bool = False,
    capture_warnings: bool = True,
    **kwargs: Any,
) -> None:
    """Configure logging with dictConfig.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Enable JSONL (JSON Lines) structured logging.
        console_enabled: Enable console/stderr logging.
        service_name: Static ``service`` field added to JSON records.
        include_process_info: Include process ID and name in records.
        include_thread_info: Include thread ID and name in records.
        capture_warnings: Forward Python warnings to logging system.
        **kwargs: Ignored extra settings, reported at DEBUG.

    Example:
        from rrule_codec.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    logging.config.dictConfig(
        build_logging_config(
            log_level=log_level,
            json_logs=json_logs,
            console_enabled=console_enabled,
            service_name=service_name,
            include_process_info=include_process_info,
            include_thread_info=include_thread_info,
        )
    )
    logging.captureWarnings(capture_warnings)

    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))


def build_logging_config(
    *,
    log_level: str,
    json_logs: bool,
    console_enabled: bool,
    service_name: str | None,
    include_process_info: bool,
    include_thread_info: bool,
) -> dict[str, Any]:
    """Build the dictConfig mapping for the given options."""
    formatters: dict[str, Any] = {
        "json": {
            "()": "rrule_codec.infra.logging.formatters.JSONFormatter",
            "static": {"service": service_name} if service_name else None,
            "include_process_info": include_process_info,
            "include_thread_info": include_thread_info,
        },
        "text": {
            "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        },
    }

    handlers: dict[str, Any] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json" if json_logs else "text",
            "level": log_level,
            "stream": "ext://sys.stderr",
        }
    else:
        handlers["null"] = {"class": "logging.NullHandler"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "root": {"level": log_level, "handlers": list(handlers)},
    }
