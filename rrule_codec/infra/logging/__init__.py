"""Logging infrastructure.

Basic usage:
    import logging

    from rrule_codec.infra.logging import setup_logging

    setup_logging()  # once, in the embedding application
    logger = logging.getLogger(__name__)

    # Lazy evaluation for expensive arguments
    from rrule_codec.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Rule: {serialize(fields)}")
"""

from rrule_codec.infra.logging.config import (
    build_logging_config,
    configure_logging,
    setup_logging,
)
from rrule_codec.infra.logging.formatters import JSONFormatter
from rrule_codec.infra.logging.lazy import (
    LazyLoggerAdapter,
    LazyString,
    get_lazy_logger,
    lazy,
)

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "LazyString",
    "build_logging_config",
    "configure_logging",
    "get_lazy_logger",
    "lazy",
    "setup_logging",
]
