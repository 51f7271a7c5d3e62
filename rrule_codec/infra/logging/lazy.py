"""Lazy evaluation support for logging.

Ensures that expensive log arguments (for example a full serialization of a
rule) are only computed if the log level is actually enabled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any


class LazyString:
    """Lazy-evaluated string that defers computation until needed.

    Example:
        ```python
        logger.debug("Rule: %s", LazyString(lambda: serialize(fields)))
        # serialize() never runs if DEBUG is disabled
        ```
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[], Any]) -> None:
        self._func = func

    def __str__(self) -> str:
        return str(self._func())

    def __repr__(self) -> str:
        return f"LazyString({self._func!r})"


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that supports lazy evaluation of log messages.

    Callables passed as the message or as format arguments are only invoked
    when the record is going to be emitted. Bound context is merged into
    each record's ``extra``.

    Example:
        ```python
        logger = LazyLoggerAdapter(logging.getLogger(__name__))
        logger.debug(lambda: f"Parsed {serialize(fields)}")
        ```
    """

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        """Merge bound context under any per-call ``extra``."""
        if self.extra:
            kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Resolve callables in ``msg`` and ``args``, then log if ``level`` is enabled.

        The level check runs first so disabled records never evaluate anything.
        """
        if not self.isEnabledFor(level):
            return
        msg = msg() if callable(msg) else msg
        args = tuple(arg() if callable(arg) else arg for arg in args)
        super().log(level, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Get logger with lazy evaluation support.

    Args:
        name: Logger name (usually __name__).
        **context: Optional context to bind to logger.

    Returns:
        Logger adapter with lazy evaluation support.

    Example:
        ```python
        lazy_logger = get_lazy_logger(__name__, component="codec")
        lazy_logger.debug(lambda: f"Fields: {fields.to_dict()}")
        ```
    """
    return LazyLoggerAdapter(logging.getLogger(name), context or {})


def lazy(func: Callable[[], Any]) -> LazyString:
    """Create a lazy-evaluated string.

    Example:
        ```python
        logger.debug("Data: %s", lazy(lambda: fields.to_dict()))
        ```
    """
    return LazyString(func)
