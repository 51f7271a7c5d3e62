"""Logging settings for embedding applications."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Options passed to ``configure_logging`` by ``setup_logging``.

    Environment variables use the LOG_ prefix, e.g. LOG_LEVEL=DEBUG or
    LOG_CONSOLE_ENABLED=false.
    """

    service_name: str = Field(default="rrule-codec", description="Static 'service' field on JSON records")
    level: LogLevel = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(default=True, alias="json", description="Emit JSON Lines instead of plain text")
    console_enabled: bool = Field(default=True, description="Attach a stderr handler")
    include_process_info: bool = Field(default=False, description="Add process id and name to JSON records")
    include_thread_info: bool = Field(default=False, description="Add thread id and name to JSON records")
    capture_warnings: bool = Field(default=True, description="Route warnings.warn() through logging")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Return keyword arguments for ``configure_logging``."""
        kwargs = self.model_dump(exclude={"level"})
        kwargs["log_level"] = self.level
        return kwargs
