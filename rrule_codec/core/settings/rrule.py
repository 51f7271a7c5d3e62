"""Codec and validator settings.

These settings bound the work a single call may do and pick the textual
form used when serializing UNTIL.

Environment variables use RRULE_ prefix.
Example: RRULE_MAX_INPUT_LENGTH=2048, RRULE_UNTIL_FORMAT=basic
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

UntilFormat = Literal["extended", "basic"]


class RRuleSettings(BaseSettings):
    """Recurrence rule configuration settings.

    Attributes:
        max_input_length: Longest RRULE text accepted by parse.
        max_list_items: Most comma-separated values accepted in one list part.
        accept_rrule_prefix: Strip a leading ``RRULE:`` before parsing.
        until_format: ``extended`` emits ``2025-12-31T23:59:59Z``,
            ``basic`` emits ``20251231T235959Z``.
        max_occurrences: Cap on occurrences produced by an unbounded expansion.

    Example:
        settings = RRuleSettings(until_format="basic")
        text = serialize(fields, settings=settings)
    """

    max_input_length: int = Field(
        default=4096,
        ge=16,
        le=1_048_576,
        description="Maximum RRULE text length accepted by parse",
    )
    max_list_items: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="Maximum number of values in a single list part",
    )
    accept_rrule_prefix: bool = Field(
        default=True,
        description="Accept and strip a leading 'RRULE:' property name",
    )
    until_format: UntilFormat = Field(
        default="extended",
        description="UNTIL serialization form (extended RFC 3339 or basic RFC 5545)",
    )
    max_occurrences: int = Field(
        default=1000,
        ge=1,
        le=1_000_000,
        description="Maximum occurrences returned when an expansion has no upper bound",
    )

    model_config = SettingsConfigDict(
        env_prefix="RRULE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
