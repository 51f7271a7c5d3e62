"""Custom exception classes for rule parsing and validation."""

from __future__ import annotations

from typing import Any


class RRuleError(Exception):
    """Base exception for the codec and validator.

    All custom exceptions should inherit from this class.
    Follows the shape of RFC 7807 Problem Details so callers can render
    diagnostics without re-parsing the input.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier.
        title: Short, human-readable summary of the problem type.
        extra: Additional context-specific information about the error.

    Example:
            raise RRuleError(
            detail="Unknown key 'FREQQ'",
            type="unknown-key",
            title="Parse Error",
            extra={"key": "FREQQ"}
        )
    """

    default_type = "rrule-error"
    default_title = "Recurrence Rule Error"

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize rule exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type or self.default_type
        self.title = title or self.default_title
        self.extra = extra or {}
        super().__init__(detail)

    def to_dict(self) -> dict[str, Any]:
        """Return a problem-details style mapping of the error."""
        return {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            **self.extra,
        }


# ──────────────────────────────────────────────────────────────
# Parse errors
# ──────────────────────────────────────────────────────────────


class ParseError(RRuleError):
    """Exception raised for malformed RRULE text.

    Example:
            raise ParseError(
            detail="Invalid value '3x' for BYHOUR",
            key="BYHOUR",
            token="3x",
        )
    """

    default_type = "parse-error"
    default_title = "Parse Error"

    def __init__(
        self,
        detail: str,
        *,
        key: str | None = None,
        token: str | None = None,
        type: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.key = key
        self.token = token
        context: dict[str, Any] = {}
        if key is not None:
            context["key"] = key
        if token is not None:
            context["token"] = token
        super().__init__(detail=detail, type=type, extra={**context, **(extra or {})})


class InputTooLongError(ParseError):
    """Exception raised when RRULE text exceeds the configured length cap."""

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(
            detail=f"RRULE text is {length} characters long, limit is {limit}",
            type="input-too-long",
            extra={"length": length, "limit": limit},
        )


class MalformedSegmentError(ParseError):
    """Exception raised for a segment that is not KEY=VALUE."""

    def __init__(self, segment: str) -> None:
        super().__init__(
            detail=f"Malformed segment '{segment}', expected KEY=VALUE",
            token=segment,
            type="malformed-segment",
        )


class DuplicateKeyError(ParseError):
    """Exception raised when a key appears more than once."""

    def __init__(self, key: str) -> None:
        super().__init__(
            detail=f"Key {key} appears more than once",
            key=key,
            type="duplicate-key",
        )


class UnknownKeyError(ParseError):
    """Exception raised for a key that is not an RRULE part."""

    def __init__(self, key: str) -> None:
        super().__init__(
            detail=f"Unknown key '{key}'",
            key=key,
            type="unknown-key",
        )


class MissingFrequencyError(ParseError):
    """Exception raised when the FREQ part is absent."""

    def __init__(self) -> None:
        super().__init__(
            detail="RRULE must have a FREQ part",
            key="FREQ",
            type="missing-frequency",
        )


class InvalidFrequencyError(ParseError):
    """Exception raised for an unrecognized FREQ token.

    Example:
            raise InvalidFrequencyError("BOGUS")
    """

    def __init__(self, token: str) -> None:
        super().__init__(
            detail=f"Invalid frequency '{token}'",
            key="FREQ",
            token=token,
            type="invalid-frequency",
        )


class InvalidIntervalError(ParseError):
    """Exception raised for a non-numeric, zero or oversized INTERVAL."""

    def __init__(self, token: str) -> None:
        super().__init__(
            detail=f"Invalid interval '{token}', expected an integer from 1 to 65535",
            key="INTERVAL",
            token=token,
            type="invalid-interval",
        )


class InvalidCountError(ParseError):
    """Exception raised for a COUNT that is not an unsigned 32-bit integer."""

    def __init__(self, token: str) -> None:
        super().__init__(
            detail=f"Invalid count '{token}', expected a non-negative integer",
            key="COUNT",
            token=token,
            type="invalid-count",
        )


class InvalidUntilError(ParseError):
    """Exception raised for an UNTIL that is not a timestamp."""

    def __init__(self, token: str) -> None:
        super().__init__(
            detail=f"Invalid until timestamp '{token}'",
            key="UNTIL",
            token=token,
            type="invalid-until",
        )


class InvalidWeekStartError(ParseError):
    """Exception raised for a WKST that is not a two-letter weekday code."""

    def __init__(self, token: str) -> None:
        super().__init__(
            detail=f"Invalid week start '{token}'",
            key="WKST",
            token=token,
            type="invalid-week-start",
        )


class InvalidWeekdayError(ParseError):
    """Exception raised for a BYDAY token matching neither MO nor -1MO shapes."""

    def __init__(self, token: str) -> None:
        super().__init__(
            detail=f"Invalid weekday '{token}'",
            key="BYDAY",
            token=token,
            type="invalid-weekday",
        )


class InvalidFieldValueError(ParseError):
    """Exception raised for a bad token in one of the numeric list parts."""

    def __init__(self, key: str, token: str) -> None:
        super().__init__(
            detail=f"Invalid value '{token}' for {key}",
            key=key,
            token=token,
            type="invalid-field-value",
        )


class TooManyValuesError(ParseError):
    """Exception raised when a list part holds more tokens than allowed."""

    def __init__(self, key: str, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            detail=f"{key} lists {size} values, limit is {limit}",
            key=key,
            type="too-many-values",
            extra={"size": size, "limit": limit},
        )


# ──────────────────────────────────────────────────────────────
# Validation errors
# ──────────────────────────────────────────────────────────────


class ValidationError(RRuleError):
    """Exception raised for a rule that is inconsistent or cannot start.

    Example:
            raise ValidationError(
            detail="by_hour value 99 is outside 0..23",
            field="by_hour",
            value=99,
        )
    """

    default_type = "validation-error"
    default_title = "Validation Error"

    def __init__(
        self,
        detail: str,
        *,
        field: str | None = None,
        value: Any = None,
        type: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.field = field
        self.value = value
        context: dict[str, Any] = {}
        if field is not None:
            context["field"] = field
        if value is not None:
            context["value"] = value
        super().__init__(detail=detail, type=type, extra={**context, **(extra or {})})


class InvalidStartError(ValidationError):
    """Exception raised when the start timestamp cannot be parsed."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            detail=f"Invalid start timestamp: {value}",
            field="start",
            value=value,
            type="invalid-start",
        )


class InvalidFrequencyValueError(ValidationError):
    """Exception raised when a hand-built rule carries an unknown frequency."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            detail=f"Invalid frequency: {value!r}",
            field="frequency",
            value=value,
            type="invalid-frequency",
        )


class InvalidIntervalValueError(ValidationError):
    """Exception raised for an interval that is not a positive integer."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            detail=f"Invalid interval: {value!r}, expected a positive integer",
            field="interval",
            value=value,
            type="invalid-interval",
        )


class InvalidCountValueError(ValidationError):
    """Exception raised for a count that is not a non-negative integer."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            detail=f"Invalid count: {value!r}, expected a non-negative integer",
            field="count",
            value=value,
            type="invalid-count",
        )


class InvalidWeekStartValueError(ValidationError):
    """Exception raised for an unrecognized week start code."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            detail=f"Invalid week start: {value!r}",
            field="week_start",
            value=value,
            type="invalid-week-start",
        )


class InvalidWeekdayCodeError(ValidationError):
    """Exception raised for an unrecognized weekday code in by_weekday."""

    def __init__(self, code: Any) -> None:
        self.code = code
        super().__init__(
            detail=f"Invalid weekday: {code!r}",
            field="by_weekday",
            value=code,
            type="invalid-weekday",
        )


class FieldRangeError(ValidationError):
    """Exception raised for a numeric value outside its field's legal range."""

    def __init__(
        self,
        field: str,
        value: Any,
        low: int,
        high: int,
        type: str = "field-out-of-range",
    ) -> None:
        self.low = low
        self.high = high
        super().__init__(
            detail=f"{field} value {value!r} is outside {low}..{high}",
            field=field,
            value=value,
            type=type,
            extra={"low": low, "high": high},
        )


class InvalidMonthError(FieldRangeError):
    """Exception raised for a by_month value outside 1..12."""

    def __init__(self, value: Any) -> None:
        super().__init__("by_month", value, 1, 12, type="invalid-month")


class RuleInvalidError(ValidationError):
    """Exception raised when the calendar engine rejects the rule.

    The engine's diagnostic is kept verbatim in ``detail`` and its
    machine-readable code in ``code``.
    """

    def __init__(
        self,
        detail: str,
        *,
        code: str | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.code = code
        super().__init__(
            detail=f"Invalid rrule: {detail}",
            field=field,
            value=value,
            type="rule-invalid",
            extra={"code": code} if code else None,
        )


__all__ = [
    "DuplicateKeyError",
    "FieldRangeError",
    "InputTooLongError",
    "InvalidCountError",
    "InvalidCountValueError",
    "InvalidFieldValueError",
    "InvalidFrequencyError",
    "InvalidFrequencyValueError",
    "InvalidIntervalError",
    "InvalidIntervalValueError",
    "InvalidMonthError",
    "InvalidStartError",
    "InvalidUntilError",
    "InvalidWeekStartError",
    "InvalidWeekStartValueError",
    "InvalidWeekdayCodeError",
    "InvalidWeekdayError",
    "MalformedSegmentError",
    "MissingFrequencyError",
    "ParseError",
    "RRuleError",
    "RuleInvalidError",
    "TooManyValuesError",
    "UnknownKeyError",
    "ValidationError",
]
