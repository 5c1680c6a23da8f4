"""Exception types raised by the index and health-risk core."""

from __future__ import annotations


class AirHealthError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(AirHealthError, ValueError):
    """A breakpoint table or a setting is malformed."""


class InvalidInputError(AirHealthError, ValueError):
    """An input value cannot be used and has no safe default."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"{field}={value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason
