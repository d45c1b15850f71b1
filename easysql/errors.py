"""Custom exception hierarchy for easysql.

All public errors inherit from EasySQLError so callers can catch the base
class for any easysql-specific failure.  Errors raised by the database
driver are never wrapped; they reach the caller unmodified.
"""
from __future__ import annotations


class EasySQLError(Exception):
    """Base exception for all easysql errors."""


class MalformedInputError(EasySQLError):
    """Raised when a value inlined into SQL text fails validation.

    Set-membership predicates render their values inline instead of binding
    them, so every token must be an integer.

    Args:
        token: The offending token.
        value: The full input the token came from.
    """

    def __init__(self, token: str, value: str) -> None:
        super().__init__(
            f"SQL statement can not contain '{token}'; it may be a value of the "
            f"wrong type. Value is '{value}'."
        )
        self.token = token
        self.value = value


class ConfigurationError(EasySQLError):
    """Raised when required configuration is missing or invalid.

    Detected when a factory or assembler is constructed, before any SQL is
    executed.

    Args:
        message: Human-readable description.
        setting: Name of the setting at fault, if any.
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class DialectError(ConfigurationError):
    """Raised when no dialect is registered under the requested target."""

    def __init__(self, target: str, registered: list[str]) -> None:
        super().__init__(
            f"Unsupported dialect target: '{target}'. Registered targets: {registered}.",
            setting="dialect",
        )
        self.target = target
        self.registered = registered


class NoExecutorError(ConfigurationError):
    """Raised when execution is requested on an assembler without an executor."""

    def __init__(self) -> None:
        super().__init__(
            "This QueryAssembler has no executor; it can render SQL but not run it.",
            setting="executor",
        )
