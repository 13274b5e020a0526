"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class InvalidConfigurationValueError(ConfigurationError):
    """A configuration value is present but cannot be used.

    ``name`` is the environment variable or option that carried ``value``.
    """

    def __init__(self, name: str, value: object, reason: str | None = None) -> None:
        self.name = name
        self.value = value
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Invalid value for {name}: {value!r}{detail}")
