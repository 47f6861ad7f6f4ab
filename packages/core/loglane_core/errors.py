"""
loglane_core.errors
~~~~~~~~~~~~~~~~~~~
Custom exception hierarchy for loglane.

All loglane exceptions inherit from LoglaneError so callers can catch the
full family with a single ``except LoglaneError`` clause while still
being able to discriminate at finer granularity.
"""

from __future__ import annotations


class LoglaneError(Exception):
    """Base class for all loglane exceptions."""


class InvalidLevelError(LoglaneError):
    """Raised when a level name is not in the level registry.

    The logger's configuration is left unchanged.

    Attributes:
        level: The rejected level name.
    """

    def __init__(self, message: str | None = None, *, level: object = None) -> None:
        if message is None:
            message = f"Invalid log level: {level}. Log level not changed."
        super().__init__(message)
        self.level = level


class InvalidFormatError(LoglaneError):
    """Raised when a custom format is ``None`` or not a mapping.

    Attributes:
        value_type: Type name of the rejected value.
    """

    def __init__(self, message: str | None = None, *, value_type: str = "") -> None:
        if message is None:
            message = f"Invalid custom format: expected a mapping, got {value_type}."
        super().__init__(message)
        self.value_type = value_type


class BackendWriteError(LoglaneError):
    """Raised by a backend when a record cannot be written.

    Attributes:
        level: Level name of the record that failed.
    """

    def __init__(self, message: str, *, level: str = "") -> None:
        super().__init__(message)
        self.level = level
