"""
loglane_core.config
~~~~~~~~~~~~~~~~~~~
Settings for the default logging backend.

Values come from ``LOGLANE_*`` environment variables or a ``.env`` file;
defaults reproduce the stock sink layout::

    logs/%DATE%-combined.log   info and above, 20 MB cap, 14 days, gzip
    logs/%DATE%-error.log      error only
    logs/exceptions.log        uncaught exceptions
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from loglane_core.levels import DEFAULT_LEVEL, LEVELS
from loglane_core.sanitizer import DEFAULT_SENSITIVE_FIELDS


class LoggerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOGLANE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity
    LOGGER_NAME: str = "loglane"

    # Gate
    LOG_LEVEL: str = DEFAULT_LEVEL

    # Sinks
    LOG_DIR: Path = Path("logs")
    CONSOLE_ENABLED: bool = True
    FILES_ENABLED: bool = True
    COMBINED_FILENAME: str = "%DATE%-combined.log"
    COMBINED_MAX_BYTES: int = 20 * 1024 * 1024
    COMBINED_RETENTION_DAYS: int = 14
    ERROR_FILENAME: str = "%DATE%-error.log"
    COMPRESS_ROTATED: bool = True
    EXCEPTIONS_FILENAME: str = "exceptions.log"
    HANDLE_EXCEPTIONS: bool = True

    # Sanitization
    SENSITIVE_FIELDS: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_SENSITIVE_FIELDS)
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if value not in LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return value

    @property
    def combined_path(self) -> Path:
        return self.LOG_DIR / self.COMBINED_FILENAME

    @property
    def error_path(self) -> Path:
        return self.LOG_DIR / self.ERROR_FILENAME

    @property
    def exceptions_path(self) -> Path:
        return self.LOG_DIR / self.EXCEPTIONS_FILENAME
