"""
loglane_core
~~~~~~~~~~~~
Structured application logging: custom severity levels, JSON output,
field sanitization and HTTP access logging for ASGI apps.

Public surface
--------------
This package exposes **all** public symbols through its top-level
namespace so consumers never need to import from internal sub-modules
directly::

    # Preferred
    from loglane_core import Logger, sanitize

    # Also valid but discouraged
    from loglane_core.logger import Logger
    from loglane_core.sanitizer import sanitize

Sub-module summary
------------------
:mod:`loglane_core.levels`
    Level registry: :class:`LogLevel`, ranks and display colors.

:mod:`loglane_core.logger`
    :class:`Logger` - gate, sanitize and write pipeline.

:mod:`loglane_core.sanitizer`
    Recursive removal of sensitive fields.

:mod:`loglane_core.formatter`
    Record assembly and JSON / console formatters.

:mod:`loglane_core.backend`
    :class:`LogBackend` Protocol, :class:`StdlibBackend` and
    :class:`InMemoryBackend`.

:mod:`loglane_core.handlers`
    Daily rotating file sink and colored console sink.

:mod:`loglane_core.middleware`
    ASGI request logging middleware.

:mod:`loglane_core.errors`
    Exception hierarchy rooted at :exc:`LoglaneError`.
"""

from __future__ import annotations

# --- Backends ---------------------------------------------------------------
from loglane_core.backend import InMemoryBackend, LogBackend, StdlibBackend

# --- Configuration ----------------------------------------------------------
from loglane_core.config import LoggerSettings

# --- Exceptions -------------------------------------------------------------
from loglane_core.errors import (
    BackendWriteError,
    InvalidFormatError,
    InvalidLevelError,
    LoglaneError,
)

# --- Formatting -------------------------------------------------------------
from loglane_core.formatter import (
    SENTINEL,
    ConsoleFormatter,
    JsonFormatter,
    build_entry,
)

# --- Sinks ------------------------------------------------------------------
from loglane_core.handlers import DailyRotatingFileHandler, RichConsoleHandler

# --- Levels -----------------------------------------------------------------
from loglane_core.levels import COLORS, LEVELS, LogLevel, is_enabled

# --- Logger -----------------------------------------------------------------
from loglane_core.logger import Logger

# --- HTTP -------------------------------------------------------------------
from loglane_core.middleware import RequestLoggingMiddleware, RequestObserver
from loglane_core.models import HttpAccessRecord

# --- Sanitization -----------------------------------------------------------
from loglane_core.sanitizer import DEFAULT_SENSITIVE_FIELDS, sanitize

__all__: list[str] = [
    # Logger
    "Logger",
    # Levels
    "COLORS",
    "LEVELS",
    "LogLevel",
    "is_enabled",
    # Sanitization
    "DEFAULT_SENSITIVE_FIELDS",
    "sanitize",
    # Formatting
    "SENTINEL",
    "ConsoleFormatter",
    "JsonFormatter",
    "build_entry",
    # Backends & sinks
    "InMemoryBackend",
    "LogBackend",
    "StdlibBackend",
    "DailyRotatingFileHandler",
    "RichConsoleHandler",
    # Configuration
    "LoggerSettings",
    # HTTP
    "HttpAccessRecord",
    "RequestLoggingMiddleware",
    "RequestObserver",
    # Errors
    "BackendWriteError",
    "InvalidFormatError",
    "InvalidLevelError",
    "LoglaneError",
]

__version__: str = "0.1.0"
