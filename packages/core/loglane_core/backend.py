"""
loglane_core.backend
~~~~~~~~~~~~~~~~~~~~
Write-side contract between the :class:`~loglane_core.logger.Logger` and
whatever actually persists records.

Design
------
* ``LogBackend`` is a ``Protocol`` (structural subtyping) rather than an
  ABC, so any object with ``level``, ``write`` and ``close`` satisfies it
  without explicit inheritance.
* ``StdlibBackend`` drives a dedicated :mod:`logging` logger with the
  console, rotating-file and uncaught-exception sinks described in
  :class:`~loglane_core.config.LoggerSettings`.
* ``InMemoryBackend`` keeps every write in a list; suitable for unit
  tests and for embedding where records are consumed programmatically.

The backend never gates or sanitizes: by the time ``write`` is called the
logger has already decided the record should go out.
"""

from __future__ import annotations

import itertools
import logging
import sys
from collections.abc import Mapping
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

from rich.console import Console

from loglane_core.config import LoggerSettings
from loglane_core.errors import BackendWriteError, InvalidLevelError
from loglane_core.formatter import (
    ATTACHMENT_ATTR,
    LEVEL_ATTR,
    ConsoleFormatter,
    FormatProvider,
    JsonFormatter,
)
from loglane_core.handlers import DailyRotatingFileHandler, RichConsoleHandler
from loglane_core.levels import LEVELS, STDLIB_LEVELS, LogLevel, stdlib_level


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class LogBackend(Protocol):
    """Leveled sink that accepts already-gated records.

    ``level`` mirrors the logger's threshold so sinks with their own
    filtering stay in step with it.
    """

    @property
    def level(self) -> str:
        """Current level name."""
        ...

    @level.setter
    def level(self, name: str) -> None: ...

    def write(self, level: str, message: str, attachment: Mapping[str, Any]) -> None:
        """Persist one record.

        Args:
            level: Registered level name.
            message: Log message, unchanged.
            attachment: ``{"meta": ...}`` plus ``"context"`` for
                context-augmented calls.
        """
        ...

    def close(self) -> None:
        """Release any sinks held by the backend."""
        ...


# ---------------------------------------------------------------------------
# Standard-library implementation
# ---------------------------------------------------------------------------


def _register_level_names() -> None:
    for name, number in STDLIB_LEVELS.items():
        if logging.getLevelName(number) == f"Level {number}":
            logging.addLevelName(number, name.upper())


# Suffix that keeps each backend's stdlib logger distinct under LOGGER_NAME.
_instance_ids = itertools.count(1)


class StdlibBackend:
    """Backend that writes through its own non-propagating stdlib logger.

    Each instance gets a child logger ``<LOGGER_NAME>.<n>``, so several
    backends built from the same settings keep separate thresholds and
    sinks; closing one leaves the others untouched.

    Sinks are built from *settings*:

    - console (colored level token, via ``rich``)
    - ``<LOG_DIR>/%DATE%-combined.log``: info and more severe, rotated
      daily, size-capped, retention-limited, gzip on rotation
    - ``<LOG_DIR>/%DATE%-error.log``: error only, rotated daily
    - ``<LOG_DIR>/exceptions.log``: uncaught exceptions, through a
      chained ``sys.excepthook``

    Args:
        settings: Sink configuration; read from the environment if omitted.
        format_provider: Callable returning the logger's active custom
            format, consulted by the formatters on each record.
        console: Rich console for the console sink (stdout by default).
    """

    def __init__(
        self,
        settings: LoggerSettings | None = None,
        *,
        format_provider: FormatProvider | None = None,
        console: Console | None = None,
    ) -> None:
        _register_level_names()
        self.settings = settings or LoggerSettings()
        self._format_provider = format_provider
        self.name = f"{self.settings.LOGGER_NAME}.{next(_instance_ids)}"
        self._logger = logging.getLogger(self.name)
        self._logger.propagate = False
        self._exc_logger = logging.getLogger(f"{self.name}.exceptions")
        self._exc_logger.propagate = False
        self._previous_excepthook: Any = None
        self._closed = False
        self._level = self.settings.LOG_LEVEL
        self._logger.setLevel(stdlib_level(self._level))

        if self.settings.CONSOLE_ENABLED:
            handler = RichConsoleHandler(console)
            handler.setFormatter(ConsoleFormatter(format_provider))
            self._logger.addHandler(handler)

        if self.settings.FILES_ENABLED:
            self._add_file_sinks()

        if self.settings.HANDLE_EXCEPTIONS:
            self._install_excepthook()

    # -- configuration ------------------------------------------------------

    def _add_file_sinks(self) -> None:
        s = self.settings
        combined = DailyRotatingFileHandler(
            s.combined_path,
            max_bytes=s.COMBINED_MAX_BYTES,
            retention_days=s.COMBINED_RETENTION_DAYS,
            compress=s.COMPRESS_ROTATED,
        )
        combined.setLevel(stdlib_level(LogLevel.INFO))
        combined.setFormatter(JsonFormatter(self._format_provider))
        self._logger.addHandler(combined)

        errors = DailyRotatingFileHandler(s.error_path)
        errors.setLevel(stdlib_level(LogLevel.ERROR))
        errors.setFormatter(JsonFormatter(self._format_provider))
        self._logger.addHandler(errors)

    def _install_excepthook(self) -> None:
        path = self.settings.exceptions_path
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8", delay=True)
        handler.setFormatter(JsonFormatter(self._format_provider))
        self._exc_logger.addHandler(handler)
        self._exc_logger.setLevel(stdlib_level(LogLevel.ERROR))

        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._handle_uncaught

    def _handle_uncaught(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if not self._closed and not issubclass(exc_type, KeyboardInterrupt):
            self._exc_logger.error(
                str(exc) or exc_type.__name__,
                exc_info=(exc_type, exc, tb),
                extra={
                    LEVEL_ATTR: LogLevel.ERROR.value,
                    ATTACHMENT_ATTR: {"meta": {"exception": exc_type.__name__}},
                },
            )
        previous = self._previous_excepthook or sys.__excepthook__
        previous(exc_type, exc, tb)

    def _remove_handlers(self) -> None:
        for log in (self._logger, self._exc_logger):
            for handler in list(log.handlers):
                log.removeHandler(handler)
                handler.close()

    # -- LogBackend ---------------------------------------------------------

    @property
    def level(self) -> str:
        return self._level

    @level.setter
    def level(self, name: str) -> None:
        if name not in LEVELS:
            raise InvalidLevelError(level=name)
        self._level = name
        self._logger.setLevel(stdlib_level(name))

    @property
    def handlers(self) -> list[logging.Handler]:
        return list(self._logger.handlers)

    def write(self, level: str, message: str, attachment: Mapping[str, Any]) -> None:
        if level not in LEVELS:
            raise BackendWriteError(f"No sink method for level {level!r}", level=level)
        self._logger.log(
            stdlib_level(level),
            message,
            extra={LEVEL_ATTR: level, ATTACHMENT_ATTR: attachment},
        )

    def close(self) -> None:
        # Another backend may have chained its hook on top of ours; only
        # unwind when ours is still the active one.
        if sys.excepthook == self._handle_uncaught:
            sys.excepthook = self._previous_excepthook or sys.__excepthook__
            self._previous_excepthook = None
        self._closed = True
        self._remove_handlers()


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class InMemoryBackend:
    """:class:`LogBackend` that keeps ``(level, message, attachment)`` tuples.

    Example::

        backend = InMemoryBackend()
        log = Logger("debug", backend=backend)
        log.log("info", "hello", {"userId": 1})
        assert backend.records == [("info", "hello", {"meta": {"userId": 1}})]
    """

    def __init__(self, level: str = LogLevel.INFO.value) -> None:
        self._level = level
        self.records: list[tuple[str, str, Mapping[str, Any]]] = []

    @property
    def level(self) -> str:
        return self._level

    @level.setter
    def level(self, name: str) -> None:
        if name not in LEVELS:
            raise InvalidLevelError(level=name)
        self._level = name

    def write(self, level: str, message: str, attachment: Mapping[str, Any]) -> None:
        if level not in LEVELS:
            raise BackendWriteError(f"No sink method for level {level!r}", level=level)
        self.records.append((level, message, attachment))

    def messages(self, level: str | None = None) -> list[str]:
        """Return written messages, optionally only those at *level*."""
        return [m for lvl, m, _ in self.records if level is None or lvl == level]

    def clear(self) -> None:
        """Remove all records.  Useful for test isolation."""
        self.records.clear()

    def close(self) -> None:
        pass

    @property
    def size(self) -> int:
        return len(self.records)
