"""
loglane_core.logger
~~~~~~~~~~~~~~~~~~~
Leveled, structured, sanitizing logger.

Every call goes through the same pipeline::

    gate (level check) -> merge custom format -> sanitize -> backend.write

A call whose level is less severe than the current threshold returns
before anything is merged, sanitized or written.

Usage::

    from loglane_core import Logger

    log = Logger("debug")
    log.log("info", "User signed in", {"userId": "u_42", "password": "x"})
    # backend receives ("User signed in", {"meta": {"userId": "u_42"}})

    app = FastAPI(middleware=[log.middleware()])

Error policy
------------
Configuration calls (:meth:`Logger.set_log_level`,
:meth:`Logger.set_custom_format`) raise synchronously and leave the
logger unchanged.  A failing backend write is swallowed and reported on
this module's stdlib logger for :meth:`Logger.log` and
:meth:`Logger.log_with_context`, but re-raised to the awaiting caller of
:meth:`Logger.log_async`.  The asymmetry is part of the contract.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from starlette.middleware import Middleware

from loglane_core.backend import LogBackend, StdlibBackend
from loglane_core.config import LoggerSettings
from loglane_core.errors import InvalidFormatError, InvalidLevelError
from loglane_core.levels import DEFAULT_LEVEL, LEVELS, is_enabled
from loglane_core.middleware import RequestLoggingMiddleware
from loglane_core.sanitizer import DEFAULT_SENSITIVE_FIELDS, sanitize

logger = logging.getLogger(__name__)


class Logger:
    """Structured logger with a mutable level threshold.

    Instances are independent: each holds its own threshold, sensitive
    field set, custom-format override and backend.

    Args:
        level: Initial threshold level name.
        backend: Sink for gated records.  Defaults to a
            :class:`~loglane_core.backend.StdlibBackend` built from
            *settings*.
        sensitive_fields: Key names dropped from every record.  Defaults
            to ``settings.SENSITIVE_FIELDS`` or ``password``,
            ``creditCard``, ``ssn``.
        settings: Backend configuration; read from the environment when
            omitted.

    Raises:
        InvalidLevelError: If *level* is not a registered level name.
    """

    def __init__(
        self,
        level: str = DEFAULT_LEVEL,
        *,
        backend: LogBackend | None = None,
        sensitive_fields: Iterable[str] | None = None,
        settings: LoggerSettings | None = None,
    ) -> None:
        if level not in LEVELS:
            raise InvalidLevelError(level=level)
        if sensitive_fields is None:
            sensitive_fields = (
                settings.SENSITIVE_FIELDS if settings else DEFAULT_SENSITIVE_FIELDS
            )

        self._lock = threading.RLock()
        self._level = level
        self._custom_format: dict[str, Any] | None = None
        self._sensitive_fields = frozenset(sensitive_fields)
        if backend is None:
            backend = StdlibBackend(settings, format_provider=self.get_custom_format)
        self._backend = backend
        self._backend.level = level

    @classmethod
    def from_settings(cls, settings: LoggerSettings | None = None) -> Logger:
        """Build a logger whose level and sinks both come from *settings*."""
        settings = settings or LoggerSettings()
        return cls(settings.LOG_LEVEL, settings=settings)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def backend(self) -> LogBackend:
        return self._backend

    @property
    def sensitive_fields(self) -> frozenset[str]:
        return self._sensitive_fields

    def set_log_level(self, level: str) -> None:
        """Change the threshold.

        Raises:
            InvalidLevelError: If *level* is unknown; the threshold is
                left unchanged.
        """
        if level not in LEVELS:
            raise InvalidLevelError(level=level)
        with self._lock:
            self._backend.level = level
            self._level = level

    def get_log_level(self) -> str:
        return self._level

    def set_custom_format(self, custom_format: Mapping[str, Any]) -> None:
        """Pre-populate fields on every subsequent record.

        Override fields win over per-call metadata.  An empty mapping is
        valid: no fields are overridden but custom mode is engaged.

        Raises:
            InvalidFormatError: If *custom_format* is ``None`` or not a
                mapping; the previous override stays active.
        """
        if custom_format is None or not isinstance(custom_format, Mapping):
            raise InvalidFormatError(value_type=type(custom_format).__name__)
        with self._lock:
            self._custom_format = dict(custom_format)

    def get_custom_format(self) -> dict[str, Any] | None:
        with self._lock:
            return None if self._custom_format is None else dict(self._custom_format)

    def clear_custom_format(self) -> None:
        with self._lock:
            self._custom_format = None

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def is_enabled(self, level: str) -> bool:
        """Return True if a record at *level* would be written.

        Raises:
            InvalidLevelError: If *level* is unknown.
        """
        if level not in LEVELS:
            raise InvalidLevelError(level=level)
        return is_enabled(level, self._level)

    def sanitize(self, value: Any) -> Any:
        """Drop this logger's sensitive fields from *value*."""
        return sanitize(value, self._sensitive_fields)

    def _merge(self, meta: Any) -> Any:
        """Merge the custom-format override into *meta*.

        Override keys win over mapping metadata.  Any other non-None
        *meta* (a list, a string) is kept whole under ``metadata`` next to
        the override fields.
        """
        override = self._custom_format
        if override is None:
            return meta
        if meta is None:
            return dict(override)
        if isinstance(meta, Mapping):
            return {**meta, **override}
        return {**override, "metadata": meta}

    def _write(self, level: str, message: str, attachment: dict[str, Any]) -> None:
        with self._lock:
            self._backend.write(level, message, attachment)

    def log(self, level: str, message: str, meta: Any = None) -> None:
        """Write *message* at *level* if the level is enabled.

        The backend receives ``(message, {"meta": meta})`` where *meta* has
        had the custom format merged in and sensitive fields removed.
        Backend failures are reported and never raised.
        """
        if not self.is_enabled(level):
            return
        attachment = {"meta": self.sanitize(self._merge(meta))}
        try:
            self._write(level, message, attachment)
        except Exception:
            logger.exception(
                "Failed to write log record",
                extra={"record_level": level, "record_message": message},
            )

    def log_with_context(
        self,
        level: str,
        message: str,
        context: Any,
        meta: Any = None,
    ) -> None:
        """Like :meth:`log`, with *context* written as a sibling of ``meta``."""
        if not self.is_enabled(level):
            return
        attachment = {
            "meta": self.sanitize(self._merge(meta)),
            "context": self.sanitize(context),
        }
        try:
            self._write(level, message, attachment)
        except Exception:
            logger.exception(
                "Failed to write log record with context",
                extra={"record_level": level, "record_message": message},
            )

    async def log_async(self, level: str, message: str, meta: Any = None) -> None:
        """Awaitable form of :meth:`log`.

        Completes without writing when *level* is gated out.  Unlike
        :meth:`log`, an exception raised by the backend propagates to the
        awaiting caller.  The write runs inline on the calling loop.
        """
        if not self.is_enabled(level):
            return
        self._write(level, message, {"meta": self.sanitize(self._merge(meta))})

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def middleware(self) -> Middleware:
        """Return a Starlette middleware entry that logs every HTTP request.

        Example::

            app = FastAPI(middleware=[log.middleware()])
        """
        return Middleware(RequestLoggingMiddleware, logger=self)

    def request_logger(self) -> Middleware:
        """Alias of :meth:`middleware`."""
        return self.middleware()

    def close(self) -> None:
        """Close the backend's sinks."""
        self._backend.close()
