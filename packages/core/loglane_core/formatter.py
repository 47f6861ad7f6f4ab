"""
loglane_core.formatter
~~~~~~~~~~~~~~~~~~~~~~
Render log records into structured output lines.

Every record carries the same top-level fields::

    timestamp, level, message,
    service, requestId, userId, ipAddress, responseTime,
    metadata   (residual per-call fields, omitted when empty)
    context    (only for context-augmented calls)

The five named fields resolve in precedence order: active custom-format
field, then per-call metadata field, then the ``"N/A"`` sentinel.

Usage::

    from loglane_core.formatter import build_entry

    build_entry("info", "Order placed", {"userId": "u1", "orderId": 7})
    # {'timestamp': '...', 'level': 'info', 'message': 'Order placed',
    #  'service': 'N/A', 'requestId': 'N/A', 'userId': 'u1',
    #  'ipAddress': 'N/A', 'responseTime': 'N/A',
    #  'metadata': {'orderId': 7}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

SENTINEL = "N/A"

# Fields promoted to the top level of every entry, in output order.
NAMED_FIELDS: tuple[str, ...] = (
    "service",
    "requestId",
    "userId",
    "ipAddress",
    "responseTime",
)

# Attributes a backend attaches to a stdlib LogRecord via ``extra``.
LEVEL_ATTR = "loglane_level"
ATTACHMENT_ATTR = "loglane_attachment"

FormatProvider = Callable[[], Mapping[str, Any] | None]


def iso_timestamp(created: float | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    moment = (
        datetime.now(tz=UTC)
        if created is None
        else datetime.fromtimestamp(created, tz=UTC)
    )
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_entry(
    level: str,
    message: str,
    meta: Any = None,
    *,
    custom_format: Mapping[str, Any] | None = None,
    context: Any = None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """Assemble the structured entry for one record.

    Args:
        level: Level name.
        message: Log message.
        meta: Per-call metadata.  A mapping is split into named fields and
            residual ``metadata``; any other non-None value is kept whole
            under ``metadata``.
        custom_format: Active custom-format override, if any.
        context: Context attached by a context-augmented call.
        timestamp: Pre-computed timestamp; generated now when omitted.

    Returns:
        A new dict ready for JSON serialisation.
    """
    override = custom_format or {}
    fields = meta if isinstance(meta, Mapping) else {}

    entry: dict[str, Any] = {
        "timestamp": timestamp or iso_timestamp(),
        "level": level,
        "message": message,
    }
    for name in NAMED_FIELDS:
        if name in override:
            entry[name] = override[name]
        elif name in fields:
            entry[name] = fields[name]
        else:
            entry[name] = SENTINEL

    if isinstance(meta, Mapping):
        residual = {k: v for k, v in meta.items() if k not in NAMED_FIELDS}
        if residual:
            entry["metadata"] = residual
    elif meta is not None:
        entry["metadata"] = meta

    if context is not None:
        entry["context"] = context
    return entry


def entry_from_record(
    record: logging.LogRecord,
    custom_format: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build an entry from a stdlib LogRecord emitted by a loglane backend."""
    attachment = getattr(record, ATTACHMENT_ATTR, None)
    if not isinstance(attachment, Mapping):
        attachment = {}
    return build_entry(
        getattr(record, LEVEL_ATTR, record.levelname.lower()),
        record.getMessage(),
        attachment.get("meta"),
        custom_format=custom_format,
        context=attachment.get("context"),
        timestamp=iso_timestamp(record.created),
    )


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Outputs one JSON object per line.  The custom-format override is read
    through *format_provider* on every call, so changes made on the logger
    apply to the very next record.
    """

    def __init__(self, format_provider: FormatProvider | None = None) -> None:
        super().__init__()
        self.format_provider = format_provider

    def current_format(self) -> Mapping[str, Any] | None:
        return self.format_provider() if self.format_provider else None

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        payload = entry_from_record(record, self.current_format())

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class ConsoleFormatter(JsonFormatter):
    """Human-oriented line: ``<timestamp> [<level>]: <message> {fields}``.

    Only fields that carry information are appended; sentinel values are
    left out to keep terminal output short.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = entry_from_record(record, self.current_format())
        head = f"{payload.pop('timestamp')} [{payload.pop('level')}]: {payload.pop('message')}"
        extras = {k: v for k, v in payload.items() if v != SENTINEL}
        line = f"{head} {json.dumps(extras, default=str)}" if extras else head
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
