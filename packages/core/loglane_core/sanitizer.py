"""
loglane_core.sanitizer
~~~~~~~~~~~~~~~~~~~~~~
Strip sensitive fields from arbitrary nested data before it is logged.

Design principles
-----------------
* **Drop, don't mask** - a key listed in the sensitive set is removed from
  its mapping entirely, so neither the value nor its presence is logged.
* **Exact match** - key comparison is case-sensitive; ``password`` is
  dropped, ``Password`` is not.
* **Recursive** - nested mappings and sequences are walked so secrets
  buried inside structured payloads are caught.
* **Non-destructive** - a *new* structure is returned; originals are
  never mutated.
* **Cycle-safe** - a container that already appears on the current path
  is replaced with ``"[Circular]"`` instead of recursing forever.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "creditCard",
        "ssn",
    }
)

CIRCULAR_MARKER = "[Circular]"


def sanitize(
    value: Any,
    sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS,
) -> Any:
    """Return a copy of *value* with every sensitive key removed.

    Args:
        value: Any structure of mappings, lists, tuples and scalars.
        sensitive_fields: Key names to drop at any nesting depth.

    Returns:
        A new structure of the same shape minus the sensitive keys.
        Lists and tuples keep their order, length and type; scalars are
        returned as-is.

    Example::

        >>> sanitize({"user": "alice", "password": "s3cr3t",
        ...           "cards": [{"creditCard": "4111", "last4": "1111"}]})
        {'user': 'alice', 'cards': [{'last4': '1111'}]}
    """
    fields = (
        sensitive_fields
        if isinstance(sensitive_fields, frozenset)
        else frozenset(sensitive_fields)
    )
    return _sanitize_recursive(value, fields, set())


def _sanitize_recursive(obj: Any, fields: frozenset[str], path: set[int]) -> Any:
    """Internal recursive worker; handles mappings, sequences and scalars."""
    if isinstance(obj, Mapping):
        if id(obj) in path:
            return CIRCULAR_MARKER
        path.add(id(obj))
        try:
            return {
                k: _sanitize_recursive(v, fields, path)
                for k, v in obj.items()
                if k not in fields
            }
        finally:
            path.discard(id(obj))
    if isinstance(obj, (list, tuple)):
        if id(obj) in path:
            return CIRCULAR_MARKER
        path.add(id(obj))
        try:
            items = [_sanitize_recursive(item, fields, path) for item in obj]
        finally:
            path.discard(id(obj))
        return items if isinstance(obj, list) else tuple(items)
    # Scalars (str, int, float, bool, None, bytes, ...) are returned as-is
    return obj
