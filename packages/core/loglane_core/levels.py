"""
loglane_core.levels
~~~~~~~~~~~~~~~~~~~
Severity level registry.

Six levels ordered by rank, lower rank = more severe::

    error(0) < warn(1) < info(2) < debug(3) < verbose(4) < silly(5)

A level is *enabled* against a threshold when its rank is less than or
equal to the threshold's rank.  Each level also carries a display color
(used by the console sink only) and a numeric standard-library level so
stdlib handlers can filter on it.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType


class LogLevel(StrEnum):
    """Ordered severity levels, most severe first."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    VERBOSE = "verbose"
    SILLY = "silly"


LEVELS: Mapping[str, int] = MappingProxyType(
    {
        LogLevel.ERROR.value: 0,
        LogLevel.WARN.value: 1,
        LogLevel.INFO.value: 2,
        LogLevel.DEBUG.value: 3,
        LogLevel.VERBOSE.value: 4,
        LogLevel.SILLY.value: 5,
    }
)

COLORS: Mapping[str, str] = MappingProxyType(
    {
        LogLevel.ERROR.value: "red",
        LogLevel.WARN.value: "yellow",
        LogLevel.INFO.value: "green",
        LogLevel.DEBUG.value: "blue",
        LogLevel.VERBOSE.value: "magenta",
        LogLevel.SILLY.value: "cyan",
    }
)

# verbose and silly sit below logging.DEBUG; the rest reuse stdlib numbers.
STDLIB_LEVELS: Mapping[str, int] = MappingProxyType(
    {
        LogLevel.ERROR.value: 40,
        LogLevel.WARN.value: 30,
        LogLevel.INFO.value: 20,
        LogLevel.DEBUG.value: 10,
        LogLevel.VERBOSE.value: 8,
        LogLevel.SILLY.value: 5,
    }
)

DEFAULT_LEVEL: str = LogLevel.INFO.value


def is_level(name: object) -> bool:
    """Return True if *name* is a registered level name."""
    return isinstance(name, str) and name in LEVELS


def is_enabled(level: str, threshold: str) -> bool:
    """Return True if *level* is as severe or more severe than *threshold*.

    Raises:
        KeyError: If either name is not registered.
    """
    return LEVELS[level] <= LEVELS[threshold]


def stdlib_level(name: str) -> int:
    """Return the numeric :mod:`logging` level for a registered name."""
    return STDLIB_LEVELS[name]
