"""
Pytest fixtures for loglane_core tests.

Provides an in-memory backend, a logger bound to it at the most verbose
level, and settings that point every file sink at ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from loglane_core import InMemoryBackend, Logger, LoggerSettings


@pytest.fixture()
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture()
def logger(backend: InMemoryBackend) -> Logger:
    return Logger("silly", backend=backend)


@pytest.fixture()
def file_settings(tmp_path: Path, request: pytest.FixtureRequest) -> LoggerSettings:
    """Settings with files under tmp_path and no console / excepthook."""
    return LoggerSettings(
        LOGGER_NAME=f"loglane.test.{request.node.name}",
        LOG_DIR=tmp_path / "logs",
        CONSOLE_ENABLED=False,
        HANDLE_EXCEPTIONS=False,
    )


@pytest.fixture()
def file_logger(file_settings: LoggerSettings) -> Iterator[Logger]:
    log = Logger("info", settings=file_settings)
    yield log
    log.close()
