"""
Tests for loglane_core.errors.

Covers: exception hierarchy, default messages, attribute presence.
"""

from __future__ import annotations

import pytest

from loglane_core import (
    BackendWriteError,
    InvalidFormatError,
    InvalidLevelError,
    LoglaneError,
)


class TestInvalidLevelError:
    def test_default_message(self) -> None:
        e = InvalidLevelError(level="invalid")
        assert str(e) == "Invalid log level: invalid. Log level not changed."
        assert e.level == "invalid"

    def test_custom_message(self) -> None:
        e = InvalidLevelError("nope", level="x")
        assert str(e) == "nope"

    def test_is_loglane_error(self) -> None:
        assert isinstance(InvalidLevelError(level="x"), LoglaneError)


class TestInvalidFormatError:
    def test_default_message_names_type(self) -> None:
        e = InvalidFormatError(value_type="NoneType")
        assert "NoneType" in str(e)
        assert e.value_type == "NoneType"


class TestBackendWriteError:
    def test_attributes(self) -> None:
        e = BackendWriteError("disk full", level="error")
        assert str(e) == "disk full"
        assert e.level == "error"


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [
            InvalidLevelError(level="x"),
            InvalidFormatError(value_type="int"),
            BackendWriteError("boom"),
        ],
    )
    def test_caught_by_loglane_error(self, exc: LoglaneError) -> None:
        with pytest.raises(LoglaneError):
            raise exc

    def test_not_value_errors(self) -> None:
        for exc_cls in (LoglaneError, InvalidLevelError, InvalidFormatError, BackendWriteError):
            assert not issubclass(exc_cls, ValueError)
