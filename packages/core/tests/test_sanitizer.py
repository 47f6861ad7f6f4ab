"""
Tests for loglane_core.sanitizer.

Covers: flat and nested removal, sequences, exact-match semantics,
custom field sets, cycles, and non-mutation.
"""

from __future__ import annotations

from typing import Any

import pytest

from loglane_core import DEFAULT_SENSITIVE_FIELDS, sanitize
from loglane_core.sanitizer import CIRCULAR_MARKER


class TestSanitize:
    def test_flat_removal(self) -> None:
        result = sanitize({"user": "alice", "password": "s3cr3t"})
        assert result == {"user": "alice"}

    def test_nested_removal(self) -> None:
        result = sanitize(
            {"outer": "safe", "payment": {"creditCard": "4111", "amount": 42}}
        )
        assert result == {"outer": "safe", "payment": {"amount": 42}}

    def test_deeply_nested(self) -> None:
        result = sanitize({"a": {"b": {"c": {"ssn": "123-45-6789", "d": 1}}}})
        assert result == {"a": {"b": {"c": {"d": 1}}}}

    def test_list_of_dicts_keeps_order_and_length(self) -> None:
        result = sanitize(
            {"users": [{"name": "a", "password": "1"}, {"name": "b"}, 3, None]}
        )
        assert result == {"users": [{"name": "a"}, {"name": "b"}, 3, None]}

    def test_tuple_stays_tuple(self) -> None:
        result = sanitize(({"ssn": "x", "k": 1}, "v"))
        assert result == ({"k": 1}, "v")
        assert isinstance(result, tuple)

    @pytest.mark.parametrize("scalar", ["text", 42, 3.14, True, None, b"raw"])
    def test_scalars_pass_through(self, scalar: Any) -> None:
        assert sanitize(scalar) == scalar

    def test_match_is_case_sensitive(self) -> None:
        result = sanitize({"Password": "kept", "PASSWORD": "kept", "password": "gone"})
        assert result == {"Password": "kept", "PASSWORD": "kept"}

    def test_sensitive_value_under_safe_key_is_kept(self) -> None:
        assert sanitize({"note": "password"}) == {"note": "password"}

    def test_custom_field_set(self) -> None:
        result = sanitize(
            {"token": "t", "password": "p", "user": "u"}, sensitive_fields={"token"}
        )
        assert result == {"password": "p", "user": "u"}

    def test_default_fields(self) -> None:
        assert DEFAULT_SENSITIVE_FIELDS == frozenset({"password", "creditCard", "ssn"})

    def test_empty_containers(self) -> None:
        assert sanitize({}) == {}
        assert sanitize([]) == []

    def test_does_not_mutate_original(self) -> None:
        original = {"password": "secret", "nested": {"ssn": "1"}}
        sanitize(original)
        assert original == {"password": "secret", "nested": {"ssn": "1"}}

    def test_returns_new_containers(self) -> None:
        original = {"items": [1, 2]}
        result = sanitize(original)
        assert result is not original
        assert result["items"] is not original["items"]


class TestCycles:
    def test_self_referencing_dict(self) -> None:
        data: dict[str, Any] = {"name": "loop", "password": "x"}
        data["self"] = data
        assert sanitize(data) == {"name": "loop", "self": CIRCULAR_MARKER}

    def test_self_referencing_list(self) -> None:
        data: list[Any] = [1]
        data.append(data)
        assert sanitize(data) == [1, CIRCULAR_MARKER]

    def test_shared_reference_is_not_circular(self) -> None:
        shared = {"v": 1, "ssn": "x"}
        assert sanitize({"a": shared, "b": shared}) == {"a": {"v": 1}, "b": {"v": 1}}
