"""Tests for the combinators derived from truthy/falsy."""

from __future__ import annotations

import pytest

from truthy.core.protocol import (
    Truthy,
    and_,
    and_then,
    or_,
    or_else,
    truthy_and,
    truthy_or,
)
from truthy.core.variants import Left, Right


class TestOr:
    def test_falsy_takes_default(self) -> None:
        assert or_("", "default") == "default"

    def test_truthy_keeps_value(self) -> None:
        assert or_("foo", "default") == "foo"

    def test_numbers(self) -> None:
        assert or_(0, 7) == 7
        assert or_(-1, 7) == -1

    def test_none(self) -> None:
        assert or_(None, [1]) == [1]

    def test_identity_preserved(self) -> None:
        items = [1]
        assert or_(items, [2]) is items


class TestOrElse:
    def test_fallback_called_on_falsy(self, calls: list[str]) -> None:
        def fallback() -> str:
            calls.append("fallback")
            return "default"

        assert or_else("", fallback) == "default"
        assert calls == ["fallback"]

    def test_fallback_not_called_on_truthy(self, calls: list[str]) -> None:
        def fallback() -> str:
            calls.append("fallback")
            return "default"

        assert or_else("foo", fallback) == "foo"
        assert calls == []

    def test_fallback_error_only_when_needed(self) -> None:
        assert or_else(5, lambda: 1 // 0) == 5
        with pytest.raises(ZeroDivisionError):
            or_else(0, lambda: 1 // 0)


class TestAnd:
    def test_falsy_kept(self) -> None:
        assert and_("", "replacement") == ""

    def test_truthy_replaced(self) -> None:
        assert and_("foo", "replacement") == "replacement"

    def test_not_boolean_and(self) -> None:
        assert and_(3, 0) == 0
        assert and_(0, 3) == 0


class TestAndThen:
    def test_falsy_path_does_not_call(self, calls: list[str]) -> None:
        def dec(n: int) -> int:
            calls.append("dec")
            return n - 1

        assert and_then(0, dec) == 0
        assert calls == []

    def test_truthy_path_transforms_current_value(self, calls: list[str]) -> None:
        def dec(n: int) -> int:
            calls.append("dec")
            return n - 1

        assert and_then(2, dec) == 1
        assert calls == ["dec"]

    def test_guarded_division(self) -> None:
        assert and_then(0, lambda d: 10 // d) == 0
        assert and_then(5, lambda d: 10 // d) == 2


class TestTruthyOr:
    def test_truthy_goes_left(self) -> None:
        assert truthy_or("value", 0) == Left("value")

    def test_falsy_goes_right(self) -> None:
        assert truthy_or("", 42) == Right(42)


class TestTruthyAnd:
    def test_truthy_wraps_other(self) -> None:
        assert truthy_and(1, "other") == "other"

    def test_falsy_gives_none(self) -> None:
        assert truthy_and([], "other") is None


class _Name(Truthy):
    def __init__(self, text: str) -> None:
        self.text = text

    def truthy(self) -> bool:
        return bool(self.text.strip())

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Name) and other.text == self.text

    def __hash__(self) -> int:
        return hash(self.text)


class TestMethodForms:
    def test_or(self) -> None:
        assert _Name("  ").or_(_Name("anon")) == _Name("anon")
        assert _Name("ann").or_(_Name("anon")) == _Name("ann")

    def test_or_else(self, calls: list[str]) -> None:
        result = _Name("ann").or_else(lambda: calls.append("x") or _Name("anon"))
        assert result == _Name("ann")
        assert calls == []

    def test_and(self) -> None:
        assert _Name("").and_(_Name("x")) == _Name("")
        assert _Name("a").and_(_Name("x")) == _Name("x")

    def test_and_then(self) -> None:
        upper = _Name("ann").and_then(lambda n: _Name(n.text.upper()))
        assert upper == _Name("ANN")

    def test_truthy_or_and(self) -> None:
        assert _Name("ann").truthy_or(0) == Left(_Name("ann"))
        assert _Name("").truthy_or(0) == Right(0)
        assert _Name("ann").truthy_and(5) == 5
        assert _Name("").truthy_and(5) is None

    def test_falsy(self) -> None:
        assert _Name(" ").falsy()
        assert not _Name("x").falsy()
