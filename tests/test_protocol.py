"""Tests for the truthy dispatcher and the built-in type rules."""

from __future__ import annotations

import math
from collections import deque
from decimal import Decimal
from fractions import Fraction

import pytest

from truthy.core.protocol import (
    SupportsTruthy,
    Truthy,
    falsy,
    is_truthy_type,
    register_truthy,
    truthy,
)
from truthy.core.variants import Err, Left, Ok, Right
from truthy.errors import MissingCapabilityError, TruthyError


class _Gauge(Truthy):
    def __init__(self, level: int) -> None:
        self.level = level

    def truthy(self) -> bool:
        return self.level != 0

    def __repr__(self) -> str:
        return f"_Gauge({self.level})"


class TestNumbers:
    @pytest.mark.parametrize("value", [0, 0.0, -0.0, 0j, Fraction(0), Decimal(0)])
    def test_zero_is_falsy(self, value: object) -> None:
        assert truthy(value) is False

    @pytest.mark.parametrize("value", [1, -1, 255, 0.1, -2.5, 1j, Fraction(1, 3), Decimal("0.01")])
    def test_nonzero_is_truthy(self, value: object) -> None:
        assert truthy(value) is True

    def test_nan_is_truthy(self) -> None:
        assert truthy(math.nan) is True
        assert truthy(float("-nan")) is True

    def test_infinity_is_truthy(self) -> None:
        assert truthy(math.inf) is True

    def test_large_int(self) -> None:
        assert truthy(2**127) is True


class TestBool:
    def test_true(self) -> None:
        assert truthy(True) is True

    def test_false(self) -> None:
        assert truthy(False) is False


class TestText:
    def test_empty_str(self) -> None:
        assert truthy("") is False

    def test_nonempty_str(self) -> None:
        assert truthy("x") is True

    def test_whitespace_is_truthy(self) -> None:
        assert truthy(" ") is True

    def test_borrowed_slice(self) -> None:
        text = "hello"
        assert truthy(text[1:3]) is True
        assert truthy(text[3:3]) is False

    def test_bytes(self) -> None:
        assert truthy(b"") is False
        assert truthy(b"\x00") is True
        assert truthy(bytearray()) is False
        assert truthy(memoryview(b"ab")) is True


class TestSequences:
    @pytest.mark.parametrize("value", [[], {}, set(), frozenset(), range(0), deque()])
    def test_empty_is_falsy(self, value: object) -> None:
        assert truthy(value) is False

    @pytest.mark.parametrize("value", [[0], {"k": None}, {0}, range(1), deque([""])])
    def test_nonempty_is_truthy_whatever_the_contents(self, value: object) -> None:
        assert truthy(value) is True

    def test_tuple_with_fields_is_truthy(self) -> None:
        assert truthy((0,)) is True
        assert truthy((0, "", None)) is True
        assert truthy(tuple(range(12))) is True

    def test_empty_tuple_is_unit(self) -> None:
        assert truthy(()) is False


class TestOptional:
    def test_none_is_falsy(self) -> None:
        assert truthy(None) is False

    def test_present_delegates_to_contents(self) -> None:
        present_zero: int | None = 0
        present_one: int | None = 1
        assert truthy(present_zero) is False
        assert truthy(present_one) is True


class TestResultAndEither:
    def test_ok_delegates(self) -> None:
        assert truthy(Ok(1)) is True
        assert truthy(Ok(0)) is False
        assert truthy(Ok("")) is False

    def test_err_always_falsy(self) -> None:
        assert truthy(Err("boom")) is False
        assert truthy(Err(1)) is False
        assert truthy(Err(True)) is False

    def test_either_delegates_to_active_variant(self) -> None:
        assert truthy(Left(1)) is True
        assert truthy(Left(0)) is False
        assert truthy(Right("x")) is True
        assert truthy(Right("")) is False

    def test_nested(self) -> None:
        assert truthy(Ok(Left([1]))) is True
        assert truthy(Ok(Right(None))) is False


class TestUserTypes:
    def test_subclass_dispatches_to_method(self, stocked: Truthy, empty: Truthy) -> None:
        assert truthy(stocked) is True
        assert truthy(empty) is False

    def test_bool_follows_truthy(self, stocked: Truthy, empty: Truthy) -> None:
        assert bool(stocked) is True
        assert bool(empty) is False

    def test_falsy_cannot_be_overridden(self) -> None:
        with pytest.raises(TypeError, match="falsy"):

            class Broken(Truthy):
                def truthy(self) -> bool:
                    return True

                def falsy(self) -> bool:
                    return True

    def test_abstract_truthy_required(self) -> None:
        class Incomplete(Truthy):
            pass

        with pytest.raises(TypeError):
            Incomplete()

    def test_structural_truthy(self) -> None:
        class Flag:
            def __init__(self, on: bool) -> None:
                self.on = on

            def truthy(self) -> bool:
                return self.on

        assert isinstance(Flag(True), SupportsTruthy)
        assert truthy(Flag(True)) is True
        assert truthy(Flag(False)) is False

    def test_register_truthy_decorator(self) -> None:
        class Temperature:
            def __init__(self, kelvin: float) -> None:
                self.kelvin = kelvin

        assert not is_truthy_type(Temperature)

        @register_truthy(Temperature)
        def _(value: Temperature) -> bool:
            return value.kelvin > 0

        assert is_truthy_type(Temperature)
        assert truthy(Temperature(300.0)) is True
        assert truthy(Temperature(0.0)) is False

    def test_register_truthy_direct_call(self) -> None:
        class Box:
            pass

        register_truthy(Box, lambda value: False)
        assert falsy(Box())


class TestMissingCapability:
    def test_unregistered_type_raises(self, opaque: object) -> None:
        with pytest.raises(MissingCapabilityError) as exc_info:
            truthy(opaque)
        assert exc_info.value.value_type is type(opaque)
        assert "Opaque" in str(exc_info.value)

    def test_is_type_error(self, opaque: object) -> None:
        with pytest.raises(TypeError):
            falsy(opaque)
        with pytest.raises(TruthyError):
            falsy(opaque)

    def test_is_truthy_type(self, stocked: Truthy, opaque: object) -> None:
        assert is_truthy_type(int)
        assert is_truthy_type(str)
        assert is_truthy_type(list)
        assert is_truthy_type(type(None))
        assert is_truthy_type(type(stocked))
        assert not is_truthy_type(type(opaque))


class TestFalsyComplement:
    @pytest.mark.parametrize(
        "value",
        [0, 1, -1, 0.0, math.nan, "", "x", [], [0], None, Ok(0), Ok(1), Err(1),
         Left(""), Right("r"), (), (0,), True, False, _Gauge(0), _Gauge(2)],
    )
    def test_falsy_is_not_truthy(self, value: object) -> None:
        assert falsy(value) is (not truthy(value))
