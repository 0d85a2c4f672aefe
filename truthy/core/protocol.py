"""Truthiness coercion protocol and the combinators derived from it.

``truthy`` is a single-dispatch function: one implementation is registered
per supported type, and every combinator below is written only in terms of
``truthy``/``falsy``. Types opt in either by subclassing ``Truthy`` or by
calling ``register_truthy``.

Rules for the built-in registrations:
  bool            -> the value itself
  numbers.Number  -> value != 0  (NaN is truthy, -0.0 is falsy)
  Sized           -> len(value) > 0  (str, bytes, list, tuple, dict, set, ...)
  None            -> always falsy
  Ok(v)           -> truthy(v);  Err(_) -> always falsy
  Left(v)/Right(v)-> truthy(v)
"""

from __future__ import annotations

import logging
import numbers
from abc import ABC, abstractmethod
from collections.abc import Sized
from functools import singledispatch
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from truthy.core.variants import Err, Left, Ok, Right
from truthy.errors import MissingCapabilityError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@runtime_checkable
class SupportsTruthy(Protocol):
    """Structural type for values that expose their own ``truthy()``."""

    def truthy(self) -> bool:
        ...


@singledispatch
def truthy(value: Any) -> bool:
    """Whether *value* counts as logically true.

    Values whose type has no registration are accepted only if they
    structurally provide a ``truthy()`` method; anything else raises
    MissingCapabilityError.
    """
    if isinstance(value, SupportsTruthy):
        return bool(value.truthy())
    raise MissingCapabilityError(type(value))


def falsy(value: Any) -> bool:
    """Exact complement of ``truthy``."""
    return not truthy(value)


def register_truthy(cls: type, func: Callable[[Any], bool] | None = None) -> Any:
    """Register *func* as the truthiness rule for *cls*.

    Usable directly or as a decorator::

        @register_truthy(Path)
        def _(value: Path) -> bool:
            return value.exists()
    """
    if func is None:
        def decorator(f: Callable[[Any], bool]) -> Callable[[Any], bool]:
            return register_truthy(cls, f)

        return decorator

    truthy.register(cls, func)
    logger.debug("Registered truthy coercion for %s", cls.__qualname__)
    return func


def is_truthy_type(cls: type) -> bool:
    """True if *cls* has a registered coercion (directly or via a base)."""
    return truthy.dispatch(cls) is not truthy.dispatch(object)


# ---- Derived combinators ----


def or_(value: T, default: T) -> T:
    """Return *value* if truthy, else *default*."""
    return value if truthy(value) else default


def or_else(value: T, f: Callable[[], T]) -> T:
    """Return *value* if truthy, else ``f()``. *f* only runs on the falsy path."""
    return value if truthy(value) else f()


def and_(value: T, replacement: T) -> T:
    """Return *value* if falsy, else *replacement* (mirrors ``&&``)."""
    return value if falsy(value) else replacement


def and_then(value: T, f: Callable[[T], T]) -> T:
    """Return *value* if falsy, else ``f(value)``. *f* only runs on the truthy path."""
    return value if falsy(value) else f(value)


def truthy_or(value: T, other: U) -> Left[T] | Right[U]:
    """``Left(value)`` if *value* is truthy, else ``Right(other)``."""
    if truthy(value):
        return Left(value)
    return Right(other)


def truthy_and(value: Any, other: U) -> U | None:
    """*other* if *value* is truthy, else ``None``."""
    return other if truthy(value) else None


class Truthy(ABC):
    """Base class for user types that define their own truthiness.

    Subclasses implement ``truthy()`` only. ``falsy()`` is always its
    negation and may not be overridden.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "falsy" in cls.__dict__:
            raise TypeError(
                f"{cls.__qualname__} overrides falsy(); implement truthy() only"
            )

    @abstractmethod
    def truthy(self) -> bool:
        """The value is truthy."""

    def falsy(self) -> bool:
        return not self.truthy()

    def __bool__(self) -> bool:
        return self.truthy()

    def or_(self: T, default: T) -> T:
        return or_(self, default)

    def or_else(self: T, f: Callable[[], T]) -> T:
        return or_else(self, f)

    def and_(self: T, replacement: T) -> T:
        return and_(self, replacement)

    def and_then(self: T, f: Callable[[T], T]) -> T:
        return and_then(self, f)

    def truthy_or(self: T, other: U) -> Left[T] | Right[U]:
        return truthy_or(self, other)

    def truthy_and(self, other: U) -> U | None:
        return truthy_and(self, other)


# ---- Built-in registrations ----


@register_truthy(Truthy)
def _truthy_self(value: Truthy) -> bool:
    return bool(value.truthy())


@register_truthy(bool)
def _truthy_bool(value: bool) -> bool:
    return value


@register_truthy(numbers.Number)
def _truthy_number(value: numbers.Number) -> bool:
    return value != 0


@register_truthy(Sized)
def _truthy_sized(value: Sized) -> bool:
    return len(value) > 0


@register_truthy(type(None))
def _truthy_none(value: None) -> bool:
    return False


@register_truthy(Ok)
def _truthy_ok(value: Ok) -> bool:
    return truthy(value.value)


@register_truthy(Err)
def _truthy_err(value: Err) -> bool:
    return False


@register_truthy(Left)
@register_truthy(Right)
def _truthy_either(value: Left | Right) -> bool:
    return truthy(value.value)
