"""Mutable cell carrying the in-place combinators.

Python cannot rebind a caller's variable from inside a method, so the
``*_eq`` family operates on a ``Slot`` that owns the value::

    count = Slot(0)
    count.or_eq(2)
    count.and_then_eq(lambda n: n - 1)
    assert count.value == 1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from truthy.core.protocol import falsy, register_truthy, truthy

T = TypeVar("T")


@dataclass
class Slot(Generic[T]):
    """A single mutable value. Each ``*_eq`` method only ever writes ``value``."""

    value: T

    def truthy(self) -> bool:
        return truthy(self.value)

    def falsy(self) -> bool:
        return falsy(self.value)

    def or_eq(self, default: T) -> None:
        """Replace the value with *default* if it is falsy."""
        if falsy(self.value):
            self.value = default

    def or_else_eq(self, f: Callable[[], T]) -> None:
        """Replace the value with ``f()`` if it is falsy."""
        if falsy(self.value):
            self.value = f()

    def and_eq(self, replacement: T) -> None:
        """Replace the value with *replacement* if it is truthy."""
        if truthy(self.value):
            self.value = replacement

    def and_then_eq(self, f: Callable[[T], T]) -> None:
        """Replace the value with ``f(value)`` if it is truthy."""
        if truthy(self.value):
            self.value = f(self.value)


@register_truthy(Slot)
def _truthy_slot(slot: Slot) -> bool:
    return slot.truthy()
