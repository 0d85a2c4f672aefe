"""Two-variant value types: a fallible result and a tagged either.

Optional values need no wrapper here; ``None`` is the absent value.
Truthiness for these types is registered in ``truthy.core.protocol``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success variant of a result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def ok(self) -> T:
        return self.value

    def err(self) -> None:
        return None

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))


@dataclass(frozen=True)
class Err(Generic[E]):
    """Error variant of a result. Always falsy, whatever the payload."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        return self


Result = Ok[T] | Err[E]


@dataclass(frozen=True)
class Left(Generic[T]):
    """First variant of an either."""

    value: T

    def is_left(self) -> bool:
        return True

    def is_right(self) -> bool:
        return False

    def left(self) -> T:
        return self.value

    def right(self) -> None:
        return None

    def map(self, f: Callable[[T], U]) -> Left[U]:
        return Left(f(self.value))


@dataclass(frozen=True)
class Right(Generic[T]):
    """Second variant of an either."""

    value: T

    def is_left(self) -> bool:
        return False

    def is_right(self) -> bool:
        return True

    def left(self) -> None:
        return None

    def right(self) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Right[U]:
        return Right(f(self.value))


Either = Left[T] | Right[U]
