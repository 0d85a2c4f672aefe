"""Shared fixtures for truthy tests."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from truthy.core.protocol import Truthy


@dataclass
class Inventory(Truthy):
    """A user type that is truthy while it holds stock."""

    count: int

    def truthy(self) -> bool:
        return self.count > 0


class Opaque:
    """A type with no truthiness registration."""


@pytest.fixture
def stocked() -> Inventory:
    return Inventory(count=3)


@pytest.fixture
def empty() -> Inventory:
    return Inventory(count=0)


@pytest.fixture
def opaque() -> Opaque:
    return Opaque()


@pytest.fixture
def calls() -> list[str]:
    """Records which fallback/transform closures ran."""
    return []
