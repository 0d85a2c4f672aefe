"""Exception hierarchy for truthiness coercion and expression rewriting."""

from __future__ import annotations


class TruthyError(Exception):
    """Base class for all errors raised by this package."""


class MissingCapabilityError(TruthyError, TypeError):
    """Raised when a value's type has no registered truthiness coercion."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type
        super().__init__(
            f"type {value_type.__qualname__!r} has no truthy coercion; "
            "subclass Truthy or call register_truthy()"
        )


class MalformedExpressionError(TruthyError, ValueError):
    """Raised when expression text does not match the boolean grammar.

    ``token`` is the first offending token (``None`` when the input ended
    early) and ``position`` its character offset in ``text``.
    """

    def __init__(
        self,
        text: str,
        reason: str,
        token: str | None = None,
        position: int | None = None,
    ) -> None:
        self.text = text
        self.reason = reason
        self.token = token
        self.position = len(text) if position is None else position
        where = "end of expression" if token is None else f"{token!r}"
        super().__init__(
            f"malformed boolean expression: {reason} at {where} "
            f"(position {self.position}) in {text!r}"
        )


class UnboundIdentifierError(TruthyError, NameError):
    """Raised when an evaluated identifier has no binding in the environment."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"identifier {name!r} is not bound")
