"""Boolean expression tree over truthiness leaves.

Grammar (as parsed from text):
  expr := Ident | Not(expr) | Group(expr) | And(left, right) | Or(left, right)

``Value`` leaves only come from the combinator API (``t``, ``and_``,
``or_``, ``not_``), which builds the same tree from Python values instead
of names. All nodes are frozen Pydantic models.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Callable, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, Discriminator, Tag

from truthy.core.protocol import register_truthy, truthy
from truthy.errors import UnboundIdentifierError

T = TypeVar("T")

_UNSET: Any = object()


class Lazy(Generic[T]):
    """A value computed on first use, then cached.

    Bind one into an environment to make short-circuiting observable:
    the function runs only if evaluation reaches its leaf.
    """

    __slots__ = ("_fn", "_value")

    def __init__(self, fn: Callable[[], T]) -> None:
        self._fn = fn
        self._value = _UNSET

    def force(self) -> T:
        if self._value is _UNSET:
            self._value = self._fn()
        return self._value

    @property
    def forced(self) -> bool:
        return self._value is not _UNSET

    def __repr__(self) -> str:
        if self.forced:
            return f"Lazy({self._value!r})"
        return "Lazy(<pending>)"


@register_truthy(Lazy)
def _truthy_lazy(value: Lazy) -> bool:
    return truthy(value.force())


class _Node(BaseModel):
    """Operator sugar shared by every node: ``&``, ``|`` and ``~``."""

    model_config = {"frozen": True}

    def __and__(self, other: Any) -> And:
        return And(left=self, right=t(other))

    def __rand__(self, other: Any) -> And:
        return And(left=t(other), right=self)

    def __or__(self, other: Any) -> Or:
        return Or(left=self, right=t(other))

    def __ror__(self, other: Any) -> Or:
        return Or(left=t(other), right=self)

    def __invert__(self) -> Not:
        return Not(operand=self)


class Ident(_Node):
    """A named leaf, resolved from the environment when evaluated."""

    tag: Literal["ident"] = "ident"
    name: str

    def evaluate(self, env: Mapping[str, Any] | None = None) -> bool:
        if env is None or self.name not in env:
            raise UnboundIdentifierError(self.name)
        return truthy(env[self.name])

    def render(self, method: str = "truthy") -> str:
        return f"{method}({self.name})"

    def __str__(self) -> str:
        return self.name


class Value(_Node):
    """A leaf holding a value directly."""

    tag: Literal["value"] = "value"
    value: Any

    def evaluate(self, env: Mapping[str, Any] | None = None) -> bool:
        return truthy(self.value)

    def render(self, method: str = "truthy") -> str:
        return f"{method}({self.value!r})"

    def __str__(self) -> str:
        return repr(self.value)


class Not(_Node):
    """Negation of the whole operand."""

    tag: Literal["not"] = "not"
    operand: BoolExpr

    def evaluate(self, env: Mapping[str, Any] | None = None) -> bool:
        return not self.operand.evaluate(env)

    def render(self, method: str = "truthy") -> str:
        return _render(self, method)

    def __str__(self) -> str:
        return _to_text(self)


class Group(_Node):
    """Explicit parentheses from the source text."""

    tag: Literal["group"] = "group"
    inner: BoolExpr

    def evaluate(self, env: Mapping[str, Any] | None = None) -> bool:
        return self.inner.evaluate(env)

    def render(self, method: str = "truthy") -> str:
        return _render(self, method)

    def __str__(self) -> str:
        return _to_text(self)


class And(_Node):
    """Short-circuit conjunction: ``right`` is only evaluated if ``left`` is truthy."""

    tag: Literal["and"] = "and"
    left: BoolExpr
    right: BoolExpr

    def evaluate(self, env: Mapping[str, Any] | None = None) -> bool:
        for operand in chain_operands(self):
            if not operand.evaluate(env):
                return False
        return True

    def render(self, method: str = "truthy") -> str:
        return _render(self, method)

    def __str__(self) -> str:
        return _to_text(self)


class Or(_Node):
    """Short-circuit disjunction: ``right`` is only evaluated if ``left`` is falsy."""

    tag: Literal["or"] = "or"
    left: BoolExpr
    right: BoolExpr

    def evaluate(self, env: Mapping[str, Any] | None = None) -> bool:
        for operand in chain_operands(self):
            if operand.evaluate(env):
                return True
        return False

    def render(self, method: str = "truthy") -> str:
        return _render(self, method)

    def __str__(self) -> str:
        return _to_text(self)


# Discriminated union type for all boolean expressions
BoolExpr = Annotated[
    Union[
        Annotated[Ident, Tag("ident")],
        Annotated[Value, Tag("value")],
        Annotated[Not, Tag("not")],
        Annotated[Group, Tag("group")],
        Annotated[And, Tag("and")],
        Annotated[Or, Tag("or")],
    ],
    Discriminator("tag"),
]

# Rebuild models now that BoolExpr is defined (forward references)
Not.model_rebuild()
Group.model_rebuild()
And.model_rebuild()
Or.model_rebuild()


def chain_operands(node: And | Or) -> list[BoolExpr]:
    """Operands of the maximal same-operator chain rooted at *node*, left to right.

    ``And(a, And(b, c))`` and ``And(And(a, b), c)`` both give ``[a, b, c]``;
    the operators are associative, so evaluating the flat list in order
    short-circuits exactly like the nested tree.
    """
    kind = type(node)
    operands: list[BoolExpr] = []
    stack: list[BoolExpr] = [node]
    while stack:
        current = stack.pop()
        if type(current) is kind:
            stack.append(current.right)
            stack.append(current.left)
        else:
            operands.append(current)
    return operands


def _children(node: BoolExpr) -> list[BoolExpr]:
    if isinstance(node, Not):
        return [node.operand]
    if isinstance(node, Group):
        return [node.inner]
    if isinstance(node, (And, Or)):
        return chain_operands(node)
    return []


def _fold(
    expr: BoolExpr,
    leaf: Callable[[BoolExpr], str],
    combine: Callable[[BoolExpr, list[BoolExpr], list[str]], str],
) -> str:
    """Build a string bottom-up with an explicit stack instead of recursion."""
    done: list[str] = []
    pending: list[tuple[BoolExpr, list[BoolExpr] | None]] = [(expr, None)]
    while pending:
        node, children = pending.pop()
        if children is not None:
            parts = done[len(done) - len(children):]
            del done[len(done) - len(children):]
            done.append(combine(node, children, parts))
            continue
        children = _children(node)
        if not children:
            done.append(leaf(node))
            continue
        pending.append((node, children))
        pending.extend((child, None) for child in reversed(children))
    return done[0]


def _render(expr: BoolExpr, method: str) -> str:
    def leaf(node: BoolExpr) -> str:
        if isinstance(node, Ident):
            return f"{method}({node.name})"
        return f"{method}({node.value!r})"

    def combine(node: BoolExpr, children: list[BoolExpr], parts: list[str]) -> str:
        if isinstance(node, Not):
            if isinstance(children[0], (And, Or)):
                return f"not ({parts[0]})"
            return f"not {parts[0]}"
        if isinstance(node, Group):
            return f"({parts[0]})"
        if isinstance(node, Or):
            return " or ".join(parts)
        # Python binds `and` tighter than `or`, so only Or operands need parentheses.
        return " and ".join(
            f"({part})" if isinstance(child, Or) else part
            for child, part in zip(children, parts)
        )

    return _fold(expr, leaf, combine)


def _to_text(expr: BoolExpr) -> str:
    def leaf(node: BoolExpr) -> str:
        if isinstance(node, Ident):
            return node.name
        return repr(node.value)

    def combine(node: BoolExpr, children: list[BoolExpr], parts: list[str]) -> str:
        if isinstance(node, Not):
            if isinstance(children[0], (And, Or)):
                return f"!({parts[0]})"
            return f"!{parts[0]}"
        if isinstance(node, Group):
            return f"({parts[0]})"
        # The text grammar only allows an identifier or a group before an
        # operator, and a chain nests to the right.
        last = len(children) - 1
        wrapped = []
        for i, (child, part) in enumerate(zip(children, parts)):
            if i < last and not isinstance(child, (Ident, Value, Group)):
                part = f"({part})"
            elif i == last and isinstance(child, (And, Or)):
                part = f"({part})"
            wrapped.append(part)
        symbol = " && " if isinstance(node, And) else " || "
        return symbol.join(wrapped)

    return _fold(expr, leaf, combine)


# ---- Combinator API ----


def t(x: Any) -> BoolExpr:
    """Leaf testing the truthiness of *x*. Nodes pass through unchanged."""
    if isinstance(x, _Node):
        return x
    return Value(value=x)


def and_(a: Any, b: Any) -> And:
    return And(left=t(a), right=t(b))


def or_(a: Any, b: Any) -> Or:
    return Or(left=t(a), right=t(b))


def not_(a: Any) -> Not:
    return Not(operand=t(a))


def ident(name: str) -> Ident:
    """Shorthand constructor for Ident."""
    return Ident(name=name)


def identifiers(expr: BoolExpr) -> list[str]:
    """Identifier names in *expr*, in order of first appearance."""
    seen: dict[str, None] = {}
    stack: list[BoolExpr] = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, Ident):
            seen.setdefault(node.name, None)
        elif isinstance(node, Not):
            stack.append(node.operand)
        elif isinstance(node, Group):
            stack.append(node.inner)
        elif isinstance(node, (And, Or)):
            stack.append(node.right)
            stack.append(node.left)
    return list(seen)
