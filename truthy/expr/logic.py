"""Propositional analysis of expression trees.

This is the only module allowed to import SymPy. Identifiers become
boolean symbols standing for "this binding is truthy"; ``Value`` leaves
are folded to ``true``/``false`` through ``truthy``.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass

import sympy as sp
from sympy.logic.boolalg import Boolean, simplify_logic
from sympy.logic.inference import satisfiable

from truthy.core.protocol import truthy
from truthy.expr.nodes import (
    And,
    BoolExpr,
    Group,
    Ident,
    Not,
    Or,
    Value,
    chain_operands,
    identifiers,
)
from truthy.expr.parser import parse


def _as_tree(expr: BoolExpr | str) -> BoolExpr:
    return parse(expr) if isinstance(expr, str) else expr


def to_sympy(expr: BoolExpr | str) -> Boolean:
    """Convert an expression (tree or text) to a SymPy boolean expression."""
    expr = _as_tree(expr)
    if isinstance(expr, Ident):
        return sp.Symbol(expr.name)
    if isinstance(expr, Value):
        return sp.true if truthy(expr.value) else sp.false
    if isinstance(expr, Group):
        return to_sympy(expr.inner)
    if isinstance(expr, Not):
        return sp.Not(to_sympy(expr.operand))
    if isinstance(expr, And):
        return sp.And(*(to_sympy(operand) for operand in chain_operands(expr)))
    if isinstance(expr, Or):
        return sp.Or(*(to_sympy(operand) for operand in chain_operands(expr)))
    raise TypeError(f"not an expression node: {expr!r}")


def equivalent(a: BoolExpr | str, b: BoolExpr | str) -> bool:
    """True if *a* and *b* agree for every truthiness of their identifiers."""
    difference = sp.Xor(to_sympy(a), to_sympy(b))
    return satisfiable(difference) is False


def simplified(expr: BoolExpr | str) -> str:
    """Minimal equivalent form, in SymPy notation (``&``, ``|``, ``~``)."""
    return str(simplify_logic(to_sympy(expr)))


@dataclass(frozen=True)
class TruthRow:
    """One assignment of truthiness to identifiers and the resulting value."""

    assignment: tuple[tuple[str, bool], ...]
    result: bool

    def as_dict(self) -> dict[str, bool]:
        return dict(self.assignment)


def truth_table(expr: BoolExpr | str) -> tuple[list[str], list[TruthRow]]:
    """Evaluate *expr* under every assignment of its identifiers.

    Returns the identifier names (first-appearance order) and one row per
    assignment, False before True, leftmost identifier varying slowest.
    """
    tree = _as_tree(expr)
    names = identifiers(tree)
    rows: list[TruthRow] = []
    for combo in itertools.product((False, True), repeat=len(names)):
        assignment = tuple(zip(names, combo))
        rows.append(TruthRow(assignment=assignment, result=tree.evaluate(dict(assignment))))
    return names, rows
