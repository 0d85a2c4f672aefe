"""CLI entry point using Typer."""

from __future__ import annotations

import ast
import json
import logging
from typing import Any, List, Optional

import typer
from pydantic import ValidationError

from truthy.config import ExprConfig
from truthy.errors import TruthyError

app = typer.Typer(name="truthy", help="Truthiness coercion and boolean expression tools")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Rewrite and evaluate boolean expressions over truthy values."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _config(method: str, no_keywords: bool) -> ExprConfig:
    try:
        return ExprConfig(method_name=method, keyword_operators=not no_keywords)
    except ValidationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)


def _parse_binding(raw: str) -> tuple[str, Any]:
    """Split NAME=LITERAL; values that are not Python literals stay strings."""
    name, sep, literal = raw.partition("=")
    if not sep or not name.strip():
        raise typer.BadParameter(f"expected NAME=VALUE, got {raw!r}", param_hint="--bind")
    try:
        value = ast.literal_eval(literal)
    except (ValueError, SyntaxError):
        value = literal
    return name.strip(), value


@app.command("rewrite")
def rewrite_cmd(
    expr: str = typer.Argument(..., help='Expression, e.g. "x && (y || !z)"'),
    method: str = typer.Option("truthy", help="Name of the coercion call to emit"),
    no_keywords: bool = typer.Option(False, "--no-keywords", help="Treat and/or/not as errors"),
) -> None:
    """Print EXPR rewritten into Python with every identifier coerced."""
    from truthy.expr.parser import rewrite

    config = _config(method, no_keywords)
    try:
        typer.echo(rewrite(expr, config))
    except TruthyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)


@app.command("eval")
def eval_cmd(
    expr: str = typer.Argument(..., help="Expression to evaluate"),
    bind: Optional[List[str]] = typer.Option(
        None, "--bind", "-b", help="Binding NAME=LITERAL (repeatable)",
    ),
    exit_code: bool = typer.Option(
        False, "--exit-code", help="Exit 0 when truthy, 1 when falsy",
    ),
) -> None:
    """Evaluate EXPR with the given bindings and print true/false."""
    from truthy.expr.parser import compile_expr

    env = dict(_parse_binding(raw) for raw in bind or [])
    try:
        result = compile_expr(expr)(env)
    except TruthyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    typer.echo("true" if result else "false")
    if exit_code and not result:
        raise typer.Exit(code=1)


@app.command("table")
def table_cmd(
    expr: str = typer.Argument(..., help="Expression to tabulate"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Print the truth table of EXPR over all of its identifiers."""
    from truthy.expr.logic import truth_table
    from truthy.render import render_truth_table, truth_table_to_json

    try:
        names, rows = truth_table(expr)
    except TruthyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    if json_output:
        typer.echo(json.dumps(truth_table_to_json(expr, names, rows), indent=2))
    else:
        render_truth_table(expr, names, rows)


@app.command("equiv")
def equiv_cmd(
    left: str = typer.Argument(..., help="First expression"),
    right: str = typer.Argument(..., help="Second expression"),
) -> None:
    """Check whether two expressions are logically equivalent (exit 1 if not)."""
    from truthy.expr.logic import equivalent, simplified

    try:
        same = equivalent(left, right)
        left_form, right_form = simplified(left), simplified(right)
    except TruthyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    typer.echo(f"  {left}  =>  {left_form}")
    typer.echo(f"  {right}  =>  {right_form}")
    if same:
        typer.echo("equivalent")
    else:
        typer.echo("not equivalent")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
