"""Parse boolean expression text and rewrite it into truthiness checks.

Accepted syntax:
  expr := ident (op expr)? | '!' expr | '(' expr ')' (op expr)?
  op   := '&&' | '||'        (also 'and' / 'or' / 'not' by default)

There is no precedence table. An unparenthesised chain is consumed one
operand at a time and nests to the right, so ``a && b || c`` means
``a && (b || c)``, and a leading ``!`` negates everything after it:
``!a && b`` means ``!(a && b)``. Parenthesise to get anything else.

    >>> rewrite("x && (y || !z)")
    'truthy(x) and (truthy(y) or not truthy(z))'
"""

from __future__ import annotations

import enum
import inspect
import keyword
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

from truthy.config import DEFAULT_CONFIG, ExprConfig
from truthy.errors import MalformedExpressionError
from truthy.expr.nodes import And, BoolExpr, Group, Ident, Not, Or, identifiers

logger = logging.getLogger(__name__)


class TokenKind(str, enum.Enum):
    IDENT = "ident"
    AND = "&&"
    OR = "||"
    NOT = "!"
    LPAREN = "("
    RPAREN = ")"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


_TOKEN_RE = re.compile(r"(?P<op>&&|\|\||!|\(|\))|(?P<ident>[^\W\d]\w*)")

_KEYWORD_OPERATORS = {
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "not": TokenKind.NOT,
}


def tokenize(text: str, config: ExprConfig = DEFAULT_CONFIG) -> list[Token]:
    """Split *text* into tokens, rejecting anything outside the grammar."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise MalformedExpressionError(
                text, "unexpected character", token=text[pos], position=pos
            )
        word = m.group()
        if m.group("op") is not None:
            tokens.append(Token(TokenKind(word), word, pos))
        elif config.keyword_operators and word in _KEYWORD_OPERATORS:
            tokens.append(Token(_KEYWORD_OPERATORS[word], word, pos))
        elif keyword.iskeyword(word):
            raise MalformedExpressionError(
                text, "reserved word used as identifier", token=word, position=pos
            )
        elif word == config.method_name:
            raise MalformedExpressionError(
                text, "identifier shadows the coercion method", token=word, position=pos
            )
        else:
            tokens.append(Token(TokenKind.IDENT, word, pos))
        pos = m.end()
    return tokens


class _Parser:
    """Recursive descent over a balanced token list.

    Recursion happens only at parentheses; operator chains are collected
    in a loop and folded right-to-left.
    """

    def __init__(self, text: str, tokens: list[Token], config: ExprConfig) -> None:
        self.text = text
        self.tokens = tokens
        self.config = config
        self.closing = self._match_parens()

    def _error(self, reason: str, token: Token | None) -> MalformedExpressionError:
        if token is None:
            return MalformedExpressionError(self.text, reason)
        return MalformedExpressionError(
            self.text, reason, token=token.text, position=token.position
        )

    def _match_parens(self) -> dict[int, int]:
        """Map each '(' index to its ')' index; reject unbalanced input up front."""
        closing: dict[int, int] = {}
        stack: list[int] = []
        for i, tok in enumerate(self.tokens):
            if tok.kind is TokenKind.LPAREN:
                stack.append(i)
                if len(stack) > self.config.max_depth:
                    raise self._error(
                        f"nesting deeper than {self.config.max_depth}", tok
                    )
            elif tok.kind is TokenKind.RPAREN:
                if not stack:
                    raise self._error("unmatched ')'", tok)
                closing[stack.pop()] = i
        if stack:
            raise self._error("unmatched '('", self.tokens[stack[0]])
        return closing

    def _token_at(self, i: int) -> Token | None:
        return self.tokens[i] if i < len(self.tokens) else None

    def parse(self) -> BoolExpr:
        if not self.tokens:
            raise self._error("empty expression", None)
        tree, _ = self._parse_range(0, len(self.tokens))
        return tree

    def _nest(self, depth: int, token: Token) -> int:
        if depth > self.config.max_depth:
            raise self._error(f"nesting deeper than {self.config.max_depth}", token)
        return depth

    def _parse_range(self, lo: int, hi: int) -> tuple[BoolExpr, int]:
        """Parse tokens[lo:hi]; also return the nesting depth of the result.

        Parentheses, negations and each switch between '&&' and '||' along
        a chain count one level. Same-operator chains stay flat.
        """
        # Each step is (operand, its depth, operator token); a pending
        # negation has no operand.
        steps: list[tuple[BoolExpr | None, int, Token]] = []
        previous: Token | None = None
        i = lo
        while True:
            if i >= hi:
                if previous is None:
                    raise self._error("empty group", self._token_at(hi))
                if previous.kind is TokenKind.NOT:
                    raise self._error("negation without operand", previous)
                raise self._error("trailing operator", previous)

            tok = self.tokens[i]
            if tok.kind is TokenKind.NOT:
                steps.append((None, 0, tok))
                previous = tok
                i += 1
                continue
            if tok.kind is TokenKind.IDENT:
                operand: BoolExpr = Ident(name=tok.text)
                depth = 0
                i += 1
            elif tok.kind is TokenKind.LPAREN:
                close = self.closing[i]
                inner, inner_depth = self._parse_range(i + 1, close)
                operand = Group(inner=inner)
                depth = self._nest(inner_depth + 1, tok)
                i = close + 1
            else:
                raise self._error("expected identifier, '!' or '('", tok)

            if i >= hi:
                result, result_depth = operand, depth
                break
            op = self.tokens[i]
            if op.kind not in (TokenKind.AND, TokenKind.OR):
                raise self._error("expected '&&' or '||'", op)
            steps.append((operand, depth, op))
            previous = op
            i += 1

        for left, left_depth, tok in reversed(steps):
            if left is None:
                result = Not(operand=result)
                result_depth = self._nest(result_depth + 1, tok)
                continue
            node_type = And if tok.kind is TokenKind.AND else Or
            if isinstance(result, (And, Or)) and not isinstance(result, node_type):
                result_depth = self._nest(result_depth + 1, tok)
            result = node_type(left=left, right=result)
            result_depth = max(left_depth, result_depth)
        return result, result_depth


@lru_cache(maxsize=512)
def _parse_cached(text: str, config: ExprConfig) -> BoolExpr:
    tree = _Parser(text, tokenize(text, config), config).parse()
    logger.debug("Parsed %r -> %s", text, tree)
    return tree


def parse(text: str, config: ExprConfig | None = None) -> BoolExpr:
    """Parse *text* into an expression tree.

    Raises MalformedExpressionError naming the first offending token.
    """
    return _parse_cached(text, config or DEFAULT_CONFIG)


def rewrite(text: str, config: ExprConfig | None = None) -> str:
    """Python source for *text* with every identifier ``x`` replaced by ``truthy(x)``."""
    config = config or DEFAULT_CONFIG
    source = parse(text, config).render(config.method_name)
    logger.debug("Rewrote %r -> %s", text, source)
    return source


@dataclass(frozen=True)
class CompiledExpr:
    """A parsed expression ready to evaluate against bindings.

    Call it with a mapping and/or keyword arguments::

        check = compile_expr("user && (token || !strict)")
        check(user="ann", token="", strict=0)   # True
    """

    text: str
    tree: BoolExpr
    config: ExprConfig = DEFAULT_CONFIG

    @property
    def identifiers(self) -> list[str]:
        return identifiers(self.tree)

    @property
    def source(self) -> str:
        return self.tree.render(self.config.method_name)

    def __call__(self, env: Mapping[str, Any] | None = None, /, **bindings: Any) -> bool:
        if env is None:
            scope: Mapping[str, Any] = bindings
        elif bindings:
            scope = {**env, **bindings}
        else:
            scope = env
        return self.tree.evaluate(scope)

    def as_function(self) -> Callable[..., bool]:
        """Wrap the expression as a plain function of its identifiers.

        Parameters are the identifiers in order of first appearance and
        may be passed positionally or by name. Evaluation short-circuits
        the same way as calling the compiled expression.
        """
        signature = inspect.Signature(
            [
                inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD)
                for name in self.identifiers
            ]
        )
        tree = self.tree

        def _expr(*args: Any, **kwargs: Any) -> bool:
            return tree.evaluate(signature.bind(*args, **kwargs).arguments)

        _expr.__signature__ = signature  # type: ignore[attr-defined]
        _expr.__doc__ = self.text
        return _expr


def compile_expr(text: str, config: ExprConfig | None = None) -> CompiledExpr:
    """Parse *text* once and return a reusable evaluator."""
    config = config or DEFAULT_CONFIG
    return CompiledExpr(text=text, tree=parse(text, config), config=config)


def evaluate(text: str, env: Mapping[str, Any] | None = None, /, **bindings: Any) -> bool:
    """Parse and evaluate *text* in one step.

    >>> evaluate("x && (y || !z)", x=True, y=False, z=False)
    True
    """
    return compile_expr(text)(env, **bindings)
