# mocat/catalog/plural.py
"""
Plural-Forms compiler.

A header such as ``nplurals=3; plural=(n%10==1 && n%100!=11) ? 0 : 1;`` is
parsed once into a small AST; evaluating it for a given n only walks that tree.
The expression language is the C subset gettext uses: the identifier ``n``,
non-negative integer literals, ``?:``, ``||``, ``&&``, ``== !=``,
``< <= > >=``, ``+ -``, ``* / %``, unary ``! -`` and parentheses.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from . import policy
from .errors import DivisionByZeroError, EvalError, InvalidPluralHeaderError

log = logging.getLogger(__name__)

HEADER_RE = re.compile(
    r"^\s*nplurals\s*=\s*(?P<nplurals>\d+)\s*;\s*plural\s*=\s*(?P<expr>.+?)\s*;?\s*$",
    re.DOTALL,
)

TOKEN_RE = re.compile(
    r"\s*(?:(?P<num>\d+)|(?P<op>\|\||&&|==|!=|<=|>=|[<>+\-*/%!?:()])|(?P<ident>[A-Za-z_]\w*))"
)


# -----------------------------------------------------------------------------
# AST
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Num:
    value: int


@dataclass(frozen=True)
class Var:
    pass


@dataclass(frozen=True)
class Unary:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class Binary:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Ternary:
    cond: "Node"
    then: "Node"
    otherwise: "Node"


Node = Union[Num, Var, Unary, Binary, Ternary]


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------
def tokenize(expr: str) -> List[Tuple[str, str]]:
    tokens: List[Tuple[str, str]] = []
    pos = 0
    end = len(expr.rstrip())
    while pos < end:
        m = TOKEN_RE.match(expr, pos)
        if not m or m.end() == pos:
            raise ValueError(f"unexpected character {expr[pos:].strip()[:1]!r} at {pos}")
        if m.group("num") is not None:
            tokens.append(("num", m.group("num")))
        elif m.group("op") is not None:
            tokens.append(("op", m.group("op")))
        else:
            ident = m.group("ident")
            if ident != "n":
                raise ValueError(f"unknown identifier {ident!r}")
            tokens.append(("n", ident))
        pos = m.end()
    return tokens


# real rules nest a handful of levels; these keep parsing and evaluation
# well inside the interpreter recursion limit
MAX_NESTING = 64
MAX_DEPTH = 200

# binary levels, loosest first; ternary sits above them
_LEVELS: Tuple[Tuple[str, ...], ...] = (
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", "<=", ">", ">="),
    ("+", "-"),
    ("*", "/", "%"),
)


class _Parser:
    def __init__(self, tokens: List[Tuple[str, str]]):
        self.tokens = tokens
        self.pos = 0
        self.nesting = 0

    def peek(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][1]
        return None

    def take(self) -> Tuple[str, str]:
        if self.pos >= len(self.tokens):
            raise ValueError("unexpected end of expression")
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def expect(self, value: str) -> None:
        _, got = self.take()
        if got != value:
            raise ValueError(f"expected {value!r}, got {got!r}")

    def parse(self) -> Node:
        if not self.tokens:
            raise ValueError("empty expression")
        node = self.ternary()
        if self.pos != len(self.tokens):
            raise ValueError(f"unexpected token {self.tokens[self.pos][1]!r}")
        return node

    def _enter(self) -> None:
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            raise ValueError("expression nested too deeply")

    def ternary(self) -> Node:
        self._enter()
        node = self.binary(0)
        if self.peek() == "?":
            self.take()
            then = self.ternary()
            self.expect(":")
            otherwise = self.ternary()
            node = Ternary(node, then, otherwise)
        self.nesting -= 1
        return node

    def binary(self, level: int) -> Node:
        if level == len(_LEVELS):
            return self.unary()
        node = self.binary(level + 1)
        while self.peek() in _LEVELS[level]:
            op = self.take()[1]
            node = Binary(op, node, self.binary(level + 1))
        return node

    def unary(self) -> Node:
        if self.peek() in ("!", "-"):
            op = self.take()[1]
            self._enter()
            node = Unary(op, self.unary())
            self.nesting -= 1
            return node
        return self.primary()

    def primary(self) -> Node:
        kind, value = self.take()
        if kind == "num":
            return Num(int(value))
        if kind == "n":
            return Var()
        if value == "(":
            node = self.ternary()
            self.expect(")")
            return node
        raise ValueError(f"unexpected token {value!r}")


def tree_depth(root: Node) -> int:
    deepest = 0
    stack = [(root, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(node, Unary):
            stack.append((node.operand, depth + 1))
        elif isinstance(node, Binary):
            stack.extend(((node.left, depth + 1), (node.right, depth + 1)))
        elif isinstance(node, Ternary):
            stack.extend(((node.cond, depth + 1), (node.then, depth + 1), (node.otherwise, depth + 1)))
    return deepest


def parse_expression(expr: str) -> Node:
    root = _Parser(tokenize(expr)).parse()
    # evaluation recurses once per level, so long operator chains are capped too
    if tree_depth(root) > MAX_DEPTH:
        raise ValueError("expression nested too deeply")
    return root


# -----------------------------------------------------------------------------
# Evaluation
# -----------------------------------------------------------------------------
def _c_div(a: int, b: int, n: int) -> int:
    if b == 0:
        raise DivisionByZeroError(n)
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _c_mod(a: int, b: int, n: int) -> int:
    return a - b * _c_div(a, b, n)


def _eval(node: Node, n: int) -> int:
    if isinstance(node, Num):
        return node.value
    if isinstance(node, Var):
        return n
    if isinstance(node, Unary):
        v = _eval(node.operand, n)
        return int(not v) if node.op == "!" else -v
    if isinstance(node, Ternary):
        return _eval(node.then if _eval(node.cond, n) else node.otherwise, n)

    op = node.op
    if op == "&&":
        return int(bool(_eval(node.left, n)) and bool(_eval(node.right, n)))
    if op == "||":
        return int(bool(_eval(node.left, n)) or bool(_eval(node.right, n)))

    a = _eval(node.left, n)
    b = _eval(node.right, n)
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if op == "/":
        return _c_div(a, b, n)
    if op == "%":
        return _c_mod(a, b, n)
    if op == "==":
        return int(a == b)
    if op == "!=":
        return int(a != b)
    if op == "<":
        return int(a < b)
    if op == "<=":
        return int(a <= b)
    if op == ">":
        return int(a > b)
    if op == ">=":
        return int(a >= b)
    raise EvalError(f"unknown operator {op!r}")


@dataclass(frozen=True)
class PluralRule:
    nplurals: int
    expression: str
    root: Node = field(repr=False, compare=False)

    def index(self, n: int) -> int:
        """Raw evaluation clamped to [0, nplurals - 1]; raises EvalError."""
        return evaluate(self, n)

    def select(self, n: int, strict: Optional[bool] = None) -> int:
        """Like index(), but degrades to form 0 on failure unless strict."""
        try:
            return evaluate(self, n)
        except EvalError as e:
            if policy.resolve(strict):
                raise
            log.warning("Plural rule %r failed for n=%s, using form 0: %s", self.expression, n, e)
            return 0


def evaluate(rule: PluralRule, n: int) -> int:
    raw = _eval(rule.root, int(n))
    return max(0, min(raw, rule.nplurals - 1))


def compile_plural_forms(header_value: str) -> PluralRule:
    """Compile a ``Plural-Forms`` header value; raises InvalidPluralHeaderError."""
    m = HEADER_RE.match(header_value or "")
    if not m:
        raise InvalidPluralHeaderError(header_value, "expected 'nplurals=<uint>; plural=<expr>;'")
    nplurals = int(m.group("nplurals"))
    if nplurals < 1:
        raise InvalidPluralHeaderError(header_value, "nplurals must be at least 1")
    expr = m.group("expr")
    try:
        root = parse_expression(expr)
    except ValueError as e:
        raise InvalidPluralHeaderError(header_value, str(e)) from e
    return PluralRule(nplurals=nplurals, expression=expr, root=root)


def constant_rule(index: int = 0) -> PluralRule:
    """Rule that always selects ``index``; stands in for an unusable header."""
    return PluralRule(nplurals=index + 1, expression=str(index), root=Num(index))
