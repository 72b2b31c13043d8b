"""Abstract Syntax Tree (AST) definitions for Rogue.

The node set is closed: expressions are the :class:`Expr` subclasses and
statements the :class:`Stmt` subclasses below. Operators and names are kept as
tokens so that evaluation errors can point at a source position. Nodes are
never mutated after the parser builds them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .tokens import Token


@dataclass(frozen=True)
class Expr:
    """Base class for expression nodes."""
    pass


@dataclass(frozen=True)
class Stmt:
    """Base class for statement nodes."""
    pass


# Expressions

@dataclass(frozen=True)
class Literal(Expr):
    value: Any


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token  # 'and' or 'or'
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


# Statements

@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Echo(Stmt):
    expression: Expr


@dataclass(frozen=True)
class VarDecl(Stmt):
    type_: Optional[Token]  # None for inferred declarations
    mutable: bool
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class For(Stmt):
    keyword: Token
    variable: Optional[Token]  # None for `for (0..3)`
    start: Expr
    end: Expr
    body: Stmt


def position(node) -> Optional[Token]:
    """The token an error raised for a node should point at.

    Literals carry no token, so a bare literal (or a block of them) has none.
    """
    while node is not None:
        if isinstance(node, (Unary, Binary, Logical)):
            return node.operator
        if isinstance(node, (Variable, Assign, VarDecl)):
            return node.name
        if isinstance(node, For):
            return node.keyword
        if isinstance(node, (Grouping, ExpressionStmt, Echo)):
            node = node.expression
        elif isinstance(node, (If, While)):
            node = node.condition
        elif isinstance(node, Block):
            node = node.statements[0] if node.statements else None
        else:
            return None
    return None


def left_spine(node: Expr, kind) -> List[Expr]:
    """Collect `node` and its left operands of the same kind, outermost first.

    `1 + 2 + 3` parses as `(+ (+ 1 2) 3)`; walking the spine in a loop keeps
    long flat chains from counting as nesting.
    """
    chain: List[Expr] = []
    while isinstance(node, kind):
        chain.append(node)
        node = node.left
    return chain
