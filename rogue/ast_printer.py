"""Render AST nodes in parenthesized prefix form.

``-123 * (45.67)`` prints as ``(* (- 123) (group 45.67))``. String literals
are quoted so that :func:`rogue.grammar.read_prefix` can read the output back.
"""

from typing import List, Optional, Union

from .ast import (
    Assign, Binary, Block, Echo, Expr, ExpressionStmt, For, Grouping, If,
    Literal, Logical, Stmt, Unary, VarDecl, Variable, While, left_spine,
    position,
)
from .errors import RecursionDepthExceeded
from .tokens import Token
from .types import to_string

# Each nesting level costs about four Python frames.
DEFAULT_MAX_DEPTH = 200


class AstPrinter:
    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth if max_depth is not None else DEFAULT_MAX_DEPTH
        self.depth = 0
        self.last_token: Optional[Token] = None

    def print(self, node: Union[Expr, Stmt]) -> str:
        token = position(node)
        if token is not None:
            self.last_token = token
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise RecursionDepthExceeded(token or self.last_token, self.max_depth)
            if isinstance(node, Stmt):
                return self.print_stmt(node)
            return self.print_expr(node)
        finally:
            self.depth -= 1

    def parenthesize(self, name: str, *parts: Union[Expr, Stmt, str]) -> str:
        builder: List[str] = ['(', name]
        for part in parts:
            builder.append(' ')
            builder.append(part if isinstance(part, str) else self.print(part))
        builder.append(')')
        return ''.join(builder)

    def print_expr(self, expr: Expr) -> str:
        if isinstance(expr, Literal):
            if isinstance(expr.value, str):
                return f'"{expr.value}"'
            return to_string(expr.value)
        if isinstance(expr, Grouping):
            return self.parenthesize('group', expr.expression)
        if isinstance(expr, Unary):
            return self.parenthesize(expr.operator.lexeme, expr.right)
        if isinstance(expr, (Binary, Logical)):
            # Flat operator chains are folded in a loop, not by recursion
            chain = left_spine(expr, (Binary, Logical))
            text = self.print(chain[-1].left)
            for link in reversed(chain):
                text = self.parenthesize(link.operator.lexeme, text, link.right)
            return text
        if isinstance(expr, Variable):
            return expr.name.lexeme
        if isinstance(expr, Assign):
            return self.parenthesize('=', expr.name.lexeme, expr.value)
        raise TypeError(f"cannot print {type(expr).__name__}")

    def print_stmt(self, stmt: Stmt) -> str:
        if isinstance(stmt, ExpressionStmt):
            return self.parenthesize('expr', stmt.expression)
        if isinstance(stmt, Echo):
            return self.parenthesize('echo', stmt.expression)
        if isinstance(stmt, VarDecl):
            head = 'set mut' if stmt.mutable else 'set'
            name = stmt.name.lexeme
            if stmt.type_ is not None:
                name += ': ' + stmt.type_.lexeme
            if stmt.initializer is None:
                return self.parenthesize(head, name)
            return self.parenthesize(head, name, stmt.initializer)
        if isinstance(stmt, Block):
            return self.parenthesize('block', *stmt.statements)
        if isinstance(stmt, If):
            if stmt.else_branch is None:
                return self.parenthesize('if', stmt.condition, stmt.then_branch)
            return self.parenthesize('if', stmt.condition, stmt.then_branch, stmt.else_branch)
        if isinstance(stmt, While):
            return self.parenthesize('while', stmt.condition, stmt.body)
        if isinstance(stmt, For):
            parts: List[Union[Expr, Stmt, str]] = []
            if stmt.variable is not None:
                parts.append(stmt.variable.lexeme)
            parts.extend([stmt.start, stmt.end, stmt.body])
            return self.parenthesize('for', *parts)
        raise TypeError(f"cannot print {type(stmt).__name__}")


def print_ast(node: Union[Expr, Stmt], max_depth: Optional[int] = None) -> str:
    """Print a node in prefix form.

    Raises:
        RecursionDepthExceeded: when the tree nests deeper than ``max_depth``.
    """
    return AstPrinter(max_depth).print(node)
