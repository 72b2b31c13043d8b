"""Grammar-driven front end for Rogue.

The same language as :mod:`rogue.parser`, described as a Lark grammar and
parsed with LALR(1). The resulting parse tree is transformed into the very
same AST node types, with tokens carrying Lark's line and column, so the
interpreter cannot tell the two front ends apart.

Unlike the hand-written parser this one stops at the first syntax error.

The module also holds a small reader for the prefix form produced by
:mod:`rogue.ast_printer`, which turns ``(* (- 123) (group 45.67))`` back into
an expression tree.
"""

from __future__ import annotations

from typing import Any, List, Optional

from lark import Lark, Transformer
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, VisitError
from lark.exceptions import UnexpectedToken as LarkUnexpectedToken

from .ast import (
    Assign, Binary, Block, Echo, Expr, ExpressionStmt, For, Grouping, If,
    Literal, Logical, Stmt, Unary, VarDecl, Variable, While,
)
from .errors import (
    InvalidAssignmentTarget, UnexpectedCharacter, UnexpectedToken,
    UnterminatedString,
)
from .tokens import EOF, IDENT, Token
from .types import NULL


ROGUE_GRAMMAR = r"""
    start: declaration*

    ?declaration: var_decl
                | statement

    var_decl: "set" [MUT] IDENT [":" IDENT] ["=" expression] ";"   -> inferred_decl
            | IDENT [MUT] IDENT ["=" expression] ";"               -> typed_decl

    ?statement: echo_stmt
              | block
              | if_stmt
              | while_stmt
              | for_stmt
              | expr_stmt

    echo_stmt: "echo" expression ";"
    block: "{" declaration* "}"
    if_stmt: "if" "(" expression ")" statement ["else" statement]
    while_stmt: "while" "(" expression ")" statement
    for_stmt: FOR "(" [IDENT "in"] expression "." "." expression ")" statement
    expr_stmt: expression ";"

    // Expressions with precedence
    ?expression: assignment
    ?assignment: logic_or EQUAL assignment   -> assign
               | logic_or
    ?logic_or: logic_and (OR logic_and)*
    ?logic_and: equality (AND equality)*
    ?equality: comparison ((EQUAL_EQUAL | BANG_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((PLUS | MINUS) factor)*
    ?factor: unary ((STAR | SLASH) unary)*
    ?unary: (BANG | MINUS) unary            -> unary_op
          | primary
    ?primary: NUMBER                        -> number
            | STRING                        -> string
            | "true"                        -> true
            | "false"                       -> false
            | "null"                        -> null
            | IDENT                         -> variable
            | "(" expression ")"            -> grouping

    MUT: "mut"
    FOR: "for"
    OR: "or"
    AND: "and"
    EQUAL: "="
    EQUAL_EQUAL: "=="
    BANG_EQUAL: "!="
    GREATER: ">"
    GREATER_EQUAL: ">="
    LESS: "<"
    LESS_EQUAL: "<="
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    BANG: "!"

    IDENT: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"[^"]*"/

    COMMENT: /--[^\n]*/
    %ignore COMMENT
    %ignore /[ \t\r\n]+/
"""


PREFIX_GRAMMAR = r"""
    ?start: sexpr

    ?sexpr: atom
          | "(" HEAD sexpr+ ")"   -> form

    ?atom: NUMBER                 -> number
         | STRING                 -> string
         | "true"                 -> true
         | "false"                -> false
         | "null"                 -> null
         | NAME                   -> variable

    HEAD: "group" | "and" | "or" | "==" | "!=" | ">=" | "<=" | ">" | "<"
        | "+" | "-" | "*" | "/" | "!" | "="
    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?([eE][-+]?[0-9]+)?/
    STRING: /"[^"]*"/

    %ignore /[ \t\r\n]+/
"""


ROGUE_PARSER = Lark(
    ROGUE_GRAMMAR,
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=True,
)

# The contextual lexer tells a HEAD like ``and`` from a NAME by parser state.
PREFIX_PARSER = Lark(
    PREFIX_GRAMMAR,
    parser='lalr',
    lexer='contextual',
    maybe_placeholders=False,
)


def convert_token(token: LarkToken, kind: Optional[str] = None, literal: Any = None) -> Token:
    """Turn a Lark token into a Rogue token; operators use their text as kind."""
    text = str(token)
    return Token(kind or text, text, literal, token.line or 0, token.column or 0)


def _ident(token: Optional[LarkToken]) -> Optional[Token]:
    return convert_token(token, IDENT) if token is not None else None


class ExpressionBuilder(Transformer):
    """Leaf and operator rules shared by the program and prefix grammars."""

    def number(self, items):
        return Literal(float(items[0]))

    def string(self, items):
        return Literal(str(items[0])[1:-1])

    def true(self, items):
        return Literal(True)

    def false(self, items):
        return Literal(False)

    def null(self, items):
        return Literal(NULL)

    def variable(self, items):
        return Variable(_ident(items[0]))


class ASTTransformer(ExpressionBuilder):
    """Transforms the Lark parse tree of a program into Rogue statements."""

    def start(self, items):
        return list(items)

    def inferred_decl(self, items):
        mut, name, type_, initializer = items
        return VarDecl(_ident(type_), mut is not None, _ident(name), initializer)

    def typed_decl(self, items):
        type_, mut, name, initializer = items
        return VarDecl(_ident(type_), mut is not None, _ident(name), initializer)

    def echo_stmt(self, items):
        return Echo(items[0])

    def block(self, items):
        return Block(list(items))

    def if_stmt(self, items):
        condition, then_branch, else_branch = items
        return If(condition, then_branch, else_branch)

    def while_stmt(self, items):
        condition, body = items
        return While(condition, body)

    def for_stmt(self, items):
        keyword, variable, start, end, body = items
        return For(convert_token(keyword), _ident(variable), start, end, body)

    def expr_stmt(self, items):
        return ExpressionStmt(items[0])

    # Expressions
    def assign(self, items):
        target, equals, value = items
        if isinstance(target, Variable):
            return Assign(target.name, value)
        raise InvalidAssignmentTarget(convert_token(equals))

    def _fold(self, items, node_type):
        # items pattern: expr (op expr)*
        left = items[0]
        i = 1
        while i < len(items):
            left = node_type(left, convert_token(items[i]), items[i + 1])
            i += 2
        return left

    def logic_or(self, items):
        return self._fold(items, Logical)

    def logic_and(self, items):
        return self._fold(items, Logical)

    def equality(self, items):
        return self._fold(items, Binary)

    def comparison(self, items):
        return self._fold(items, Binary)

    def term(self, items):
        return self._fold(items, Binary)

    def factor(self, items):
        return self._fold(items, Binary)

    def unary_op(self, items):
        operator, operand = items
        return Unary(convert_token(operator), operand)

    def grouping(self, items):
        return Grouping(items[0])


class PrefixTransformer(ExpressionBuilder):
    """Builds expressions from prefix forms such as ``(- a b)``."""

    def form(self, items):
        head, args = items[0], items[1:]
        name = str(head)
        if name == 'group' and len(args) == 1:
            return Grouping(args[0])
        if name in ('and', 'or') and len(args) == 2:
            return Logical(args[0], convert_token(head), args[1])
        if name == '=' and len(args) == 2 and isinstance(args[0], Variable):
            return Assign(args[0].name, args[1])
        if name in ('!', '-') and len(args) == 1:
            return Unary(convert_token(head), args[0])
        if name not in ('group', '!', '=') and len(args) == 2:
            return Binary(args[0], convert_token(head), args[1])
        raise ValueError(f"malformed prefix form ({name} ...) with {len(args)} operand(s)")


def _translate(error: UnexpectedInput) -> Exception:
    """Map a Lark parse failure onto the Rogue error taxonomy."""
    if isinstance(error, UnexpectedCharacters):
        if error.char == '"':
            return UnterminatedString(error.line, error.column)
        return UnexpectedCharacter(error.char, error.line, error.column)
    if isinstance(error, LarkUnexpectedToken):
        token = error.token
        if token.type == '$END':
            rogue_token = Token(EOF, '', None, token.line or 0, token.column or 0)
        else:
            rogue_token = convert_token(token, token.type if token.type in ('IDENT', 'NUMBER', 'STRING') else None)
        expected = ', '.join(sorted(error.expected))
        return UnexpectedToken(rogue_token, f"Unexpected token, expected one of: {expected}.")
    line = getattr(error, 'line', 0) or 0
    column = getattr(error, 'column', 0) or 0
    return UnexpectedToken(Token(EOF, '', None, line, column), 'Unexpected end of input.')


def parse_source(source: str) -> List[Stmt]:
    """Parse Rogue source with the Lark grammar.

    Raises the first syntax error as a Rogue error; see :func:`_translate`.
    """
    try:
        tree = ROGUE_PARSER.parse(source)
    except UnexpectedInput as e:
        raise _translate(e) from e
    try:
        return ASTTransformer().transform(tree)
    except VisitError as e:
        raise e.orig_exc from e


def read_prefix(text: str) -> Expr:
    """Read an expression back from its printed prefix form."""
    tree = PREFIX_PARSER.parse(text)
    try:
        return PrefixTransformer().transform(tree)
    except VisitError as e:
        raise e.orig_exc from e
