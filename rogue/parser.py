"""Recursive-descent parser for Rogue.

Grammar, lowest to highest precedence::

    declaration  -> varDecl | statement
    varDecl      -> "set" "mut"? IDENT (":" IDENT)? ("=" expression)? ";"
                  | IDENT "mut"? IDENT ("=" expression)? ";"
    statement    -> echoStmt | block | ifStmt | whileStmt | forStmt | exprStmt
    block        -> "{" declaration* "}"
    ifStmt       -> "if" "(" expression ")" statement ("else" statement)?
    whileStmt    -> "while" "(" expression ")" statement
    forStmt      -> "for" "(" (IDENT "in")? expression ".." expression ")" statement
    expression   -> assignment
    assignment   -> IDENT "=" assignment | logic_or
    logic_or     -> logic_and ("or" logic_and)*
    logic_and    -> equality ("and" equality)*
    equality     -> comparison (("==" | "!=") comparison)*
    comparison   -> term ((">" | ">=" | "<" | "<=") term)*
    term         -> factor (("+" | "-") factor)*
    factor       -> unary (("*" | "/") unary)*
    unary        -> ("!" | "-") unary | primary
    primary      -> NUMBER | STRING | "true" | "false" | "null" | IDENT
                  | "(" expression ")"

A syntax error does not stop the parse. The error is recorded, tokens are
skipped up to the next statement boundary and parsing resumes, so a single
run reports every independent mistake. :func:`parse` raises
:class:`~rogue.errors.ParseErrors` at the end if anything was recorded.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Echo, Expr, ExpressionStmt, For, Grouping, If,
    Literal, Logical, Stmt, Unary, VarDecl, Variable, While,
)
from .errors import InvalidAssignmentTarget, ParseErrors, RogueError, UnexpectedToken
from .lexer import tokenize
from .tokens import EOF, IDENT, NUMBER, STATEMENT_KEYWORDS, STRING, Token
from .types import NULL

# Each nesting level costs about a dozen Python frames.
DEFAULT_MAX_DEPTH = 50


class Parser:
    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth
        self.depth = 0
        self.errors: List[RogueError] = []

    # Token cursor

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def peek_next(self) -> Token:
        if self.pos + 1 < len(self.tokens):
            return self.tokens[self.pos + 1]
        return self.tokens[-1]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.peek().type == EOF

    def advance(self) -> Token:
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def check(self, kind: str) -> bool:
        if self.at_end():
            return False
        return self.peek().type == kind

    def match(self, *kinds: str) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind: str, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise UnexpectedToken(self.peek(), message)

    @contextmanager
    def nested(self):
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise UnexpectedToken(self.peek(), 'Code nested too deeply.')
            yield
        finally:
            self.depth -= 1

    # Statements

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match('set'):
                return self.var_declaration(None)
            if self.check(IDENT) and self.peek_next().type in (IDENT, 'mut'):
                return self.var_declaration(self.advance())
            return self.statement()
        except UnexpectedToken as error:
            self.errors.append(error)
            self.synchronize()
            return None

    def var_declaration(self, type_: Optional[Token]) -> VarDecl:
        mutable = self.match('mut')
        name = self.consume(IDENT, 'Expect variable name.')
        if type_ is None and self.match(':'):
            type_ = self.consume(IDENT, "Expect type name after ':'.")
        initializer = None
        if self.match('='):
            initializer = self.expression()
        self.consume(';', "Expect ';' after variable declaration.")
        return VarDecl(type_, mutable, name, initializer)

    def statement(self) -> Stmt:
        with self.nested():
            if self.match('echo'):
                value = self.expression()
                self.consume(';', "Expect ';' after value.")
                return Echo(value)
            if self.match('{'):
                return Block(self.block())
            if self.match('if'):
                return self.if_statement()
            if self.match('while'):
                return self.while_statement()
            if self.match('for'):
                return self.for_statement()
            expr = self.expression()
            self.consume(';', "Expect ';' after expression.")
            return ExpressionStmt(expr)

    def block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check('}') and not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume('}', "Expect '}' after block.")
        return statements

    def if_statement(self) -> If:
        self.consume('(', "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(')', "Expect ')' after if condition.")
        then_branch = self.statement()
        else_branch = None
        if self.match('else'):
            else_branch = self.statement()
        return If(condition, then_branch, else_branch)

    def while_statement(self) -> While:
        self.consume('(', "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(')', "Expect ')' after condition.")
        return While(condition, self.statement())

    def for_statement(self) -> For:
        keyword = self.previous()
        self.consume('(', "Expect '(' after 'for'.")
        variable = None
        if self.check(IDENT) and self.peek_next().type == 'in':
            variable = self.advance()
            self.advance()
        start = self.expression()
        self.consume('.', "Expect '..' in range.")
        self.consume('.', "Expect '..' in range.")
        end = self.expression()
        self.consume(')', "Expect ')' after range.")
        return For(keyword, variable, start, end, self.statement())

    def synchronize(self):
        """Skip to just after a ';' or just before a statement keyword."""
        self.advance()
        while not self.at_end():
            if self.previous().type == ';':
                return
            if self.peek().type in STATEMENT_KEYWORDS:
                return
            self.advance()

    # Expressions

    def expression(self) -> Expr:
        with self.nested():
            return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()
        if self.match('='):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # Reported without resynchronizing; the parser is not lost
            self.errors.append(InvalidAssignmentTarget(equals))
        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match('or'):
            operator = self.previous()
            expr = Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match('and'):
            operator = self.previous()
            expr = Logical(expr, operator, self.equality())
        return expr

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match('==', '!='):
            operator = self.previous()
            expr = Binary(expr, operator, self.comparison())
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match('>', '>=', '<', '<='):
            operator = self.previous()
            expr = Binary(expr, operator, self.term())
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match('+', '-'):
            operator = self.previous()
            expr = Binary(expr, operator, self.factor())
        return expr

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match('*', '/'):
            operator = self.previous()
            expr = Binary(expr, operator, self.unary())
        return expr

    def unary(self) -> Expr:
        if self.match('!', '-'):
            operator = self.previous()
            with self.nested():
                return Unary(operator, self.unary())
        return self.primary()

    def primary(self) -> Expr:
        if self.match('false'):
            return Literal(False)
        if self.match('true'):
            return Literal(True)
        if self.match('null'):
            return Literal(NULL)
        if self.match(NUMBER, STRING):
            return Literal(self.previous().literal)
        if self.match(IDENT):
            return Variable(self.previous())
        if self.match('('):
            expr = self.expression()
            self.consume(')', "Expect ')' after expression.")
            return Grouping(expr)
        raise UnexpectedToken(self.peek(), 'Expect expression.')


def parse(tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH) -> List[Stmt]:
    """Parse a token list into statements.

    Raises:
        ParseErrors: if any syntax error was recorded, listing all of them.
    """
    parser = Parser(tokens, max_depth)
    statements = parser.parse()
    if parser.errors:
        raise ParseErrors(sorted(parser.errors, key=lambda e: (e.line, e.column)))
    return statements


def parse_expression(tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH) -> Expr:
    """Parse a token list holding exactly one expression."""
    parser = Parser(tokens, max_depth)
    try:
        expr = parser.expression()
        if not parser.at_end():
            raise UnexpectedToken(parser.peek(), 'Expect end of expression.')
    except UnexpectedToken as error:
        parser.errors.append(error)
    if parser.errors:
        raise ParseErrors(sorted(parser.errors, key=lambda e: (e.line, e.column)))
    return expr


def parse_program(source: str) -> List[Stmt]:
    """Tokenize and parse Rogue source code."""
    return parse(tokenize(source))
