"""Lexer for Rogue.

A single left-to-right pass with two characters of lookahead. Identifiers are
scanned to their full length before being checked against the keyword table,
so ``setter`` is an identifier and ``set`` a keyword. ``--`` starts a line
comment. Number literals are always produced as floats.
"""

from __future__ import annotations

from typing import List

from rogue.errors import UnexpectedCharacter, UnterminatedString
from rogue.tokens import (
    EOF, IDENT, KEYWORDS, NUMBER, SINGLE_CHARS, STRING, TWO_CHAR_OPERATORS, Token,
)


def is_alpha(c: str) -> bool:
    return 'a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_'


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens ending with one EOF token.

    Raises:
        UnexpectedCharacter: for a character no token can start with.
        UnterminatedString: when a string literal runs into the end of input.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def peek(offset: int = 0) -> str:
        pos = i + offset
        return source[pos] if pos < length else '\0'

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        start_i = i
        start_line = line
        start_col = col
        if c in ' \r\t\n':
            advance()
            continue
        # Line comment
        if c == '-' and peek(1) == '-':
            while i < length and source[i] != '\n':
                advance()
            continue
        if is_alpha(c):
            while i < length and (is_alpha(source[i]) or is_digit(source[i])):
                advance()
            text = source[start_i:i]
            kind = text if text in KEYWORDS else IDENT
            tokens.append(Token(kind, text, None, start_line, start_col))
            continue
        if is_digit(c):
            while is_digit(peek()):
                advance()
            # A '.' only belongs to the number when a digit follows it
            if peek() == '.' and is_digit(peek(1)):
                advance()
                while is_digit(peek()):
                    advance()
            text = source[start_i:i]
            tokens.append(Token(NUMBER, text, float(text), start_line, start_col))
            continue
        if c == '"':
            advance()
            while i < length and source[i] != '"':
                advance()
            if i >= length:
                raise UnterminatedString(start_line, start_col)
            advance()  # closing quote
            text = source[start_i:i]
            tokens.append(Token(STRING, text, text[1:-1], start_line, start_col))
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPERATORS:
            tokens.append(Token(pair, pair, None, start_line, start_col))
            advance(2)
            continue
        if c in SINGLE_CHARS:
            tokens.append(Token(c, c, None, start_line, start_col))
            advance()
            continue
        raise UnexpectedCharacter(c, start_line, start_col)
    tokens.append(Token(EOF, '', None, line, col))
    return tokens
