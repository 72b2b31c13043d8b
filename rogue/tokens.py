"""Token definitions shared by the lexer and both parsers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

IDENT = 'IDENT'
NUMBER = 'NUMBER'
STRING = 'STRING'
EOF = 'EOF'

# Reserved words. A token's kind is the keyword spelling itself.
KEYWORDS = frozenset([
    'mut', 'typeof', 'sizeof', 'nameof', 'as', 'void', 'use', 'with', 'out',
    'true', 'false', 'if', 'elif', 'else', 'while', 'for', 'in', 'entity',
    'init', 'new', 'this', 'set', 'enum', 'throw', 'catch', 'pub', 'priv',
    'prot', 'unreachable', 'todo', 'pass', 'test', 'trait', 'parent', 'open',
    'override', 'scene', 'import', 'echo', 'try', 'and', 'or', 'null',
])

# Keywords that may begin a statement; the parser resynchronizes before them.
STATEMENT_KEYWORDS = frozenset([
    'set', 'if', 'while', 'for', 'echo', 'entity', 'trait', 'catch', 'elif',
    'else', 'unreachable', 'void', 'typeof', 'nameof', 'sizeof', 'todo',
    'test', 'override', 'open', 'scene',
])

# Operator and punctuation characters; two character forms are matched first.
SINGLE_CHARS = '(){}[],.;:?+-*/!=<>'
TWO_CHAR_OPERATORS = frozenset(['-=', '->', '+=', '*=', '/=', '!=', '==', '<=', '>='])


@dataclass(frozen=True)
class Token:
    type: str
    lexeme: str
    literal: Optional[Any]
    line: int
    column: int

    def __str__(self) -> str:
        literal = '' if self.literal is None else f' {self.literal!r}'
        return f"{self.line}:{self.column} {self.type} {self.lexeme!r}{literal}"
