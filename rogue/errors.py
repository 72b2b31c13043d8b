"""Error taxonomy for Rogue.

Every failure carries a position (line and column) and a message. The
diagnostic renderer additionally reads ``title``, ``help`` and ``note``.
"""

from typing import Iterable, List, Optional

from rogue.tokens import Token


class RogueError(Exception):
    """Base class for every error the lexer, parser or interpreter raises."""
    title = 'Error'

    def __init__(self, message: str, token: Optional[Token] = None,
                 line: Optional[int] = None, column: Optional[int] = None,
                 help: Optional[str] = None, note: Optional[str] = None):
        self.message = message
        self.token = token
        self.line = line if line is not None else (token.line if token else 0)
        self.column = column if column is not None else (token.column if token else 0)
        self.help = help
        self.note = note
        super().__init__(f"[line {self.line}:{self.column}] {self.title}: {message}")

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def width(self) -> int:
        """Number of columns the caret should underline."""
        if self.token is not None and self.token.lexeme:
            return len(self.token.lexeme.splitlines()[0] or ' ')
        return 1


class UnexpectedCharacter(RogueError):
    title = 'Unexpected Character'

    def __init__(self, char: str, line: int, column: int):
        super().__init__(f"Unexpected character {char!r}.", line=line, column=column,
                         help='Remove this character.')
        self.char = char


class UnterminatedString(RogueError):
    title = 'Unterminated String'

    def __init__(self, line: int, column: int):
        super().__init__('String literal is never closed.', line=line, column=column,
                         help='Add a closing `"`.')


class UnexpectedToken(RogueError):
    title = 'Unexpected Token'

    def __init__(self, token: Token, message: str):
        super().__init__(message, token=token)


class InvalidAssignmentTarget(RogueError):
    title = 'Invalid Assignment Target'

    def __init__(self, token: Token):
        super().__init__('Invalid assignment target.', token=token,
                         note='Only a variable name may appear left of `=`.')


class NumberOperandExpected(RogueError):
    title = 'Wrong number-operand order'

    def __init__(self, token: Token):
        super().__init__(f"Expected number after operand `{token.lexeme}` in expression.", token=token)


class UnexpectedType(RogueError):
    title = 'Unexpected Type'

    def __init__(self, token: Token, value_text: str):
        super().__init__(f"Expected type `f64`, got value of `{value_text}`.", token=token,
                         help='Change to type `f64`.')
        self.value_text = value_text


class TypeMismatch(RogueError):
    title = 'Type mismatch'

    def __init__(self, token: Token, got: str, expected: List[str]):
        super().__init__(f"got: `{got}`, expected: {join_alternatives(expected)}", token=token)
        self.got = got
        self.expected = expected


class ImmutableAssignment(RogueError):
    title = 'Cannot assign to immutable data'

    def __init__(self, token: Token):
        name = token.lexeme
        super().__init__(f"Cannot assign to `{name}`, because `{name}` is immutable.", token=token,
                         help=f"Make `{name}` mutable by adding the `mut` keyword.",
                         note='Variables need to be mutable to be reassigned.')


class UndefinedVariable(RogueError):
    title = 'Undefined Variable'

    def __init__(self, token: Token):
        name = token.lexeme
        super().__init__(f"Variable `{name}` is undefined in this scope.", token=token,
                         help=f"Maybe `{name}` was moved to another scope or never declared?")


class RecursionDepthExceeded(RogueError):
    title = 'Recursion Limit'

    def __init__(self, token: Optional[Token], limit: int):
        super().__init__(f"Evaluation nested deeper than {limit} levels.", token=token,
                         help='Split the expression or flatten nested blocks.')
        self.limit = limit


class ParseErrors(RogueError):
    """Every diagnostic one parse recorded, in source order."""
    title = 'Syntax errors'

    def __init__(self, errors: Iterable[RogueError]):
        self.errors = list(errors)
        first = self.errors[0]
        super().__init__(f"{len(self.errors)} syntax error(s); first: {first.message}",
                         token=first.token, line=first.line, column=first.column)


def join_alternatives(names: List[str]) -> str:
    """Render ``['i32', 'u32']`` as ```i32` or `u32```."""
    return ' or '.join(f"`{name}`" for name in names)
