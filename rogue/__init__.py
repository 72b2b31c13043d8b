# Rogue language package
# This package provides a lexer, two parsers and a tree-walking interpreter for the Rogue language.
from .environment import Environment
from .errors import ParseErrors, RogueError
from .interpreter import Interpreter, interpret, run_program
from .lexer import tokenize
from .parser import parse, parse_program

__all__ = [
    'tokenize',
    'parse',
    'parse_program',
    'interpret',
    'run_program',
    'Interpreter',
    'Environment',
    'RogueError',
    'ParseErrors',
]
