"""CLI entry point for the Rogue interpreter.

Usage:
    python -m rogue [-v|-vv|-vvv] [--grammar] <program_file>
    python -m rogue --tokens <program_file>
    python -m rogue --ast <program_file>
    python -m rogue                      (interactive prompt)

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream instead of running the program
  --ast         Print every statement in prefix form instead of running
  --grammar     Parse with the Lark grammar instead of the hand-written parser

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Errors are reported on stderr; the exit
status is 65 for lexical and syntax errors, 70 for runtime errors and 66 when
the program file cannot be read.
"""

import argparse
import cmd
import sys
from pathlib import Path
from typing import List, Optional

from .ast import Stmt
from .ast_printer import print_ast
from .diagnostics import report
from .environment import Environment
from .errors import (
    InvalidAssignmentTarget, ParseErrors, RogueError, UnexpectedCharacter,
    UnexpectedToken, UnterminatedString,
)
from .grammar import parse_source
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse
from .types import to_string

EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

SYNTAX_ERRORS = (ParseErrors, UnexpectedCharacter, UnterminatedString, UnexpectedToken,
                 InvalidAssignmentTarget)


def parse_text(source: str, use_grammar: bool = False) -> List[Stmt]:
    if use_grammar:
        return parse_source(source)
    return parse(tokenize(source))


class Shell(cmd.Cmd):
    """Interactive Rogue prompt. Declarations persist between lines."""
    intro = "Rogue interpreter. Type 'help' for commands, 'exit' to leave."
    prompt = "> "

    def __init__(self, interpreter: Interpreter, use_grammar: bool = False, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter
        self.use_grammar = use_grammar

    def default(self, line):
        """Runs a line of Rogue code."""
        try:
            self.interpreter.run(parse_text(line, self.use_grammar))
        except RogueError as e:
            report(e, line, '<stdin>', stream=self.stdout)

    def do_vars(self, arg):
        """Lists the variables visible at the prompt."""
        for name, value in sorted(self.interpreter.environment.snapshot().items()):
            shown = 'uninitialized' if value is None else to_string(value)
            print(f"{name} = {shown}", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='rogue', description="Rogue language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', action='store_true', help='print the token stream and exit')
    group.add_argument('--ast', action='store_true', help='print the parsed statements in prefix form and exit')
    parser.add_argument('--grammar', action='store_true', help='parse with the Lark grammar front end')
    parser.add_argument('program', nargs='?', help='Rogue program file to execute; omit for a prompt')
    args = parser.parse_args(argv)

    if not args.program:
        if args.tokens or args.ast:
            parser.error('--tokens and --ast need a program file')
        interpreter = Interpreter(Environment(), debug_level=args.v)
        try:
            Shell(interpreter, args.grammar).cmdloop()
        finally:
            interpreter.close()
        return 0

    program_file = Path(args.program)
    try:
        source = program_file.read_text(encoding='utf-8')
    except OSError as e:
        print(f"Error: cannot read {program_file}: {e.strerror}", file=sys.stderr)
        return EX_NOINPUT

    try:
        if args.tokens:
            for token in tokenize(source):
                print(token)
            return 0
        statements = parse_text(source, args.grammar)
    except SYNTAX_ERRORS as e:
        report(e, source, str(program_file))
        return EX_DATAERR

    if args.ast:
        try:
            for stmt in statements:
                print(print_ast(stmt))
        except RogueError as e:
            sys.stdout.flush()
            report(e, source, str(program_file))
            return EX_DATAERR
        return 0

    interpreter = Interpreter(debug_level=args.v)
    try:
        interpreter.run(statements)
    except RogueError as e:
        sys.stdout.flush()
        report(e, source, str(program_file))
        return EX_SOFTWARE
    finally:
        interpreter.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
