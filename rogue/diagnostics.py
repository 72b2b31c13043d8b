"""Human-readable error reports.

A report names the error, points at ``path:line:column``, quotes the source
line and underlines the offending token::

    error: Undefined Variable
        --> main.rogue:3:6
         |
       3 | echo y;
         |      ^ Variable `y` is undefined in this scope.
         |
         = help: Maybe `y` was moved to another scope or never declared?
"""

import sys
from typing import List, Optional, TextIO

from termcolor import colored

from .errors import ParseErrors, RogueError

ERROR = 'red'
GUTTER = 'blue'


def _paint(text: str, color: Optional[str], bold: bool, enabled: bool) -> str:
    if not enabled:
        return text
    return colored(text, color, attrs=['bold'] if bold else None)


def source_line(source: str, line: int) -> Optional[str]:
    lines = source.splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1].expandtabs(1)
    return None


def render(error: RogueError, source: str, path: str = '<input>', color: bool = True) -> str:
    """Render a single error as a caret-annotated report."""
    code = source_line(source, error.line)
    width = max(3, len(str(error.line)))
    bar = _paint('|', GUTTER, True, color)
    blank = ' ' * (width + 1)

    out: List[str] = []
    out.append(_paint('error', ERROR, True, color) + _paint(':', None, True, color) + ' '
               + _paint(error.title, None, True, color))
    out.append(f"{blank}{_paint('-->', GUTTER, True, color)} {path}:{error.line}:{error.column}")
    if code is not None:
        caret = '^' * max(1, min(error.width, len(code) - error.column + 1))
        out.append(f"{blank}{bar}")
        out.append(f"{_paint(str(error.line).rjust(width), GUTTER, True, color)} {bar} {code}")
        out.append(f"{blank}{bar} {' ' * (error.column - 1)}{_paint(caret, ERROR, True, color)} {error.message}")
        out.append(f"{blank}{bar}")
    else:
        out.append(f"{blank}{bar} {error.message}")
    if error.help:
        out.append(f"{blank}{_paint('=', GUTTER, True, color)} {_paint('help:', None, True, color)} {error.help}")
    if error.note:
        out.append(f"{blank}{_paint('=', GUTTER, True, color)} {_paint('note:', None, True, color)} {error.note}")
    return '\n'.join(out)


def report(error: RogueError, source: str, path: str = '<input>',
           stream: Optional[TextIO] = None, color: bool = True):
    """Print a report for an error; a ParseErrors prints one per diagnostic."""
    stream = stream if stream is not None else sys.stderr
    errors = error.errors if isinstance(error, ParseErrors) else [error]
    for item in errors:
        print(render(item, source, path, color), file=stream)
    if len(errors) > 1:
        print(_paint(f"{len(errors)} errors found.", ERROR, True, color), file=stream)
