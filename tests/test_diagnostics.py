import io

import pytest

from rogue.diagnostics import render, report, source_line
from rogue.errors import ParseErrors, UndefinedVariable
from rogue.interpreter import run_program
from rogue.parser import parse_program


def runtime_error(source):
    with pytest.raises(UndefinedVariable) as excinfo:
        run_program(source)
    return excinfo.value


def test_render_points_at_the_token():
    source = 'set x = 1;\necho x;\necho missing;'
    text = render(runtime_error(source), source, 'main.rogue', color=False)
    lines = text.splitlines()
    assert lines[0] == 'error: Undefined Variable'
    assert lines[1] == '    --> main.rogue:3:6'
    assert lines[3] == '  3 | echo missing;'
    assert lines[4] == '    |      ^^^^^^^ Variable `missing` is undefined in this scope.'
    assert lines[-1] == '    = help: Maybe `missing` was moved to another scope or never declared?'


def test_render_includes_note():
    source = 'set x = 1; x = 2;'
    with pytest.raises(Exception) as excinfo:
        run_program(source)
    text = render(excinfo.value, source, color=False)
    assert '= note: Variables need to be mutable to be reassigned.' in text
    assert '<input>:1:12' in text


def test_source_line_out_of_range():
    assert source_line('one\ntwo', 2) == 'two'
    assert source_line('one', 5) is None


def test_report_lists_every_parse_error():
    source = 'set = 1;\necho (2;'
    with pytest.raises(ParseErrors) as excinfo:
        parse_program(source)
    stream = io.StringIO()
    report(excinfo.value, source, 'bad.rogue', stream=stream, color=False)
    out = stream.getvalue()
    assert out.count('error: Unexpected Token') == 2
    assert 'bad.rogue:1:5' in out
    assert 'bad.rogue:2:8' in out
    assert out.rstrip().endswith('2 errors found.')


def test_report_defaults_to_stderr(capsys):
    source = 'echo nothing;'
    report(runtime_error(source), source, color=False)
    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'Undefined Variable' in captured.err


def test_plain_report_has_no_escape_codes():
    source = 'echo nothing;'
    text = render(runtime_error(source), source, color=False)
    assert '\x1b[' not in text
