import io
import math

import pytest

from rogue.environment import Environment
from rogue.errors import (
    ImmutableAssignment, NumberOperandExpected, RecursionDepthExceeded,
    TypeMismatch, UndefinedVariable, UnexpectedType,
)
from rogue.interpreter import Interpreter, interpret, run_program
from rogue.lexer import tokenize
from rogue.parser import parse, parse_expression, parse_program


def run(source, capsys):
    run_program(source)
    return capsys.readouterr().out.splitlines()


def evaluate(source):
    return Interpreter().evaluate(parse_expression(tokenize(source)))


def test_arithmetic_precedence(capsys):
    assert run('echo 1 + 2 * 3;', capsys) == ['7']
    assert evaluate('1 + 2 * 3') == 7.0


def test_mutable_assignment(capsys):
    assert run('set mut x = 5; x = x + 1; echo x;', capsys) == ['6']


def test_immutable_assignment_is_rejected(capsys):
    with pytest.raises(ImmutableAssignment) as excinfo:
        run_program('set x = 5; x = 6;')
    error = excinfo.value
    assert error.message == 'Cannot assign to `x`, because `x` is immutable.'
    assert (error.line, error.column) == (1, 12)


def test_undefined_variable(capsys):
    with pytest.raises(UndefinedVariable) as excinfo:
        run_program('echo y;')
    assert excinfo.value.message == 'Variable `y` is undefined in this scope.'
    assert capsys.readouterr().out == ''


def test_uninitialized_variable_reads_as_undefined():
    with pytest.raises(UndefinedVariable):
        run_program('set mut x; echo x;')


def test_type_mismatch_on_declaration():
    with pytest.raises(TypeMismatch) as excinfo:
        run_program('i32 n = "hello";')
    error = excinfo.value
    assert error.got == 'String'
    assert error.expected == ['i32', 'u32']
    assert error.message == 'got: `String`, expected: `i32` or `u32`'


def test_unknown_annotation_lists_matching_spellings():
    with pytest.raises(TypeMismatch) as excinfo:
        run_program('set name: text = "hello";')
    assert excinfo.value.got == 'text'
    assert excinfo.value.expected == ['String', 'string']


def test_annotations_that_match(capsys):
    assert run('f64 a = 1.5; boolean b = true; String s = "x"; echo a; echo b; echo s;', capsys) == [
        '1.5', 'true', 'x',
    ]


def test_number_literals_never_satisfy_integer_annotations():
    with pytest.raises(TypeMismatch) as excinfo:
        run_program('u32 n = 3;')
    assert excinfo.value.got == 'Float'


def test_declared_type_is_checked_on_assignment(capsys):
    with pytest.raises(TypeMismatch):
        run_program('f64 mut x = 1; echo x; x = "one";')
    assert capsys.readouterr().out == '1\n'


def test_if_else(capsys):
    assert run('if (1 > 2) echo 1; else echo 2;', capsys) == ['2']


def test_while_loop(capsys):
    assert run('set mut i = 0; while (i < 3) { echo i; i = i + 1; }', capsys) == ['0', '1', '2']


def test_shadowing_restores_outer_binding(capsys):
    assert run('set x = 1; { set x = 2; echo x; } echo x;', capsys) == ['2', '1']


def test_inner_scope_assigns_outer_variable(capsys):
    assert run('set mut x = 1; { x = 2; } echo x;', capsys) == ['2']


def test_block_locals_do_not_leak():
    with pytest.raises(UndefinedVariable):
        run_program('{ set inner = 1; } echo inner;')


def test_redeclaration_in_same_scope_replaces(capsys):
    assert run('set x = 1; set x = "two"; echo x;', capsys) == ['two']


def test_for_loop_counts_up_to_end(capsys):
    assert run('for (i in 0..3) echo i;', capsys) == ['0', '1', '2']
    assert run('for (1..3) echo "tick";', capsys) == ['tick', 'tick']


def test_for_variable_is_scoped_to_loop():
    with pytest.raises(UndefinedVariable):
        run_program('for (i in 0..1) echo i; echo i;')


def test_for_bounds_must_be_numbers():
    with pytest.raises(UnexpectedType):
        run_program('for (i in "a"..3) echo i;')


def test_logical_operators_return_an_operand():
    assert evaluate('null or "fallback"') == 'fallback'
    assert evaluate('"first" or "second"') == 'first'
    assert evaluate('false and missing') is False
    assert evaluate('1 and 2') == 2.0


def test_short_circuit_skips_right_operand(capsys):
    assert run('true or undefined_name; echo "ok";', capsys) == ['ok']


def test_truthiness(capsys):
    assert run('if (0) echo "zero"; if ("") echo "empty"; if (null) echo "null";', capsys) == [
        'zero', 'empty',
    ]
    assert evaluate('!null') is True
    assert evaluate('!0') is False


def test_equality_is_structural():
    assert evaluate('1 == 1') is True
    assert evaluate('"a" == "a"') is True
    assert evaluate('null == null') is True
    assert evaluate('1 == "1"') is False
    assert evaluate('true != 1') is True
    assert evaluate('null == false') is False


def test_comparison_and_arithmetic_need_numbers():
    with pytest.raises(UnexpectedType) as excinfo:
        evaluate('"a" + 1')
    assert excinfo.value.message == 'Expected type `f64`, got value of `a`.'
    with pytest.raises(UnexpectedType):
        evaluate('true < 2')


def test_negation_needs_a_number():
    with pytest.raises(NumberOperandExpected) as excinfo:
        evaluate('-"text"')
    assert excinfo.value.message == 'Expected number after operand `-` in expression.'
    with pytest.raises(NumberOperandExpected):
        evaluate('-true')


def test_division_follows_ieee():
    assert evaluate('1 / 0') == math.inf
    assert evaluate('-1 / 0') == -math.inf
    assert math.isnan(evaluate('0 / 0'))


def test_echo_formats_values(capsys):
    assert run('echo 10 / 4; echo 1 / 0; echo 0 / 0; echo null; echo 1 == 1;', capsys) == [
        '2.5', 'inf', 'NaN', 'null', 'true',
    ]


def test_output_stream_can_be_redirected(capsys):
    buffer = io.StringIO()
    run_program('echo "captured";', output=buffer)
    assert buffer.getvalue() == 'captured\n'
    assert capsys.readouterr().out == ''


def test_interpret_keeps_environment_between_runs():
    env = interpret(parse_program('set mut total = 1;'))
    interpret(parse_program('total = total + 41;'), env)
    assert env.snapshot() == {'total': 42.0}


def test_recursion_limit_is_an_error():
    source = 'echo ' + '!' * 150 + 'true;'
    statements = parse(tokenize(source), max_depth=200)
    interpreter = Interpreter(max_depth=100)
    with pytest.raises(RecursionDepthExceeded) as excinfo:
        interpreter.run(statements)
    assert excinfo.value.limit == 100
    assert (excinfo.value.line, excinfo.value.column) == (1, 105)
    assert excinfo.value.token.lexeme == '!'
    assert interpreter.depth == 0


def test_debug_output_written_to_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    interp = Interpreter(Environment(), debug_level=3)
    try:
        interp.run(parse_program('set mut a = 1; { a = 2; } if (a > 1) echo a;'))
    finally:
        interp.close()
    log = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'declare mut a: Float = 1' in log
    assert 'assign a = 2' in log
    assert 'enter scope 1' in log
    assert 'if condition true -> true' in log


def test_no_debug_file_without_verbosity(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    interp = Interpreter()
    interp.run(parse_program('echo 1;'))
    interp.close()
    assert not (tmp_path / 'debug.txt').exists()


def test_inferred_declaration_with_annotation_is_checked():
    with pytest.raises(TypeMismatch) as excinfo:
        run_program('set n: i32 = "hello";')
    assert excinfo.value.expected == ['i32', 'u32']
    assert excinfo.value.token.lexeme == 'i32'


def test_block_branches(capsys):
    assert run('if (false) { echo 1; } else { echo 2; }', capsys) == ['2']
    assert run('set mut x = 5; x = 6; echo x;', capsys) == ['6']


def test_long_flat_chains_are_not_nesting(capsys):
    assert run('echo ' + ' + '.join(['1'] * 250) + ';', capsys) == ['250']
    assert run('echo ' + ' or '.join(['false'] * 300) + ' or "last";', capsys) == ['last']
    assert run('echo ' + ' and '.join(['true'] * 300) + ' and 0 - 1;', capsys) == ['-1']


def test_flat_chain_evaluates_left_to_right():
    with pytest.raises(UndefinedVariable) as excinfo:
        run_program('echo 1 - 2 - first - second;')
    assert excinfo.value.token.lexeme == 'first'
