import pytest

from rogue.ast import Assign, Binary, Grouping, Literal, Unary
from rogue.ast_printer import print_ast
from rogue.errors import (
    InvalidAssignmentTarget, RecursionDepthExceeded, UnexpectedCharacter,
    UnexpectedToken,
)
from rogue.grammar import parse_source, read_prefix
from rogue.interpreter import Interpreter
from rogue.lexer import tokenize
from rogue.parser import parse_expression, parse_program
from rogue.tokens import EOF, IDENT

PROGRAM = '''
-- every statement form
set greeting = "hi";
set mut count: f64 = 0;
i32 mut limit;
boolean done = false;
echo greeting;
{ count = count + 1; echo count; }
if (count >= 1 and !done) echo "yes"; else { echo "no"; }
while (count < 3) count = count + 1;
for (i in 0..2) echo i * 2;
for (1..2) echo -count / (2 - 1);
echo null == null or 1 != 2;
'''


def test_grammar_builds_the_same_tree_as_the_hand_parser():
    hand = [print_ast(s) for s in parse_program(PROGRAM)]
    lark = [print_ast(s) for s in parse_source(PROGRAM)]
    assert lark == hand
    assert len(lark) == 11


def test_grammar_tokens_carry_positions():
    (decl,) = parse_source('\n  set value = 1;')
    assert decl.name.type == IDENT
    assert (decl.name.line, decl.name.column) == (2, 7)


def test_grammar_program_runs(capsys):
    Interpreter().run(parse_source('set mut x = 2; x = x * 21; echo x;'))
    assert capsys.readouterr().out == '42\n'


def test_dangling_else_binds_to_nearest_if():
    (stmt,) = parse_source('if (a) if (b) echo 1; else echo 2;')
    assert stmt.else_branch is None
    assert stmt.then_branch.else_branch is not None


def test_grammar_reports_unexpected_token():
    with pytest.raises(UnexpectedToken) as excinfo:
        parse_source('echo 1 +;')
    assert excinfo.value.token.lexeme == ';'
    assert (excinfo.value.line, excinfo.value.column) == (1, 9)


def test_grammar_reports_missing_semicolon_at_end():
    with pytest.raises(UnexpectedToken) as excinfo:
        parse_source('echo 1')
    assert excinfo.value.token.type == EOF


def test_grammar_reports_unexpected_character():
    with pytest.raises(UnexpectedCharacter) as excinfo:
        parse_source('echo #;')
    assert excinfo.value.char == '#'


def test_grammar_rejects_invalid_assignment_target():
    with pytest.raises(InvalidAssignmentTarget):
        parse_source('(a) = 1;')


def test_printer_prefix_form():
    assert print_ast(parse_expression(tokenize('-123 * (45.67)'))) == '(* (- 123) (group 45.67))'
    assert print_ast(parse_expression(tokenize('"s" == x'))) == '(== "s" x)'
    assert print_ast(parse_expression(tokenize('a = null'))) == '(= a null)'


def test_printer_statements():
    stmts = parse_program('set mut a: f64 = 1; set b; { echo a; } while (true) a = 2;')
    assert [print_ast(s) for s in stmts] == [
        '(set mut a: f64 1)',
        '(set b)',
        '(block (echo a))',
        '(while true (expr (= a 2)))',
    ]


def test_read_prefix_builds_nodes():
    expr = read_prefix('(* (- 123) (group 45.67))')
    assert isinstance(expr, Binary)
    assert isinstance(expr.left, Unary) and expr.left.right == Literal(123.0)
    assert isinstance(expr.right, Grouping)
    assert isinstance(read_prefix('(= a 1)'), Assign)


@pytest.mark.parametrize('source', [
    '1 + 2 * 3',
    '-(4 - 2) / 8',
    'a = b = "text"',
    '!(x == null) or y and false',
    'count >= 10 and count <= 20.5',
])
def test_printed_form_reads_back(source):
    printed = print_ast(parse_expression(tokenize(source)))
    assert print_ast(read_prefix(printed)) == printed


def test_read_prefix_rejects_malformed_forms():
    with pytest.raises(ValueError):
        read_prefix('(group 1 2)')


def test_printer_folds_long_chains_without_recursion():
    printed = print_ast(parse_expression(tokenize(' + '.join(['1'] * 600))))
    assert printed.count('(+') == 599
    assert printed.startswith('(+ (+ (+ ')
    assert printed.endswith(' 1) 1)')


def test_printer_depth_limit():
    with pytest.raises(RecursionDepthExceeded) as excinfo:
        print_ast(parse_expression(tokenize('!!!!true')), max_depth=3)
    assert excinfo.value.token.lexeme == '!'
    assert excinfo.value.column == 4
