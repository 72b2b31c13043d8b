"""Tree-walking interpreter for Rogue.

:meth:`Interpreter.execute` runs statements and :meth:`Interpreter.evaluate`
computes expression values; both dispatch on the node type. Runtime errors
are raised as :class:`~rogue.errors.RogueError` subclasses and abort the run.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, TextIO

from .ast import (
    Assign, Binary, Block, Echo, Expr, ExpressionStmt, For, Grouping, If,
    Literal, Logical, Stmt, Unary, VarDecl, Variable, While,
    left_spine, position,
)
from .environment import Binding, Environment
from .errors import (
    NumberOperandExpected, RecursionDepthExceeded, TypeMismatch,
    UndefinedVariable, UnexpectedType,
)
from .parser import parse_program
from .tokens import Token
from .types import (
    as_float, check_annotation, divide, is_truthy, to_string, type_name,
    values_equal,
)

DEFAULT_MAX_DEPTH = 200


class Interpreter:
    """Core interpreter that executes Rogue statements."""
    def __init__(self, environment: Optional[Environment] = None,
                 output: Optional[TextIO] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt', max_depth: int = DEFAULT_MAX_DEPTH):
        self.environment = environment if environment is not None else Environment()
        self.output = output
        self.max_depth = max_depth
        self.depth = 0
        self.last_token: Optional[Token] = None
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, statements: List[Stmt]):
        for stmt in statements:
            self.execute(stmt)

    def _enter(self, node):
        token = position(node)
        if token is not None:
            self.last_token = token
        self.depth += 1
        if self.depth > self.max_depth:
            self.depth -= 1
            raise RecursionDepthExceeded(token or self.last_token, self.max_depth)

    def execute(self, node: Stmt):
        self._enter(node)
        try:
            self._execute(node)
        finally:
            self.depth -= 1

    def _execute(self, node: Stmt):
        env = self.environment
        if isinstance(node, ExpressionStmt):
            self.evaluate(node.expression)
            return
        if isinstance(node, Echo):
            value = self.evaluate(node.expression)
            print(to_string(value), file=self.output if self.output is not None else sys.stdout)
            return
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer) if node.initializer is not None else None
            if node.type_ is not None and value is not None:
                mismatch = check_annotation(node.type_.lexeme, value)
                if mismatch is not None:
                    raise TypeMismatch(node.type_, *mismatch)
            env.define(node.name.lexeme, Binding(node.type_, value, node.mutable))
            if self.debug_level >= 1:
                shown = 'uninitialized' if value is None else f"{type_name(value)} = {to_string(value)}"
                self.debug(f"declare {'mut ' if node.mutable else ''}{node.name.lexeme}: {shown}")
            return
        if isinstance(node, Block):
            with env.scope() as index:
                if self.debug_level >= 2:
                    self.debug(f"enter scope {index}")
                for stmt in node.statements:
                    self.execute(stmt)
            if self.debug_level >= 2:
                self.debug(f"leave scope {index}")
            return
        if isinstance(node, If):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {to_string(truthy)}")
            if truthy:
                self.execute(node.then_branch)
            elif node.else_branch is not None:
                self.execute(node.else_branch)
            return
        if isinstance(node, While):
            while True:
                cond = self.evaluate(node.condition)
                if self.debug_level >= 3:
                    self.debug(f"while condition {to_string(cond)}")
                if not is_truthy(cond):
                    break
                self.execute(node.body)
            return
        if isinstance(node, For):
            self.execute_for(node)
            return
        raise TypeError(f"unknown statement node {type(node).__name__}")

    def execute_for(self, node: For):
        start = self.range_bound(node.start, node.keyword)
        end = self.range_bound(node.end, node.keyword)
        env = self.environment
        with env.scope():
            current = start
            while current < end:
                if node.variable is not None:
                    env.define(node.variable.lexeme, Binding(None, current, True))
                if self.debug_level >= 3:
                    self.debug(f"for pass {to_string(current)}")
                self.execute(node.body)
                current += 1.0

    def range_bound(self, expr: Expr, keyword: Token) -> float:
        value = self.evaluate(expr)
        number = as_float(value)
        if number is None:
            raise UnexpectedType(keyword, to_string(value))
        return number

    def evaluate(self, node: Expr) -> Any:
        self._enter(node)
        try:
            return self._evaluate(node)
        finally:
            self.depth -= 1

    def _evaluate(self, node: Expr) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Variable):
            binding = self.environment.get(node.name)
            if binding.value is None:
                raise UndefinedVariable(node.name)
            return binding.value
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.environment.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name.lexeme} = {to_string(value)}")
            return value
        if isinstance(node, Unary):
            operand = self.evaluate(node.right)
            if node.operator.type == '!':
                return not is_truthy(operand)
            # bool is an int subclass but never a number here
            if isinstance(operand, float):
                return -operand
            raise NumberOperandExpected(node.operator)
        if isinstance(node, Logical):
            chain = left_spine(node, Logical)
            value = self.evaluate(chain[-1].left)
            for link in reversed(chain):
                if link.operator.type == 'or':
                    if is_truthy(value):
                        continue
                elif not is_truthy(value):
                    continue
                value = self.evaluate(link.right)
            return value
        if isinstance(node, Binary):
            chain = left_spine(node, Binary)
            value = self.evaluate(chain[-1].left)
            for link in reversed(chain):
                value = self.apply_binary_op(link.operator, value, self.evaluate(link.right))
            return value
        raise TypeError(f"unknown expression node {type(node).__name__}")

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == '==':
            return values_equal(a, b)
        if op == '!=':
            return not values_equal(a, b)
        x = as_float(a)
        if x is None:
            raise UnexpectedType(operator, to_string(a))
        y = as_float(b)
        if y is None:
            raise UnexpectedType(operator, to_string(b))
        if op == '+':
            return x + y
        if op == '-':
            return x - y
        if op == '*':
            return x * y
        if op == '/':
            return divide(x, y)
        if op == '>':
            return x > y
        if op == '>=':
            return x >= y
        if op == '<':
            return x < y
        if op == '<=':
            return x <= y
        raise TypeError(f"unknown binary operator {op}")


def interpret(statements: List[Stmt], environment: Optional[Environment] = None,
              output: Optional[TextIO] = None) -> Environment:
    """Execute statements and return the environment they ran against."""
    interpreter = Interpreter(environment, output=output)
    interpreter.run(statements)
    return interpreter.environment


def run_program(source: str, output: Optional[TextIO] = None, debug_level: int = 0) -> Environment:
    """Convenience function to tokenize, parse and run a Rogue program."""
    statements = parse_program(source)
    interpreter = Interpreter(output=output, debug_level=debug_level)
    try:
        interpreter.run(statements)
    finally:
        interpreter.close()
    return interpreter.environment
