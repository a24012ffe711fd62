"""Tree-walking interpreter for type-checked Naruto programs.

`Interpreter.execute(statements)` runs a program for its effects: `print`
output goes to the configured output sink and `input(...)` reads lines from
the configured input stream. Faults raise `RuntimeFault`; whatever was
printed before the fault stays printed.

Evaluation is a depth-first walk. `evaluate(expr, env)` returns the value
of an expression. `execute_statement(stmt, env)` returns an `ExecResult`
whose signal tells loops and calls about `break`, `continue` and `return`;
each construct inspects the signal of its children and either handles it or
passes it up.

Environments:
- a block (and each `switch` case) runs in a child of the current environment;
- a `for` loop gets one environment for its header that lives across all
  iterations;
- a call runs in a fresh environment whose parent is the global environment,
  so functions see globals and their own locals only.

Arrays are values. `a[i] = v` reads the whole array from the variable, builds
a new one with element `i` replaced and stores it back, which only works when
the indexed expression is a plain variable.
"""

from __future__ import annotations
import logging
import operator
import re
import sys
from typing import Optional, Dict, List, Sequence, TextIO, assert_never
from ast_nodes import *
from errors import RuntimeFault
from runtime import (
    INT64_MAX,
    INT64_MIN,
    NORMAL,
    Environment,
    ExecResult,
    RuntimeValue,
    Signal,
    ValueKind,
    c_mod,
    coerce,
    concat_text,
    default_value,
    format_value,
    trunc_div,
)

logger = logging.getLogger(__name__)

COMPARISONS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

ARITHMETIC = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}

BITWISE = {
    "&": operator.and_,
    "|": operator.or_,
    "^": operator.xor,
}

INT_INPUT = re.compile(r"[+-]?[0-9]+")
FLOAT_INPUT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE
)


def is_truthy(value: RuntimeValue) -> bool:
    if value.kind == ValueKind.BOOL:
        return value.value
    if value.kind == ValueKind.INTEGER:
        return value.value != 0
    return False


def values_equal(left: RuntimeValue, right: RuntimeValue) -> bool:
    if left.is_number and right.is_number:
        return left.value == right.value
    return left.kind == right.kind and left.value == right.value


def ordering_key(value: RuntimeValue):
    """Python value used by `<`, `<=`, `>`, `>=`; arrays order element-wise."""
    if value.kind == ValueKind.ARRAY:
        return tuple(item.value for item in value.value)
    return value.value


def convert_input(text: str) -> RuntimeValue:
    """Interpret a line of input as an int, then a float, else a string."""
    # Leading blanks are skipped; anything trailing keeps the line a string.
    candidate = text.lstrip()
    if INT_INPUT.fullmatch(candidate):
        number = int(candidate)
        if INT64_MIN <= number <= INT64_MAX:
            return RuntimeValue.integer(number)
    if FLOAT_INPUT.fullmatch(candidate):
        return RuntimeValue.floating(float(candidate))
    return RuntimeValue.string(text)


class Interpreter:
    def __init__(self, output: Optional[TextIO] = None, input_stream: Optional[TextIO] = None):
        self.output = output if output is not None else sys.stdout
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.globals = Environment()
        self.functions: Dict[str, FunctionDeclarationNode] = {}

    def execute(self, statements: Sequence[Statement]) -> Environment:
        """Run a program and return its global environment."""
        for stmt in statements:
            if isinstance(stmt, FunctionDeclarationNode):
                self.functions[stmt.func_name] = stmt
        logger.debug("executing %d statements, %d functions", len(statements), len(self.functions))

        try:
            for stmt in statements:
                result = self.execute_statement(stmt, self.globals)
                if not result.is_normal:
                    logger.warning(
                        "'%s' reached the top level (line %d); stopping execution.",
                        result.signal.name.lower(),
                        stmt.line,
                    )
                    break
        except RecursionError as err:
            raise RuntimeFault("Maximum recursion depth exceeded.") from err
        return self.globals

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute_block(self, statements: Sequence[Statement], env: Environment) -> ExecResult:
        for stmt in statements:
            result = self.execute_statement(stmt, env)
            if not result.is_normal:
                return result
        return NORMAL

    def execute_statement(self, stmt: Statement, env: Environment) -> ExecResult:
        match stmt:
            case ExpressionStatementNode(expression=expr):
                self.evaluate(expr, env)
                return NORMAL

            case PrintStatementNode(expression=expr):
                value = self.evaluate(expr, env)
                if value.kind != ValueKind.VOID:
                    print(format_value(value), file=self.output)
                return NORMAL

            case VariableDeclarationNode(var_type=var_type, var_name=name, init_value=init):
                value = self.evaluate(init, env) if init is not None else default_value(var_type)
                env.define(name, value, var_type)
                return NORMAL

            case BlockNode(statements=stmts):
                return self.execute_block(stmts, Environment(parent=env))

            case IfStatementNode(condition=cond, then_block=then_block, else_block=else_block):
                if is_truthy(self.evaluate(cond, env)):
                    return self.execute_statement(then_block, env)
                if else_block is not None:
                    return self.execute_statement(else_block, env)
                return NORMAL

            case SwitchStatementNode(value=value, cases=cases):
                return self.execute_switch(self.evaluate(value, env), cases, env)

            case WhileStatementNode(condition=cond, body=body):
                while is_truthy(self.evaluate(cond, env)):
                    result = self.execute_statement(body, env)
                    if result.signal == Signal.BREAK:
                        break
                    if result.signal == Signal.RETURN:
                        return result
                return NORMAL

            case ForStatementNode(initializer=init, condition=cond, increment=incr, body=body):
                loop_env = Environment(parent=env)
                if init is not None:
                    self.execute_statement(init, loop_env)
                while cond is None or is_truthy(self.evaluate(cond, loop_env)):
                    result = self.execute_statement(body, loop_env)
                    if result.signal == Signal.BREAK:
                        break
                    if result.signal == Signal.RETURN:
                        return result
                    # Runs after a normal or a `continue`-terminated iteration.
                    if incr is not None:
                        self.evaluate(incr, loop_env)
                return NORMAL

            case BreakStatementNode():
                return ExecResult(Signal.BREAK)

            case ContinueStatementNode():
                return ExecResult(Signal.CONTINUE)

            case ReturnStatementNode(expression=expr):
                value = self.evaluate(expr, env) if expr is not None else RuntimeValue.void()
                return ExecResult(Signal.RETURN, value)

            case FunctionDeclarationNode(func_name=name):
                self.functions[name] = stmt
                return NORMAL

            case _:
                assert_never(stmt)

    def execute_switch(self, target: RuntimeValue, cases: List[SwitchCase], env: Environment) -> ExecResult:
        """Run the first matching case (or the first default reached) and stop."""
        for case in cases:
            if case.condition is None or values_equal(self.evaluate(case.condition, env), target):
                return self.execute_block(case.statements, Environment(parent=env))
        return NORMAL

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate(self, expr: Expression, env: Environment) -> RuntimeValue:
        match expr:
            case LiteralNode(value_type=value_type, value=value):
                return self.literal(value_type, value)

            case VariableNode(name=name):
                return env.get(name, expr.line)

            case BinaryOpNode(left=left, operator=op, right=right):
                return self.binary(op, self.evaluate(left, env), self.evaluate(right, env), expr.line)

            case BitwiseOpNode(left=left, operator=op, right=right):
                return self.bitwise(op, self.evaluate(left, env), self.evaluate(right, env), expr.line)

            case LogicalOpNode(left=left, operator="&&", right=right):
                if not is_truthy(self.evaluate(left, env)):
                    return RuntimeValue.boolean(False)
                return RuntimeValue.boolean(is_truthy(self.evaluate(right, env)))

            case LogicalOpNode(left=left, operator="||", right=right):
                if is_truthy(self.evaluate(left, env)):
                    return RuntimeValue.boolean(True)
                return RuntimeValue.boolean(is_truthy(self.evaluate(right, env)))

            case LogicalOpNode(operator=op):
                raise RuntimeFault(f"Unsupported logical operator: {op}", expr.line)

            case UnaryOpNode(operator=op, operand=operand):
                return self.unary(op, self.evaluate(operand, env), expr.line)

            case IncrementNode(target=target, operator=op, is_prefix=is_prefix):
                return self.increment(target, op, is_prefix, env, expr.line)

            case FunctionCallNode(callee=VariableNode(name=name), arguments=args):
                values = [self.evaluate(arg, env) for arg in args]
                return self.call_function(name, values, expr.line)

            case FunctionCallNode():
                raise RuntimeFault("Only named functions can be called.", expr.line)

            case InputNode(prompt=prompt):
                if prompt is not None:
                    self.output.write(format_value(self.evaluate(prompt, env)))
                    self.output.flush()
                return convert_input(self.input_stream.readline().rstrip("\r\n"))

            case ArrayLiteralNode(elements=elements):
                return RuntimeValue.array(self.evaluate(e, env) for e in elements)

            case ArrayIndexNode(array=array, index=index):
                items = self.array_items(self.evaluate(array, env), expr.line)
                position = self.checked_index(self.evaluate(index, env), len(items), expr.line)
                return items[position]

            case ArrayAssignmentNode(array=VariableNode(name=name), index=index, value=value):
                position_value = self.evaluate(index, env)
                new_value = self.evaluate(value, env)
                return self.store_element(name, position_value, new_value, env, expr.line)

            case ArrayAssignmentNode():
                raise RuntimeFault(
                    "Assigning to an element of a non-variable array is not supported.", expr.line
                )

            case AssignmentNode(name=name, value=value):
                return env.assign(name, self.evaluate(value, env), expr.line)

            case _:
                assert_never(expr)

    @staticmethod
    def literal(value_type: str, value) -> RuntimeValue:
        match value_type:
            case "int":
                return RuntimeValue.integer(value)
            case "float":
                return RuntimeValue.floating(value)
            case "string" | "char":
                return RuntimeValue.string(value)
            case "bool":
                return RuntimeValue.boolean(value)
            case _:
                return RuntimeValue.void()

    @staticmethod
    def binary(op: str, left: RuntimeValue, right: RuntimeValue, line: int) -> RuntimeValue:
        if op in ("==", "!="):
            equal = values_equal(left, right)
            return RuntimeValue.boolean(equal if op == "==" else not equal)

        if op == "+" and ValueKind.STRING in (left.kind, right.kind):
            return RuntimeValue.string(concat_text(left) + concat_text(right))

        if op in COMPARISONS:
            if (left.is_number and right.is_number) or (left.kind == right.kind and left.kind != ValueKind.VOID):
                return RuntimeValue.boolean(COMPARISONS[op](ordering_key(left), ordering_key(right)))
            raise RuntimeFault(f"Cannot compare {left.kind} and {right.kind}.", line)

        if not (left.is_number and right.is_number):
            raise RuntimeFault(f"Operator '{op}' cannot be applied to {left.kind} and {right.kind}.", line)

        both_ints = left.kind == right.kind == ValueKind.INTEGER
        match op:
            case "+" | "-" | "*":
                if both_ints:
                    return RuntimeValue.integer(ARITHMETIC[op](left.value, right.value))
                return RuntimeValue.floating(ARITHMETIC[op](left.as_float(), right.as_float()))
            case "/":
                if right.as_float() == 0:
                    raise RuntimeFault("Division by zero.", line)
                if both_ints:
                    return RuntimeValue.integer(trunc_div(left.value, right.value))
                return RuntimeValue.floating(left.as_float() / right.as_float())
            case "%":
                if not both_ints:
                    raise RuntimeFault("Modulo on floats is not supported.", line)
                if right.value == 0:
                    raise RuntimeFault("Modulo by zero.", line)
                return RuntimeValue.integer(c_mod(left.value, right.value))
            case _:
                raise RuntimeFault(f"Unsupported binary operator: {op}", line)

    @staticmethod
    def bitwise(op: str, left: RuntimeValue, right: RuntimeValue, line: int) -> RuntimeValue:
        if left.kind != ValueKind.INTEGER or right.kind != ValueKind.INTEGER:
            raise RuntimeFault(f"Bitwise operator '{op}' requires integers.", line)
        match op:
            case "&" | "|" | "^":
                return RuntimeValue.integer(BITWISE[op](left.value, right.value))
            # Shift counts use the low six bits, as 64-bit hardware does.
            case "<<":
                return RuntimeValue.integer(left.value << (right.value & 63))
            case ">>":
                return RuntimeValue.integer(left.value >> (right.value & 63))
            case _:
                raise RuntimeFault(f"Unsupported bitwise operator: {op}", line)

    @staticmethod
    def unary(op: str, operand: RuntimeValue, line: int) -> RuntimeValue:
        match op:
            case "!":
                return RuntimeValue.boolean(not is_truthy(operand))
            case "-" if operand.kind == ValueKind.INTEGER:
                return RuntimeValue.integer(-operand.value)
            case "-" if operand.kind == ValueKind.FLOAT:
                return RuntimeValue.floating(-operand.value)
            case "~" if operand.kind == ValueKind.INTEGER:
                return RuntimeValue.integer(~operand.value)
            case _:
                raise RuntimeFault(f"Cannot apply unary '{op}' to {operand.kind}.", line)

    def increment(
        self, target: Expression, op: str, is_prefix: bool, env: Environment, line: int
    ) -> RuntimeValue:
        step = 1 if op == "++" else -1

        def bumped(old: RuntimeValue) -> RuntimeValue:
            if old.kind == ValueKind.INTEGER:
                return RuntimeValue.integer(old.value + step)
            if old.kind == ValueKind.FLOAT:
                return RuntimeValue.floating(old.value + step)
            raise RuntimeFault(f"Cannot apply '{op}' to {old.kind}.", line)

        match target:
            case VariableNode(name=name):
                old = env.get(name, line)
                new = env.assign(name, bumped(old), line)
            case ArrayIndexNode(array=VariableNode(name=name), index=index):
                position = self.evaluate(index, env)
                items = self.array_items(env.get(name, line), line)
                old = items[self.checked_index(position, len(items), line)]
                new = self.store_element(name, position, bumped(old), env, line)
            case _:
                raise RuntimeFault(f"Invalid '{op}' target.", line)
        return new if is_prefix else old

    def call_function(self, name: str, args: List[RuntimeValue], line: int) -> RuntimeValue:
        decl = self.functions.get(name)
        if decl is None:
            raise RuntimeFault(f"Undefined function '{name}'.", line)
        if len(args) != len(decl.parameters):
            raise RuntimeFault(
                f"Function '{name}' expects {len(decl.parameters)} arguments, got {len(args)}.", line
            )

        frame = Environment(parent=self.globals)
        for param, arg in zip(decl.parameters, args):
            frame.define(param.name, arg, param.param_type)
        logger.debug("call %s(%s)", name, ", ".join(format_value(a) for a in args))

        try:
            result = self.execute_statement(decl.body, frame)
        except RecursionError as err:
            raise RuntimeFault(f"Stack overflow in call to '{name}'.", line) from err

        if result.signal == Signal.RETURN:
            return coerce(result.value, decl.return_type)
        return RuntimeValue.void()

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    @staticmethod
    def array_items(value: RuntimeValue, line: int):
        if value.kind != ValueKind.ARRAY:
            raise RuntimeFault(f"Cannot index a value of kind {value.kind}.", line)
        return value.value

    @staticmethod
    def checked_index(index: RuntimeValue, length: int, line: int) -> int:
        if index.kind != ValueKind.INTEGER:
            raise RuntimeFault(f"Array index must be an integer, got {index.kind}.", line)
        if not 0 <= index.value < length:
            raise RuntimeFault(f"Array index {index.value} out of bounds (size {length}).", line)
        return index.value

    def store_element(
        self, name: str, index: RuntimeValue, value: RuntimeValue, env: Environment, line: int
    ) -> RuntimeValue:
        """Replace one element of the array held by `name` and return it as stored."""
        items = list(self.array_items(env.get(name, line), line))
        position = self.checked_index(index, len(items), line)
        items[position] = value
        stored = env.assign(name, RuntimeValue.array(items), line)
        return stored.value[position]


def interpret_program(
    statements: Sequence[Statement],
    output: Optional[TextIO] = None,
    input_stream: Optional[TextIO] = None,
) -> Environment:
    """Execute a checked program and return the global environment."""
    return Interpreter(output=output, input_stream=input_stream).execute(statements)
