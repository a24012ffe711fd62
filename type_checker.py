"""Type checking for the Naruto language.

This module provides a `TypeChecker` that verifies a parsed program before
it is allowed to run. `check(statements)` either returns quietly or raises
on the first violation.

Responsibilities:
- Determine and validate expression types (literals, arithmetic with
  numeric promotion, string concatenation, comparisons, bitwise and logical
  operators, increments, calls, array literals, indexing and assignments).
- Validate statements: declarations (with duplicate detection and const
  rules), conditions, `switch` case types, `break`/`continue` placement and
  `return` types against the enclosing function.

Scopes are `SymbolTable`s linked to their parent. A block, a loop body, a
`for` header, each `switch` case and each function body get their own
table. Function bodies are checked against the global table only, because
at run time a call's environment is parented on the global environment.

Function signatures are collected in a pre-pass over the top-level
statements, so calls may refer to functions declared later in the file and
functions may call themselves.

The checker never modifies the AST. Type errors raise `TypeCheckError`;
other rule violations raise `SemanticError`.
"""

from __future__ import annotations
import logging
from typing import Optional, Dict, List, Sequence, Set, assert_never
from ast_nodes import *
from errors import SemanticError, TypeCheckError
from symbols import (
    DYNAMIC,
    EMPTY_ARRAY,
    FunctionSignature,
    SymbolTable,
    can_assign,
    element_type,
    is_array,
    is_integer,
    is_numeric,
    promote,
)

logger = logging.getLogger(__name__)

COMPARISON_OPERATORS = ("==", "!=", "<", "<=", ">", ">=")


class TypeChecker:
    def __init__(self) -> None:
        self.globals = SymbolTable()
        self.scope = self.globals
        self.functions: Dict[str, FunctionSignature] = {}
        # ids of declarations already in `functions`
        self.registered: Set[int] = set()
        self.loop_depth = 0
        # None outside of any function body
        self.return_type: Optional[str] = None

    def check(self, statements: Sequence[Statement]) -> None:
        """Check a whole program."""
        for stmt in statements:
            if isinstance(stmt, FunctionDeclarationNode):
                self.declare_function(stmt)

        try:
            for stmt in statements:
                self.check_statement(stmt)
        except RecursionError as err:
            raise SemanticError("Program is nested too deeply.", stmt.line) from err
        logger.debug("type check passed (%d statements)", len(statements))

    def declare_function(self, node: FunctionDeclarationNode) -> None:
        if node.func_name in self.functions:
            raise SemanticError(f"Function '{node.func_name}' already declared.", node.line)
        self.registered.add(id(node))
        self.functions[node.func_name] = FunctionSignature(
            name=node.func_name,
            return_type=node.return_type,
            parameters=[p.param_type for p in node.parameters],
        )
        logger.debug("registered function %s -> %s", node.func_name, node.return_type)

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def push_scope(self) -> None:
        self.scope = SymbolTable(parent=self.scope)

    def pop_scope(self) -> None:
        assert self.scope.parent is not None
        self.scope = self.scope.parent

    def check_in_scope(self, statements: Sequence[Statement]) -> None:
        self.push_scope()
        try:
            for stmt in statements:
                self.check_statement(stmt)
        finally:
            self.pop_scope()

    def check_loop_body(self, body: Statement) -> None:
        self.loop_depth += 1
        try:
            self.check_statement(body)
        finally:
            self.loop_depth -= 1

    def check_condition(self, node: Expression, construct: str) -> None:
        cond_type = self.check_expression(node)
        if cond_type != "bool":
            raise TypeCheckError(
                f"'{construct}' condition must be 'bool', got '{cond_type}'.", node.line
            )

    @staticmethod
    def check_declared_type(type_name: str, what: str, line: int) -> None:
        if type_name in ("void", "void[]"):
            raise TypeCheckError(f"{what} cannot have type '{type_name}'.", line)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def check_expression(self, node: Expression) -> str:
        """Check an expression and return its type."""
        match node:
            case LiteralNode(value_type=value_type):
                return value_type

            case VariableNode(name=name):
                return self.scope.lookup(name, node.line).type

            case BinaryOpNode(left=left, operator=op, right=right):
                return self.check_binary(op, self.check_expression(left), self.check_expression(right), node.line)

            case BitwiseOpNode(left=left, operator=op, right=right):
                left_type = self.check_expression(left)
                right_type = self.check_expression(right)
                if not is_integer(left_type) or not is_integer(right_type):
                    raise TypeCheckError(
                        f"Bitwise operator '{op}' requires integer types. "
                        f"Got '{left_type}' and '{right_type}'.",
                        node.line,
                    )
                return promote(left_type, right_type)

            case LogicalOpNode(left=left, right=right):
                self.check_expression(left)
                self.check_expression(right)
                return "bool"

            case UnaryOpNode(operator=op, operand=operand):
                operand_type = self.check_expression(operand)
                if op == "!":
                    return "bool"
                if op == "-" and is_numeric(operand_type):
                    return operand_type
                if op == "~" and is_integer(operand_type):
                    return operand_type
                raise TypeCheckError(f"Cannot apply unary '{op}' to type '{operand_type}'.", node.line)

            case IncrementNode(target=target, operator=op):
                if not isinstance(target, (VariableNode, ArrayIndexNode)):
                    raise SemanticError(f"Invalid '{op}' target.", node.line)
                if isinstance(target, VariableNode):
                    self.require_mutable(target.name, node.line)
                elif isinstance(target.array, VariableNode):
                    self.require_mutable(target.array.name, node.line)
                target_type = self.check_expression(target)
                if not is_numeric(target_type):
                    raise TypeCheckError(
                        f"Increment/decrement requires a numeric variable, got '{target_type}'.",
                        node.line,
                    )
                return target_type

            case FunctionCallNode(callee=callee, arguments=args):
                return self.check_call(callee, args, node.line)

            case InputNode(prompt=prompt):
                if prompt is not None:
                    self.check_expression(prompt)
                return DYNAMIC

            case ArrayLiteralNode(elements=elements):
                if not elements:
                    return EMPTY_ARRAY
                first_type = self.check_expression(elements[0])
                for element in elements[1:]:
                    if self.check_expression(element) != first_type:
                        raise TypeCheckError("Array elements must be of homogeneous type.", element.line)
                return first_type + "[]"

            case ArrayIndexNode(array=array, index=index):
                return self.check_index(array, index, node.line)

            case ArrayAssignmentNode(array=array, index=index, value=value):
                if isinstance(array, VariableNode):
                    self.require_mutable(array.name, node.line)
                elem_type = self.check_index(array, index, node.line)
                value_type = self.check_expression(value)
                if not can_assign(elem_type, value_type):
                    raise TypeCheckError(
                        f"Cannot assign '{value_type}' to array of '{elem_type}'.", node.line
                    )
                return elem_type

            case AssignmentNode(name=name, value=value):
                var_type = self.require_mutable(name, node.line)
                value_type = self.check_expression(value)
                if not can_assign(var_type, value_type):
                    raise TypeCheckError(
                        f"Cannot assign '{value_type}' to variable of type '{var_type}'.", node.line
                    )
                return var_type

            case _:
                assert_never(node)

    def check_binary(self, op: str, left_type: str, right_type: str, line: int) -> str:
        if op in COMPARISON_OPERATORS:
            if left_type != right_type and not (is_numeric(left_type) and is_numeric(right_type)):
                raise TypeCheckError(f"Cannot compare '{left_type}' and '{right_type}'.", line)
            if left_type == "void" and op not in ("==", "!="):
                raise TypeCheckError("Cannot order values of type 'void'.", line)
            return "bool"

        if op == "+" and (left_type == "string" or right_type == "string"):
            return "string"

        result = promote(left_type, right_type)
        if result is None:
            raise TypeCheckError(
                f"Binary operation '{op}' requires numeric operands. "
                f"Got '{left_type}' and '{right_type}'.",
                line,
            )
        return result

    def check_index(self, array: Expression, index: Expression, line: int) -> str:
        array_type = self.check_expression(array)
        index_type = self.check_expression(index)
        if not is_array(array_type):
            raise TypeCheckError(f"Cannot index non-array type '{array_type}'.", line)
        if index_type != "int":
            raise TypeCheckError(f"Array index must be 'int', got '{index_type}'.", line)
        return element_type(array_type)

    def check_call(self, callee: Expression, args: List[Expression], line: int) -> str:
        if not isinstance(callee, VariableNode):
            raise SemanticError("Only named functions can be called.", line)

        signature = self.functions.get(callee.name)
        if signature is None:
            if self.scope.exists(callee.name):
                raise SemanticError(f"'{callee.name}' is not a function.", line)
            raise SemanticError(f"Undefined function '{callee.name}'.", line)

        if len(args) != len(signature.parameters):
            raise TypeCheckError(
                f"Function '{callee.name}' expects {len(signature.parameters)} arguments, got {len(args)}.",
                line,
            )
        for position, (expected, arg) in enumerate(zip(signature.parameters, args), start=1):
            arg_type = self.check_expression(arg)
            if not can_assign(expected, arg_type):
                raise TypeCheckError(
                    f"Argument {position} of '{callee.name}': expected '{expected}', got '{arg_type}'.",
                    arg.line,
                )
        return signature.return_type

    def require_mutable(self, name: str, line: int) -> str:
        """Return the declared type of an assignable variable."""
        symbol = self.scope.lookup(name, line)
        if symbol.is_const:
            raise SemanticError(f"Cannot assign to constant '{name}'.", line)
        return symbol.type

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def check_statement(self, node: Statement) -> None:
        """Check type correctness of a statement."""
        match node:
            case ExpressionStatementNode(expression=expr) | PrintStatementNode(expression=expr):
                self.check_expression(expr)

            case VariableDeclarationNode(var_type=var_type, var_name=name, init_value=init, is_const=is_const):
                self.check_declared_type(var_type, f"Variable '{name}'", node.line)
                if init is not None:
                    init_type = self.check_expression(init)
                    if not can_assign(var_type, init_type):
                        raise TypeCheckError(
                            f"Cannot initialize '{name}' of type '{var_type}' with '{init_type}'.",
                            node.line,
                        )
                elif is_const:
                    raise SemanticError(f"Constant '{name}' must be initialized.", node.line)
                self.scope.declare(name, var_type, is_const, node.line)

            case BlockNode(statements=stmts):
                self.check_in_scope(stmts)

            case IfStatementNode(condition=cond, then_block=then_block, else_block=else_block):
                self.check_condition(cond, "if")
                self.check_statement(then_block)
                if else_block is not None:
                    self.check_statement(else_block)

            case SwitchStatementNode(value=value, cases=cases):
                switch_type = self.check_expression(value)
                for case in cases:
                    if case.condition is not None:
                        case_type = self.check_expression(case.condition)
                        if case_type != switch_type:
                            raise TypeCheckError(
                                f"Case type '{case_type}' does not match switch type '{switch_type}'.",
                                case.line,
                            )
                    self.check_in_scope(case.statements)

            case WhileStatementNode(condition=cond, body=body):
                self.check_condition(cond, "while")
                self.check_loop_body(body)

            case ForStatementNode(initializer=init, condition=cond, increment=incr, body=body):
                self.push_scope()
                try:
                    if init is not None:
                        self.check_statement(init)
                    if cond is not None:
                        self.check_condition(cond, "for")
                    if incr is not None:
                        self.check_expression(incr)
                    self.check_loop_body(body)
                finally:
                    self.pop_scope()

            case BreakStatementNode():
                if self.loop_depth == 0:
                    raise SemanticError("'break' outside of loop.", node.line)

            case ContinueStatementNode():
                if self.loop_depth == 0:
                    raise SemanticError("'continue' outside of loop.", node.line)

            case ReturnStatementNode(expression=None):
                if self.return_type is None:
                    raise SemanticError("'return' outside of function.", node.line)
                if self.return_type != "void":
                    raise TypeCheckError(
                        f"Non-void function must return a value of type '{self.return_type}'.",
                        node.line,
                    )

            case ReturnStatementNode(expression=expr):
                if self.return_type is None:
                    raise SemanticError("'return' outside of function.", node.line)
                expr_type = self.check_expression(expr)
                if not can_assign(self.return_type, expr_type):
                    raise TypeCheckError(
                        f"Return type mismatch. Expected '{self.return_type}', got '{expr_type}'.",
                        node.line,
                    )

            case FunctionDeclarationNode():
                self.check_function(node)

            case _:
                assert_never(node)

    def check_function(self, node: FunctionDeclarationNode) -> None:
        if id(node) not in self.registered:
            # Nested declaration, not seen by the top-level pre-pass.
            self.declare_function(node)

        saved = (self.scope, self.loop_depth, self.return_type)
        self.scope = SymbolTable(parent=self.globals)
        self.loop_depth = 0
        self.return_type = node.return_type
        try:
            for param in node.parameters:
                self.check_declared_type(param.param_type, f"Parameter '{param.name}'", node.line)
                self.scope.declare(param.name, param.param_type, line=node.line)
            self.check_statement(node.body)
        finally:
            self.scope, self.loop_depth, self.return_type = saved
