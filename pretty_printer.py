"""Pretty-printer for the AST.

Provides `PrettyPrinter.print_ast(node, indent, prefix)` which renders an
AST into a readable multi-line string, `PrettyPrinter.print_program` for a
whole statement list, and `PrettyPrinter.print_surface(node)` which returns
a compact one-line, source-like rendering used for graph labels. The
printer is intended for debugging, tests and development rather than for
producing final source code.

Examples:
    PrettyPrinter.print_program(statements)
"""

from __future__ import annotations
from typing import Sequence
from ast_nodes import *


class PrettyPrinter:
    @staticmethod
    def print_program(statements: Sequence[Statement]) -> str:
        lines = ["Program"]
        for i, stmt in enumerate(statements):
            lines.append(PrettyPrinter.print_ast(stmt, 4, f"stmt[{i}]: "))
        return "\n".join(lines)

    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print AST and return as string."""
        lines = []
        indent_str = " " * indent

        if not isinstance(node, ASTNode):
            lines.append(f"{indent_str}{prefix}{node}")
            return "\n".join(lines)

        match node:
            case LiteralNode(value_type=vt, value=v):
                lines.append(f"{indent_str}{prefix}Literal({vt}: {v!r})")

            case VariableNode(name=n):
                lines.append(f"{indent_str}{prefix}Variable({n})")

            case BinaryOpNode(left=left, operator=op, right=right):
                lines.append(f"{indent_str}{prefix}BinaryOp({op})")
                lines.append(PrettyPrinter.print_ast(left, indent + 2, "left: "))
                lines.append(PrettyPrinter.print_ast(right, indent + 2, "right: "))

            case BitwiseOpNode(left=left, operator=op, right=right):
                lines.append(f"{indent_str}{prefix}BitwiseOp({op})")
                lines.append(PrettyPrinter.print_ast(left, indent + 2, "left: "))
                lines.append(PrettyPrinter.print_ast(right, indent + 2, "right: "))

            case LogicalOpNode(left=left, operator=op, right=right):
                lines.append(f"{indent_str}{prefix}LogicalOp({op})")
                lines.append(PrettyPrinter.print_ast(left, indent + 2, "left: "))
                lines.append(PrettyPrinter.print_ast(right, indent + 2, "right: "))

            case UnaryOpNode(operator=op, operand=operand):
                lines.append(f"{indent_str}{prefix}UnaryOp({op})")
                lines.append(PrettyPrinter.print_ast(operand, indent + 2))

            case IncrementNode(target=target, operator=op, is_prefix=is_prefix):
                fixity = "prefix" if is_prefix else "postfix"
                lines.append(f"{indent_str}{prefix}Increment({op}, {fixity})")
                lines.append(PrettyPrinter.print_ast(target, indent + 2, "target: "))

            case FunctionCallNode(callee=callee, arguments=args):
                func_name = callee.name if isinstance(callee, VariableNode) else "anonymous"
                lines.append(f"{indent_str}{prefix}FunctionCall({func_name})")
                for i, arg in enumerate(args):
                    lines.append(PrettyPrinter.print_ast(arg, indent + 4, f"arg[{i}]: "))

            case InputNode(prompt=prompt):
                lines.append(f"{indent_str}{prefix}Input")
                if prompt is not None:
                    lines.append(PrettyPrinter.print_ast(prompt, indent + 2, "prompt: "))

            case ArrayLiteralNode(elements=elements):
                lines.append(f"{indent_str}{prefix}ArrayLiteral({len(elements)})")
                for i, element in enumerate(elements):
                    lines.append(PrettyPrinter.print_ast(element, indent + 2, f"[{i}]: "))

            case ArrayIndexNode(array=arr, index=idx):
                lines.append(f"{indent_str}{prefix}ArrayIndex")
                lines.append(PrettyPrinter.print_ast(arr, indent + 2, "array: "))
                lines.append(PrettyPrinter.print_ast(idx, indent + 2, "index: "))

            case ArrayAssignmentNode(array=arr, index=idx, value=value):
                lines.append(f"{indent_str}{prefix}ArrayAssignment")
                lines.append(PrettyPrinter.print_ast(arr, indent + 2, "array: "))
                lines.append(PrettyPrinter.print_ast(idx, indent + 2, "index: "))
                lines.append(PrettyPrinter.print_ast(value, indent + 2, "value: "))

            case AssignmentNode(name=name, value=value):
                lines.append(f"{indent_str}{prefix}Assignment({name})")
                lines.append(PrettyPrinter.print_ast(value, indent + 2, "value: "))

            case ExpressionStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}ExpressionStatement")
                lines.append(PrettyPrinter.print_ast(expr, indent + 2))

            case PrintStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}Print")
                lines.append(PrettyPrinter.print_ast(expr, indent + 2))

            case VariableDeclarationNode(var_name=vname, var_type=vtype, init_value=init, is_const=is_const):
                const_str = "const " if is_const else ""
                init_str = " = ..." if init else ""
                lines.append(f"{indent_str}{prefix}VarDecl({const_str}{vname}: {vtype}{init_str})")
                if init:
                    lines.append(PrettyPrinter.print_ast(init, indent + 2, "init: "))

            case BlockNode(statements=stmts):
                lines.append(f"{indent_str}{prefix}Block")
                for i, stmt in enumerate(stmts):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 4, f"stmt[{i}]: "))

            case IfStatementNode(condition=cond, then_block=then_b, else_block=else_b):
                lines.append(f"{indent_str}{prefix}IfStatement")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                lines.append(PrettyPrinter.print_ast(then_b, indent + 4, "then: "))
                if else_b:
                    lines.append(PrettyPrinter.print_ast(else_b, indent + 4, "else: "))

            case SwitchStatementNode(value=value, cases=cases):
                lines.append(f"{indent_str}{prefix}SwitchStatement")
                lines.append(PrettyPrinter.print_ast(value, indent + 4, "value: "))
                for case in cases:
                    if case.condition is None:
                        lines.append(f"{indent_str}    default:")
                    else:
                        lines.append(PrettyPrinter.print_ast(case.condition, indent + 4, "case: "))
                    for i, stmt in enumerate(case.statements):
                        lines.append(PrettyPrinter.print_ast(stmt, indent + 8, f"stmt[{i}]: "))

            case WhileStatementNode(condition=cond, body=body):
                lines.append(f"{indent_str}{prefix}WhileStatement")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                lines.append(PrettyPrinter.print_ast(body, indent + 4, "body: "))

            case ForStatementNode(initializer=init, condition=cond, increment=incr, body=body):
                lines.append(f"{indent_str}{prefix}ForStatement")
                if init:
                    lines.append(PrettyPrinter.print_ast(init, indent + 4, "init: "))
                if cond:
                    lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                if incr:
                    lines.append(PrettyPrinter.print_ast(incr, indent + 4, "increment: "))
                lines.append(PrettyPrinter.print_ast(body, indent + 4, "body: "))

            case BreakStatementNode():
                lines.append(f"{indent_str}{prefix}Break")

            case ContinueStatementNode():
                lines.append(f"{indent_str}{prefix}Continue")

            case ReturnStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}Return")
                if expr:
                    lines.append(PrettyPrinter.print_ast(expr, indent + 2, "expr: "))

            case FunctionDeclarationNode(func_name=name, parameters=params, body=body):
                args = ", ".join(f"{p.name}: {p.param_type}" for p in params)
                lines.append(f"{indent_str}{prefix}FunctionDecl({name} -> {node.return_type}, params=[{args}])")
                lines.append(PrettyPrinter.print_ast(body, indent + 4, "body: "))

            case _:
                lines.append(f"{indent_str}{prefix}Unknown node type: {type(node)}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def print_surface(node: ASTNode) -> str:
        """Return a compact, surface-syntax-like one-line representation of an AST node.

        Used for Graphviz labels, where `x = a + 1` reads better than a subtree.
        """
        if node is None:
            return ""

        def _p(n: ASTNode) -> str:
            return PrettyPrinter.print_surface(n) if isinstance(n, ASTNode) else str(n)

        match node:
            case LiteralNode(value_type="string", value=v):
                return f'"{v}"'
            case LiteralNode(value_type="char", value=v):
                return f"'{v}'"
            case LiteralNode(value_type="bool", value=v):
                return "true" if v else "false"
            case LiteralNode(value_type="void"):
                return "null"
            case LiteralNode(value=v):
                return str(v)
            case VariableNode(name=n):
                return n
            case BinaryOpNode(left=l, operator=op, right=r) | BitwiseOpNode(
                left=l, operator=op, right=r
            ) | LogicalOpNode(left=l, operator=op, right=r):
                return f"{_p(l)} {op} {_p(r)}"
            case UnaryOpNode(operator=op, operand=operand):
                return f"{op}{_p(operand)}"
            case IncrementNode(target=target, operator=op, is_prefix=True):
                return f"{op}{_p(target)}"
            case IncrementNode(target=target, operator=op):
                return f"{_p(target)}{op}"
            case FunctionCallNode(callee=callee, arguments=args):
                args_s = ", ".join(_p(a) for a in args)
                return f"{_p(callee)}({args_s})"
            case InputNode(prompt=prompt):
                return f"input({_p(prompt)})"
            case ArrayLiteralNode(elements=elements):
                return "[" + ", ".join(_p(e) for e in elements) + "]"
            case ArrayIndexNode(array=arr, index=idx):
                return f"{_p(arr)}[{_p(idx)}]"
            case ArrayAssignmentNode(array=arr, index=idx, value=value):
                return f"{_p(arr)}[{_p(idx)}] = {_p(value)}"
            case AssignmentNode(name=name, value=value):
                return f"{name} = {_p(value)}"
            case ExpressionStatementNode(expression=expr):
                return _p(expr)
            case PrintStatementNode(expression=expr):
                return f"print {_p(expr)}"
            case VariableDeclarationNode(var_type=vt, var_name=vn, init_value=init, is_const=is_const):
                decl = f"{'const ' if is_const else ''}{vt} {vn}"
                if init:
                    return f"{decl} = {_p(init)}"
                return decl
            case ReturnStatementNode(expression=expr):
                if expr:
                    return f"return {_p(expr)}"
                return "return"
            case BreakStatementNode():
                return "break"
            case ContinueStatementNode():
                return "continue"
            case WhileStatementNode(condition=cond):
                return f"while ({_p(cond)})"
            case ForStatementNode(initializer=init, condition=cond, increment=incr):
                return f"for ({_p(init)}; {_p(cond)}; {_p(incr)})"
            case IfStatementNode(condition=cond):
                return f"if ({_p(cond)})"
            case SwitchStatementNode(value=value):
                return f"switch ({_p(value)})"
            case FunctionDeclarationNode(func_name=fn, return_type=rt, parameters=params):
                args = ", ".join(f"{p.param_type} {p.name}" for p in params)
                return f"function {rt} {fn}({args})"
            case BlockNode():
                return "{...}"
            case _:
                s = PrettyPrinter.print_ast(node)
                return " ".join(line.strip() for line in s.splitlines())
