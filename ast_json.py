"""Convert AST nodes into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing the AST node, and `program_to_json`
for a whole statement list. Every node is encoded with its `node_type`,
its source `line` and its key fields.
"""

from typing import Any, Dict, Optional, Sequence
from ast_nodes import *


def ast_to_json(node: Optional[ASTNode]) -> Any:
    if node is None:
        return None

    data: Dict[str, Any]
    match node:
        # expressions
        case LiteralNode():
            data = {"node_type": "Literal", "value_type": node.value_type, "value": node.value}
        case VariableNode():
            data = {"node_type": "Variable", "name": node.name}
        case BinaryOpNode() | BitwiseOpNode() | LogicalOpNode():
            data = {
                "node_type": {
                    NodeType.BINARY_OP: "BinaryOp",
                    NodeType.BITWISE_OP: "BitwiseOp",
                    NodeType.LOGICAL_OP: "LogicalOp",
                }[node.type],
                "operator": node.operator,
                "left": ast_to_json(node.left),
                "right": ast_to_json(node.right),
            }
        case UnaryOpNode():
            data = {
                "node_type": "UnaryOp",
                "operator": node.operator,
                "operand": ast_to_json(node.operand),
            }
        case IncrementNode():
            data = {
                "node_type": "Increment",
                "operator": node.operator,
                "is_prefix": node.is_prefix,
                "target": ast_to_json(node.target),
            }
        case FunctionCallNode():
            data = {
                "node_type": "FunctionCall",
                "callee": ast_to_json(node.callee),
                "arguments": [ast_to_json(a) for a in node.arguments],
            }
        case InputNode():
            data = {"node_type": "Input", "prompt": ast_to_json(node.prompt)}
        case ArrayLiteralNode():
            data = {"node_type": "ArrayLiteral", "elements": [ast_to_json(e) for e in node.elements]}
        case ArrayIndexNode():
            data = {
                "node_type": "ArrayIndex",
                "array": ast_to_json(node.array),
                "index": ast_to_json(node.index),
            }
        case ArrayAssignmentNode():
            data = {
                "node_type": "ArrayAssignment",
                "array": ast_to_json(node.array),
                "index": ast_to_json(node.index),
                "value": ast_to_json(node.value),
            }
        case AssignmentNode():
            data = {"node_type": "Assignment", "name": node.name, "value": ast_to_json(node.value)}
        # statements
        case ExpressionStatementNode():
            data = {"node_type": "ExprStmt", "expression": ast_to_json(node.expression)}
        case PrintStatementNode():
            data = {"node_type": "Print", "expression": ast_to_json(node.expression)}
        case VariableDeclarationNode():
            data = {
                "node_type": "VarDecl",
                "var_name": node.var_name,
                "var_type": node.var_type,
                "is_const": node.is_const,
                "init_value": ast_to_json(node.init_value),
            }
        case BlockNode():
            data = {"node_type": "Block", "statements": [ast_to_json(s) for s in node.statements]}
        case IfStatementNode():
            data = {
                "node_type": "If",
                "condition": ast_to_json(node.condition),
                "then": ast_to_json(node.then_block),
                "else": ast_to_json(node.else_block),
            }
        case SwitchStatementNode():
            data = {
                "node_type": "Switch",
                "value": ast_to_json(node.value),
                "cases": [
                    {
                        "condition": ast_to_json(case.condition),
                        "is_default": case.condition is None,
                        "statements": [ast_to_json(s) for s in case.statements],
                    }
                    for case in node.cases
                ],
            }
        case WhileStatementNode():
            data = {
                "node_type": "While",
                "condition": ast_to_json(node.condition),
                "body": ast_to_json(node.body),
            }
        case ForStatementNode():
            data = {
                "node_type": "For",
                "initializer": ast_to_json(node.initializer),
                "condition": ast_to_json(node.condition),
                "increment": ast_to_json(node.increment),
                "body": ast_to_json(node.body),
            }
        case BreakStatementNode():
            data = {"node_type": "Break"}
        case ContinueStatementNode():
            data = {"node_type": "Continue"}
        case ReturnStatementNode():
            data = {"node_type": "Return", "expression": ast_to_json(node.expression)}
        case FunctionDeclarationNode():
            data = {
                "node_type": "FunctionDecl",
                "func_name": node.func_name,
                "return_type": node.return_type,
                "parameters": [{"type": p.param_type, "name": p.name} for p in node.parameters],
                "body": ast_to_json(node.body),
            }
        case _:
            raise TypeError(f"Cannot serialize AST node: {type(node).__name__}")

    data["line"] = node.line
    return data


def program_to_json(statements: Sequence[ASTNode]) -> Dict[str, Any]:
    return {"node_type": "Program", "statements": [ast_to_json(s) for s in statements]}
