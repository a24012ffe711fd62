"""AST node definitions for the Naruto language.

This module defines the concrete AST node dataclasses built by the parser
and read by the type checker, the interpreter and the debugging renderers.
Each node is a dataclass that carries the relevant information (an
operator, child nodes, names, declared types). The `NodeType` enum names
node kinds and is used by the pretty-printer and the JSON/Graphviz dumps.

Conventions:
- All AST node dataclasses inherit from `ASTNode` which records the node
    kind (`NodeType`) and the source `line` it started on.
- The node set is closed. `Expression` and `Statement` are unions over every
    variant; traversals `match` on the node class and finish with
    `assert_never` so a variant that is not handled is reported by a static
    type checker instead of being skipped silently.
- Each node owns its children. The parser builds the tree once; nothing
    rewrites it afterwards.
- Declared types are plain strings: `int`, `double`, `string`, ... with a
    trailing `[]` for arrays (`int[]`).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union, List


class NodeType(Enum):
    LITERAL = auto()
    VARIABLE = auto()
    BINARY_OP = auto()
    BITWISE_OP = auto()
    LOGICAL_OP = auto()
    UNARY_OP = auto()
    INCREMENT = auto()
    FUNC_CALL = auto()
    INPUT = auto()
    ARRAY_LITERAL = auto()
    ARRAY_INDEX = auto()
    ARRAY_ASSIGNMENT = auto()
    ASSIGNMENT = auto()
    EXPR_STMT = auto()
    PRINT_STMT = auto()
    VAR_DECL = auto()
    BLOCK = auto()
    IF_STMT = auto()
    SWITCH_STMT = auto()
    WHILE_STMT = auto()
    FOR_STMT = auto()
    BREAK_STMT = auto()
    CONTINUE_STMT = auto()
    RETURN_STMT = auto()
    FUNC_DECL = auto()

    def __str__(self) -> str:
        return self.name


# Base AST Node
@dataclass
class ASTNode:
    type: NodeType
    line: int = 0


# Expression Nodes
@dataclass
class LiteralNode(ASTNode):
    type: NodeType = NodeType.LITERAL
    # Static type of the literal: int, float, string, char, bool or void (null)
    value_type: str = "int"
    value: Union[int, float, str, bool, None] = 0


@dataclass
class VariableNode(ASTNode):
    type: NodeType = NodeType.VARIABLE
    name: str = ""


@dataclass
class BinaryOpNode(ASTNode):
    """Arithmetic (+ - * / %) and comparison (== != < <= > >=)."""

    type: NodeType = NodeType.BINARY_OP
    left: Expression = field(default_factory=lambda: LiteralNode())
    operator: str = ""
    right: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class BitwiseOpNode(ASTNode):
    type: NodeType = NodeType.BITWISE_OP
    left: Expression = field(default_factory=lambda: LiteralNode())
    operator: str = ""
    right: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class LogicalOpNode(ASTNode):
    type: NodeType = NodeType.LOGICAL_OP
    left: Expression = field(default_factory=lambda: LiteralNode())
    operator: str = ""
    right: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class UnaryOpNode(ASTNode):
    type: NodeType = NodeType.UNARY_OP
    operator: str = ""
    operand: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class IncrementNode(ASTNode):
    type: NodeType = NodeType.INCREMENT
    target: Expression = field(default_factory=lambda: VariableNode())
    operator: str = "++"
    is_prefix: bool = False


@dataclass
class FunctionCallNode(ASTNode):
    type: NodeType = NodeType.FUNC_CALL
    callee: Expression = field(default_factory=lambda: VariableNode())
    arguments: List[Expression] = field(default_factory=list)


@dataclass
class InputNode(ASTNode):
    type: NodeType = NodeType.INPUT
    prompt: Optional[Expression] = None


@dataclass
class ArrayLiteralNode(ASTNode):
    type: NodeType = NodeType.ARRAY_LITERAL
    elements: List[Expression] = field(default_factory=list)


@dataclass
class ArrayIndexNode(ASTNode):
    type: NodeType = NodeType.ARRAY_INDEX
    array: Expression = field(default_factory=lambda: VariableNode())
    index: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class ArrayAssignmentNode(ASTNode):
    type: NodeType = NodeType.ARRAY_ASSIGNMENT
    array: Expression = field(default_factory=lambda: VariableNode())
    index: Expression = field(default_factory=lambda: LiteralNode())
    value: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class AssignmentNode(ASTNode):
    type: NodeType = NodeType.ASSIGNMENT
    name: str = ""
    value: Expression = field(default_factory=lambda: LiteralNode())


# Statement Nodes
@dataclass
class ExpressionStatementNode(ASTNode):
    type: NodeType = NodeType.EXPR_STMT
    expression: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class PrintStatementNode(ASTNode):
    type: NodeType = NodeType.PRINT_STMT
    expression: Expression = field(default_factory=lambda: LiteralNode())


@dataclass
class VariableDeclarationNode(ASTNode):
    type: NodeType = NodeType.VAR_DECL
    var_type: str = "int"
    var_name: str = ""
    init_value: Optional[Expression] = None
    is_const: bool = False


@dataclass
class BlockNode(ASTNode):
    type: NodeType = NodeType.BLOCK
    statements: List[Statement] = field(default_factory=list)


@dataclass
class IfStatementNode(ASTNode):
    type: NodeType = NodeType.IF_STMT
    condition: Expression = field(default_factory=lambda: LiteralNode())
    then_block: Statement = field(default_factory=lambda: BlockNode())
    else_block: Optional[Statement] = None


@dataclass
class SwitchCase:
    # None marks the default case
    condition: Optional[Expression] = None
    statements: List[Statement] = field(default_factory=list)
    line: int = 0


@dataclass
class SwitchStatementNode(ASTNode):
    type: NodeType = NodeType.SWITCH_STMT
    value: Expression = field(default_factory=lambda: LiteralNode())
    cases: List[SwitchCase] = field(default_factory=list)


@dataclass
class WhileStatementNode(ASTNode):
    type: NodeType = NodeType.WHILE_STMT
    condition: Expression = field(default_factory=lambda: LiteralNode())
    body: Statement = field(default_factory=lambda: BlockNode())


@dataclass
class ForStatementNode(ASTNode):
    type: NodeType = NodeType.FOR_STMT
    initializer: Optional[Statement] = None
    condition: Optional[Expression] = None
    increment: Optional[Expression] = None
    body: Statement = field(default_factory=lambda: BlockNode())


@dataclass
class BreakStatementNode(ASTNode):
    type: NodeType = NodeType.BREAK_STMT


@dataclass
class ContinueStatementNode(ASTNode):
    type: NodeType = NodeType.CONTINUE_STMT


@dataclass
class ReturnStatementNode(ASTNode):
    type: NodeType = NodeType.RETURN_STMT
    expression: Optional[Expression] = None


@dataclass
class Parameter:
    param_type: str = "int"
    name: str = ""


@dataclass
class FunctionDeclarationNode(ASTNode):
    type: NodeType = NodeType.FUNC_DECL
    func_name: str = ""
    return_type: str = "void"
    parameters: List[Parameter] = field(default_factory=list)
    body: BlockNode = field(default_factory=lambda: BlockNode())


Expression = Union[
    LiteralNode,
    VariableNode,
    BinaryOpNode,
    BitwiseOpNode,
    LogicalOpNode,
    UnaryOpNode,
    IncrementNode,
    FunctionCallNode,
    InputNode,
    ArrayLiteralNode,
    ArrayIndexNode,
    ArrayAssignmentNode,
    AssignmentNode,
]

Statement = Union[
    ExpressionStatementNode,
    PrintStatementNode,
    VariableDeclarationNode,
    BlockNode,
    IfStatementNode,
    SwitchStatementNode,
    WhileStatementNode,
    ForStatementNode,
    BreakStatementNode,
    ContinueStatementNode,
    ReturnStatementNode,
    FunctionDeclarationNode,
]
