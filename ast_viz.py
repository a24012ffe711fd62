"""Graphviz visualization helpers for ASTs.

Provides `render_ast_dot(statements, use_surface=True)` which returns a
`graphviz.Digraph` object (not rendered). `write_and_render` writes the
file to disk and requires the Graphviz binaries.

Layout: every AST node becomes a small HTML-like table with the node kind in
bold and, optionally, a one-line source rendering of the node underneath.
Edges are labelled with the child's role (`left`, `body`, `arg[0]`, ...).
Each function declaration is drawn inside its own cluster.
"""

import html
import re
from typing import List, Optional, Sequence, Tuple
from graphviz import Digraph
from ast_nodes import *
from pretty_printer import PrettyPrinter


def _children(node: ASTNode) -> List[Tuple[str, ASTNode]]:
    """(role, child) pairs of a node, in source order."""
    match node:
        case BinaryOpNode(left=l, right=r) | BitwiseOpNode(left=l, right=r) | LogicalOpNode(left=l, right=r):
            return [("left", l), ("right", r)]
        case UnaryOpNode(operand=operand):
            return [("operand", operand)]
        case IncrementNode(target=target):
            return [("target", target)]
        case FunctionCallNode(callee=callee, arguments=args):
            return [("callee", callee)] + [(f"arg[{i}]", a) for i, a in enumerate(args)]
        case InputNode(prompt=prompt):
            return [("prompt", prompt)] if prompt is not None else []
        case ArrayLiteralNode(elements=elements):
            return [(f"[{i}]", e) for i, e in enumerate(elements)]
        case ArrayIndexNode(array=arr, index=idx):
            return [("array", arr), ("index", idx)]
        case ArrayAssignmentNode(array=arr, index=idx, value=value):
            return [("array", arr), ("index", idx), ("value", value)]
        case AssignmentNode(value=value):
            return [("value", value)]
        case ExpressionStatementNode(expression=expr) | PrintStatementNode(expression=expr):
            return [("expr", expr)]
        case VariableDeclarationNode(init_value=init):
            return [("init", init)] if init is not None else []
        case BlockNode(statements=stmts):
            return [(f"stmt[{i}]", s) for i, s in enumerate(stmts)]
        case IfStatementNode(condition=cond, then_block=then_b, else_block=else_b):
            pairs = [("condition", cond), ("then", then_b)]
            if else_b is not None:
                pairs.append(("else", else_b))
            return pairs
        case SwitchStatementNode(value=value):
            return [("value", value)]
        case WhileStatementNode(condition=cond, body=body):
            return [("condition", cond), ("body", body)]
        case ForStatementNode(initializer=init, condition=cond, increment=incr, body=body):
            pairs = [("init", init), ("condition", cond), ("increment", incr), ("body", body)]
            return [(role, child) for role, child in pairs if child is not None]
        case ReturnStatementNode(expression=expr):
            return [("expr", expr)] if expr is not None else []
        case FunctionDeclarationNode(body=body):
            return [("body", body)]
        case _:
            return []


def _node_html(title: str, detail: Optional[str]) -> str:
    rows = f"<TR><TD><B>{html.escape(title)}</B></TD></TR>"
    if detail:
        rows += f'<TR><TD><FONT POINT-SIZE="10">{html.escape(detail)}</FONT></TD></TR>'
    return f'<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0">{rows}</TABLE>>'


class _Builder:
    def __init__(self, dot: Digraph, use_surface: bool):
        self.dot = dot
        self.use_surface = use_surface
        self.counter = 0

    def new_id(self) -> str:
        self.counter += 1
        return f"n{self.counter}"

    def emit(self, graph: Digraph, node: ASTNode) -> str:
        node_id = self.new_id()
        detail = PrettyPrinter.print_surface(node) if self.use_surface else None
        graph.node(node_id, label=_node_html(str(node.type), detail), shape="plaintext")

        for role, child in _children(node):
            child_id = self.emit(graph, child)
            graph.edge(node_id, child_id, label=role)

        if isinstance(node, SwitchStatementNode):
            for i, case in enumerate(node.cases):
                case_id = self.new_id()
                title = "DEFAULT" if case.condition is None else "CASE"
                graph.node(case_id, label=_node_html(title, None), shape="plaintext")
                graph.edge(node_id, case_id, label=f"case[{i}]")
                if case.condition is not None:
                    graph.edge(case_id, self.emit(graph, case.condition), label="match")
                for j, stmt in enumerate(case.statements):
                    graph.edge(case_id, self.emit(graph, stmt), label=f"stmt[{j}]")
        return node_id


def render_ast_dot(statements: Sequence[Statement], use_surface: bool = True) -> Digraph:
    """Return a graphviz.Digraph for a parsed program.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB")
    builder = _Builder(dot, use_surface)

    root = builder.new_id()
    dot.node(root, label=_node_html("PROGRAM", None), shape="plaintext")

    for i, stmt in enumerate(statements):
        if isinstance(stmt, FunctionDeclarationNode):
            cluster_name = f"cluster_{re.sub(r'[^0-9A-Za-z_]', '_', stmt.func_name)}"
            with dot.subgraph(name=cluster_name) as c:
                c.attr(label=f"function: {stmt.func_name}")
                c.attr(style="rounded")
                child_id = builder.emit(c, stmt)
        else:
            child_id = builder.emit(dot, stmt)
        dot.edge(root, child_id, label=f"stmt[{i}]")

    return dot


def write_and_render(
    statements: Sequence[Statement],
    out_path: str,
    fmt: str = "svg",
    use_surface: bool = True,
) -> str:
    """Write and render the AST to the given path (without extension).

    Example: write_and_render(stmts, 'out/ast', fmt='png') will create out/ast.png
    (requires Graphviz). Returns the path of the rendered file."""
    dot = render_ast_dot(statements, use_surface=use_surface)
    dot.format = fmt
    # render appends the extension itself
    return dot.render(out_path, cleanup=True)
