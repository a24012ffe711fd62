"""Tests for ast_viz: ensure a Digraph is produced and contains node labels."""

import graphviz

from tests.utils import parse_text
from ast_viz import render_ast_dot


def test_ast_viz_dot_source():
    stmts = parse_text("int x = 1; x = x + 2; print x;")
    dot = render_ast_dot(stmts)
    src = dot.source
    assert isinstance(dot, graphviz.Digraph)
    assert "PROGRAM" in src
    assert "VAR_DECL" in src
    assert "BINARY_OP" in src
    assert "x = x + 2" in src
    assert "stmt[2]" in src


def test_functions_are_clustered():
    stmts = parse_text("function int twice(int a) { return a * 2; } print twice(2);")
    src = render_ast_dot(stmts).source
    assert "cluster_twice" in src
    assert "function: twice" in src


def test_switch_cases_and_escaping():
    stmts = parse_text('switch (1) { case 1: print "<a&b>"; default: print 0; }')
    src = render_ast_dot(stmts, use_surface=True).source
    assert "CASE" in src and "DEFAULT" in src
    assert "&lt;a&amp;b&gt;" in src


def test_surface_text_can_be_omitted():
    stmts = parse_text("print 12345;")
    src = render_ast_dot(stmts, use_surface=False).source
    assert "12345" not in src
    assert "PRINT_STMT" in src
