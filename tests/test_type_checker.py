import pytest
from main import lex, parse_tokens
from type_checker import TypeChecker
from errors import SemanticError, TypeCheckError
from symbols import can_assign, promote, SymbolTable


def _type_check_program(src):
    statements = parse_tokens(lex(src))
    TypeChecker().check(statements)
    return statements


def test_type_checker_accepts_valid_functions():
    _type_check_program("function int add(int a, int b) { return a + b; } int r = add(1, 2);")


def test_type_checker_rejects_void_returning_value():
    with pytest.raises(TypeCheckError):
        _type_check_program("function void foo() { return 1; }")


def test_type_checker_rejects_missing_return_value():
    with pytest.raises(TypeCheckError):
        _type_check_program("function int bad() { return; }")


def test_type_checker_checks_call_signatures():
    with pytest.raises(TypeCheckError, match="expects 2 arguments"):
        _type_check_program("function int add(int a, int b) { return a + b; } print add(1);")
    with pytest.raises(TypeCheckError, match="Argument 1"):
        _type_check_program('function int id(int a) { return a; } print id("x");')


def test_functions_may_be_called_before_declaration_and_recursively():
    _type_check_program(
        """
        print fact(5);
        function int fact(int n) { if (n <= 1) { return 1; } return n * fact(n - 1); }
        """
    )


def test_undefined_names():
    with pytest.raises(SemanticError, match="Undefined variable"):
        _type_check_program("print y;")
    with pytest.raises(SemanticError, match="Undefined function"):
        _type_check_program("print nope();")
    with pytest.raises(SemanticError, match="not a function"):
        _type_check_program("int f = 1; print f();")


def test_duplicate_declarations():
    with pytest.raises(SemanticError, match="already declared"):
        _type_check_program("int x = 1; int x = 2;")
    with pytest.raises(SemanticError, match="already declared"):
        _type_check_program("function void f() {} function void f() {}")
    with pytest.raises(SemanticError, match="already declared"):
        _type_check_program("function void f(int a, int a) {}")


def test_shadowing_in_inner_block_is_allowed():
    _type_check_program("int x = 1; { string x = \"s\"; print x; } print x;")


def test_block_locals_do_not_leak():
    with pytest.raises(SemanticError):
        _type_check_program("{ int inner = 1; } print inner;")


def test_function_body_sees_globals_but_not_locals_of_caller():
    _type_check_program("int g = 1; function int f() { return g; }")
    with pytest.raises(SemanticError):
        _type_check_program("{ int local = 1; function int f() { return local; } }")


@pytest.mark.parametrize(
    "src",
    [
        "byte b = 10; double d = b;",
        "byte b2 = 300;",
        "int i = 1; long l = i; float f = l; double d = f;",
        "float f = 1;",
        "short s = 1 + 2;",
        "double d = 1.5;",
        "int[] a = [];",
        "double[] ds = [];",
        "int x = input();",
        "string s = input(\"name? \");",
        "string s = \"n=\" + 4;",
        "string s = 1.5 + \"x\";",
        "bool b = 1 < 2.0;",
        "bool b = \"a\" == \"b\";",
        "long l = 1 << 3;",
        "bool b = 1 && \"x\";",
        "char c = 'a';",
    ],
)
def test_accepted_programs(src):
    _type_check_program(src)


@pytest.mark.parametrize(
    "src",
    [
        "int x = 1.5;",
        "long l = 1; int i = l;",
        "string s = 1;",
        "int x = \"1\";",
        "bool b = 1 < \"x\";",
        "double d = 1.0; long l = d << 1;",
        "int[] a = [1, 2.5];",
        "int[] a = [1]; print a[1.0];",
        "int x = 1; print x[0];",
        "int[] a = [1]; a[0] = \"s\";",
        "bool b = true; print -b;",
        "double d = 1.0; print ~d;",
        "string s = \"a\"; s++;",
        "if (1) { }",
        "while (1) { }",
        "for (; 1; ) { }",
        "int x = 1; switch (x) { case 1.0: print 1; }",
        "int x = 1; switch (x) { case \"1\": print 1; }",
        "string s = \"a\" - \"b\";",
        "function void v() { } bool b = v() < v();",
    ],
)
def test_rejected_type_errors(src):
    with pytest.raises(TypeCheckError):
        _type_check_program(src)


@pytest.mark.parametrize(
    "src",
    [
        "break;",
        "continue;",
        "if (true) { break; }",
        "return 1;",
        "while (true) { function void f() { break; } }",
        "const int c = 1; c = 2;",
        "const int c = 1; c++;",
        "const int[] a = [1]; a[0] = 2;",
        "const int[] a = [1, 2]; a[0]++;",
        "const int[] a = [1, 2]; --a[1];",
        "function int f() { return 1; } function void g() { function int f() { return 2; } }",
        "const int c;",
        "void v;",
        "function void f(void p) {}",
    ],
)
def test_rejected_semantic_errors(src):
    with pytest.raises(SemanticError):
        _type_check_program(src)


def test_break_and_continue_inside_loops():
    _type_check_program(
        """
        int i = 0;
        while (i < 10) { i++; if (i == 2) { continue; } if (i == 5) { break; } }
        for (int j = 0; j < 3; j++) { switch (j) { case 1: break; default: continue; } }
        """
    )


def test_switch_case_type_must_match_exactly():
    _type_check_program('string s = "a"; switch (s) { case "a": print 1; default: print 2; }')


def test_checker_does_not_mutate_ast_and_is_idempotent():
    src = "int x = 1; function int f(int a) { return a * 2; } print f(x) + 1;"
    statements = parse_tokens(lex(src))
    before = repr(statements)
    TypeChecker().check(statements)
    TypeChecker().check(statements)
    assert repr(statements) == before


def test_can_assign_lattice():
    chain = ["byte", "short", "int", "long", "float", "double"]
    for t in chain + ["bool", "char", "string", "int[]"]:
        assert can_assign(t, t)
    for i, lower in enumerate(chain):
        for higher in chain[i:]:
            assert can_assign(higher, lower)
    for t in chain + ["bool", "char"]:
        assert not can_assign("string", t)
    assert not can_assign("int", "long")
    assert can_assign("byte", "int")
    assert not can_assign("float", "double")
    assert can_assign("int[]", "array")
    assert not can_assign("int", "array")
    assert can_assign("bool", "dynamic")


def test_promote():
    assert promote("byte", "int") == "int"
    assert promote("double", "long") == "double"
    assert promote("short", "short") == "short"
    assert promote("int", "string") is None


def test_symbol_table_scoping():
    outer = SymbolTable()
    outer.declare("x", "int")
    inner = SymbolTable(parent=outer)
    inner.declare("x", "string")
    assert inner.lookup("x").type == "string"
    assert outer.lookup("x").type == "int"
    assert inner.exists("x") and not inner.exists("y")
    with pytest.raises(SemanticError):
        outer.declare("x", "int")
    with pytest.raises(SemanticError):
        inner.lookup("missing")


def test_very_long_operator_chain_is_rejected_not_crashing():
    # Left-associative chains parse iteratively but check recursively.
    src = "int x = 1" + " + 1" * 5000 + ";"
    with pytest.raises(SemanticError, match="nested too deeply"):
        _type_check_program(src)


def test_nested_function_with_a_fresh_name_is_accepted():
    _type_check_program("function int outer() { function int inner() { return 2; } return inner(); }")
