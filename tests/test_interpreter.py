import io
import logging

import pytest
from tests.utils import parse_text, run_lines, run_text
from interpreter import Interpreter, convert_input, interpret_program
from runtime import RuntimeValue, ValueKind, Environment, wrap_int64, trunc_div, c_mod
from errors import RuntimeFault


def test_arithmetic_and_printing():
    src = """
    print 7 / 2;
    print -7 / 2;
    print -7 % 3;
    print 7.0 / 2;
    print 2 * 3 + 1;
    print 1.5 + 1;
    print true;
    print false;
    print "hi";
    print 'c';
    """
    assert run_lines(src) == ["3", "-3", "-1", "3.5", "7", "2.5", "true", "false", "hi", "c"]


def test_float_printing_uses_general_format():
    assert run_lines("print 0.1 + 0.2; print 100000.0 * 10; print 1.0 / 3;") == [
        "0.3",
        "1e+06",
        "0.333333",
    ]


def test_integer_overflow_wraps():
    assert run_lines("long big = 9223372036854775807; print big + 1;") == ["-9223372036854775808"]


def test_float_slots_widen_integers():
    src = """
    double d = 7;
    print d / 2;
    float f;
    f = 3;
    print f / 2;
    double[] ds = [0.5, 2.0];
    ds[0] = 1;
    print ds[0] / 4;
    function double half(double x) { return x / 2; }
    print half(5);
    function double one() { return 1; }
    print one() / 4;
    """
    assert run_lines(src) == ["3.5", "1.5", "0.25", "2.5", "0.25"]


def test_default_values_for_uninitialized_declarations():
    src = """
    int i; double d; bool b; string s; int[] a;
    print i; print d; print b; print "[" + s + "]"; print a;
    """
    assert run_lines(src) == ["0", "0", "false", "[]", "[Array]"]


def test_string_concatenation_stringifies_operands():
    src = 'print "n=" + 4; print true + "!"; print "x" + 1.5; int[] a = [1]; print "a:" + a;'
    assert run_lines(src) == ["n=4", "true!", "x1.500000", "a:[Array]"]


def test_comparisons():
    src = """
    print 1 < 2;
    print 2 <= 1;
    print 1 == 1.0;
    print "a" == "a";
    print "a" != "b";
    print "abc" < "abd";
    print true == false;
    """
    assert run_lines(src) == ["true", "false", "true", "true", "true", "true", "false"]


def test_bitwise_and_unary():
    src = "print 6 & 3; print 6 | 3; print 6 ^ 3; print 1 << 4; print -16 >> 2; print ~0; print !true; print -(3);"
    assert run_lines(src) == ["2", "7", "5", "16", "-4", "-1", "false", "-3"]


def test_compound_assignment():
    src = "int x = 10; x += 5; x -= 3; x *= 2; x /= 4; x %= 4; print x; x |= 8; x &= 12; x ^= 1; print x;"
    assert run_lines(src) == ["2", "9"]


def test_logical_operators_short_circuit():
    src = """
    int calls = 0;
    function bool touch() { calls = calls + 1; return true; }
    bool a = false && touch();
    bool b = true || touch();
    bool c = true && touch();
    print calls;
    print a; print b; print c;
    """
    assert run_lines(src) == ["1", "false", "true", "true"]


def test_increment_and_decrement():
    src = """
    int i = 5;
    print i++;
    print i;
    print ++i;
    print --i;
    print i--;
    print i;
    double d = 1.5;
    d++;
    print d;
    int[] a = [1, 2];
    a[1]++;
    print ++a[0];
    print a[1];
    """
    assert run_lines(src) == ["5", "6", "7", "6", "6", "5", "2.5", "2", "3"]


def test_block_scoping_and_shadowing():
    src = """
    int x = 1;
    { int x = 2; print x; x = 3; print x; }
    print x;
    { x = 4; }
    print x;
    """
    assert run_lines(src) == ["2", "3", "1", "4"]


def test_functions_see_globals_not_callers_locals():
    src = """
    int g = 10;
    function int read() { return g; }
    function void bump() { g = g + 1; }
    {
        int g2 = 99;
        bump();
        print read();
    }
    """
    assert run_lines(src) == ["11"]


def test_recursion():
    src = """
    function int fib(int n) { if (n < 2) { return n; } return fib(n - 1) + fib(n - 2); }
    print fib(15);
    """
    assert run_lines(src) == ["610"]


def test_void_function_result_prints_nothing():
    src = "function void noop() { } print noop(); print 1;"
    assert run_lines(src) == ["1"]


def test_return_unwinds_nested_loops():
    src = """
    function int find(int[] xs, int target) {
        for (int i = 0; i < 10; i++) {
            while (true) {
                if (xs[i] == target) { return i; }
                break;
            }
        }
        return -1;
    }
    print find([4, 5, 6, 7, 8, 9, 10, 11, 12, 13], 7);
    """
    assert run_lines(src) == ["3"]


def test_for_loop_increment_runs_after_continue_not_after_break():
    src = """
    int i;
    for (i = 0; i < 5; i++) {
        if (i == 1) { continue; }
        if (i == 3) { break; }
        print i;
    }
    print i;
    """
    assert run_lines(src) == ["0", "2", "3"]


def test_for_loop_variable_is_scoped_to_loop():
    src = """
    int i = 100;
    for (int i = 0; i < 2; i++) { print i; }
    print i;
    """
    assert run_lines(src) == ["0", "1", "100"]


def test_switch_runs_exactly_one_case():
    src = """
    function void pick(int x) {
        switch (x) {
            case 1: print "one";
            case 1: print "one again";
            case 2: print "two";
            default: print "other";
            case 3: print "three";
        }
    }
    pick(1); pick(2); pick(3); pick(9);
    """
    assert run_lines(src) == ["one", "two", "other", "other"]


def test_switch_on_strings_and_no_match():
    src = """
    string s = "b";
    switch (s) { case "a": print 1; case "b": print 2; }
    switch (s) { case "z": print 3; }
    print "done";
    """
    assert run_lines(src) == ["2", "done"]


def test_break_inside_switch_leaves_enclosing_loop():
    src = """
    int i = 0;
    while (i < 5) {
        switch (i) { case 2: break; default: print i; }
        i++;
    }
    """
    assert run_lines(src) == ["0", "1"]


def test_arrays_are_values():
    src = """
    int[] a = [1, 2, 3];
    int[] b = a;
    b[0] = 100;
    print a[0];
    print b[0];
    function int mutate(int[] xs) { xs[0] = 42; return xs[0]; }
    print mutate(a);
    print a[0];
    """
    assert run_lines(src) == ["1", "100", "42", "1"]


def test_assignment_is_an_expression():
    assert run_lines("int a; int b; a = b = 7; print a + b; int[] c = [0]; print c[0] = 5;") == ["14", "5"]


def test_input_conversion():
    src = """
    int n = input("n? ");
    double d = input();
    string s = input();
    print n + 1;
    print d * 2;
    print s;
    """
    out = run_text(src, stdin="41\n1.25\nhello world\n")
    assert out == "n? 42\n2.5\nhello world\n"


def test_convert_input():
    assert convert_input("12") == RuntimeValue.integer(12)
    assert convert_input("-3") == RuntimeValue.integer(-3)
    assert convert_input("2.5") == RuntimeValue.floating(2.5)
    assert convert_input("1e3").kind == ValueKind.FLOAT
    assert convert_input("99999999999999999999").kind == ValueKind.FLOAT
    assert convert_input("12abc") == RuntimeValue.string("12abc")
    assert convert_input("") == RuntimeValue.string("")


@pytest.mark.parametrize(
    "src, message",
    [
        ("print 1 / 0;", "Division by zero"),
        ("print 1.0 / 0;", "Division by zero"),
        ("print 1 % 0;", "Modulo by zero"),
        ("print 1.5 % 2;", "Modulo on floats"),
        ("int[] a = [1]; print a[3];", "out of bounds"),
        ("int[] a = [1]; a[-1] = 2;", "out of bounds"),
        ("function int[] make() { return [1]; } make()[0] = 1;", "not supported"),
    ],
)
def test_runtime_faults(src, message):
    with pytest.raises(RuntimeFault, match=message):
        run_text(src)


def test_output_before_fault_is_kept():
    out = io.StringIO()
    statements = parse_text("print 1; print 2 / 0; print 3;")
    with pytest.raises(RuntimeFault) as info:
        Interpreter(output=out).execute(statements)
    assert out.getvalue() == "1\n"
    assert info.value.line == 1


def test_unbounded_recursion_is_a_runtime_fault():
    statements = parse_text("function int down(int n) { return down(n + 1); } print down(0);")
    with pytest.raises(RuntimeFault):
        interpret_program(statements, output=io.StringIO())


def test_stray_top_level_signal_stops_execution(caplog):
    # Unchecked program: `break` outside of a loop.
    statements = parse_text("print 1; break; print 2;")
    out = io.StringIO()
    with caplog.at_level(logging.WARNING, logger="interpreter"):
        interpret_program(statements, output=out)
    assert out.getvalue() == "1\n"
    assert "break" in caplog.text


def test_interpret_program_returns_globals():
    env = interpret_program(parse_text("int x = 2; x = x * 21;"), output=io.StringIO())
    assert env.get("x") == RuntimeValue.integer(42)


def test_environment_chain():
    outer = Environment()
    outer.define("x", RuntimeValue.integer(1), "double")
    inner = Environment(parent=outer)
    assert inner.get("x") == RuntimeValue.floating(1.0)
    inner.assign("x", RuntimeValue.integer(5))
    assert outer.get("x") == RuntimeValue.floating(5.0)
    assert "x" in inner and "y" not in inner
    with pytest.raises(RuntimeFault):
        inner.get("y")


def test_integer_helpers():
    assert wrap_int64(2**63) == -(2**63)
    assert wrap_int64(-(2**63) - 1) == 2**63 - 1
    assert trunc_div(-7, 2) == -3
    assert trunc_div(7, -2) == -3
    assert c_mod(-7, 3) == -1
    assert c_mod(7, -3) == 1


def test_ordering_bools_and_arrays():
    src = """
    print true > false;
    print false >= true;
    print false <= false;
    int[] a = [1, 2];
    int[] b = [1, 3];
    print a < b;
    print b <= a;
    """
    assert run_lines(src) == ["true", "false", "true", "true", "false"]


def test_convert_input_whitespace():
    assert convert_input("  7") == RuntimeValue.integer(7)
    assert convert_input("42 ") == RuntimeValue.string("42 ")
    assert convert_input("1.5\t") == RuntimeValue.string("1.5\t")


def test_input_with_trailing_space_stays_text():
    assert run_lines('string s = input(); print s + "!";', stdin="42 \n") == ["42 !"]
