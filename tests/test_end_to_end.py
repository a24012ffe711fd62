"""Whole-pipeline programs: lex, parse, check and run."""

import pytest
from tests.utils import check_text, run_lines
from errors import CompileError, RuntimeFault


def test_scenario_expression_print():
    assert run_lines("int x = 5; print x + 3;") == ["8"]


def test_scenario_string_concatenation():
    assert run_lines('string s = "n="; int x = 4; print s + x;') == ["n=4"]


def test_scenario_array_write_back():
    assert run_lines("int[] a = [1,2,3]; a[1] = 9; print a[1];") == ["9"]


def test_scenario_function_call():
    assert run_lines("function int add(int a, int b) { return a + b; } print add(2,3);") == ["5"]


def test_scenario_continue_skips_iteration():
    src = "int i = 0; while (i < 3) { if (i == 1) { i = i + 1; continue; } print i; i = i + 1; }"
    assert run_lines(src) == ["0", "2"]


def test_scenario_widening_and_unchecked_literal_range():
    check_text("byte b = 10; double d = b;")
    check_text("byte b2 = 300;")
    assert run_lines("byte b = 10; double d = b; print d / 4;") == ["2.5"]


def test_fizzbuzz_with_switch_and_for():
    src = """
    function string label(int n) {
        switch (n % 15) {
            case 0: return "FizzBuzz";
        }
        switch (n % 5) {
            case 0: return "Buzz";
        }
        switch (n % 3) {
            case 0: return "Fizz";
            default: return "" + n;
        }
        return "unreachable";
    }
    for (int i = 1; i <= 15; i++) { print label(i); }
    """
    assert run_lines(src) == [
        "1", "2", "Fizz", "4", "Buzz", "Fizz", "7", "8", "Fizz", "Buzz",
        "11", "Fizz", "13", "14", "FizzBuzz",
    ]


def test_bubble_sort_through_global_array():
    src = """
    int[] data = [5, 3, 8, 1, 9, 2];
    function void sort(int n) {
        for (int i = 0; i < n; i++) {
            for (int j = 0; j < n - i - 1; j++) {
                if (data[j] > data[j + 1]) {
                    int tmp = data[j];
                    data[j] = data[j + 1];
                    data[j + 1] = tmp;
                }
            }
        }
    }
    sort(6);
    string out = "";
    for (int k = 0; k < 6; k++) { out += data[k] + " "; }
    print out;
    """
    assert run_lines(src) == ["1 2 3 5 8 9 "]


def test_comments_and_constants():
    src = """
    // constants
    const int LIMIT = 3; /* inline */ int total = 0;
    for (int i = 0; i < LIMIT; i++) { total += i; }
    print total;
    """
    assert run_lines(src) == ["3"]


def test_nested_function_declaration_is_callable_after_it_runs():
    src = """
    function int outer() {
        function int inner(int x) { return x * 10; }
        return inner(4);
    }
    print outer();
    """
    assert run_lines(src) == ["40"]


def test_reading_values_from_input():
    src = """
    int count = input();
    int sum = 0;
    for (int i = 0; i < count; i++) { int v = input(); sum += v; }
    print "sum=" + sum;
    """
    assert run_lines(src, stdin="3\n10\n20\n12\n") == ["sum=42"]


@pytest.mark.parametrize(
    "src",
    [
        "int x = ;",
        "int x = 1; int x = 2;",
        "string s = 1;",
        "break;",
    ],
)
def test_rejected_programs_never_run(src):
    with pytest.raises(CompileError):
        run_lines(src)


def test_runtime_fault_stops_the_run():
    with pytest.raises(RuntimeFault):
        run_lines("int[] a = [1]; print a[0]; print a[5];")


def test_stages_log_at_debug_level(debug_logs):
    run_lines("function int one() { return 1; } print one();")
    messages = [r.getMessage() for r in debug_logs.records]
    loggers = {r.name for r in debug_logs.records}
    assert {"lexer", "parser", "type_checker", "interpreter"} <= loggers
    assert any(m.startswith("lexed ") for m in messages)
    assert any(m.startswith("call one(") for m in messages)
