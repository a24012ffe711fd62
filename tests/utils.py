import io

from lexer import Lexer
from parser import Parser
from type_checker import TypeChecker
from interpreter import Interpreter


def lex(text: str):
    """Return a list of tokens for the given source text."""
    return Lexer(text).tokenize()


def parse_tokens(tokens):
    """Parse a list of tokens into a list of top-level statements."""
    return Parser(tokens).parse()


def parse_text(text: str):
    """Convenience: lex+parse a source text into its statements."""
    return Parser(Lexer(text).tokenize()).parse()


def check_text(text: str):
    """Lex, parse and type check; return the statements."""
    statements = parse_text(text)
    TypeChecker().check(statements)
    return statements


def run_text(text: str, stdin: str = "") -> str:
    """Check and run a program, returning everything it printed."""
    statements = check_text(text)
    out = io.StringIO()
    Interpreter(output=out, input_stream=io.StringIO(stdin)).execute(statements)
    return out.getvalue()


def run_lines(text: str, stdin: str = ""):
    return run_text(text, stdin).splitlines()
