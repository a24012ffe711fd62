from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence, TextIO

import graphviz

from lexer import Lexer
from tokens import Token
from ast_nodes import Statement
from parser import Parser
from type_checker import TypeChecker
from interpreter import Interpreter
from errors import CompileError, RuntimeFault
from pretty_printer import PrettyPrinter
from ast_json import program_to_json
from ast_viz import write_and_render

logger = logging.getLogger(__name__)


def lex(text: str) -> List[Token]:
    """Tokenize input string."""
    lexer = Lexer(text)
    return lexer.tokenize()


def parse_tokens(tokens: List[Token]) -> List[Statement]:
    """Parse tokens into AST."""
    parser = Parser(tokens)
    return parser.parse()


def check_program(statements: Sequence[Statement]) -> None:
    """Type check a parsed program, raising on the first violation."""
    TypeChecker().check(statements)


def execute_program(
    statements: Sequence[Statement],
    output: Optional[TextIO] = None,
    input_stream: Optional[TextIO] = None,
) -> None:
    Interpreter(output=output, input_stream=input_stream).execute(statements)


def process_program(
    text: str,
    *,
    print_tokens: bool = False,
    print_ast: bool = False,
    dump_ast_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
    check_only: bool = False,
    output: Optional[TextIO] = None,
    input_stream: Optional[TextIO] = None,
) -> int:
    """Process a single program: lex, parse, type check and run it.

    Debug dumps are printed or written between the stages when requested.
    Returns the process exit status: 0 on success, 1 when the program was
    rejected or faulted. Diagnostics go to stderr.
    """
    try:
        tokens = lex(text)
        if print_tokens:
            print(f"Tokens ({len(tokens)}):")
            for i, token in enumerate(tokens[:50]):
                print(f"  {i:3}: {token}")
            if len(tokens) > 50:
                print(f"  ... and {len(tokens) - 50} more")

        statements = parse_tokens(tokens)
        if print_ast:
            print("\nAST:")
            print(PrettyPrinter.print_program(statements))

        if dump_ast_path:
            try:
                with open(dump_ast_path, "w", encoding="utf-8") as fh:
                    json.dump(program_to_json(statements), fh, indent=2)
                print(f"Wrote AST JSON to {dump_ast_path}")
            except OSError as e:
                print(f"Failed to write AST JSON to {dump_ast_path}: {e}", file=sys.stderr)

        if viz_path:
            try:
                write_and_render(statements, viz_path, fmt=viz_format)
                print(f"Wrote AST visualization to {viz_path}.{viz_format}")
            except (OSError, graphviz.ExecutableNotFound, graphviz.CalledProcessError) as e:
                print(f"Failed to render AST visualization to {viz_path}: {e}", file=sys.stderr)

        check_program(statements)
        if check_only:
            print("Type check passed")
            return 0

        execute_program(statements, output=output, input_stream=input_stream)
    except (CompileError, RuntimeFault) as e:
        # Output already produced stays on stdout.
        sys.stdout.flush()
        print(f"{e.label}: {e}", file=sys.stderr)
        return 1
    return 0


def interactive_mode(print_tokens: bool = False, print_ast: bool = False) -> None:
    """Run interactive REPL reading programs from stdin."""
    print("\nInteractive Mode (type 'quit' to exit)")
    print("=" * 80)

    while True:
        try:
            text = input("\nEnter program: ").strip()
            if text.lower() in ("quit", "exit", "q"):
                print("Goodbye!")
                break

            if not text:
                continue

            process_program(text, print_tokens=print_tokens, print_ast=print_ast)

        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("\n\nExiting...")
            break


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a Naruto program from a file or interactively from stdin"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--file", "-f", dest="file", help="Path to source file to run")
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Start interactive REPL mode",
    )
    # printing/verbosity options
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--print-ast", dest="print_ast", action="store_true", help="Print the parsed AST"
    )
    parser.add_argument("--dump-ast", dest="dump_ast", help="Path to write the AST as JSON")
    parser.add_argument(
        "--viz-ast",
        dest="viz_ast",
        help="Path (without extension) to write Graphviz visualization of the AST",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    parser.add_argument(
        "--check-only",
        dest="check_only",
        action="store_true",
        help="Stop after type checking; do not run the program",
    )
    parser.add_argument(
        "--recursion-limit",
        dest="recursion_limit",
        type=int,
        default=None,
        help="Python recursion limit to use while running deeply recursive programs",
    )
    parser.add_argument(
        "--verbose", "-v", dest="verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if args.recursion_limit:
        sys.setrecursionlimit(args.recursion_limit)
        logger.debug("recursion limit set to %d", args.recursion_limit)

    if args.interactive:
        interactive_mode(print_tokens=args.print_tokens, print_ast=args.print_ast)
        return 0

    if args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as fh:
                text = fh.read()
        except OSError as e:
            print(f"Failed to read file {args.file}: {e}", file=sys.stderr)
            return 1

        return process_program(
            text,
            print_tokens=args.print_tokens,
            print_ast=args.print_ast,
            dump_ast_path=args.dump_ast,
            viz_path=args.viz_ast,
            viz_format=args.viz_format,
            check_only=args.check_only,
        )

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
