"""Error types raised by the pipeline stages.

Static errors (lexing, parsing, checking) derive from `CompileError`, which
is a `SyntaxError` so callers that only care about "the program was
rejected" can catch the built-in. Runtime faults derive from `RuntimeError`.
Every error remembers the source line it refers to (0 when unknown).
"""

from __future__ import annotations


class CompileError(SyntaxError):
    """A program was rejected before execution."""

    label = "Compile Error"

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line:
            return f"Line {self.line}: {self.message}"
        return self.message


class LexError(CompileError):
    label = "Lexical Error"


class ParseError(CompileError):
    label = "Syntax Error"


class SemanticError(CompileError):
    """Undefined names, duplicates, misplaced control flow, const violations."""

    label = "Semantic Error"


class TypeCheckError(SemanticError):
    label = "Type Error"


class RuntimeFault(RuntimeError):
    """A fatal fault while executing a program."""

    label = "Runtime Error"

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line:
            return f"Line {self.line}: {self.message}"
        return self.message
