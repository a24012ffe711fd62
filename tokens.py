"""Token definitions for the lexer.

This module defines the `TokenType` enum for all token kinds recognized by
the lexer and a small `Token` dataclass that holds a token type, its lexeme
and the source line it started on. Tokens are the atomic units produced by
the lexer and consumed by the parser. A token list always ends with `EOF`.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    # Type keywords
    BYTE_TYPE = auto()
    SHORT_TYPE = auto()
    INT_TYPE = auto()
    LONG_TYPE = auto()
    FLOAT_TYPE = auto()
    DOUBLE_TYPE = auto()
    BOOL_TYPE = auto()
    CHAR_TYPE = auto()
    STRING_TYPE = auto()
    VOID_TYPE = auto()

    # Literals
    IDENTIFIER = auto()
    INT_LITERAL = auto()
    FLOAT_LITERAL = auto()
    CHAR_LITERAL = auto()
    STRING_LITERAL = auto()

    # Arithmetic operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    MOD = auto()

    # Comparison operators
    EQ = auto()
    NEQ = auto()
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()

    # Logical operators
    AND = auto()
    OR = auto()
    NOT = auto()

    # Assignment operators
    ASSIGN = auto()
    PLUS_ASSIGN = auto()
    MINUS_ASSIGN = auto()
    STAR_ASSIGN = auto()
    SLASH_ASSIGN = auto()
    MOD_ASSIGN = auto()
    AND_ASSIGN = auto()
    OR_ASSIGN = auto()
    XOR_ASSIGN = auto()
    INCREMENT = auto()
    DECREMENT = auto()

    # Bitwise operators
    BIT_AND = auto()
    BIT_OR = auto()
    BIT_XOR = auto()
    BIT_NOT = auto()
    SHIFT_LEFT = auto()
    SHIFT_RIGHT = auto()

    # Punctuation
    DOT = auto()
    SEMICOLON = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    COLON = auto()

    # Keywords
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FOR = auto()
    RETURN = auto()
    FUNCTION = auto()
    CONST = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    PRINT = auto()
    INPUT = auto()
    BREAK = auto()
    CONTINUE = auto()
    SWITCH = auto()
    CASE = auto()
    DEFAULT = auto()

    # Special
    EOF = auto()

    def __str__(self) -> str:
        return self.name


# Type keyword -> declared type name
TYPE_KEYWORDS = {
    TokenType.BYTE_TYPE: "byte",
    TokenType.SHORT_TYPE: "short",
    TokenType.INT_TYPE: "int",
    TokenType.LONG_TYPE: "long",
    TokenType.FLOAT_TYPE: "float",
    TokenType.DOUBLE_TYPE: "double",
    TokenType.BOOL_TYPE: "bool",
    TokenType.CHAR_TYPE: "char",
    TokenType.STRING_TYPE: "string",
    TokenType.VOID_TYPE: "void",
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str = ""
    line: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.lexeme!r}, line={self.line})"

    @property
    def is_type_keyword(self) -> bool:
        return self.type in TYPE_KEYWORDS
