"""
Lexer for the Naruto language.

Overview:
- This module implements a small hand-written lexical analyzer (scanner) that
    transforms an input source string into a list of `Token` objects defined
    in `tokens.py`. The list always ends with an `EOF` token.
- It recognizes type keywords (`byte` .. `double`, `bool`, `char`, `string`,
    `void`), control-flow keywords, identifiers, integer/float/char/string
    literals, one-, two- and three-character operators, punctuation, and skips
    whitespace plus `//` and `/* */` comments.

Examples:
    Input:  "int x = a + 1;"
    Tokens: [INT_TYPE, IDENTIFIER('x'), ASSIGN, IDENTIFIER('a'), PLUS, ...]

Implementation notes:
- Operators are matched longest first using `OPERATORS`, which is ordered by
    length, so `<<` is not lexed as `<` `<` and `+=` is not lexed as `+` `=`.
- String and char literal tokens carry the unescaped text as their lexeme.
- Every token records the line on which it starts.
"""

from __future__ import annotations
import logging
from typing import Optional, List
from tokens import Token, TokenType
from errors import LexError

logger = logging.getLogger(__name__)


KEYWORDS = {
    "byte": TokenType.BYTE_TYPE,
    "short": TokenType.SHORT_TYPE,
    "int": TokenType.INT_TYPE,
    "long": TokenType.LONG_TYPE,
    "float": TokenType.FLOAT_TYPE,
    "double": TokenType.DOUBLE_TYPE,
    "bool": TokenType.BOOL_TYPE,
    "char": TokenType.CHAR_TYPE,
    "string": TokenType.STRING_TYPE,
    "void": TokenType.VOID_TYPE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "return": TokenType.RETURN,
    "function": TokenType.FUNCTION,
    "fn": TokenType.FUNCTION,
    "const": TokenType.CONST,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
    "print": TokenType.PRINT,
    "input": TokenType.INPUT,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "switch": TokenType.SWITCH,
    "case": TokenType.CASE,
    "default": TokenType.DEFAULT,
}


def is_digit(char: Optional[str]) -> bool:
    """ASCII digits only; `str.isdigit` also accepts superscripts and the like."""
    return char is not None and "0" <= char <= "9"


# Longest operators first.
OPERATORS = [
    ("<<", TokenType.SHIFT_LEFT),
    (">>", TokenType.SHIFT_RIGHT),
    ("==", TokenType.EQ),
    ("!=", TokenType.NEQ),
    ("<=", TokenType.LTE),
    (">=", TokenType.GTE),
    ("&&", TokenType.AND),
    ("||", TokenType.OR),
    ("++", TokenType.INCREMENT),
    ("--", TokenType.DECREMENT),
    ("+=", TokenType.PLUS_ASSIGN),
    ("-=", TokenType.MINUS_ASSIGN),
    ("*=", TokenType.STAR_ASSIGN),
    ("/=", TokenType.SLASH_ASSIGN),
    ("%=", TokenType.MOD_ASSIGN),
    ("&=", TokenType.AND_ASSIGN),
    ("|=", TokenType.OR_ASSIGN),
    ("^=", TokenType.XOR_ASSIGN),
    ("+", TokenType.PLUS),
    ("-", TokenType.MINUS),
    ("*", TokenType.STAR),
    ("/", TokenType.SLASH),
    ("%", TokenType.MOD),
    ("<", TokenType.LT),
    (">", TokenType.GT),
    ("!", TokenType.NOT),
    ("=", TokenType.ASSIGN),
    ("&", TokenType.BIT_AND),
    ("|", TokenType.BIT_OR),
    ("^", TokenType.BIT_XOR),
    ("~", TokenType.BIT_NOT),
    (".", TokenType.DOT),
    (";", TokenType.SEMICOLON),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
    ("{", TokenType.LBRACE),
    ("}", TokenType.RBRACE),
    ("[", TokenType.LBRACKET),
    ("]", TokenType.RBRACKET),
    (",", TokenType.COMMA),
    (":", TokenType.COLON),
]

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current_char = self.text[self.pos] if self.text else None

    def error(self, message: str = "") -> LexError:
        msg = f"{message} (column {self.column})"
        return LexError(msg, self.line)

    def advance(self) -> None:
        """Advance to next character."""
        # Newlines reset the column and increment the line number.
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek_char(self, offset: int = 1) -> Optional[str]:
        """Look ahead without consuming."""
        next_pos = self.pos + offset
        if next_pos < len(self.text):
            return self.text[next_pos]
        return None

    def skip_whitespace(self) -> None:
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_line_comment(self) -> None:
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        start_line = self.line
        self.advance()
        self.advance()
        while self.current_char is not None:
            if self.current_char == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                return
            self.advance()
        raise LexError("Unterminated block comment", start_line)

    def number(self) -> Token:
        """Scan an integer or float literal."""
        line = self.line
        result = []
        while is_digit(self.current_char):
            result.append(self.current_char)
            self.advance()

        # A float needs a digit after the dot.
        if self.current_char == "." and is_digit(self.peek_char()):
            result.append(".")
            self.advance()
            while is_digit(self.current_char):
                result.append(self.current_char)
                self.advance()
            return Token(TokenType.FLOAT_LITERAL, "".join(result), line)

        return Token(TokenType.INT_LITERAL, "".join(result), line)

    def identifier(self) -> Token:
        """Scan an identifier or keyword."""
        line = self.line
        result = []
        while self.current_char is not None and (
            self.current_char.isalnum() or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()

        word = "".join(result)
        return Token(KEYWORDS.get(word, TokenType.IDENTIFIER), word, line)

    def quoted(self, quote: str) -> str:
        """Scan the body of a quoted literal, returning the unescaped text."""
        start_line = self.line
        self.advance()  # opening quote
        result = []
        while self.current_char is not None and self.current_char != quote:
            if self.current_char == "\n":
                raise LexError("Unterminated literal", start_line)
            if self.current_char == "\\":
                self.advance()
                if self.current_char is None:
                    break
                if self.current_char not in ESCAPES:
                    raise self.error(f"Unknown escape sequence '\\{self.current_char}'")
                result.append(ESCAPES[self.current_char])
            else:
                result.append(self.current_char)
            self.advance()

        if self.current_char is None:
            raise LexError("Unterminated literal", start_line)
        self.advance()  # closing quote
        return "".join(result)

    def get_next_token(self) -> Token:
        """Return the next token, or EOF once the input is exhausted."""
        while self.current_char is not None:
            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char == "/" and self.peek_char() == "/":
                self.skip_line_comment()
                continue

            if self.current_char == "/" and self.peek_char() == "*":
                self.skip_block_comment()
                continue

            if is_digit(self.current_char):
                return self.number()

            if self.current_char.isalpha() or self.current_char == "_":
                return self.identifier()

            if self.current_char == '"':
                line = self.line
                return Token(TokenType.STRING_LITERAL, self.quoted('"'), line)

            if self.current_char == "'":
                line = self.line
                text = self.quoted("'")
                if len(text) != 1:
                    raise LexError("Char literal must hold exactly one character", line)
                return Token(TokenType.CHAR_LITERAL, text, line)

            for op, token_type in OPERATORS:
                if self.text.startswith(op, self.pos):
                    line = self.line
                    for _ in op:
                        self.advance()
                    return Token(token_type, op, line)

            raise self.error(f"Unexpected character '{self.current_char}'")

        return Token(TokenType.EOF, "", self.line)

    def tokenize(self) -> List[Token]:
        """Return all tokens from the input string."""
        tokens = []
        while True:
            token = self.get_next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        logger.debug("lexed %d tokens", len(tokens))
        return tokens
