import pytest
from main import lex
from tokens import TokenType
from errors import LexError


def types_of(src):
    return [t.type for t in lex(src)]


def test_lexer_recognizes_keywords_and_punctuation():
    src = "int x = 5; void foo; return;"
    types = types_of(src)

    assert TokenType.INT_TYPE in types
    assert TokenType.VOID_TYPE in types
    assert TokenType.IDENTIFIER in types
    assert TokenType.ASSIGN in types
    assert TokenType.SEMICOLON in types
    assert TokenType.RETURN in types
    assert types[-1] == TokenType.EOF


def test_lexer_empty_input_is_just_eof():
    tokens = lex("")
    assert len(tokens) == 1
    assert tokens[0].type == TokenType.EOF


def test_function_keyword_aliases():
    assert types_of("function fn")[:2] == [TokenType.FUNCTION, TokenType.FUNCTION]


def test_longest_operator_wins():
    assert types_of("<< >> <= >= == != && || ++ -- += &= ^=")[:-1] == [
        TokenType.SHIFT_LEFT,
        TokenType.SHIFT_RIGHT,
        TokenType.LTE,
        TokenType.GTE,
        TokenType.EQ,
        TokenType.NEQ,
        TokenType.AND,
        TokenType.OR,
        TokenType.INCREMENT,
        TokenType.DECREMENT,
        TokenType.PLUS_ASSIGN,
        TokenType.AND_ASSIGN,
        TokenType.XOR_ASSIGN,
    ]


def test_number_literals():
    tokens = lex("42 3.14 7.")
    assert (tokens[0].type, tokens[0].lexeme) == (TokenType.INT_LITERAL, "42")
    assert (tokens[1].type, tokens[1].lexeme) == (TokenType.FLOAT_LITERAL, "3.14")
    # a trailing dot is not part of the number
    assert tokens[2].type == TokenType.INT_LITERAL
    assert tokens[3].type == TokenType.DOT


def test_string_and_char_literals_are_unescaped():
    tokens = lex(r'"a\tb\n" ' + r"'\''")
    assert tokens[0].type == TokenType.STRING_LITERAL
    assert tokens[0].lexeme == "a\tb\n"
    assert tokens[1].type == TokenType.CHAR_LITERAL
    assert tokens[1].lexeme == "'"


def test_comments_are_skipped_and_lines_counted():
    src = "// header\nint a; /* multi\nline */ int b;"
    tokens = lex(src)
    idents = [t for t in tokens if t.type == TokenType.IDENTIFIER]
    assert [t.lexeme for t in idents] == ["a", "b"]
    assert idents[0].line == 2
    assert idents[1].line == 3


def test_type_keywords_cover_all_declared_types():
    src = "byte short int long float double bool char string void"
    tokens = lex(src)[:-1]
    assert all(t.is_type_keyword for t in tokens)


@pytest.mark.parametrize(
    "src",
    [
        "int x = 1 @ 2;",
        '"never closed',
        "'ab'",
        "/* open comment",
        r'"\q"',
        "print \u00b2;",
    ],
)
def test_lexer_rejects_malformed_input(src):
    with pytest.raises(LexError):
        lex(src)


def test_lex_errors_are_syntax_errors():
    with pytest.raises(SyntaxError):
        lex("$")
