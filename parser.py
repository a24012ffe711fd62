"""
Parser for the Naruto language.

Overview and approach:
- This parser is a hand-written recursive-descent parser. It consumes the
    token list once, left to right, and produces the list of top-level
    statements. There is no backtracking and no error recovery: every
    expected token is either consumed or a `ParseError` naming the line and
    the token found is raised.

Key points:
- Statement parsing:
    - `parse_declaration()` recognizes function declarations
        (`function <type> name(...) { ... }`), variable declarations (by
        one-token lookahead on a type keyword, optionally after `const`) and
        otherwise delegates to `parse_statement()`.
    - `parse_statement()` handles `if`, `switch`, `while`, `for`, `print`,
        `return`, `break`, `continue`, blocks and expression statements.

- Expression parsing:
    - `parse_assignment()` is the lowest level. Assignment is
        right-associative, and compound operators (`+=`, `&=`, ...) are
        desugared here into `target = target OP value`.
    - The binary operators below it form an explicit precedence ladder,
        `BINARY_LEVELS`, listed lowest to highest. Each level is
        left-associative: parse one level down, then keep folding while the
        current token is an operator of this level.
    - `parse_unary()` handles `!`, `-`, `~` and prefix `++`/`--`;
        `parse_postfix()` handles calls, indexing and postfix `++`/`--`;
        `parse_primary()` handles literals, names, `input(...)`, array
        literals and parentheses.

Examples:
    - `int[] a = [1, 2, 3];`
    - `function int add(int a, int b) { return a + b; }`
    - `x += 2;` parses as `x = x + 2;`
"""

from __future__ import annotations
import copy
import logging
from typing import List, Optional, Dict, Callable, Tuple, Set, Union
from tokens import Token, TokenType, TYPE_KEYWORDS
from ast_nodes import *
from errors import ParseError

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1

BinaryFactory = Callable[..., Expression]

# Lowest to highest precedence.
BINARY_LEVELS: List[Tuple[Set[TokenType], BinaryFactory]] = [
    ({TokenType.OR}, LogicalOpNode),
    ({TokenType.AND}, LogicalOpNode),
    ({TokenType.BIT_OR}, BitwiseOpNode),
    ({TokenType.BIT_XOR}, BitwiseOpNode),
    ({TokenType.BIT_AND}, BitwiseOpNode),
    ({TokenType.EQ, TokenType.NEQ}, BinaryOpNode),
    ({TokenType.LT, TokenType.LTE, TokenType.GT, TokenType.GTE}, BinaryOpNode),
    ({TokenType.SHIFT_LEFT, TokenType.SHIFT_RIGHT}, BitwiseOpNode),
    ({TokenType.PLUS, TokenType.MINUS}, BinaryOpNode),
    ({TokenType.STAR, TokenType.SLASH, TokenType.MOD}, BinaryOpNode),
]

# Compound assignment -> (operator, node class for the desugared operation)
COMPOUND_ASSIGNMENTS: Dict[TokenType, Tuple[str, BinaryFactory]] = {
    TokenType.PLUS_ASSIGN: ("+", BinaryOpNode),
    TokenType.MINUS_ASSIGN: ("-", BinaryOpNode),
    TokenType.STAR_ASSIGN: ("*", BinaryOpNode),
    TokenType.SLASH_ASSIGN: ("/", BinaryOpNode),
    TokenType.MOD_ASSIGN: ("%", BinaryOpNode),
    TokenType.AND_ASSIGN: ("&", BitwiseOpNode),
    TokenType.OR_ASSIGN: ("|", BitwiseOpNode),
    TokenType.XOR_ASSIGN: ("^", BitwiseOpNode),
}

LITERAL_TYPES = {
    TokenType.INT_LITERAL: "int",
    TokenType.FLOAT_LITERAL: "float",
    TokenType.STRING_LITERAL: "string",
    TokenType.CHAR_LITERAL: "char",
    TokenType.TRUE: "bool",
    TokenType.FALSE: "bool",
    TokenType.NULL: "void",
}


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            last_line = tokens[-1].line if tokens else 0
            tokens = list(tokens) + [Token(TokenType.EOF, "", last_line)]
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0]

    def advance(self) -> Token:
        """Consume the current token and return it. EOF is never consumed."""
        token = self.current
        if token.type != TokenType.EOF:
            self.pos += 1
            self.current = self.tokens[self.pos]
        return token

    def check(self, token_type: TokenType) -> bool:
        return self.current.type == token_type

    def match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume and return the current token if it has one of the given types."""
        if self.current.type in token_types:
            return self.advance()
        return None

    def error(self, message: str) -> ParseError:
        found = self.current.lexeme if self.current.type != TokenType.EOF else "end of input"
        return ParseError(f"{message} Found: '{found}'", self.current.line)

    def expect(self, expected_type: TokenType, message: Optional[str] = None) -> Token:
        """Expect and consume token of given type."""
        if self.current.type == expected_type:
            return self.advance()
        raise self.error(message or f"Expected {expected_type}.")

    def parse_type(self) -> str:
        """Parse a type keyword with an optional `[]` suffix."""
        if not self.current.is_type_keyword:
            raise self.error("Expected type.")
        type_name = TYPE_KEYWORDS[self.advance().type]
        if self.match(TokenType.LBRACKET):
            self.expect(TokenType.RBRACKET, "Expected ']'.")
            type_name += "[]"
        return type_name

    # ------------------------------------------------------------------
    # Declarations and statements
    # ------------------------------------------------------------------

    def parse_declaration(self) -> Statement:
        if self.check(TokenType.FUNCTION):
            return self.parse_function_declaration()

        if self.check(TokenType.CONST):
            line = self.advance().line
            if not self.current.is_type_keyword:
                raise self.error("Expected type after 'const'.")
            return self.parse_variable_declaration(is_const=True, line=line)

        if self.current.is_type_keyword:
            return self.parse_variable_declaration()

        return self.parse_statement()

    def parse_function_declaration(self) -> FunctionDeclarationNode:
        """Parse `function <type> name(<type> a, ...) { ... }`."""
        line = self.expect(TokenType.FUNCTION).line
        if not self.current.is_type_keyword:
            raise self.error("Expected return type.")
        return_type = self.parse_type()
        func_name = self.expect(TokenType.IDENTIFIER, "Expected function name.").lexeme

        self.expect(TokenType.LPAREN, "Expected '('.")
        parameters: List[Parameter] = []
        if not self.check(TokenType.RPAREN):
            while True:
                if not self.current.is_type_keyword:
                    raise self.error("Expected parameter type.")
                param_type = self.parse_type()
                param_name = self.expect(TokenType.IDENTIFIER, "Expected parameter name.")
                parameters.append(Parameter(param_type=param_type, name=param_name.lexeme))
                if not self.match(TokenType.COMMA):
                    break
        self.expect(TokenType.RPAREN, "Expected ')'.")

        if not self.check(TokenType.LBRACE):
            raise self.error("Expected '{'.")
        body = self.parse_block()

        return FunctionDeclarationNode(
            func_name=func_name,
            return_type=return_type,
            parameters=parameters,
            body=body,
            line=line,
        )

    def parse_variable_declaration(
        self, is_const: bool = False, line: Optional[int] = None
    ) -> VariableDeclarationNode:
        """Parse variable declaration: type ([])? identifier (= expression)? ;"""
        if line is None:
            line = self.current.line
        var_type = self.parse_type()
        var_name = self.expect(TokenType.IDENTIFIER, "Expected variable name.").lexeme

        init_value = None
        if self.match(TokenType.ASSIGN):
            init_value = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expected ';'.")

        return VariableDeclarationNode(
            var_type=var_type,
            var_name=var_name,
            init_value=init_value,
            is_const=is_const,
            line=line,
        )

    def parse_statement(self) -> Statement:
        """Parse a statement."""
        match self.current.type:
            case TokenType.IF:
                return self.parse_if_statement()
            case TokenType.SWITCH:
                return self.parse_switch_statement()
            case TokenType.WHILE:
                return self.parse_while_statement()
            case TokenType.FOR:
                return self.parse_for_statement()
            case TokenType.PRINT:
                line = self.advance().line
                expr = self.parse_expression()
                self.expect(TokenType.SEMICOLON, "Expected ';'.")
                return PrintStatementNode(expression=expr, line=line)
            case TokenType.RETURN:
                return self.parse_return_statement()
            case TokenType.BREAK:
                line = self.advance().line
                self.expect(TokenType.SEMICOLON, "Expected ';'.")
                return BreakStatementNode(line=line)
            case TokenType.CONTINUE:
                line = self.advance().line
                self.expect(TokenType.SEMICOLON, "Expected ';'.")
                return ContinueStatementNode(line=line)
            case TokenType.LBRACE:
                return self.parse_block()
            case _:
                return self.parse_expression_statement()

    def parse_expression_statement(self) -> ExpressionStatementNode:
        line = self.current.line
        expr = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expected ';'.")
        return ExpressionStatementNode(expression=expr, line=line)

    def parse_block(self) -> BlockNode:
        """Parse a block of declarations: { declaration* }"""
        line = self.expect(TokenType.LBRACE, "Expected '{'.").line
        statements: List[Statement] = []
        while not self.check(TokenType.RBRACE) and not self.check(TokenType.EOF):
            statements.append(self.parse_declaration())
        self.expect(TokenType.RBRACE, "Expected '}'.")
        return BlockNode(statements=statements, line=line)

    def parse_if_statement(self) -> IfStatementNode:
        """Parse if statement: if (expr) stmt (else stmt)?"""
        line = self.expect(TokenType.IF).line
        self.expect(TokenType.LPAREN, "Expected '('.")
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN, "Expected ')'.")

        then_block = self.parse_statement()
        else_block = None
        if self.match(TokenType.ELSE):
            else_block = self.parse_statement()

        return IfStatementNode(
            condition=condition, then_block=then_block, else_block=else_block, line=line
        )

    def parse_switch_statement(self) -> SwitchStatementNode:
        """Parse switch (expr) { case expr: stmt* ... default: stmt* }"""
        line = self.expect(TokenType.SWITCH).line
        self.expect(TokenType.LPAREN, "Expected '(' after switch.")
        value = self.parse_expression()
        self.expect(TokenType.RPAREN, "Expected ')'.")
        self.expect(TokenType.LBRACE, "Expected '{'.")

        cases: List[SwitchCase] = []
        while not self.check(TokenType.RBRACE) and not self.check(TokenType.EOF):
            case_line = self.current.line
            condition = None
            if self.match(TokenType.CASE):
                condition = self.parse_expression()
                self.expect(TokenType.COLON, "Expected ':' after case.")
            elif self.match(TokenType.DEFAULT):
                self.expect(TokenType.COLON, "Expected ':' after default.")
            else:
                raise self.error("Expected case or default.")

            statements: List[Statement] = []
            while self.current.type not in (
                TokenType.CASE,
                TokenType.DEFAULT,
                TokenType.RBRACE,
                TokenType.EOF,
            ):
                statements.append(self.parse_declaration())
            cases.append(SwitchCase(condition=condition, statements=statements, line=case_line))

        self.expect(TokenType.RBRACE, "Expected '}'.")
        return SwitchStatementNode(value=value, cases=cases, line=line)

    def parse_while_statement(self) -> WhileStatementNode:
        """Parse while statement: while (expr) stmt"""
        line = self.expect(TokenType.WHILE).line
        self.expect(TokenType.LPAREN, "Expected '('.")
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN, "Expected ')'.")
        body = self.parse_statement()
        return WhileStatementNode(condition=condition, body=body, line=line)

    def parse_for_statement(self) -> ForStatementNode:
        """Parse for statement: for (init? ; cond? ; incr?) stmt"""
        line = self.expect(TokenType.FOR).line
        self.expect(TokenType.LPAREN, "Expected '('.")

        initializer: Optional[Statement] = None
        if not self.match(TokenType.SEMICOLON):
            if self.current.is_type_keyword:
                initializer = self.parse_variable_declaration()
            else:
                initializer = self.parse_expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expected ';'.")

        increment = None
        if not self.check(TokenType.RPAREN):
            increment = self.parse_expression()
        self.expect(TokenType.RPAREN, "Expected ')'.")

        body = self.parse_statement()
        return ForStatementNode(
            initializer=initializer,
            condition=condition,
            increment=increment,
            body=body,
            line=line,
        )

    def parse_return_statement(self) -> ReturnStatementNode:
        """Parse return statement: return expr? ;"""
        line = self.expect(TokenType.RETURN).line
        expr = None
        if not self.check(TokenType.SEMICOLON):
            expr = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expected ';'.")
        return ReturnStatementNode(expression=expr, line=line)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        return self.parse_assignment()

    def parse_assignment(self) -> Expression:
        target = self.parse_binary(0)

        op = self.match(TokenType.ASSIGN, *COMPOUND_ASSIGNMENTS)
        if op is None:
            return target

        if not isinstance(target, (VariableNode, ArrayIndexNode)):
            raise ParseError("Invalid assignment target.", op.line)

        value = self.parse_assignment()
        if op.type != TokenType.ASSIGN:
            # x op= v  ->  x = x op v. The read side is a copy so no subtree is shared.
            operator, node_cls = COMPOUND_ASSIGNMENTS[op.type]
            value = node_cls(
                left=copy.deepcopy(target), operator=operator, right=value, line=op.line
            )

        if isinstance(target, VariableNode):
            return AssignmentNode(name=target.name, value=value, line=target.line)
        return ArrayAssignmentNode(
            array=target.array, index=target.index, value=value, line=target.line
        )

    def parse_binary(self, level: int) -> Expression:
        """Parse one rung of the precedence ladder (left-associative)."""
        if level == len(BINARY_LEVELS):
            return self.parse_unary()

        operators, node_cls = BINARY_LEVELS[level]
        left = self.parse_binary(level + 1)
        while self.current.type in operators:
            op = self.advance()
            right = self.parse_binary(level + 1)
            left = node_cls(left=left, operator=op.lexeme, right=right, line=op.line)
        return left

    def parse_unary(self) -> Expression:
        op = self.match(TokenType.INCREMENT, TokenType.DECREMENT)
        if op is not None:
            target = self.parse_unary()
            return IncrementNode(target=target, operator=op.lexeme, is_prefix=True, line=op.line)

        op = self.match(TokenType.NOT, TokenType.MINUS, TokenType.BIT_NOT)
        if op is not None:
            operand = self.parse_unary()
            return UnaryOpNode(operator=op.lexeme, operand=operand, line=op.line)

        return self.parse_postfix(self.parse_primary())

    def parse_postfix(self, left: Expression) -> Expression:
        """Parse postfix expressions (calls, array indexing, x++ / x--)."""
        while True:
            match self.current.type:
                case TokenType.LPAREN:
                    line = self.advance().line
                    args = self.parse_arguments(TokenType.RPAREN)
                    self.expect(TokenType.RPAREN, "Expected ')'.")
                    left = FunctionCallNode(callee=left, arguments=args, line=line)

                case TokenType.LBRACKET:
                    line = self.advance().line
                    index = self.parse_expression()
                    self.expect(TokenType.RBRACKET, "Expected ']'.")
                    left = ArrayIndexNode(array=left, index=index, line=line)

                case TokenType.INCREMENT | TokenType.DECREMENT:
                    op = self.advance()
                    left = IncrementNode(target=left, operator=op.lexeme, is_prefix=False, line=op.line)

                case _:
                    break

        return left

    def parse_arguments(self, closing: TokenType) -> List[Expression]:
        """Parse a possibly empty comma-separated expression list up to `closing`."""
        items: List[Expression] = []
        if not self.check(closing):
            items.append(self.parse_expression())
            while self.match(TokenType.COMMA):
                items.append(self.parse_expression())
        return items

    def parse_primary(self) -> Expression:
        """Parse primary expressions (literals, names, input, arrays, groups)."""
        token = self.current

        match token.type:
            case (
                TokenType.INT_LITERAL
                | TokenType.FLOAT_LITERAL
                | TokenType.STRING_LITERAL
                | TokenType.CHAR_LITERAL
                | TokenType.TRUE
                | TokenType.FALSE
                | TokenType.NULL
            ):
                self.advance()
                return LiteralNode(
                    value_type=LITERAL_TYPES[token.type],
                    value=self.literal_value(token),
                    line=token.line,
                )

            case TokenType.IDENTIFIER:
                self.advance()
                return VariableNode(name=token.lexeme, line=token.line)

            case TokenType.INPUT:
                self.advance()
                self.expect(TokenType.LPAREN, "Expected '('.")
                prompt = None
                if not self.check(TokenType.RPAREN):
                    prompt = self.parse_expression()
                self.expect(TokenType.RPAREN, "Expected ')'.")
                return InputNode(prompt=prompt, line=token.line)

            case TokenType.LBRACKET:
                self.advance()
                elements = self.parse_arguments(TokenType.RBRACKET)
                self.expect(TokenType.RBRACKET, "Expected ']'.")
                return ArrayLiteralNode(elements=elements, line=token.line)

            case TokenType.LPAREN:
                self.advance()
                expr = self.parse_expression()
                self.expect(TokenType.RPAREN, "Expected ')'.")
                return expr

            case _:
                raise self.error("Expected expression.")

    def literal_value(self, token: Token) -> Union[int, float, str, bool, None]:
        match token.type:
            case TokenType.INT_LITERAL:
                value = int(token.lexeme)
                if value > INT64_MAX:
                    raise ParseError(f"Integer literal out of range: {token.lexeme}", token.line)
                return value
            case TokenType.FLOAT_LITERAL:
                return float(token.lexeme)
            case TokenType.TRUE:
                return True
            case TokenType.FALSE:
                return False
            case TokenType.NULL:
                return None
            case _:
                return token.lexeme

    def parse(self) -> List[Statement]:
        """Parse a complete compilation unit into its top-level statements."""
        statements: List[Statement] = []
        try:
            while not self.check(TokenType.EOF):
                statements.append(self.parse_declaration())
        except RecursionError as err:
            raise ParseError("Program is nested too deeply.", self.current.line) from err
        logger.debug("parsed %d top-level statements", len(statements))
        return statements
