"""
minic Parser Implementation

Hand-written recursive descent for declarations and statements, combined
with a table-driven precedence-climbing (Pratt) parser for expressions.
The grammar of expressions lives in the prefix/infix/precedence tables
built by ``_init_parsing_tables``.

The parser reads tokens through a one-token-lookahead stream, so it can
be driven directly by ``Lexer.iter_tokens()``. Syntax errors are recorded
and the parser resynchronizes at the next statement boundary; the result
always says explicitly whether the tree is complete.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional

from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    ASTNodeType, SourceSpan, Program, FunctionDef, Parameter, Statement,
    VariableDecl, Assignment, ExpressionStatement, BlockStatement,
    IfStatement, WhileLoop, ReturnStatement, Expression, Literal,
    Identifier, UnaryOp, BinaryOp, FunctionCall
)
from .errors import (
    ParseError, SyntaxErrorRecovery, create_unexpected_token_error,
    create_expected_type_error, create_invalid_expression_error,
    create_invalid_assignment_target_error, create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)

# Statements and expressions nested past this many levels are rejected with P020
MAX_NESTING_DEPTH = 100


class Precedence(IntEnum):
    """Operator precedence levels for Pratt parsing."""
    NONE = 0
    OR = 1              # ||
    AND = 2             # &&
    EQUALITY = 3        # ==, !=
    COMPARISON = 4      # <, >, <=, >=
    TERM = 5            # +, -
    FACTOR = 6          # *, /, %
    UNARY = 7           # !, -, +
    CALL = 8            # function calls
    PRIMARY = 9         # literals, identifiers, parentheses


@dataclass
class ParseResult:
    """Outcome of a parse: the tree that was built plus every syntax error."""
    program: Program
    errors: List[ParseError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True only when the tree is complete and error free."""
        return not self.errors

    def has_errors(self) -> bool:
        return len(self.errors) > 0


class TokenStream:
    """
    One-token lookahead over any iterable of tokens.

    Tokens are pulled lazily. A stream that ends without an EOF token
    gets one synthesized at the last known position.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._iterator = iter(tokens)
        self._previous: Optional[Token] = None
        self._current = self._pull(SourceLocation("<unknown>", 1, 1, 0))

    def _pull(self, fallback: SourceLocation) -> Token:
        token = next(self._iterator, None)
        if token is None:
            return Token(TokenType.EOF, "", None, fallback)
        return token

    def peek(self) -> Token:
        return self._current

    def previous(self) -> Token:
        return self._previous if self._previous is not None else self._current

    def advance(self) -> Token:
        """Consume and return the current token. EOF is never consumed."""
        token = self._current
        if token.type != TokenType.EOF:
            self._previous = token
            self._current = self._pull(token.location)
        return token


class Parser:
    """
    minic parser.

    Builds the AST directly from matched productions (no intermediate
    parse tree) and collects every syntax error it can recover from.
    """

    def __init__(self, tokens: Iterable[Token]):
        """
        Initialize parser with a token source.

        Args:
            tokens: List of tokens, or a token generator from the lexer
        """
        self.stream = TokenStream(tokens)
        self.errors: List[ParseError] = []
        self._depth = 0
        self._heights: Dict[Expression, int] = {}

        # Initialize parsing tables
        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize operator precedence and parsing function tables."""

        # Prefix parsing functions (for tokens that can start expressions)
        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            # Literals
            TokenType.INTEGER: self._parse_integer_literal,
            TokenType.FLOAT: self._parse_float_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean_literal,
            TokenType.FALSE: self._parse_boolean_literal,

            # Identifiers
            TokenType.IDENTIFIER: self._parse_identifier,

            # Unary operators
            TokenType.MINUS: self._parse_unary,
            TokenType.PLUS: self._parse_unary,
            TokenType.LOGICAL_NOT: self._parse_unary,

            # Grouping
            TokenType.LEFT_PAREN: self._parse_grouping,
        }

        # Infix parsing functions (for binary operators)
        self.infix_parsers: Dict[TokenType, Callable[[Expression], Expression]] = {
            TokenType.PLUS: self._parse_binary,
            TokenType.MINUS: self._parse_binary,
            TokenType.MULTIPLY: self._parse_binary,
            TokenType.DIVIDE: self._parse_binary,
            TokenType.MODULO: self._parse_binary,

            TokenType.EQUAL: self._parse_binary,
            TokenType.NOT_EQUAL: self._parse_binary,
            TokenType.LESS_THAN: self._parse_binary,
            TokenType.GREATER_THAN: self._parse_binary,
            TokenType.LESS_EQUAL: self._parse_binary,
            TokenType.GREATER_EQUAL: self._parse_binary,

            TokenType.LOGICAL_AND: self._parse_binary,
            TokenType.LOGICAL_OR: self._parse_binary,

            # Function call
            TokenType.LEFT_PAREN: self._parse_function_call,
        }

        # Operator precedence table
        self.precedences: Dict[TokenType, Precedence] = {
            TokenType.LOGICAL_OR: Precedence.OR,
            TokenType.LOGICAL_AND: Precedence.AND,

            TokenType.EQUAL: Precedence.EQUALITY,
            TokenType.NOT_EQUAL: Precedence.EQUALITY,

            TokenType.LESS_THAN: Precedence.COMPARISON,
            TokenType.GREATER_THAN: Precedence.COMPARISON,
            TokenType.LESS_EQUAL: Precedence.COMPARISON,
            TokenType.GREATER_EQUAL: Precedence.COMPARISON,

            TokenType.PLUS: Precedence.TERM,
            TokenType.MINUS: Precedence.TERM,

            TokenType.MULTIPLY: Precedence.FACTOR,
            TokenType.DIVIDE: Precedence.FACTOR,
            TokenType.MODULO: Precedence.FACTOR,

            TokenType.LEFT_PAREN: Precedence.CALL,
        }

    def parse(self) -> ParseResult:
        """
        Parse the token stream into an AST.

        Returns:
            ParseResult holding the Program and any syntax errors. The
            program is complete only if ``result.succeeded``.
        """
        start_location = self._peek().location
        declarations = []

        while not self._check(TokenType.EOF):
            try:
                declarations.append(self._parse_declaration())
            except ParseError as e:
                self._record(e)
                self._synchronize_top_level()

        program_span = SourceSpan(start_location, self._peek().location)
        program = Program(declarations, program_span)
        self._heights.clear()

        logger.debug(
            "Parsed %d declarations with %d syntax errors",
            len(declarations), len(self.errors)
        )
        return ParseResult(program, self.errors)

    # Declarations

    def _parse_declaration(self):
        """Parse a global variable or a function definition."""
        type_token = self._consume_type()
        name_token = self._consume(TokenType.IDENTIFIER, "Expected a name after the type")

        if self._check(TokenType.LEFT_PAREN):
            return self._parse_function(type_token, name_token)
        return self._parse_variable_rest(type_token, name_token)

    def _parse_function(self, type_token: Token, name_token: Token) -> FunctionDef:
        """Parse the parameter list and body of a function definition."""
        self._consume(TokenType.LEFT_PAREN, "Expected '(' after function name")
        params = self._parse_parameter_list()
        self._consume(TokenType.RIGHT_PAREN, "Expected ')' after parameters")

        body = self._parse_block_statement()

        span = SourceSpan(type_token.location, self._previous().location)
        return FunctionDef(
            name=name_token.lexeme,
            return_type=type_token.lexeme,
            params=params,
            body=body,
            span=span,
            name_location=name_token.location
        )

    def _parse_parameter_list(self) -> List[Parameter]:
        """Parse function parameter list."""
        params = []

        if not self._check(TokenType.RIGHT_PAREN):
            params.append(self._parse_parameter())
            while self._match(TokenType.COMMA):
                params.append(self._parse_parameter())

        return params

    def _parse_parameter(self) -> Parameter:
        """Parse a single function parameter."""
        type_token = self._consume_type()
        name_token = self._consume(TokenType.IDENTIFIER, "Expected parameter name")

        span = SourceSpan(type_token.location, name_token.location)
        return Parameter(type_token.lexeme, name_token.lexeme, span, name_token.location)

    def _parse_variable_rest(self, type_token: Token, name_token: Token) -> VariableDecl:
        """Parse the optional initializer and terminator of a declaration."""
        initializer = None
        if self._match(TokenType.ASSIGN):
            initializer = self._parse_expression()

        self._consume(TokenType.SEMICOLON, "Expected ';' after declaration")

        span = SourceSpan(type_token.location, self._previous().location)
        return VariableDecl(
            type_name=type_token.lexeme,
            name=name_token.lexeme,
            initializer=initializer,
            span=span,
            name_location=name_token.location
        )

    # Statements

    def _parse_block_statement(self) -> BlockStatement:
        """Parse a block statement."""
        start_token = self._consume(TokenType.LEFT_BRACE, "Expected '{'")
        statements = []

        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt:
                statements.append(stmt)

        end_token = self._consume(TokenType.RIGHT_BRACE, "Expected '}'")
        span = SourceSpan(start_token.location, end_token.location)

        return BlockStatement(statements, span)

    def _parse_statement(self) -> Optional[Statement]:
        """Parse a statement, recovering at the next statement boundary on error."""
        try:
            return self._parse_statement_required()
        except ParseError as e:
            self._record(e)
            if e.code == "P020" and self._check(TokenType.LEFT_BRACE):
                self._skip_balanced_block()
            else:
                self._synchronize_statement()
            return None

    def _parse_statement_required(self) -> Statement:
        """Parse a statement, letting syntax errors propagate."""
        self._descend()
        try:
            return self._parse_statement_kind()
        finally:
            self._depth -= 1

    def _parse_statement_kind(self) -> Statement:
        token = self._peek()

        if token.is_type_keyword:
            type_token = self._advance()
            name_token = self._consume(TokenType.IDENTIFIER, "Expected variable name")
            return self._parse_variable_rest(type_token, name_token)
        elif token.type == TokenType.IF:
            return self._parse_if_statement()
        elif token.type == TokenType.WHILE:
            return self._parse_while_statement()
        elif token.type == TokenType.RETURN:
            return self._parse_return_statement()
        elif token.type == TokenType.LEFT_BRACE:
            return self._parse_block_statement()
        else:
            return self._parse_assignment_or_expression()

    def _parse_if_statement(self) -> IfStatement:
        """Parse an if statement. A dangling else binds to the nearest if."""
        start_token = self._consume(TokenType.IF, "Expected 'if'")

        self._consume(TokenType.LEFT_PAREN, "Expected '(' after 'if'")
        condition = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN, "Expected ')' after condition")

        then_branch = self._parse_statement_required()

        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._parse_statement_required()

        span = SourceSpan(start_token.location, self._previous().location)
        return IfStatement(condition, then_branch, else_branch, span)

    def _parse_while_statement(self) -> WhileLoop:
        """Parse a while loop statement."""
        start_token = self._consume(TokenType.WHILE, "Expected 'while'")

        self._consume(TokenType.LEFT_PAREN, "Expected '(' after 'while'")
        condition = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN, "Expected ')' after condition")

        body = self._parse_statement_required()

        span = SourceSpan(start_token.location, self._previous().location)
        return WhileLoop(condition, body, span)

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse a return statement."""
        start_token = self._consume(TokenType.RETURN, "Expected 'return'")

        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._parse_expression()

        self._consume(TokenType.SEMICOLON, "Expected ';' after return")

        span = SourceSpan(start_token.location, self._previous().location)
        return ReturnStatement(value, span)

    def _parse_assignment_or_expression(self) -> Statement:
        """Parse ``name = expr;`` or ``expr;``, deciding on the token after the expression."""
        start_token = self._peek()
        expr = self._parse_expression()

        if self._check(TokenType.ASSIGN):
            assign_token = self._advance()
            if expr.node_type != ASTNodeType.IDENTIFIER:
                raise create_invalid_assignment_target_error(assign_token)
            value = self._parse_expression()
            self._consume(TokenType.SEMICOLON, "Expected ';' after assignment")
            span = SourceSpan(start_token.location, self._previous().location)
            return Assignment(expr, value, span)

        self._consume(TokenType.SEMICOLON, "Expected ';' after expression")
        span = SourceSpan(start_token.location, self._previous().location)
        return ExpressionStatement(expr, span)

    # Expressions

    def _parse_expression(self) -> Expression:
        """Parse an expression using Pratt parsing."""
        return self._parse_precedence(Precedence.OR)

    def _parse_precedence(self, precedence: Precedence) -> Expression:
        """Parse expression with given minimum precedence."""
        prefix_parser = self.prefix_parsers.get(self._peek().type)
        if prefix_parser is None:
            raise create_invalid_expression_error(self._peek())

        self._descend()
        try:
            left = prefix_parser()

            while precedence <= self._get_precedence(self._peek().type):
                infix_parser = self.infix_parsers[self._peek().type]
                left = infix_parser(left)
        finally:
            self._depth -= 1

        return left

    def _descend(self):
        if self._depth >= MAX_NESTING_DEPTH:
            raise create_nesting_too_deep_error(self._peek(), MAX_NESTING_DEPTH)
        self._depth += 1

    def _with_height(self, node: Expression, height: int, token: Token) -> Expression:
        """Record the height of an expression tree; left-associative chains grow it without recursion."""
        if height > MAX_NESTING_DEPTH:
            raise create_nesting_too_deep_error(token, MAX_NESTING_DEPTH)
        self._heights[node] = height
        return node

    def _height(self, node: Expression) -> int:
        return self._heights.get(node, 1)

    def _get_precedence(self, token_type: TokenType) -> Precedence:
        """Get precedence for a token type."""
        return self.precedences.get(token_type, Precedence.NONE)

    # Prefix parsers (tokens that can start expressions)

    def _parse_integer_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, "integer", SourceSpan(token.location, token.location))

    def _parse_float_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, "float", SourceSpan(token.location, token.location))

    def _parse_string_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, "string", SourceSpan(token.location, token.location))

    def _parse_boolean_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, "boolean", SourceSpan(token.location, token.location))

    def _parse_identifier(self) -> Identifier:
        token = self._advance()
        return Identifier(token.lexeme, SourceSpan(token.location, token.location))

    def _parse_unary(self) -> UnaryOp:
        """Parse unary operation (right associative)."""
        operator_token = self._advance()
        operand = self._parse_precedence(Precedence.UNARY)

        span = SourceSpan(operator_token.location, operand.span.end)
        node = UnaryOp(operator_token.lexeme, operand, span)
        return self._with_height(node, self._height(operand) + 1, operator_token)

    def _parse_grouping(self) -> Expression:
        """Parse parenthesized expression."""
        self._advance()  # Consume (
        expr = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN, "Expected ')' after expression")
        return expr

    # Infix parsers

    def _parse_binary(self, left: Expression) -> BinaryOp:
        """Parse binary operation (left associative)."""
        operator_token = self._advance()
        precedence = self._get_precedence(operator_token.type)
        right = self._parse_precedence(Precedence(precedence + 1))

        span = SourceSpan(left.span.start, right.span.end)
        node = BinaryOp(left, operator_token.lexeme, right, span)
        height = max(self._height(left), self._height(right)) + 1
        return self._with_height(node, height, operator_token)

    def _parse_function_call(self, left: Expression) -> FunctionCall:
        """Parse function call."""
        paren_token = self._advance()  # Consume (

        if left.node_type != ASTNodeType.IDENTIFIER:
            raise ParseError(
                "Only a function name can be called",
                paren_token.location,
                token=paren_token,
                code="P005",
                help_text="Call expressions have the form name(arguments)."
            )

        args = []
        if not self._check(TokenType.RIGHT_PAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())

        end_token = self._consume(TokenType.RIGHT_PAREN, "Expected ')' after arguments")

        span = SourceSpan(left.span.start, end_token.location)
        node = FunctionCall(left, args, span)
        height = max((self._height(arg) for arg in args), default=1) + 1
        return self._with_height(node, height, paren_token)

    # Error recovery

    def _record(self, error: ParseError):
        self.errors.append(error)
        logger.debug("%s: %s (recovering)", error.location, error.message)

    def _synchronize_statement(self):
        """Skip to just after the next ';', or to the next block delimiter."""
        while not self._check_any(SyntaxErrorRecovery.BLOCK_DELIMITERS):
            token = self._advance()
            if token.type in SyntaxErrorRecovery.STATEMENT_TERMINATORS:
                return

    def _synchronize_top_level(self):
        """Skip the rest of a broken top-level declaration."""
        while not self._check(TokenType.EOF):
            token = self._peek()
            if token.type in SyntaxErrorRecovery.STATEMENT_TERMINATORS:
                self._advance()
                return
            if token.type == TokenType.LEFT_BRACE:
                self._skip_balanced_block()
                return
            if token.type == TokenType.RIGHT_BRACE:
                self._advance()
                return
            self._advance()

    def _skip_balanced_block(self):
        depth = 0
        while not self._check(TokenType.EOF):
            token = self._advance()
            if token.type == TokenType.LEFT_BRACE:
                depth += 1
            elif token.type == TokenType.RIGHT_BRACE:
                depth -= 1
                if depth == 0:
                    return

    # Utility methods

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _check_any(self, token_types) -> bool:
        return self._peek().type in token_types

    def _advance(self) -> Token:
        """Consume and return current token."""
        return self.stream.advance()

    def _peek(self) -> Token:
        """Return current token without consuming."""
        return self.stream.peek()

    def _previous(self) -> Token:
        """Return previous token."""
        return self.stream.previous()

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()

        logger.debug("%s", message)
        raise create_unexpected_token_error(token_type, self._peek())

    def _consume_type(self) -> Token:
        """Consume a type keyword or raise error."""
        if self._peek().is_type_keyword:
            return self._advance()
        raise create_expected_type_error(self._peek())


def parse_string(source: str, filename: str = "<string>") -> Program:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        Program AST

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    result = Parser(tokens).parse()

    if result.errors:
        raise result.errors[0]

    return result.program


def parse_file(filepath: str) -> Program:
    """
    Convenience function to parse a source file.

    Args:
        filepath: Path to source file

    Returns:
        Program AST

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return parse_string(source, filepath)
