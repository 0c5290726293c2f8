"""
Error handling for the minic parser.

Provides error reporting with source location information, error
recovery helpers, and diagnostics for syntax errors.
"""

from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation, TYPE_KEYWORDS
from ..lexer.errors import Diagnostic, ErrorRecovery


class ParseError(Exception):
    """
    Exception raised when the parser meets a grammar violation.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    Provides the token sets the parser resynchronizes on and suggestion
    helpers, allowing the collection of multiple errors in a single pass.
    """

    # Skipping stops after one of these
    STATEMENT_TERMINATORS = frozenset({
        TokenType.SEMICOLON,
    })

    # Skipping stops before one of these
    BLOCK_DELIMITERS = frozenset({
        TokenType.LEFT_BRACE,
        TokenType.RIGHT_BRACE,
        TokenType.EOF,
    })

    TOKEN_DISPLAY = {
        TokenType.SEMICOLON: "';'",
        TokenType.COMMA: "','",
        TokenType.LEFT_PAREN: "'('",
        TokenType.RIGHT_PAREN: "')'",
        TokenType.LEFT_BRACE: "'{'",
        TokenType.RIGHT_BRACE: "'}'",
        TokenType.ASSIGN: "'='",
        TokenType.IDENTIFIER: "identifier",
        TokenType.EOF: "end of input",
    }

    @staticmethod
    def describe(token_type: TokenType) -> str:
        return SyntaxErrorRecovery.TOKEN_DISPLAY.get(token_type, token_type.name)

    @staticmethod
    def describe_token(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of input"
        return f"'{token.lexeme}'"

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            TokenType.SEMICOLON: ["Add a semicolon ';' to end the statement"],
            TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
            TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
            TokenType.LEFT_BRACE: ["Add an opening brace '{' to start a block"],
            TokenType.LEFT_PAREN: ["Add an opening parenthesis '('"],
            TokenType.IDENTIFIER: ["Provide a name here"],
        }

        return list(token_suggestions.get(expected, []))

    @staticmethod
    def suggest_type_names(found: Token) -> List[str]:
        """Suggest type keywords close to an unknown word used as a type."""
        if found.type != TokenType.IDENTIFIER:
            return []
        candidates = ErrorRecovery.suggest_keyword_corrections(found.lexeme)
        type_names = {"int", "float", "bool", "string", "void"}
        return [f"Did you mean '{name}'?" for name in candidates if name in type_names]


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P005": "Invalid expression",
    "P010": "Unexpected end of input",
    "P013": "Invalid assignment target",
    "P020": "Nesting too deep",
}


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected: Union[TokenType, str], found: Token) -> ParseError:
    """Create an error for an unexpected token."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error(
            SyntaxErrorRecovery.describe(expected) if isinstance(expected, TokenType) else expected,
            found
        )

    if isinstance(expected, TokenType):
        expected_str = SyntaxErrorRecovery.describe(expected)
        suggestions = SyntaxErrorRecovery.suggest_missing_token(expected)
    else:
        expected_str = expected
        suggestions = []
    found_str = SyntaxErrorRecovery.describe_token(found)

    return ParseError(
        message=f"Expected {expected_str}, found {found_str}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"The parser expected to see {expected_str} at this position, but found {found_str} instead.",
        suggestions=suggestions
    )


def create_expected_type_error(found: Token) -> ParseError:
    """Create an error for a missing or unknown type name."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error("a type name", found)

    type_names = ", ".join(sorted(t.name.lower().replace("_kw", "") for t in TYPE_KEYWORDS))
    return ParseError(
        message=f"Expected a type name, found {SyntaxErrorRecovery.describe_token(found)}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"Declarations start with one of: {type_names}.",
        suggestions=SyntaxErrorRecovery.suggest_type_names(found)
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error("an expression", found)

    return ParseError(
        message=f"Invalid expression: unexpected {SyntaxErrorRecovery.describe_token(found)}",
        location=found.location,
        token=found,
        code="P005",
        help_text="An expression must start with a literal, a name, '(' or a unary operator.",
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_invalid_assignment_target_error(found: Token) -> ParseError:
    """Create an error for assigning to something that is not a name."""
    return ParseError(
        message="Invalid assignment target",
        location=found.location,
        token=found,
        code="P013",
        help_text="Only a variable name may appear on the left of '='.",
        suggestions=["Use '==' for comparison"]
    )


def create_unexpected_eof_error(expected: str, found: Token) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=found.location,
        token=found,
        code="P010",
        help_text=f"The parser reached the end of the file while expecting {expected}.",
        suggestions=[f"Add the missing {expected}", "Check for unclosed braces"]
    )


def create_nesting_too_deep_error(found: Token, limit: int) -> ParseError:
    """Create an error for statements or expressions nested past the parser's limit."""
    return ParseError(
        message=f"Nesting too deep: more than {limit} levels",
        location=found.location,
        token=found,
        code="P020",
        help_text=f"Blocks, statements and expressions may be nested at most {limit} levels deep.",
        suggestions=["Split the expression using temporary variables", "Move inner blocks into functions"]
    )
