"""
Token definitions for the minic lexer.

This module defines all token types supported by minic, including:
- Keywords (control flow, type names, boolean literals)
- Operators (arithmetic, comparison, logical, assignment)
- Literals (integers, floats, strings)
- Identifiers
- Punctuation and delimiters

Each fine-grained TokenType also belongs to one of the coarse categories
reported in token dumps (keyword, identifier, literal kinds, operator,
punctuation, end-of-file).
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict


class TokenCategory(Enum):
    """Coarse token kinds used by diagnostics and token dumps."""
    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    INTEGER_LITERAL = "integer-literal"
    FLOAT_LITERAL = "float-literal"
    STRING_LITERAL = "string-literal"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    EOF = "end-of-file"


class TokenType(Enum):
    """
    Enumeration of all token types in minic.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of file

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER = auto()                # 42
    FLOAT = auto()                  # 3.14, 1e-4
    STRING = auto()                 # "hello\n"

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # counter, _tmp1

    # Type keywords
    INT = auto()                    # int
    FLOAT_KW = auto()               # float
    BOOL = auto()                   # bool
    STRING_KW = auto()              # string
    VOID = auto()                   # void

    # Control flow keywords
    IF = auto()                     # if
    ELSE = auto()                   # else
    WHILE = auto()                  # while
    RETURN = auto()                 # return

    # Boolean literals
    TRUE = auto()                   # true
    FALSE = auto()                  # false

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    MODULO = auto()                 # %

    ASSIGN = auto()                 # =

    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    LOGICAL_AND = auto()            # &&
    LOGICAL_OR = auto()             # ||
    LOGICAL_NOT = auto()            # !

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and token dumps.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the minic language.

    Contains the token type, lexeme (raw text), semantic value,
    and source location for error reporting.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed/semantic value (e.g., int for INTEGER)
    location: SourceLocation        # Source location

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def category(self) -> TokenCategory:
        """The coarse kind of this token."""
        return TOKEN_CATEGORIES[self.type]

    @property
    def is_type_keyword(self) -> bool:
        """Check if this token names a type."""
        return self.type in TYPE_KEYWORDS


class TriviaKind(Enum):
    """Kinds of source text that do not produce tokens."""
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    SKIPPED = "skipped"             # discarded while recovering from a lexer error


@dataclass(frozen=True)
class Trivia:
    """A span of source text skipped by the lexer."""
    kind: TriviaKind
    text: str
    location: SourceLocation


# Lookup tables for keyword/operator recognition

KEYWORDS: Dict[str, TokenType] = {
    # Types
    "int": TokenType.INT,
    "float": TokenType.FLOAT_KW,
    "bool": TokenType.BOOL,
    "string": TokenType.STRING_KW,
    "void": TokenType.VOID,

    # Control flow
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "return": TokenType.RETURN,

    # Literals
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

TYPE_KEYWORDS = frozenset({
    TokenType.INT,
    TokenType.FLOAT_KW,
    TokenType.BOOL,
    TokenType.STRING_KW,
    TokenType.VOID,
})

OPERATORS: Dict[str, TokenType] = {
    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,

    # Assignment
    "=": TokenType.ASSIGN,

    # Comparison
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,

    # Logical
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,
    "!": TokenType.LOGICAL_NOT,
}

PUNCTUATION: Dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}

# The lexer tries candidates of MAX_SYMBOL_LENGTH first (maximal munch)
SYMBOLS: Dict[str, TokenType] = {**OPERATORS, **PUNCTUATION}
MAX_SYMBOL_LENGTH = max(len(symbol) for symbol in SYMBOLS)

def _build_categories() -> Dict[TokenType, TokenCategory]:
    categories = {
        TokenType.EOF: TokenCategory.EOF,
        TokenType.IDENTIFIER: TokenCategory.IDENTIFIER,
        TokenType.INTEGER: TokenCategory.INTEGER_LITERAL,
        TokenType.FLOAT: TokenCategory.FLOAT_LITERAL,
        TokenType.STRING: TokenCategory.STRING_LITERAL,
    }
    for token_type in KEYWORDS.values():
        categories[token_type] = TokenCategory.KEYWORD
    for token_type in OPERATORS.values():
        categories[token_type] = TokenCategory.OPERATOR
    for token_type in PUNCTUATION.values():
        categories[token_type] = TokenCategory.PUNCTUATION
    return categories


TOKEN_CATEGORIES: Dict[TokenType, TokenCategory] = _build_categories()
