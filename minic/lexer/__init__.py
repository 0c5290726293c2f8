"""
minic Lexer Package

Implements the lexical analyzer (tokenizer) for the minic language.

Key Features:
- Maximal-munch recognition of keywords, identifiers, numbers, strings,
  operators and punctuation
- Line/column/offset tracking for every token
- Error recovery: every lexical error is recorded and skipped
- Trivia spans so tokens plus skipped text reconstruct the input exactly
"""

from .tokens import Token, TokenType, TokenCategory, SourceLocation, Trivia, TriviaKind
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import Diagnostic, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "TokenCategory",
    "SourceLocation",
    "Trivia",
    "TriviaKind",
    "Diagnostic",
    "LexerError",
    "tokenize_string",
    "tokenize_file",
]
