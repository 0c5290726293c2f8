"""
minic Lexer - turns source text into a stream of tokens.

The lexer keeps no state beyond the source text and its cursor, so two
independent runs over the same text always agree token for token. Every
character of the input ends up either in a token lexeme or in a trivia
span (whitespace, comments, text skipped while recovering from an error).
"""

import logging
import re
import string
from typing import Iterator, List

from .tokens import (
    Token, TokenType, SourceLocation, Trivia, TriviaKind,
    KEYWORDS, SYMBOLS, MAX_SYMBOL_LENGTH
)
from .errors import (
    LexerError, create_invalid_character_error,
    create_unterminated_string_error, create_invalid_number_error,
    create_invalid_escape_error, create_unterminated_comment_error
)

logger = logging.getLogger(__name__)

NUMBER_GLUE = frozenset(string.ascii_letters + string.digits + '_.')

ESCAPE_SEQUENCES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    '"': '"',
    "'": "'",
    '0': '\0',
}


class Lexer:
    """
    minic lexical analyzer.

    Converts source code text into a stream of tokens, recording every
    lexical error and resynchronizing after it so one pass reports as
    many problems as possible.
    """

    def __init__(self, source: str, filename: str = "<unknown>", recover: bool = True):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
            recover: Keep tokenizing after an error (otherwise stop at the
                first error and emit EOF)
        """
        self.source = source
        self.filename = filename
        self.recover = recover
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.trivia: List[Trivia] = []
        self.errors: List[LexerError] = []

        # Precompile regex patterns for efficiency
        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""
        self.identifier_pattern = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
        self.number_pattern = re.compile(r'[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?')

        # Everything glued to a malformed number is skipped with it
        self.number_run_pattern = re.compile(r'[A-Za-z0-9_.]*')

        self.whitespace_pattern = re.compile(r'\s+')

    def _reset(self):
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []
        self.trivia = []
        self.errors = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens ending with a single EOF token
        """
        return list(self.iter_tokens())

    def iter_tokens(self) -> Iterator[Token]:
        """
        Yield tokens one at a time, ending with EOF.

        Each call starts a fresh pass over the source.
        """
        self._reset()

        while self.pos < len(self.source):
            start = self._location()
            try:
                if self._skip_trivia():
                    continue
                token = self._next_token()
            except LexerError as e:
                self.errors.append(e)
                logger.debug("%s: %s", e.location, e.message)
                # Resynchronize past the offending lexeme
                if self.pos == start.offset:
                    self._advance()
                self.trivia.append(Trivia(
                    TriviaKind.SKIPPED, self.source[start.offset:self.pos], start
                ))
                if not self.recover:
                    break
                continue

            self.tokens.append(token)
            yield token

        eof = Token(TokenType.EOF, "", None, self._location())
        self.tokens.append(eof)
        logger.debug(
            "Tokenized %s: %d tokens, %d errors",
            self.filename, len(self.tokens), len(self.errors)
        )
        yield eof

    def _next_token(self) -> Token:
        """Get the next token from the source."""
        start = self._location()
        current_char = self.source[self.pos]

        # Numbers
        if '0' <= current_char <= '9':
            return self._tokenize_number(start)

        # Identifiers and keywords
        if self.identifier_pattern.match(self.source, self.pos):
            return self._tokenize_identifier_or_keyword(start)

        # String literals
        if current_char == '"':
            return self._tokenize_string(start)

        # Operators and punctuation (longest match first)
        for length in range(MAX_SYMBOL_LENGTH, 0, -1):
            candidate = self.source[self.pos:self.pos + length]
            if len(candidate) == length and candidate in SYMBOLS:
                self._advance_by(length)
                return Token(SYMBOLS[candidate], candidate, None, start)

        self._advance()
        raise create_invalid_character_error(current_char, start)

    def _tokenize_number(self, start: SourceLocation) -> Token:
        """Tokenize integer or float literals."""
        match = self.number_pattern.match(self.source, self.pos)
        lexeme = match.group(0)
        end = match.end()

        if end < len(self.source) and self._is_number_glue(self.source[end]):
            run = self.number_run_pattern.match(self.source, self.pos).group(0)
            self._advance_by(len(run))
            raise create_invalid_number_error(run, start, self._describe_bad_number(run))

        self._advance_by(len(lexeme))

        if '.' in lexeme or 'e' in lexeme or 'E' in lexeme:
            return Token(TokenType.FLOAT, lexeme, float(lexeme), start)
        return Token(TokenType.INTEGER, lexeme, int(lexeme), start)

    @staticmethod
    def _is_number_glue(char: str) -> bool:
        return char in NUMBER_GLUE

    @staticmethod
    def _describe_bad_number(run: str) -> str:
        if run.count('.') > 1:
            return "A numeric literal can contain at most one decimal point."
        if run.endswith('.') or '._' in run or re.search(r'\.[^0-9]', run):
            return "Expected digits after the decimal point."
        if re.match(r'^\d+(\.\d+)?[eE]$', run):
            return "Expected digits after the exponent marker."
        return "Numbers cannot be immediately followed by letters or '_'."

    def _tokenize_identifier_or_keyword(self, start: SourceLocation) -> Token:
        """Tokenize an identifier or keyword."""
        lexeme = self.identifier_pattern.match(self.source, self.pos).group(0)
        self._advance_by(len(lexeme))

        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None

        # Handle boolean literals
        if token_type in (TokenType.TRUE, TokenType.FALSE):
            value = token_type == TokenType.TRUE

        return Token(token_type, lexeme, value, start)

    def _tokenize_string(self, start: SourceLocation) -> Token:
        """Tokenize a double-quoted, single-line string literal."""
        self._advance()  # Skip opening quote

        value_parts = []
        bad_escape = None

        while True:
            if self.pos >= len(self.source) or self.source[self.pos] == '\n':
                raise create_unterminated_string_error(start)

            char = self.source[self.pos]
            if char == '"':
                self._advance()  # Skip closing quote
                break

            if char == '\\':
                escape_location = self._location()
                self._advance()
                if self.pos >= len(self.source) or self.source[self.pos] == '\n':
                    raise create_unterminated_string_error(start)
                escape_char = self.source[self.pos]
                self._advance()
                if escape_char in ESCAPE_SEQUENCES:
                    value_parts.append(ESCAPE_SEQUENCES[escape_char])
                elif bad_escape is None:
                    bad_escape = create_invalid_escape_error('\\' + escape_char, escape_location)
                continue

            value_parts.append(char)
            self._advance()

        # The whole literal is discarded so the error is reported once
        if bad_escape is not None:
            raise bad_escape

        lexeme = self.source[start.offset:self.pos]
        return Token(TokenType.STRING, lexeme, ''.join(value_parts), start)

    def _skip_trivia(self) -> bool:
        """Skip one run of whitespace or one comment. Returns True if anything was skipped."""
        start = self._location()

        match = self.whitespace_pattern.match(self.source, self.pos)
        if match:
            self._advance_by(len(match.group(0)))
            self.trivia.append(Trivia(TriviaKind.WHITESPACE, match.group(0), start))
            return True

        # Line comments //
        if self.source.startswith('//', self.pos):
            end = self.source.find('\n', self.pos)
            if end == -1:
                end = len(self.source)
            text = self.source[self.pos:end]
            self._advance_by(len(text))
            self.trivia.append(Trivia(TriviaKind.COMMENT, text, start))
            return True

        # Block comments /* */
        if self.source.startswith('/*', self.pos):
            end = self.source.find('*/', self.pos + 2)
            if end == -1:
                self._advance_by(len(self.source) - self.pos)
                raise create_unterminated_comment_error(start)
            text = self.source[self.pos:end + 2]
            self._advance_by(len(text))
            self.trivia.append(Trivia(TriviaKind.COMMENT, text, start))
            return True

        return False

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0

    def get_diagnostics(self) -> List[LexerError]:
        """Get all diagnostics collected by the last pass."""
        return list(self.errors)


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        # Raise the first error encountered
        raise lexer.errors[0]

    return tokens


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Args:
        filepath: Path to source file

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
