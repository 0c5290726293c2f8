"""
Error handling for the minic lexer.

Provides error reporting with source location information and
recovery suggestions. The Diagnostic record defined here is shared by
the parser and the scope resolver.
"""

from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A reported problem (error, warning, info) with its position and cause."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        code = f"[{self.code}]" if self.code else ""
        result = f"{severity_prefix}{code}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result

    def summary(self) -> str:
        """One-line form: ``file:line:col: error[code]: message``."""
        code = f"[{self.code}]" if self.code else ""
        return f"{self.location}: {self.severity}{code}: {self.message}"


class LexerError(Exception):
    """
    Exception raised when the lexer cannot form a token.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
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


class ErrorRecovery:
    """
    Utilities for error recovery in the lexer.

    Provides suggestions that help the user fix the input once all
    errors of a single pass have been collected.
    """

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str) -> List[str]:
        """Suggest corrections for misspelled keywords using edit distance."""
        from .tokens import KEYWORDS

        suggestions = []
        for keyword in KEYWORDS.keys():
            distance = ErrorRecovery.edit_distance(invalid_word.lower(), keyword)
            if distance <= 2:  # Allow up to 2 character differences
                suggestions.append(keyword)

        return sorted(suggestions, key=lambda k: ErrorRecovery.edit_distance(invalid_word.lower(), k))[:3]

    @staticmethod
    def suggest_operator_corrections(invalid_char: str) -> List[str]:
        """Suggest operators that start with the given character."""
        from .tokens import OPERATORS

        return sorted(op for op in OPERATORS if op.startswith(invalid_char) and op != invalid_char)[:3]

    @staticmethod
    def edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery.edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L003": "Invalid numeric literal",
    "L006": "Invalid escape sequence",
    "L011": "Unterminated block comment",
}


# Helper functions for creating common errors

def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for an invalid character."""
    suggestions = ErrorRecovery.suggest_operator_corrections(char)

    if suggestions:
        help_text = f"'{char}' is only valid as part of an operator."
    elif char.isprintable():
        help_text = f"The character '{char}' is not valid in minic source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Invalid character: '{char}'",
        location=location,
        code="L001",
        help_text=help_text,
        suggestions=[f"Did you mean '{op}'?" for op in suggestions]
    )


def create_unterminated_string_error(location: SourceLocation) -> LexerError:
    """Create an error for an unterminated string literal."""
    return LexerError(
        message="Unterminated string literal",
        location=location,
        code="L002",
        help_text="String literals must be closed with a matching '\"' on the same line.",
        suggestions=["Add a closing '\"' quote", "Use '\\n' for a newline inside a string"]
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    return LexerError(
        message=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        code="L003",
        help_text=reason,
        suggestions=["Check the numeric format", "Separate a number from a following name with a space"]
    )


def create_invalid_escape_error(sequence: str, location: SourceLocation) -> LexerError:
    """Create an error for an unknown escape sequence in a string."""
    return LexerError(
        message=f"Invalid escape sequence: '{sequence}'",
        location=location,
        code="L006",
        help_text="Supported escapes are \\n, \\t, \\r, \\\\, \\\", \\' and \\0.",
        suggestions=["Escape a literal backslash as '\\\\'"]
    )


def create_unterminated_comment_error(location: SourceLocation) -> LexerError:
    """Create an error for a block comment that is never closed."""
    return LexerError(
        message="Unterminated block comment",
        location=location,
        code="L011",
        help_text="Block comments opened with '/*' must be closed with '*/'.",
        suggestions=["Add a closing '*/'"]
    )
