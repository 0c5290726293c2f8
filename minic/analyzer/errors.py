"""
Scope resolution error handling for minic.

Every naming problem the resolver finds is a SemanticError subclass
carrying a Diagnostic, so all stages report errors in the same shape.
"""

from typing import Optional, List

from ..lexer.tokens import SourceLocation
from ..lexer.errors import Diagnostic
from ..parser.ast_nodes import ASTNode


class SemanticError(Exception):
    """
    Exception raised when scope resolution finds a naming error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        node: Optional[ASTNode] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        related_locations: Optional[List[SourceLocation]] = None
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
        self.node = node
        self.related_locations = related_locations or []

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
        result = str(self.diagnostic)

        # Add related locations if any
        if self.related_locations:
            result += "\nRelated locations:\n"
            for loc in self.related_locations:
                result += f"  --> {loc}\n"

        return result


class DuplicateDeclaration(SemanticError):
    """A name declared twice in the same scope."""

    def __init__(self, name: str, location: SourceLocation, **kwargs):
        self.name = name
        super().__init__(location=location, **kwargs)


class UndeclaredIdentifier(SemanticError):
    """A reference to a name no enclosing scope declares."""

    def __init__(self, name: str, location: SourceLocation, **kwargs):
        self.name = name
        super().__init__(location=location, **kwargs)


class ArgumentCountMismatch(SemanticError):
    """A call whose argument count differs from the function's arity."""

    def __init__(self, name: str, expected: int, actual: int, location: SourceLocation, **kwargs):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(location=location, **kwargs)


class NotCallable(SemanticError):
    """A call whose target resolves to something other than a function."""

    def __init__(self, name: str, location: SourceLocation, **kwargs):
        self.name = name
        super().__init__(location=location, **kwargs)


# Scope resolution error codes
SEMANTIC_ERROR_CODES = {
    "S010": "Undeclared identifier",
    "S011": "Duplicate declaration",
    "S050": "Argument count mismatch",
    "S053": "Not callable",
}


# Helper functions for creating specific semantic errors

def create_duplicate_declaration_error(
    name: str,
    location: SourceLocation,
    previous_location: SourceLocation,
    node: Optional[ASTNode] = None
) -> DuplicateDeclaration:
    """Create a duplicate declaration error."""
    return DuplicateDeclaration(
        name,
        location,
        message=f"Duplicate declaration of '{name}'",
        node=node,
        code="S011",
        help_text=f"'{name}' is already declared in this scope.",
        suggestions=[f"Rename this '{name}'", "Remove one of the declarations"],
        related_locations=[previous_location]
    )


def create_undeclared_identifier_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    similar_names: Optional[List[str]] = None
) -> UndeclaredIdentifier:
    """Create an undeclared identifier error."""
    suggestions = []
    if similar_names:
        suggestions.extend([f"Did you mean '{similar}'?" for similar in similar_names[:3]])

    suggestions.extend([
        f"Declare '{name}' before using it",
        "Check for typos in the name",
    ])

    return UndeclaredIdentifier(
        name,
        location,
        message=f"Undeclared identifier '{name}'",
        node=node,
        code="S010",
        help_text=f"No enclosing scope declares '{name}'.",
        suggestions=suggestions
    )


def create_argument_count_error(
    name: str,
    expected: int,
    actual: int,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> ArgumentCountMismatch:
    """Create a function arity mismatch error."""
    return ArgumentCountMismatch(
        name,
        expected,
        actual,
        location,
        message=f"Function '{name}' expects {expected} arguments, got {actual}",
        node=node,
        code="S050",
        help_text="The function call has the wrong number of arguments.",
        suggestions=[
            f"Provide exactly {expected} arguments",
            "Check the function signature",
        ]
    )


def create_not_callable_error(
    name: str,
    kind: str,
    location: SourceLocation,
    declared_at: Optional[SourceLocation] = None,
    node: Optional[ASTNode] = None
) -> NotCallable:
    """Create an error for calling something that is not a function."""
    return NotCallable(
        name,
        location,
        message=f"'{name}' is a {kind}, not a function",
        node=node,
        code="S053",
        help_text=f"Only functions can be called, but '{name}' names a {kind}.",
        suggestions=[f"Check whether a local {kind} shadows a function named '{name}'"],
        related_locations=[declared_at] if declared_at else None
    )
