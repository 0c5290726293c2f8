"""
minic Scope Resolution Package

Builds nested symbol tables for a parsed program and reports naming
errors: duplicates, undeclared names, wrong argument counts and calls
to non-functions.
"""

from .scope_resolver import ScopeResolver, ResolutionResult, ResolutionStatus, resolve_program
from .symbol_table import SymbolTable, Symbol, SymbolKind, Scope, ScopeKind
from .errors import (
    SemanticError, DuplicateDeclaration, UndeclaredIdentifier,
    ArgumentCountMismatch, NotCallable
)

__all__ = [
    "ScopeResolver",
    "ResolutionResult",
    "ResolutionStatus",
    "resolve_program",
    "SymbolTable",
    "Symbol",
    "SymbolKind",
    "Scope",
    "ScopeKind",
    "SemanticError",
    "DuplicateDeclaration",
    "UndeclaredIdentifier",
    "ArgumentCountMismatch",
    "NotCallable",
]
