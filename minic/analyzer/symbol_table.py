"""
Symbol table and scope management for minic scope resolution.

Implements hierarchical symbol tables with support for:
- Lexical scoping (global, function and block scopes)
- Shadowing across nesting levels
- Duplicate detection within a single scope
- Similar-name suggestions for undeclared identifiers

Ownership runs one way: a scope owns its child scopes and its symbols.
Parent links and a symbol's link to its declaring scope are weak.
"""

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..lexer.tokens import SourceLocation
from ..lexer.errors import ErrorRecovery
from ..parser.ast_nodes import ASTNode
from .errors import create_duplicate_declaration_error, create_undeclared_identifier_error


class SymbolKind(Enum):
    """Kinds of symbols in the symbol table."""
    VARIABLE = "variable"
    PARAMETER = "parameter"
    FUNCTION = "function"


@dataclass(frozen=True, eq=False)
class Symbol:
    """
    A declared name. Immutable once inserted.

    For functions ``symbol_type`` is the return type and
    ``parameter_types`` lists the declared parameter types.
    """
    name: str
    kind: SymbolKind
    symbol_type: str
    location: SourceLocation
    scope_ref: 'weakref.ref' = field(repr=False)
    parameter_types: Tuple[str, ...] = ()
    declaration: Optional[ASTNode] = field(default=None, repr=False)

    @property
    def scope(self) -> Optional['Scope']:
        """The scope that declared this symbol."""
        return self.scope_ref()

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    @property
    def is_function(self) -> bool:
        return self.kind == SymbolKind.FUNCTION

    def signature(self) -> str:
        if self.is_function:
            return f"{self.symbol_type}({', '.join(self.parameter_types)})"
        return self.symbol_type

    def __str__(self) -> str:
        return f"{self.name}: {self.signature()}"


class ScopeKind(Enum):
    """Kinds of scopes."""
    GLOBAL = "global"
    FUNCTION = "function"
    BLOCK = "block"


class Scope:
    """Represents a lexical scope."""

    def __init__(self, kind: ScopeKind, name: str, parent: Optional['Scope'] = None):
        self.kind = kind
        self.name = name
        self.symbols: Dict[str, Symbol] = {}
        self.children: List['Scope'] = []
        self._parent = weakref.ref(parent) if parent is not None else None
        self.depth = parent.depth + 1 if parent is not None else 0

        if parent is not None:
            parent.children.append(self)

    @property
    def parent(self) -> Optional['Scope']:
        return self._parent() if self._parent is not None else None

    def define_symbol(self, symbol: Symbol) -> None:
        """Define a symbol in this scope. The first declaration of a name wins."""
        existing = self.symbols.get(symbol.name)
        if existing is not None:
            raise create_duplicate_declaration_error(
                symbol.name, symbol.location, existing.location, node=symbol.declaration
            )

        self.symbols[symbol.name] = symbol

    def lookup_symbol(self, name: str) -> Optional[Symbol]:
        """Look up a symbol in this scope and parent scopes."""
        scope = self
        while scope is not None:
            if name in scope.symbols:
                return scope.symbols[name]
            scope = scope.parent
        return None

    def get_all_symbols(self) -> Dict[str, Symbol]:
        """Get all symbols visible in this scope."""
        result = {}

        # Add parent symbols first
        parent = self.parent
        if parent is not None:
            result.update(parent.get_all_symbols())

        # Add local symbols (can override parent symbols)
        result.update(self.symbols)

        return result

    def get_similar_names(self, name: str, max_distance: int = 2) -> List[str]:
        """Get visible names similar to the given name (for error suggestions)."""
        similar_names = []

        for symbol_name in self.get_all_symbols():
            distance = ErrorRecovery.edit_distance(name.lower(), symbol_name.lower())
            if distance <= max_distance:
                similar_names.append((symbol_name, distance))

        # Sort by distance and return names only
        similar_names.sort(key=lambda x: x[1])
        return [similar for similar, _ in similar_names[:5]]

    def __str__(self) -> str:
        symbol_count = len(self.symbols)
        return f"Scope({self.kind.value}, {self.name}, {symbol_count} symbols)"


class SymbolTable:
    """
    The tree of scopes built for one program.

    Owns the global scope and keeps every scope in creation order.
    """

    def __init__(self):
        self.global_scope = Scope(ScopeKind.GLOBAL, "global")
        self.current_scope = self.global_scope
        self.scopes: List[Scope] = [self.global_scope]

    def enter_scope(self, kind: ScopeKind, name: str) -> Scope:
        """Enter a new scope."""
        new_scope = Scope(kind, name, parent=self.current_scope)
        self.current_scope = new_scope
        self.scopes.append(new_scope)
        return new_scope

    def exit_scope(self) -> Optional[Scope]:
        """Exit the current scope and return to parent."""
        parent = self.current_scope.parent
        if parent is not None:
            old_scope = self.current_scope
            self.current_scope = parent
            return old_scope
        return None

    def define_symbol(self, symbol: Symbol) -> None:
        """Define a symbol in the current scope."""
        self.current_scope.define_symbol(symbol)

    def lookup_symbol(self, name: str, location: SourceLocation, node: Optional[ASTNode] = None) -> Symbol:
        """Look up a symbol and raise error if not found."""
        symbol = self.current_scope.lookup_symbol(name)

        if symbol is None:
            similar_names = self.current_scope.get_similar_names(name)
            raise create_undeclared_identifier_error(name, location, node=node, similar_names=similar_names)

        return symbol

    def define_variable(self, name: str, type_name: str, location: SourceLocation,
                        kind: SymbolKind = SymbolKind.VARIABLE,
                        declaration: Optional[ASTNode] = None) -> Symbol:
        """Define a variable or parameter in the current scope."""
        symbol = Symbol(
            name=name,
            kind=kind,
            symbol_type=type_name,
            location=location,
            scope_ref=weakref.ref(self.current_scope),
            declaration=declaration
        )
        self.define_symbol(symbol)
        return symbol

    def define_function(self, name: str, return_type: str, parameter_types: List[str],
                        location: SourceLocation, declaration: Optional[ASTNode] = None) -> Symbol:
        """Define a function in the current scope."""
        symbol = Symbol(
            name=name,
            kind=SymbolKind.FUNCTION,
            symbol_type=return_type,
            location=location,
            scope_ref=weakref.ref(self.current_scope),
            parameter_types=tuple(parameter_types),
            declaration=declaration
        )
        self.define_symbol(symbol)
        return symbol

    def __str__(self) -> str:
        return f"SymbolTable({len(self.scopes)} scopes)"
