"""
Scope resolver for minic.

Walks a complete AST depth-first in declaration order, builds the tree
of scopes, binds every name reference to its declaring symbol, and
collects naming diagnostics:
- duplicate declarations within one scope
- references to undeclared names
- calls with the wrong number of arguments
- calls to names that are not functions

The pass never stops early; every problem in the program is reported.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from ..parser.ast_nodes import (
    ASTNode, ASTVisitor, Program, FunctionDef, Parameter, VariableDecl,
    Assignment, ExpressionStatement, BlockStatement, IfStatement, WhileLoop,
    ReturnStatement, Literal, Identifier, UnaryOp, BinaryOp, FunctionCall
)
from .symbol_table import SymbolTable, Symbol, SymbolKind, Scope, ScopeKind
from .errors import SemanticError, create_argument_count_error, create_not_callable_error

logger = logging.getLogger(__name__)


class ResolutionStatus(Enum):
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass
class ResolutionResult:
    """Results of scope resolution."""
    status: ResolutionStatus
    symbol_table: SymbolTable
    errors: List[SemanticError] = field(default_factory=list)
    resolutions: Dict[ASTNode, Symbol] = field(default_factory=dict)  # reference node -> symbol
    scopes_by_node: Dict[ASTNode, Scope] = field(default_factory=dict)  # function/block -> scope

    @property
    def succeeded(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED

    def has_errors(self) -> bool:
        """Check if resolution found any errors."""
        return len(self.errors) > 0


class ScopeResolver(ASTVisitor):
    """
    Builds scopes and resolves names for one program.

    A resolver instance is single use: create a new one per program.
    """

    def __init__(self):
        self.symbol_table = SymbolTable()
        self.errors: List[SemanticError] = []
        self.resolutions: Dict[ASTNode, Symbol] = {}
        self.scopes_by_node: Dict[ASTNode, Scope] = {}

    def resolve(self, program: Program) -> ResolutionResult:
        """
        Resolve every name in a syntactically valid program.

        Args:
            program: Program produced by a successful parse

        Returns:
            ResolutionResult with the scope tree and all diagnostics
        """
        self.visit(program)

        status = ResolutionStatus.FAILED if self.errors else ResolutionStatus.RESOLVED
        logger.debug(
            "Resolved %d references in %d scopes, %d errors",
            len(self.resolutions), len(self.symbol_table.scopes), len(self.errors)
        )

        return ResolutionResult(
            status=status,
            symbol_table=self.symbol_table,
            errors=self.errors,
            resolutions=self.resolutions,
            scopes_by_node=self.scopes_by_node
        )

    def _report(self, error: SemanticError):
        self.errors.append(error)
        logger.debug("%s: %s", error.location, error.message)

    # Top level

    def visit_program(self, node: Program):
        self.scopes_by_node[node] = self.symbol_table.global_scope

        # Pass 1: every global name, in declaration order
        for declaration in node.declarations:
            try:
                if isinstance(declaration, FunctionDef):
                    self.symbol_table.define_function(
                        declaration.name,
                        declaration.return_type,
                        [param.type_name for param in declaration.params],
                        declaration.name_location,
                        declaration=declaration
                    )
                else:
                    self.symbol_table.define_variable(
                        declaration.name,
                        declaration.type_name,
                        declaration.name_location,
                        declaration=declaration
                    )
            except SemanticError as e:
                self._report(e)

        # Pass 2: global initializers and function bodies
        for declaration in node.declarations:
            if isinstance(declaration, FunctionDef):
                self.visit(declaration)
            elif declaration.initializer is not None:
                self.visit(declaration.initializer)

    def visit_function_def(self, node: FunctionDef):
        scope = self.symbol_table.enter_scope(ScopeKind.FUNCTION, node.name)
        self.scopes_by_node[node] = scope
        self.scopes_by_node[node.body] = scope

        for param in node.params:
            self.visit(param)

        # The outermost body block shares the function scope
        for statement in node.body.statements:
            self.visit(statement)

        self.symbol_table.exit_scope()

    def visit_parameter(self, node: Parameter):
        try:
            self.symbol_table.define_variable(
                node.name, node.type_name, node.name_location,
                kind=SymbolKind.PARAMETER, declaration=node
            )
        except SemanticError as e:
            self._report(e)

    # Statements

    def visit_variable_decl(self, node: VariableDecl):
        # The initializer cannot see the name being declared
        if node.initializer is not None:
            self.visit(node.initializer)

        try:
            self.symbol_table.define_variable(
                node.name, node.type_name, node.name_location, declaration=node
            )
        except SemanticError as e:
            self._report(e)

    def visit_assignment(self, node: Assignment):
        symbol = self.visit(node.target)
        if symbol is not None:
            self.resolutions[node] = symbol
        self.visit(node.value)

    def visit_expression_statement(self, node: ExpressionStatement):
        self.visit(node.expression)

    def visit_block_statement(self, node: BlockStatement):
        scope = self.symbol_table.enter_scope(ScopeKind.BLOCK, "block")
        self.scopes_by_node[node] = scope

        for statement in node.statements:
            self.visit(statement)

        self.symbol_table.exit_scope()

    def visit_if_statement(self, node: IfStatement):
        self.visit(node.condition)
        self.visit(node.then_branch)
        if node.else_branch is not None:
            self.visit(node.else_branch)

    def visit_while_loop(self, node: WhileLoop):
        self.visit(node.condition)
        self.visit(node.body)

    def visit_return_statement(self, node: ReturnStatement):
        if node.value is not None:
            self.visit(node.value)

    # Expressions

    def visit_literal(self, node: Literal):
        return None

    def visit_identifier(self, node: Identifier):
        try:
            symbol = self.symbol_table.lookup_symbol(node.name, node.span.start, node=node)
        except SemanticError as e:
            self._report(e)
            return None

        self.resolutions[node] = symbol
        return symbol

    def visit_unary_op(self, node: UnaryOp):
        self.visit(node.operand)

    def visit_binary_op(self, node: BinaryOp):
        self.visit(node.left)
        self.visit(node.right)

    def visit_function_call(self, node: FunctionCall):
        symbol = self.visit(node.callee)

        if symbol is not None:
            self.resolutions[node] = symbol
            if not symbol.is_function:
                self._report(create_not_callable_error(
                    symbol.name, symbol.kind.value, node.callee.span.start,
                    declared_at=symbol.location, node=node
                ))
            elif symbol.arity != len(node.args):
                self._report(create_argument_count_error(
                    symbol.name, symbol.arity, len(node.args), node.callee.span.start, node=node
                ))

        for arg in node.args:
            self.visit(arg)


def resolve_program(program: Program) -> ResolutionResult:
    """Convenience function: resolve a program with a fresh resolver."""
    return ScopeResolver().resolve(program)
