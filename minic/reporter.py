"""
Human-readable report of a front-end run.

The report goes to one stream and diagnostics to another, in this order:
token dump, parse status, program summary, optional AST listing,
function signatures, scope diagnostics, symbol tables.
"""

import sys
from typing import List, Optional, TextIO

from .lexer import Token
from .parser.ast_nodes import (
    ASTVisitor, Program, FunctionDef, Parameter, VariableDecl, Assignment,
    ExpressionStatement, BlockStatement, IfStatement, WhileLoop,
    ReturnStatement, Literal, Identifier, UnaryOp, BinaryOp, FunctionCall
)
from .analyzer import SymbolTable
from .pipeline import CompilationContext

RULE = "=" * 22


def format_token(token: Token) -> str:
    """One token dump line: category, type, lexeme, position."""
    location = token.location
    return (f"{token.category.value:<15} {token.type.name:<14} "
            f"{token.lexeme!r:<12} {location.line}:{location.column}")


def format_diagnostic(error, detailed: bool = False) -> str:
    """One-line form of any stage's error, or its full rendering when detailed."""
    if detailed:
        return str(error).rstrip()
    return error.diagnostic.summary()


class ASTPrinter(ASTVisitor):
    """Renders an AST as an indented outline, one node per line."""

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self.lines: List[str] = []
        self.depth = 0

    def render(self, program: Program) -> str:
        self.lines = []
        self.depth = 0
        self.visit(program)
        return "\n".join(self.lines)

    def _emit(self, text: str):
        self.lines.append(self.indent * self.depth + text)

    def _nested(self, label: Optional[str], node):
        self.depth += 1
        if label:
            self._emit(label)
            self.depth += 1
            self.visit(node)
            self.depth -= 1
        else:
            self.visit(node)
        self.depth -= 1

    def visit_program(self, node: Program):
        self._emit(f"Program ({len(node.functions)} functions, {len(node.globals)} globals)")
        for declaration in node.declarations:
            self._nested(None, declaration)

    def visit_function_def(self, node: FunctionDef):
        self._emit(f"Function {node.name} -> {node.return_type}")
        for param in node.params:
            self._nested(None, param)
        self._nested(None, node.body)

    def visit_parameter(self, node: Parameter):
        self._emit(f"Param {node.type_name} {node.name}")

    def visit_variable_decl(self, node: VariableDecl):
        self._emit(f"VarDecl {node.type_name} {node.name}")
        if node.initializer is not None:
            self._nested("init:", node.initializer)

    def visit_assignment(self, node: Assignment):
        self._emit(f"Assign {node.target.name}")
        self._nested(None, node.value)

    def visit_expression_statement(self, node: ExpressionStatement):
        self._emit("ExprStmt")
        self._nested(None, node.expression)

    def visit_block_statement(self, node: BlockStatement):
        self._emit(f"Block ({len(node.statements)} statements)")
        for statement in node.statements:
            self._nested(None, statement)

    def visit_if_statement(self, node: IfStatement):
        self._emit("If")
        self._nested("cond:", node.condition)
        self._nested("then:", node.then_branch)
        if node.else_branch is not None:
            self._nested("else:", node.else_branch)

    def visit_while_loop(self, node: WhileLoop):
        self._emit("While")
        self._nested("cond:", node.condition)
        self._nested("body:", node.body)

    def visit_return_statement(self, node: ReturnStatement):
        self._emit("Return")
        if node.value is not None:
            self._nested(None, node.value)

    def visit_literal(self, node: Literal):
        self._emit(f"Literal {node.literal_type} {node.value!r}")

    def visit_identifier(self, node: Identifier):
        self._emit(f"Identifier {node.name}")

    def visit_unary_op(self, node: UnaryOp):
        self._emit(f"Unary {node.operator}")
        self._nested(None, node.operand)

    def visit_binary_op(self, node: BinaryOp):
        self._emit(f"Binary {node.operator}")
        self._nested(None, node.left)
        self._nested(None, node.right)

    def visit_function_call(self, node: FunctionCall):
        self._emit(f"Call {node.callee.name} ({len(node.args)} args)")
        for arg in node.args:
            self._nested(None, arg)


def format_symbol_tables(symbol_table: SymbolTable) -> str:
    """Render the scope tree with each scope's symbols in insertion order."""
    lines: List[str] = []

    # Scopes are created in pre-order, so depth alone places each one
    for scope in symbol_table.scopes:
        pad = "  " * scope.depth
        lines.append(f"{pad}Scope {scope.name} ({scope.kind.value})")
        for symbol in scope.symbols.values():
            location = symbol.location
            lines.append(
                f"{pad}  {symbol.name}: {symbol.signature()} "
                f"[{symbol.kind.value}] at {location.line}:{location.column}"
            )

    return "\n".join(lines)


class Reporter:
    """Writes the report for one CompilationContext."""

    def __init__(self, out: TextIO = None, err: TextIO = None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def _print(self, text: str = ""):
        print(text, file=self.out)

    def _error(self, text: str = ""):
        print(text, file=self.err)

    def report(self, context: CompilationContext):
        options = context.options
        detailed = options.detailed_diagnostics

        if options.dump_tokens:
            self.report_tokens(context.tokens)

        for error in context.lexer_errors:
            self._error(format_diagnostic(error, detailed))

        self._print("Parsing...")
        if not context.parsing_succeeded:
            for error in context.parse_result.errors:
                self._error(format_diagnostic(error, detailed))
            self._error("Parsing failed!")
            return

        self._print("Parsing successful!")
        program = context.program
        self.report_summary(program)

        if options.dump_ast:
            self._print(ASTPrinter().render(program))
            self._print()

        self.report_functions(program)

        if context.lexer_errors:
            self._error("Lexical analysis failed! Cannot proceed to scope analysis.")
            return

        self.report_resolution(context)

    def report_tokens(self, tokens: List[Token]):
        self._print("=== LEXER DEBUG ===")
        self._print(f"Total tokens: {len(tokens)}")
        for token in tokens:
            self._print(format_token(token))
        self._print("=" * 19)
        self._print()

    def report_summary(self, program: Program):
        self._print()
        self._print("=== PROGRAM SUMMARY ===")
        self._print(f"Functions: {len(program.functions)}")
        self._print(f"Global Variables: {len(program.globals)}")
        self._print(RULE)
        self._print()

    def report_functions(self, program: Program):
        for function in program.functions:
            self._print(f"Function: {function.name} (return type: {function.return_type})")
            self._print(f"  Parameters: {len(function.params)}")
            for param in function.params:
                self._print(f"    - {param.type_name} {param.name}")
            self._print(f"  Body statements: {len(function.body.statements)}")
            self._print()

    def report_resolution(self, context: CompilationContext):
        resolution = context.resolution
        detailed = context.options.detailed_diagnostics
        self._print()
        self._print("=== SCOPE ANALYSIS ===")

        for error in resolution.errors:
            self._error(format_diagnostic(error, detailed))

        if not resolution.succeeded:
            self._error()
            self._error("Scope analysis failed! Cannot proceed to type checking.")
            return

        self._print("No scope errors.")
        if context.options.show_symbols:
            self._print()
            self._print(format_symbol_tables(resolution.symbol_table))
        self._print(RULE)
        self._print()
