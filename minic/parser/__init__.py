"""
minic Parser Package

Recursive descent for declarations and statements, precedence climbing
for expressions, and statement-level error recovery.
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, SourceSpan, Program, FunctionDef,
    Parameter, Statement, VariableDecl, Assignment, ExpressionStatement,
    BlockStatement, IfStatement, WhileLoop, ReturnStatement, Expression,
    Literal, Identifier, UnaryOp, BinaryOp, FunctionCall
)
from .parser import Parser, ParseResult, Precedence, TokenStream, parse_string, parse_file
from .errors import ParseError

__all__ = [
    "Parser",
    "ParseResult",
    "ParseError",
    "Precedence",
    "TokenStream",
    "parse_string",
    "parse_file",
    "ASTNode",
    "ASTNodeType",
    "ASTVisitor",
    "SourceSpan",
    "Program",
    "FunctionDef",
    "Parameter",
    "Statement",
    "VariableDecl",
    "Assignment",
    "ExpressionStatement",
    "BlockStatement",
    "IfStatement",
    "WhileLoop",
    "ReturnStatement",
    "Expression",
    "Literal",
    "Identifier",
    "UnaryOp",
    "BinaryOp",
    "FunctionCall",
]
