"""
Abstract Syntax Tree node definitions for minic.

The tree is strictly single-owner: every node is referenced by exactly
one parent and no node points back at its parent. Nodes compare and hash
by identity, so later passes can attach information through side tables
keyed by node instead of mutating the tree.

Node kinds form a closed set (ASTNodeType). Consumers dispatch on the tag
through ASTVisitor, which raises on any kind the consumer does not handle.
"""

from typing import List, Optional, Any, Union
from dataclasses import dataclass
from enum import Enum

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"
    FUNCTION_DEF = "FunctionDef"
    PARAMETER = "Parameter"

    # Statements
    VARIABLE_DECL = "VariableDecl"
    ASSIGNMENT = "Assignment"
    EXPRESSION_STMT = "ExpressionStatement"
    IF_STATEMENT = "IfStatement"
    WHILE_LOOP = "WhileLoop"
    RETURN_STATEMENT = "ReturnStatement"
    BLOCK_STATEMENT = "BlockStatement"

    # Expressions
    LITERAL = "Literal"
    IDENTIFIER = "Identifier"
    UNARY_OP = "UnaryOp"
    BINARY_OP = "BinaryOp"
    FUNCTION_CALL = "FunctionCall"


VISIT_METHODS = {
    ASTNodeType.PROGRAM: "visit_program",
    ASTNodeType.FUNCTION_DEF: "visit_function_def",
    ASTNodeType.PARAMETER: "visit_parameter",
    ASTNodeType.VARIABLE_DECL: "visit_variable_decl",
    ASTNodeType.ASSIGNMENT: "visit_assignment",
    ASTNodeType.EXPRESSION_STMT: "visit_expression_statement",
    ASTNodeType.IF_STATEMENT: "visit_if_statement",
    ASTNodeType.WHILE_LOOP: "visit_while_loop",
    ASTNodeType.RETURN_STATEMENT: "visit_return_statement",
    ASTNodeType.BLOCK_STATEMENT: "visit_block_statement",
    ASTNodeType.LITERAL: "visit_literal",
    ASTNodeType.IDENTIFIER: "visit_identifier",
    ASTNodeType.UNARY_OP: "visit_unary_op",
    ASTNodeType.BINARY_OP: "visit_binary_op",
    ASTNodeType.FUNCTION_CALL: "visit_function_call",
}


@dataclass
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor:
    """
    Tag-dispatching visitor.

    Subclasses implement ``visit_<kind>`` methods (see VISIT_METHODS).
    Visiting a node whose kind has no method raises NotImplementedError
    rather than silently skipping it.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method_name = VISIT_METHODS[node.node_type]
        method = getattr(self, method_name, None)
        if method is None:
            raise NotImplementedError(
                f"{type(self).__name__} does not handle {node.node_type.value} nodes"
            )
        return method(node)


class ASTNode:
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, span: SourceSpan):
        self.node_type = node_type
        self.span = span

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    def children(self) -> List['ASTNode']:
        """Get all child nodes, in source order."""
        return []

    def walk(self):
        """Yield this node and all of its descendants, depth-first."""
        yield self
        for child in self.children():
            yield from child.walk()

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.span}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(span={self.span})"


# ============================================================================
# Top-level nodes
# ============================================================================

class Program(ASTNode):
    """Root AST node: global variables and functions in declaration order."""

    def __init__(self, declarations: List[Union['FunctionDef', 'VariableDecl']], span: SourceSpan):
        super().__init__(ASTNodeType.PROGRAM, span)
        self.declarations = declarations

    @property
    def functions(self) -> List['FunctionDef']:
        return [d for d in self.declarations if d.node_type == ASTNodeType.FUNCTION_DEF]

    @property
    def globals(self) -> List['VariableDecl']:
        return [d for d in self.declarations if d.node_type == ASTNodeType.VARIABLE_DECL]

    def children(self) -> List[ASTNode]:
        return list(self.declarations)


class FunctionDef(ASTNode):
    """Function definition."""

    def __init__(self, name: str, return_type: str, params: List['Parameter'],
                 body: 'BlockStatement', span: SourceSpan, name_location: SourceLocation):
        super().__init__(ASTNodeType.FUNCTION_DEF, span)
        self.name = name
        self.return_type = return_type
        self.params = params
        self.body = body
        self.name_location = name_location

    @property
    def arity(self) -> int:
        return len(self.params)

    def children(self) -> List[ASTNode]:
        return [*self.params, self.body]


class Parameter(ASTNode):
    """Function parameter."""

    def __init__(self, type_name: str, name: str, span: SourceSpan, name_location: SourceLocation):
        super().__init__(ASTNodeType.PARAMETER, span)
        self.type_name = type_name
        self.name = name
        self.name_location = name_location


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class VariableDecl(Statement):
    """Variable declaration, either global or inside a block."""

    def __init__(self, type_name: str, name: str, initializer: Optional['Expression'],
                 span: SourceSpan, name_location: SourceLocation):
        super().__init__(ASTNodeType.VARIABLE_DECL, span)
        self.type_name = type_name
        self.name = name
        self.initializer = initializer
        self.name_location = name_location

    def children(self) -> List[ASTNode]:
        return [self.initializer] if self.initializer else []


class Assignment(Statement):
    """Assignment of an expression to a named variable."""

    def __init__(self, target: 'Identifier', value: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.ASSIGNMENT, span)
        self.target = target
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.target, self.value]


class ExpressionStatement(Statement):
    """An expression evaluated for its effect."""

    def __init__(self, expression: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.EXPRESSION_STMT, span)
        self.expression = expression

    def children(self) -> List[ASTNode]:
        return [self.expression]


class BlockStatement(Statement):
    """Block statement containing multiple statements."""

    def __init__(self, statements: List[Statement], span: SourceSpan):
        super().__init__(ASTNodeType.BLOCK_STATEMENT, span)
        self.statements = statements

    def children(self) -> List[ASTNode]:
        return list(self.statements)


class IfStatement(Statement):
    """If statement with optional else clause."""

    def __init__(self, condition: 'Expression', then_branch: Statement,
                 else_branch: Optional[Statement], span: SourceSpan):
        super().__init__(ASTNodeType.IF_STATEMENT, span)
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch

    def children(self) -> List[ASTNode]:
        children = [self.condition, self.then_branch]
        if self.else_branch:
            children.append(self.else_branch)
        return children


class WhileLoop(Statement):
    """While loop statement."""

    def __init__(self, condition: 'Expression', body: Statement, span: SourceSpan):
        super().__init__(ASTNodeType.WHILE_LOOP, span)
        self.condition = condition
        self.body = body

    def children(self) -> List[ASTNode]:
        return [self.condition, self.body]


class ReturnStatement(Statement):
    """Return statement."""

    def __init__(self, value: Optional['Expression'], span: SourceSpan):
        super().__init__(ASTNodeType.RETURN_STATEMENT, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value else []


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""
    pass


class Literal(Expression):
    """Literal value: integer, float, string or boolean."""

    def __init__(self, value: Any, literal_type: str, span: SourceSpan):
        super().__init__(ASTNodeType.LITERAL, span)
        self.value = value
        self.literal_type = literal_type  # "integer", "float", "string", "boolean"


class Identifier(Expression):
    """Reference to a named entity."""

    def __init__(self, name: str, span: SourceSpan):
        super().__init__(ASTNodeType.IDENTIFIER, span)
        self.name = name


class UnaryOp(Expression):
    """Unary operation expression."""

    def __init__(self, operator: str, operand: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.UNARY_OP, span)
        self.operator = operator
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return [self.operand]


class BinaryOp(Expression):
    """Binary operation expression."""

    def __init__(self, left: Expression, operator: str, right: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.BINARY_OP, span)
        self.left = left
        self.operator = operator
        self.right = right

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


class FunctionCall(Expression):
    """Call of a named function."""

    def __init__(self, callee: Identifier, args: List[Expression], span: SourceSpan):
        super().__init__(ASTNodeType.FUNCTION_CALL, span)
        self.callee = callee
        self.args = args

    def children(self) -> List[ASTNode]:
        return [self.callee, *self.args]
