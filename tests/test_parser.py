"""
Test suite for the minic parser.

Tests cover:
- Program shape (globals, functions, parameters, bodies)
- Every statement form
- Operator precedence and associativity
- Dangling else
- Syntax error reporting and recovery
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minic.lexer import Lexer
from minic.parser import (
    Parser, ParseError, ASTNodeType, parse_string, Program, FunctionDef,
    VariableDecl, BinaryOp, UnaryOp, FunctionCall, IfStatement, BlockStatement
)
from minic.parser.parser import MAX_NESTING_DEPTH


def parse(source):
    return Parser(Lexer(source, "test.mc").iter_tokens()).parse()


def expr_of(source):
    """Parse ``source`` as the initializer of a global and return it."""
    program = parse_string(f"int v = {source};")
    return program.declarations[0].initializer


def render(expr):
    """Fully parenthesized form of an expression tree."""
    if expr.node_type == ASTNodeType.BINARY_OP:
        return f"({render(expr.left)} {expr.operator} {render(expr.right)})"
    if expr.node_type == ASTNodeType.UNARY_OP:
        return f"({expr.operator}{render(expr.operand)})"
    if expr.node_type == ASTNodeType.FUNCTION_CALL:
        return f"{expr.callee.name}({', '.join(render(a) for a in expr.args)})"
    if expr.node_type == ASTNodeType.IDENTIFIER:
        return expr.name
    return repr(expr.value)


class TestProgramShape(unittest.TestCase):
    """Top-level structure."""

    def test_parse_shape(self):
        program = parse_string("int x = 1; int main(int a, float b) { return a; }")
        self.assertIsInstance(program, Program)
        self.assertEqual(len(program.globals), 1)
        self.assertEqual(len(program.functions), 1)

        glob = program.globals[0]
        self.assertEqual((glob.type_name, glob.name), ("int", "x"))
        self.assertEqual(glob.initializer.value, 1)

        main = program.functions[0]
        self.assertIsInstance(main, FunctionDef)
        self.assertEqual((main.name, main.return_type), ("main", "int"))
        self.assertEqual([(p.type_name, p.name) for p in main.params], [("int", "a"), ("float", "b")])
        self.assertEqual(len(main.body.statements), 1)
        self.assertEqual(main.body.statements[0].node_type, ASTNodeType.RETURN_STATEMENT)

    def test_declaration_order_preserved(self):
        program = parse_string("int a; void f() {} float b = 2.0; bool g() { return true; }")
        self.assertEqual([d.name for d in program.declarations], ["a", "f", "b", "g"])
        self.assertEqual([f.name for f in program.functions], ["f", "g"])
        self.assertEqual([g.name for g in program.globals], ["a", "b"])

    def test_empty_program(self):
        result = parse("")
        self.assertTrue(result.succeeded)
        self.assertEqual(result.program.declarations, [])

    def test_accepts_token_list(self):
        tokens = Lexer("int x;").tokenize()
        result = Parser(tokens).parse()
        self.assertTrue(result.succeeded)
        self.assertEqual(result.program.globals[0].name, "x")

    def test_spans(self):
        program = parse_string("int main() {\n  return 0;\n}")
        main = program.functions[0]
        self.assertEqual(main.span.start.line, 1)
        self.assertEqual(main.span.end.line, 3)
        self.assertEqual(main.name_location.column, 5)


class TestStatements(unittest.TestCase):
    """Statement forms."""

    def _body(self, body_source):
        program = parse_string(f"void f() {{ {body_source} }}")
        return program.functions[0].body.statements

    def test_all_statement_kinds(self):
        stmts = self._body(
            "int x = 1; x = 2; f(); if (x) x = 3; while (x > 0) { x = x - 1; } return; { }"
        )
        self.assertEqual(
            [s.node_type for s in stmts],
            [ASTNodeType.VARIABLE_DECL, ASTNodeType.ASSIGNMENT, ASTNodeType.EXPRESSION_STMT,
             ASTNodeType.IF_STATEMENT, ASTNodeType.WHILE_LOOP, ASTNodeType.RETURN_STATEMENT,
             ASTNodeType.BLOCK_STATEMENT]
        )
        self.assertIsNone(stmts[5].value)

    def test_declaration_without_initializer(self):
        stmt = self._body("string s;")[0]
        self.assertIsInstance(stmt, VariableDecl)
        self.assertIsNone(stmt.initializer)

    def test_assignment(self):
        stmt = self._body("total = total + 1;")[0]
        self.assertEqual(stmt.target.name, "total")
        self.assertEqual(render(stmt.value), "(total + 1)")

    def test_dangling_else_binds_to_nearest_if(self):
        outer = self._body("if (a) if (b) x = 1; else x = 2;")[0]
        self.assertIsInstance(outer, IfStatement)
        self.assertIsNone(outer.else_branch)
        inner = outer.then_branch
        self.assertIsInstance(inner, IfStatement)
        self.assertIsNotNone(inner.else_branch)

    def test_else_if_chain(self):
        stmt = self._body("if (a) { } else if (b) { } else { }")[0]
        self.assertIsInstance(stmt.then_branch, BlockStatement)
        self.assertIsInstance(stmt.else_branch, IfStatement)
        self.assertIsInstance(stmt.else_branch.else_branch, BlockStatement)


class TestExpressions(unittest.TestCase):
    """Precedence and associativity."""

    def test_precedence(self):
        self.assertEqual(render(expr_of("1 + 2 * 3")), "(1 + (2 * 3))")
        self.assertEqual(render(expr_of("a || b && c")), "(a || (b && c))")
        self.assertEqual(render(expr_of("a == b < c")), "(a == (b < c))")
        self.assertEqual(render(expr_of("a < b + c")), "(a < (b + c))")
        self.assertEqual(render(expr_of("a && b == c")), "(a && (b == c))")
        self.assertEqual(render(expr_of("a % b - c")), "((a % b) - c)")

    def test_left_associativity(self):
        self.assertEqual(render(expr_of("a - b - c")), "((a - b) - c)")
        self.assertEqual(render(expr_of("a / b * c")), "((a / b) * c)")
        self.assertEqual(render(expr_of("a || b || c")), "((a || b) || c)")

    def test_unary(self):
        self.assertEqual(render(expr_of("-a * b")), "((-a) * b)")
        self.assertEqual(render(expr_of("!!a")), "(!(!a))")
        self.assertEqual(render(expr_of("- -a")), "(-(-a))")
        self.assertEqual(render(expr_of("-f(x)")), "(-f(x))")
        self.assertIsInstance(expr_of("+a"), UnaryOp)

    def test_grouping(self):
        self.assertEqual(render(expr_of("(1 + 2) * 3")), "((1 + 2) * 3)")

    def test_calls(self):
        call = expr_of("add(1, g(2), x + 3)")
        self.assertIsInstance(call, FunctionCall)
        self.assertEqual(call.callee.name, "add")
        self.assertEqual(render(call), "add(1, g(2), (x + 3))")
        self.assertEqual(expr_of("f()").args, [])

    def test_literals(self):
        self.assertEqual(expr_of("1.5").literal_type, "float")
        self.assertEqual(expr_of('"hi"').value, "hi")
        self.assertEqual(expr_of("false").literal_type, "boolean")
        self.assertIsInstance(expr_of("1 + 2"), BinaryOp)


class TestSyntaxErrors(unittest.TestCase):
    """Error detection and recovery."""

    def test_missing_semicolon(self):
        result = parse("int main() { int x = 1 return x; }")
        self.assertFalse(result.succeeded)
        self.assertEqual(result.errors[0].code, "P001")
        self.assertIn("';'", result.errors[0].message)

    def test_invalid_expression(self):
        result = parse("int main() { int x = ; }")
        self.assertEqual([e.code for e in result.errors], ["P005"])

    def test_invalid_assignment_target(self):
        result = parse("void f() { 1 + a = 3; }")
        self.assertEqual([e.code for e in result.errors], ["P013"])

    def test_unexpected_eof(self):
        result = parse("int main() { return 0;")
        self.assertEqual(result.errors[-1].code, "P010")

    def test_missing_type(self):
        result = parse("main() { }")
        self.assertEqual(result.errors[0].code, "P001")
        self.assertIn("type name", result.errors[0].message)

    def test_misspelled_type_suggestion(self):
        result = parse("itn x;")
        self.assertIn("Did you mean 'int'?", result.errors[0].diagnostic.suggestions)

    def test_recovery_collects_several_errors(self):
        source = (
            "int main() {\n"
            "    int a = ;\n"
            "    int b = 2\n"
            "    int c = 3;\n"
            "    a = * 4;\n"
            "    return c;\n"
            "}\n"
        )
        result = parse(source)
        self.assertFalse(result.succeeded)
        self.assertGreaterEqual(len(result.errors), 3)
        self.assertEqual([e.location.line for e in result.errors][:2], [2, 4])
        # The statement after the errors is still parsed
        body = result.program.functions[0].body.statements
        self.assertEqual(body[-1].node_type, ASTNodeType.RETURN_STATEMENT)

    def test_top_level_recovery(self):
        result = parse("int f(int a b) { return a; }\nint g() { return 1; }")
        self.assertEqual(len(result.errors), 1)
        self.assertEqual([f.name for f in result.program.functions], ["g"])

    def test_stray_tokens_at_top_level(self):
        result = parse("; } int x;")
        self.assertFalse(result.succeeded)
        self.assertEqual([g.name for g in result.program.globals], ["x"])

    def test_parse_string_raises(self):
        with self.assertRaises(ParseError):
            parse_string("int x = ;")

    def test_non_name_call(self):
        result = parse("int v = (a + b)(1);")
        self.assertEqual(result.errors[0].code, "P005")


class TestNestingLimit(unittest.TestCase):
    """Nesting past MAX_NESTING_DEPTH is a syntax error, not a crash."""

    def test_deep_unary_chain(self):
        result = parse("int main() { return " + "-" * 1200 + "1; }")
        self.assertEqual([e.code for e in result.errors], ["P020"])
        self.assertEqual([f.name for f in result.program.functions], ["main"])

    def test_deep_parentheses(self):
        result = parse("int v = " + "(" * 400 + "1" + ")" * 400 + ";\nint w;")
        self.assertEqual([e.code for e in result.errors], ["P020"])
        self.assertEqual([g.name for g in result.program.globals], ["w"])

    def test_deep_blocks(self):
        result = parse("int main() " + "{" * 400 + "}" * 400 + "\nint after;")
        self.assertEqual([e.code for e in result.errors], ["P020"])
        self.assertEqual([f.name for f in result.program.functions], ["main"])
        self.assertEqual([g.name for g in result.program.globals], ["after"])

    def test_long_left_associative_chain(self):
        result = parse("int v = 1" + " + 1" * 300 + ";")
        self.assertEqual([e.code for e in result.errors], ["P020"])

    def test_error_names_the_limit(self):
        result = parse("int v = " + "!" * 200 + "x;")
        self.assertIn(str(MAX_NESTING_DEPTH), result.errors[0].message)

    def test_moderate_nesting_is_accepted(self):
        expr = expr_of("(" * 50 + "-" * 40 + "x" + ")" * 50)
        self.assertEqual(expr.node_type, ASTNodeType.UNARY_OP)
        result = parse("int main() " + "{" * 50 + "return 1;" + "}" * 50)
        self.assertTrue(result.succeeded)


if __name__ == "__main__":
    unittest.main()
