"""
Test suite for the minic front-end pipeline, configuration and reporter.

Tests cover:
- Stage gating (resolution only after clean lexing and parsing)
- Diagnostics collected across stages
- Option loading from .minicrc.json
- Report layout
"""

import io
import json
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minic import FrontendOptions, ConfigError, load_options, run_frontend, compile_file, Stage
from minic.config import find_config, options_from_dict, CONFIG_FILE_NAME
from minic.reporter import Reporter, ASTPrinter, format_symbol_tables
from minic.lexer import TokenType


VALID = """
int total = 0;

int add(int a, int b) {
    return a + b;
}

int main() {
    int x = add(1, 2);
    if (x > 2) {
        total = x;
    }
    return total;
}
"""


class TestPipeline(unittest.TestCase):
    """Stage ordering and gating."""

    def test_successful_run(self):
        context = run_frontend(VALID, "valid.mc")
        self.assertTrue(context.succeeded)
        self.assertEqual(context.stage_reached, Stage.RESOLUTION)
        self.assertEqual(context.diagnostics, [])
        self.assertEqual(context.tokens[-1].type, TokenType.EOF)
        self.assertEqual(len(context.program.functions), 2)

    def test_dump_tokens_match_driving_run(self):
        from minic.lexer import Lexer
        context = run_frontend(VALID, "valid.mc")
        self.assertEqual(context.tokens, Lexer(VALID, "valid.mc").tokenize())

    def test_parse_failure_skips_resolution(self):
        context = run_frontend("int main() { return y }", "bad.mc")
        self.assertFalse(context.succeeded)
        self.assertIsNone(context.resolution)
        self.assertEqual(context.stage_reached, Stage.PARSING)
        self.assertFalse(context.parsing_succeeded)

    def test_lexer_failure_skips_resolution(self):
        context = run_frontend("int main() { return y; } @", "lex.mc")
        self.assertTrue(context.parsing_succeeded)
        self.assertEqual(len(context.lexer_errors), 1)
        self.assertIsNone(context.resolution)
        self.assertFalse(context.succeeded)

    def test_scope_failure(self):
        context = run_frontend("int main() { return y; }", "scope.mc")
        self.assertEqual(context.stage_reached, Stage.RESOLUTION)
        self.assertFalse(context.succeeded)
        self.assertEqual([e.code for e in context.diagnostics], ["S010"])

    def test_diagnostics_in_stage_order(self):
        context = run_frontend("int x = 1 @ 2 int y;", "mixed.mc")
        codes = [e.code for e in context.diagnostics]
        self.assertEqual(codes[0], "L001")
        self.assertIn("P001", codes[1:])

    def test_fail_fast_option(self):
        options = FrontendOptions(recover_lexer_errors=False)
        context = run_frontend("int a = 1; @ # $", "ff.mc", options)
        self.assertEqual(len(context.lexer_errors), 1)

    def test_compile_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "prog.mc")
            with open(path, "w", encoding="utf-8") as f:
                f.write(VALID)
            context = compile_file(path)
        self.assertTrue(context.succeeded)
        self.assertEqual(context.filename, path)

    def test_compile_missing_file(self):
        with self.assertRaises(OSError):
            compile_file(os.path.join(tempfile.gettempdir(), "does-not-exist.mc"))

    def test_deeply_nested_source_is_a_syntax_error(self):
        source = "int main() { return " + "-" * 1200 + "1; }\nint f() " + "{" * 400 + "}" * 400
        context = run_frontend(source, "deep.mc")
        self.assertEqual(context.stage_reached, Stage.PARSING)
        self.assertEqual([e.code for e in context.diagnostics], ["P020", "P020"])

    def test_nesting_below_limit_is_resolved(self):
        source = "int main() { int x = 1; " + "{" * 40 + "x = " + "-" * 40 + "x;" + "}" * 40 + " return x; }"
        context = run_frontend(source, "nested.mc")
        self.assertTrue(context.succeeded)
        self.assertEqual(len(context.resolution.symbol_table.scopes), 42)


class TestConfig(unittest.TestCase):
    """FrontendOptions and .minicrc.json."""

    def test_defaults(self):
        options = FrontendOptions()
        self.assertTrue(options.recover_lexer_errors)
        self.assertTrue(options.dump_tokens)
        self.assertFalse(options.dump_ast)
        self.assertFalse(options.detailed_diagnostics)
        self.assertEqual(options.log_level, "WARNING")

    def test_load_and_find(self):
        with tempfile.TemporaryDirectory() as tmp:
            nested = os.path.join(tmp, "src", "deep")
            os.makedirs(nested)
            path = os.path.join(tmp, CONFIG_FILE_NAME)
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"dump_ast": True, "log_level": "info"}, f)

            self.assertEqual(find_config(nested), path)
            options = load_options(start_dir=nested)

        self.assertTrue(options.dump_ast)
        self.assertEqual(options.log_level, "INFO")
        self.assertTrue(options.dump_tokens)

    def test_unknown_key_rejected(self):
        with self.assertRaises(ConfigError):
            options_from_dict({"dump_tokenz": False})

    def test_wrong_type_rejected(self):
        with self.assertRaises(ConfigError):
            options_from_dict({"dump_ast": "yes"})

    def test_bad_log_level_rejected(self):
        with self.assertRaises(ConfigError):
            options_from_dict({"log_level": "LOUD"})

    def test_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "bad.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write("{not json")
            with self.assertRaises(ConfigError):
                load_options(path)

    def test_overrides_ignore_none(self):
        options = FrontendOptions().with_overrides(dump_ast=True, dump_tokens=None)
        self.assertTrue(options.dump_ast)
        self.assertTrue(options.dump_tokens)


class TestReporter(unittest.TestCase):
    """Report layout."""

    def _report(self, source, **option_values):
        context = run_frontend(source, "r.mc", FrontendOptions(**option_values))
        out, err = io.StringIO(), io.StringIO()
        Reporter(out, err).report(context)
        return out.getvalue(), err.getvalue()

    def test_successful_report_sections_in_order(self):
        out, err = self._report(VALID, dump_ast=True)
        self.assertEqual(err, "")
        markers = [
            "=== LEXER DEBUG ===",
            "Parsing successful!",
            "=== PROGRAM SUMMARY ===",
            "Program (2 functions, 1 globals)",
            "Function: add (return type: int)",
            "=== SCOPE ANALYSIS ===",
            "Scope global (global)",
        ]
        positions = [out.index(marker) for marker in markers]
        self.assertEqual(positions, sorted(positions))
        self.assertIn("Functions: 2", out)
        self.assertIn("Global Variables: 1", out)
        self.assertIn("    - int a", out)

    def test_token_dump_can_be_disabled(self):
        out, _ = self._report(VALID, dump_tokens=False)
        self.assertNotIn("LEXER DEBUG", out)

    def test_parse_failure_report(self):
        out, err = self._report("int main() { return 1 }")
        self.assertIn("error[P001]", err)
        self.assertIn("Parsing failed!", err)
        self.assertNotIn("PROGRAM SUMMARY", out)

    def test_scope_failure_report(self):
        out, err = self._report("int main() { return y; }")
        self.assertIn("r.mc:1:21: error[S010]: Undeclared identifier 'y'", err)
        self.assertIn("Scope analysis failed!", err)
        self.assertNotIn("Scope global", out)

    def test_detailed_diagnostics(self):
        source = "int count; int count; int main() { return cont; }"
        _, brief = self._report(source)
        _, detailed = self._report(source, detailed_diagnostics=True)
        self.assertNotIn("help:", brief)
        self.assertIn("help: 'count' is already declared in this scope.", detailed)
        self.assertIn("Related locations:", detailed)
        self.assertIn("Did you mean 'count'?", detailed)
        self.assertIn("Scope analysis failed!", detailed)

    def test_detailed_parse_errors(self):
        _, err = self._report("int v = " + "(" * 150 + "1" + ")" * 150 + ";", detailed_diagnostics=True)
        self.assertIn("ERROR[P020]", err)
        self.assertIn("Split the expression using temporary variables", err)

    def test_symbol_table_dump(self):
        context = run_frontend("int g; int f(int a) { { int b; } return a; }", "s.mc")
        text = format_symbol_tables(context.resolution.symbol_table)
        self.assertEqual(text.splitlines(), [
            "Scope global (global)",
            "  g: int [variable] at 1:5",
            "  f: int(int) [function] at 1:12",
            "  Scope f (function)",
            "    a: int [parameter] at 1:18",
            "    Scope block (block)",
            "      b: int [variable] at 1:29",
        ])

    def test_ast_printer(self):
        context = run_frontend("int main() { return -x + 1; }", "a.mc")
        text = ASTPrinter().render(context.program)
        self.assertEqual(text.splitlines(), [
            "Program (1 functions, 0 globals)",
            "  Function main -> int",
            "    Block (1 statements)",
            "      Return",
            "        Binary +",
            "          Unary -",
            "            Identifier x",
            "          Literal integer 1",
        ])


if __name__ == "__main__":
    unittest.main()
