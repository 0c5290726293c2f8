"""
Test suite for the minic command line driver.

Tests cover exit codes, option handling and where output goes.
"""

import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minic import __version__
from minic.cli import main


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name, text):
        path = os.path.join(self.tmp, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_success_exit_code(self):
        path = self._write("ok.mc", "int main() { int x; x = 5; return x; }")
        code, out, err = self._run(path)
        self.assertEqual(code, 0)
        self.assertIn("Parsing successful!", out)
        self.assertIn("=== LEXER DEBUG ===", out)

    def test_scope_error_exit_code(self):
        path = self._write("scope.mc", "int main(){ return y; }")
        code, _, err = self._run(path)
        self.assertEqual(code, 1)
        self.assertIn("Scope analysis failed!", err)

    def test_parse_error_exit_code(self):
        path = self._write("parse.mc", "int main() { return 0 }")
        code, _, err = self._run(path)
        self.assertEqual(code, 1)
        self.assertIn("Parsing failed!", err)

    def test_lexer_error_exit_code(self):
        path = self._write("lex.mc", "int main() { return 0; } @")
        code, _, err = self._run(path)
        self.assertEqual(code, 1)
        self.assertIn("error[L001]", err)

    def test_missing_file(self):
        code, _, err = self._run(os.path.join(self.tmp, "nope.mc"))
        self.assertEqual(code, 1)
        self.assertIn("cannot read", err)

    def test_missing_argument_is_usage_error(self):
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            main([])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("usage:", err.getvalue())

    def test_version(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            main(["--version"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn(__version__, out.getvalue())

    def test_report_flags(self):
        path = self._write("flags.mc", "int main() { return 0; }")
        code, out, _ = self._run("--no-tokens", "--ast", "--no-symbols", path)
        self.assertEqual(code, 0)
        self.assertNotIn("LEXER DEBUG", out)
        self.assertIn("Function main -> int", out)
        self.assertNotIn("Scope global", out)

    def test_verbose_shows_error_details(self):
        path = self._write("typo.mc", "int count; int main() { return cont; }")
        code, _, err = self._run("-v", path)
        self.assertEqual(code, 1)
        self.assertIn("Did you mean 'count'?", err)
        _, _, brief = self._run(path)
        self.assertNotIn("Did you mean", brief)

    def test_deep_nesting_does_not_crash(self):
        path = self._write("deep.mc", "int main() { return " + "(" * 400 + "1" + ")" * 400 + "; }")
        code, _, err = self._run(path)
        self.assertEqual(code, 1)
        self.assertIn("error[P020]", err)
        self.assertIn("Parsing failed!", err)

    def test_config_file_is_used(self):
        self._write(".minicrc.json", json.dumps({"dump_tokens": False}))
        path = self._write("cfg.mc", "int main() { return 0; }")
        code, out, _ = self._run(path)
        self.assertEqual(code, 0)
        self.assertNotIn("LEXER DEBUG", out)

    def test_bad_config_file(self):
        config = self._write("custom.json", json.dumps({"colour": True}))
        path = self._write("cfg.mc", "int main() { return 0; }")
        code, _, err = self._run("--config", config, path)
        self.assertEqual(code, 1)
        self.assertIn("unknown option", err)


if __name__ == "__main__":
    unittest.main()
