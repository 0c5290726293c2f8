#!/usr/bin/env python3
"""
Main test runner for the minic front-end tests.
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_all_tests(verbosity: int = 2) -> bool:
    """Discover and run every test under tests/."""

    print("minic Front-End Test Suite")
    print("=" * 60)

    # Test if basic imports work
    try:
        from minic.lexer import Lexer  # noqa: F401
        from minic.parser import Parser  # noqa: F401
        from minic.analyzer import ScopeResolver  # noqa: F401
        print("All front-end modules imported successfully")
        print()
    except ImportError as e:
        print(f"Failed to import front-end modules: {e}")
        return False

    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=verbosity).run(suite)

    print()
    print("=" * 60)
    print(f"Ran {result.testsRun} tests: "
          f"{len(result.failures)} failures, {len(result.errors)} errors")
    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
