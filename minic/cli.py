"""
Command line driver for the minic front end.

Usage:
    minic [options] <source_file>

Exit status is 0 when the file lexes, parses and resolves cleanly and 1
otherwise (including usage errors and unreadable files).
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from . import __version__
from .config import ConfigError, load_options
from .pipeline import compile_file
from .reporter import Reporter

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="minic",
        description="Tokenize, parse and scope-check a minic source file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    minic program.mc                 # Full report
    minic --no-tokens --ast prog.mc  # Skip the token dump, show the AST
    minic --fail-fast prog.mc        # Stop tokenizing at the first lexical error
        """
    )

    parser.add_argument('source_file', help='Source file to compile')

    # Report options
    parser.add_argument('--no-tokens', action='store_true',
                        help='Do not print the token dump')
    parser.add_argument('--ast', action='store_true',
                        help='Print the AST outline')
    parser.add_argument('--no-symbols', action='store_true',
                        help='Do not print the symbol tables')

    # Behaviour options
    parser.add_argument('--fail-fast', action='store_true',
                        help='Stop tokenizing at the first lexical error')
    parser.add_argument('--config', metavar='PATH',
                        help='Read options from this JSON file instead of the nearest .minicrc.json')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging and detailed diagnostics')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        start_dir = os.path.dirname(os.path.abspath(args.source_file))
        options = load_options(args.config, start_dir=start_dir)
    except ConfigError as e:
        print(f"minic: {e}", file=sys.stderr)
        return 1

    options = options.with_overrides(
        recover_lexer_errors=False if args.fail_fast else None,
        dump_tokens=False if args.no_tokens else None,
        dump_ast=True if args.ast else None,
        show_symbols=False if args.no_symbols else None,
        log_level="DEBUG" if args.verbose else None,
        detailed_diagnostics=True if args.verbose else None,
    )

    logging.basicConfig(
        level=getattr(logging, options.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )

    try:
        context = compile_file(args.source_file, options)
    except (OSError, UnicodeDecodeError) as e:
        print(f"minic: cannot read {args.source_file}: {e}", file=sys.stderr)
        return 1

    Reporter(sys.stdout, sys.stderr).report(context)

    logger.debug("%s: stage reached %s", args.source_file, context.stage_reached.name)
    return 0 if context.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
