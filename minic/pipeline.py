"""
minic front-end pipeline.

Runs the stages in order over one source text: tokenize, parse, resolve
scopes. Each stage runs only if the stages before it succeeded, and
everything a run produces lives on its CompilationContext.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from .config import FrontendOptions
from .lexer import Lexer, Token, LexerError
from .parser import Parser, ParseResult, Program
from .analyzer import ScopeResolver, ResolutionResult

logger = logging.getLogger(__name__)


class Stage(IntEnum):
    """Front-end stages, in execution order."""
    NONE = 0
    LEXING = 1
    PARSING = 2
    RESOLUTION = 3


@dataclass
class CompilationContext:
    """Everything one front-end run produced."""
    source: str
    filename: str
    options: FrontendOptions = field(default_factory=FrontendOptions)
    tokens: List[Token] = field(default_factory=list)
    lexer_errors: List[LexerError] = field(default_factory=list)
    parse_result: Optional[ParseResult] = None
    resolution: Optional[ResolutionResult] = None
    stage_reached: Stage = Stage.NONE

    @property
    def program(self) -> Optional[Program]:
        return self.parse_result.program if self.parse_result else None

    @property
    def lexing_succeeded(self) -> bool:
        return self.stage_reached >= Stage.LEXING and not self.lexer_errors

    @property
    def parsing_succeeded(self) -> bool:
        return self.parse_result is not None and self.parse_result.succeeded

    @property
    def succeeded(self) -> bool:
        """True only if resolution ran and every stage succeeded."""
        return (
            self.lexing_succeeded
            and self.parsing_succeeded
            and self.resolution is not None
            and self.resolution.succeeded
        )

    @property
    def diagnostics(self) -> list:
        """All errors from every stage that ran, in stage order."""
        errors: list = list(self.lexer_errors)
        if self.parse_result is not None:
            errors.extend(self.parse_result.errors)
        if self.resolution is not None:
            errors.extend(self.resolution.errors)
        return errors


def run_frontend(source: str, filename: str = "<string>",
                 options: Optional[FrontendOptions] = None) -> CompilationContext:
    """
    Run the front end over a source text.

    Args:
        source: Source code string
        filename: Filename for error reporting
        options: Front-end options (defaults if omitted)

    Returns:
        CompilationContext holding the outputs of every stage that ran
    """
    options = options or FrontendOptions()
    context = CompilationContext(source=source, filename=filename, options=options)

    # Independent tokenization for the token dump
    preview = Lexer(source, filename, recover=options.recover_lexer_errors)
    context.tokens = preview.tokenize()

    # Driving tokenization, streamed straight into the parser
    lexer = Lexer(source, filename, recover=options.recover_lexer_errors)
    parser = Parser(lexer.iter_tokens())
    context.parse_result = parser.parse()
    context.lexer_errors = lexer.get_diagnostics()
    context.stage_reached = Stage.PARSING

    logger.debug(
        "%s: %d lexical errors, %d syntax errors",
        filename, len(context.lexer_errors), len(context.parse_result.errors)
    )

    if context.lexer_errors or not context.parse_result.succeeded:
        logger.info("%s: skipping scope resolution after front-end errors", filename)
        return context

    context.resolution = ScopeResolver().resolve(context.parse_result.program)
    context.stage_reached = Stage.RESOLUTION
    return context


def compile_file(path: str, options: Optional[FrontendOptions] = None) -> CompilationContext:
    """
    Read a UTF-8 source file and run the front end over it.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()

    return run_frontend(source, path, options)
