"""
minic - front end for a small C-like language.

Tokenizes source text, parses it into an AST and resolves every name
against nested lexical scopes, reporting all lexical, syntactic and
naming errors it finds.
"""

__version__ = "0.1.0"

from .config import FrontendOptions, ConfigError, load_options
from .pipeline import CompilationContext, Stage, run_frontend, compile_file

__all__ = [
    "__version__",
    "FrontendOptions",
    "ConfigError",
    "load_options",
    "CompilationContext",
    "Stage",
    "run_frontend",
    "compile_file",
]
