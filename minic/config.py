"""minic configuration: front-end options and .minicrc.json support.

Options come from defaults, then an optional JSON rc file, then command
line flags. Example .minicrc.json:

    {
        "recover_lexer_errors": true,
        "dump_tokens": false,
        "dump_ast": true,
        "show_symbols": true,
        "detailed_diagnostics": false,
        "log_level": "INFO"
    }
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".minicrc.json"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised for unreadable or malformed configuration."""


@dataclass(frozen=True)
class FrontendOptions:
    """Options for one front-end run."""
    # Keep tokenizing after a lexical error
    recover_lexer_errors: bool = True
    # Report output
    dump_tokens: bool = True
    dump_ast: bool = False
    show_symbols: bool = True
    # Print help text, suggestions and related locations under each error
    detailed_diagnostics: bool = False
    # Logging threshold used by the command line driver
    log_level: str = "WARNING"

    def with_overrides(self, **overrides: Any) -> 'FrontendOptions':
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def find_config(start_dir: str = ".") -> Optional[str]:
    """Find the nearest config file by walking up from start_dir."""
    current = os.path.abspath(start_dir)
    while True:
        path = os.path.join(current, CONFIG_FILE_NAME)
        if os.path.isfile(path):
            return path
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return None


def load_options(path: Optional[str] = None, start_dir: str = ".") -> FrontendOptions:
    """Load options from a JSON config file.

    If no path is given, searches for a config file starting from start_dir.
    If no config file is found, returns defaults.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return FrontendOptions()

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON: {e}") from e

    logger.debug("Loaded config from %s", path)
    return options_from_dict(data, source=path)


def options_from_dict(data: Dict[str, Any], source: str = "<config>") -> FrontendOptions:
    """Build FrontendOptions from a mapping, rejecting unknown keys and bad values."""
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a JSON object at top level")

    known = {f.name: f for f in fields(FrontendOptions)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"{source}: unknown option(s): {', '.join(unknown)}")

    for key, value in data.items():
        expected = str if key == "log_level" else bool
        if not isinstance(value, expected):
            raise ConfigError(f"{source}: option '{key}' must be a {expected.__name__}")

    if "log_level" in data:
        level = data["log_level"].upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"{source}: log_level must be one of {', '.join(LOG_LEVELS)}")
        data = dict(data, log_level=level)

    return FrontendOptions(**data)
