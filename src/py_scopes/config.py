"""Scope options — the few knobs an environment chain exposes.

Two questions have more than one sensible answer:

1. **Which binding wins when a chain is flattened?**  An interpreter
   usually wants the innermost (newest) binding to survive, exactly as
   lookup sees it.  Some callers want the opposite: keep the outermost
   (oldest) definition and treat inner ones as temporary overrides.
2. **How chatty should the audit log be?**

``ScopeOptions`` answers both.  Options can be built in code or loaded
from a small JSON file::

    {"precedence": "outermost", "log_level": "DEBUG"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from py_scopes.logging import LogLevel

if TYPE_CHECKING:
    from pathlib import Path


class ConfigError(Exception):
    """Raise when scope options cannot be loaded."""


class Precedence(StrEnum):
    """Which level wins a shadowed key when a chain is flattened."""

    INNERMOST = "innermost"
    OUTERMOST = "outermost"


@dataclass(frozen=True)
class ScopeOptions:
    """Behaviour shared by every level of a chain.

    Attributes:
        precedence: Default winner for ``Environment.flatten``.
        log_level: Events below this level are not recorded.

    """

    precedence: Precedence = Precedence.INNERMOST
    log_level: LogLevel = LogLevel.INFO


DEFAULT_OPTIONS = ScopeOptions()


def load_options(path: Path) -> ScopeOptions:
    """Load scope options from a JSON file.

    Missing keys keep their defaults.  Both values are matched
    case-insensitively; ``log_level`` by name.

    Args:
        path: Location of the JSON file.

    Returns:
        The parsed options.

    Raises:
        ConfigError: If the file is unreadable, is not a JSON object, or
            names an unknown precedence or log level.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load scope options: {e}"
        raise ConfigError(msg) from e

    if not isinstance(data, dict):
        msg = f"Scope options must be a JSON object, got {type(data).__name__}"
        raise ConfigError(msg)

    try:
        precedence = Precedence(str(data.get("precedence", DEFAULT_OPTIONS.precedence)).lower())
        level_name = str(data.get("log_level", DEFAULT_OPTIONS.log_level.name))
        log_level = LogLevel[level_name.upper()]
    except (KeyError, ValueError) as e:
        msg = f"Invalid scope option: {e}"
        raise ConfigError(msg) from e

    return ScopeOptions(precedence=precedence, log_level=log_level)
