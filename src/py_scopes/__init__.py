"""Chained scopes — nested key-value environments with shadowing.

Re-exports public symbols so callers can write::

    from py_scopes import Environment, Precedence
"""

from py_scopes.bindings import Binding, UpdateResult
from py_scopes.config import ConfigError, Precedence, ScopeOptions, load_options
from py_scopes.environment import Environment
from py_scopes.logging import Logger, LogLevel, Operation, ScopeEvent

__all__ = [
    "Binding",
    "ConfigError",
    "Environment",
    "LogLevel",
    "Logger",
    "Operation",
    "Precedence",
    "ScopeEvent",
    "ScopeOptions",
    "UpdateResult",
    "load_options",
]
