"""
FIXSPEC - Core Module

This module provides the core infrastructure for the dictionary compiler:
configuration management, exception handling and structured logging.
"""

from .config import CompilerConfig, LogLevel, VersionOverride, get_config, load_config, set_config
from .exceptions import (
    FixSpecException,
    ConfigurationException,
    DocumentError,
    SchemaError,
    SchemaErrorKind,
    EmissionError,
)

__version__ = "1.0.0"
__all__ = [
    "CompilerConfig",
    "LogLevel",
    "VersionOverride",
    "get_config",
    "load_config",
    "set_config",
    "FixSpecException",
    "ConfigurationException",
    "DocumentError",
    "SchemaError",
    "SchemaErrorKind",
    "EmissionError",
]
