"""
FIXSPEC - FIX Data Dictionary Compiler

Compiles FIX protocol data dictionaries into a resolved, cross-referenced
schema (fields, components, header, trailer and messages) and generates the
static lookup tables a runtime protocol engine uses to encode, decode and
validate messages.
"""

from .core import (
    CompilerConfig,
    FixSpecException,
    SchemaError,
    SchemaErrorKind,
    get_config,
    set_config,
    load_config,
)
from .dictionary import Spec, compile_file

__version__ = "1.0.0"
__all__ = [
    "CompilerConfig",
    "FixSpecException",
    "SchemaError",
    "SchemaErrorKind",
    "get_config",
    "set_config",
    "load_config",
    "Spec",
    "compile_file",
]
