"""
Multi-Language Table Generator

Generates the static lookup tables of a compiled FIX dictionary schema:
- C (linked into the runtime protocol engine)
- Python

Features:
- Tag table sorted by tag with a terminating sentinel row
- Per-message tag sequence tables sorted by message type
- Byte-identical output for identical input
- Nothing written when rendering fails

Usage:
    from fixspec.dictionary import compile_file
    from table_generator import TableGenerator, Language

    spec = compile_file("ref/FIX44.xml")
    TableGenerator(spec).generate(Language.C, "src/ofix/fix44.c")
"""

from table_generator.generator import (
    TableGenerator,
    TableEmitter,
    Language,
    GeneratorConfig,
    TagRow,
    MessageBlock,
)
from table_generator.languages.c import CGenerator
from table_generator.languages.python import PythonGenerator

__all__ = [
    "TableGenerator",
    "TableEmitter",
    "Language",
    "GeneratorConfig",
    "TagRow",
    "MessageBlock",
    "CGenerator",
    "PythonGenerator",
]
