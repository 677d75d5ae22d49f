"""
Language-specific table generators.
"""

from table_generator.languages.c import CGenerator
from table_generator.languages.python import PythonGenerator

__all__ = [
    "CGenerator",
    "PythonGenerator",
]
