"""
Core generator module for algen.

This module contains the language-independent parts of code generation:
name allocation, the block traversal driver with its scrubbing and helper
registry, and the compile orchestration.
"""

from .names import NameDB, NameType, safe_name
from .generator import (
    FUNCTION_NAME_PLACEHOLDER,
    Generator,
    GenerationError,
    UnknownBlockError,
)

__all__ = [
    "NameDB",
    "NameType",
    "safe_name",
    "FUNCTION_NAME_PLACEHOLDER",
    "Generator",
    "GenerationError",
    "UnknownBlockError",
]
