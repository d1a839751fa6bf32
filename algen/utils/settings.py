"""
Configuration settings for algen.

This module contains default configuration values used by the code
generator. A Settings instance is handed to a generator at construction
time; every generation pass run by that generator uses the same settings.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class Settings:
    """Generator settings and configuration.

    Attributes:
        reserved_words: Extra words the name allocator must never emit,
            on top of the target language's own keyword list
        name_namespaces: Mapping of name kind ("VARIABLE", "PROCEDURE", ...)
            to a namespace group. Kinds in the same group share one set of
            used names; kinds not listed fall into the "default" group
        indent: Indentation unit for nested statements
        statement_prefix: Text injected before every statement ("%1" is
            replaced by the quoted block id), or None
        statement_suffix: Text injected after every statement, or None
        infinite_loop_trap: Text injected at the top of loop and procedure
            bodies, or None
        comment_wrap: Maximum line length for block comments
    """
    reserved_words: List[str] = None
    name_namespaces: Dict[str, str] = None
    indent: str = "  "
    statement_prefix: Optional[str] = None
    statement_suffix: Optional[str] = None
    infinite_loop_trap: Optional[str] = None
    comment_wrap: int = 60

    def __post_init__(self):
        if self.reserved_words is None:
            self.reserved_words = []
        if self.name_namespaces is None:
            self.name_namespaces = {}


# Global default settings instance
DEFAULT_SETTINGS = Settings()
