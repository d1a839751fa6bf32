"""
Utility modules for algen.

This package contains configuration and text helpers used throughout the
generator.
"""

from .settings import Settings, DEFAULT_SETTINGS
from .strings import is_number, prefix_lines, wrap

__all__ = [
    "Settings",
    "DEFAULT_SETTINGS",
    "is_number",
    "prefix_lines",
    "wrap",
]
