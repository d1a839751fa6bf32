"""
Backend code generation module for algen.

This module handles the conversion of block trees to AL source.
"""

from .al import ALGenerator, RESERVED_WORDS
from .order import Order

__all__ = [
    "ALGenerator",
    "Order",
    "RESERVED_WORDS",
]
