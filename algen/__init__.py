"""
algen - block program to AL code generator

Translates visually composed programs (trees of typed blocks) into AL
source text: precedence-aware expressions, collision-free identifiers,
hoisted helper procedures and attached block comments.

Example:
    >>> from algen import Compiler
    >>> compiler = Compiler()
    >>> result = compiler.build(Path("program.json"), Path("program.al"))
    >>> if result.success:
    ...     print("Generated!")

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "algen Team"

from .backend import ALGenerator, Order
from .blocks import Block, Input, Variable, Workspace, workspace_from_dict
from .core import GenerationError, UnknownBlockError
from .core.compiler import Compiler
from .utils import Settings

__all__ = [
    "__version__",
    "__author__",
    "ALGenerator",
    "Order",
    "Block",
    "Input",
    "Variable",
    "Workspace",
    "workspace_from_dict",
    "GenerationError",
    "UnknownBlockError",
    "Compiler",
    "Settings",
]
