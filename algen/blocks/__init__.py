"""
Block tree module for algen.

This module defines the read-only block tree the generator consumes: blocks,
their typed input slots, workspace variables and a loader for the JSON form
of a program.
"""

from .nodes import (
    Block,
    Input,
    InputType,
    Variable,
    Workspace,
    BlockLoadError,
    LOOP_TYPES,
    block_from_dict,
    workspace_from_dict,
)

__all__ = [
    "Block",
    "Input",
    "InputType",
    "Variable",
    "Workspace",
    "BlockLoadError",
    "LOOP_TYPES",
    "block_from_dict",
    "workspace_from_dict",
]
