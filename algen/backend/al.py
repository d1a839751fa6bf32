"""
AL code generation module for algen.

Binds the generic :class:`~algen.core.generator.Generator` to AL: the
reserved words, the pass hooks that seed the name table, the output
assembly (helper and procedure definitions ahead of the program body) and
string quoting. The per-kind emission rules live in :mod:`.rules`.
"""

import logging
from typing import Optional

from ..blocks.nodes import Workspace
from ..core.generator import Generator
from ..utils.settings import Settings
from .rules import load_rules

logger = logging.getLogger(__name__)

RESERVED_WORDS = (
    "error", "trigger", "message",
    "and", "break", "do", "else", "end", "false", "for", "procedure", "if",
    "in", "local", "nil", "not", "or", "repeat", "exit", "then", "true",
    "until", "while",
)


class ALGenerator(Generator):
    """Generator emitting AL source.

    Example:
        >>> generator = ALGenerator()
        >>> code = generator.workspace_to_code(workspace)
    """

    RESERVED_WORDS = RESERVED_WORDS

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__("AL", settings)
        self.for_block.update(load_rules())

    def init(self, workspace: Optional[Workspace]) -> None:
        """Start a pass: reset the name table and seed it from the workspace."""
        super().init(workspace)
        self.name_db.reset()
        if workspace is not None:
            self.name_db.set_variable_map(workspace)
            self.name_db.populate_variables(workspace)
            self.name_db.populate_procedures(workspace)
        logger.debug("AL pass started with %d top-level blocks",
                     len(workspace.top_blocks) if workspace is not None else 0)

    def finish(self, code: str) -> str:
        """Place helper and procedure definitions ahead of the body."""
        definitions = list(self.definitions_.values())
        code = super().finish(code)
        return "\n\n".join(definitions) + "\n\n\n" + code

    def scrub_naked_value(self, line: str) -> str:
        # A bare expression is not a statement; keep it as a block comment.
        return "/*\n" + line + "\n*/\n"

    def quote_(self, string: str) -> str:
        """Quote a string literal, doubling embedded single quotes."""
        return "'" + string.replace("'", "''") + "'"
