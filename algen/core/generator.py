"""
Generic block-to-text generation for algen.

The Generator walks a block tree and asks a per-kind emission rule for the
text of every block. Expression rules return ``(text, order)`` pairs, where
``order`` is the precedence level of the produced fragment; statement rules
return plain text. The generator composes these pieces:

* :meth:`Generator.value_to_code` parenthesises a child fragment whose level
  is looser than the slot it is placed in,
* :meth:`Generator.scrub_` attaches block comments and chains the next
  statement,
* :meth:`Generator.provide_function_` hoists shared helper routines so each
  is emitted once per pass, ahead of the program body.

A Generator instance owns all pass-scoped state (name table, helper
definitions). Passes on one instance must not overlap; run concurrent
passes on separate instances.
"""

import logging
import re
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from ..blocks.nodes import Block, InputType, Workspace
from ..utils.settings import Settings
from ..utils.strings import prefix_lines, wrap
from .names import NameDB, NameType

logger = logging.getLogger(__name__)

# Marker substituted with the allocated helper name inside helper templates.
FUNCTION_NAME_PLACEHOLDER = "{leCUI8hutHZI4480Dc}"

Fragment = Tuple[str, int]
RuleResult = Union[str, Fragment, None]
Rule = Callable[[Block, "Generator"], RuleResult]


class GenerationError(Exception):
    """Exception raised when code generation cannot continue."""

    def __init__(self, message: str, block_type: Optional[str] = None):
        self.message = message
        self.block_type = block_type
        super().__init__(message)


class UnknownBlockError(GenerationError):
    """Raised for a block kind or field value no emission rule understands.

    Attributes:
        block_type: Kind tag of the offending block
        value: The unrecognised field value, or None when it is missing
        field: Name of the offending field, or None for an unknown kind
    """

    def __init__(self, block_type: str, value: Optional[str] = None, language: str = "",
                 field: Optional[str] = None):
        self.value = value
        self.field = field
        if field is not None:
            if value is None:
                message = f'Missing value for field "{field}" on block type "{block_type}"'
            else:
                message = (f'Unknown value "{value}" for field "{field}" '
                           f'on block type "{block_type}"')
        elif value is not None:
            message = f'Unknown value "{value}" on block type "{block_type}"'
        else:
            message = (f'Language "{language}" does not know how to generate '
                       f'code for block type "{block_type}"')
        super().__init__(message, block_type)


class Generator:
    """Base class for block-to-text generators.

    Subclasses provide the language specifics: reserved words, the comment
    prefix, the emission rules in ``for_block`` and the ``init``/``finish``
    hooks.

    Args:
        name: Language name used in diagnostics
        settings: Generator settings (defaults are used when omitted)
    """

    FUNCTION_NAME_PLACEHOLDER_ = FUNCTION_NAME_PLACEHOLDER
    RESERVED_WORDS: Tuple[str, ...] = ()
    COMMENT_PREFIX = "// "

    def __init__(self, name: str, settings: Optional[Settings] = None) -> None:
        self.name = name
        self.settings = settings or Settings()
        self.INDENT = self.settings.indent
        self.STATEMENT_PREFIX = self.settings.statement_prefix
        self.STATEMENT_SUFFIX = self.settings.statement_suffix
        self.INFINITE_LOOP_TRAP = self.settings.infinite_loop_trap
        self.COMMENT_WRAP = self.settings.comment_wrap
        self.for_block: Dict[str, Rule] = {}
        self.name_db = NameDB(
            list(self.RESERVED_WORDS) + list(self.settings.reserved_words),
            self.settings.name_namespaces,
        )
        self.definitions_: Dict[str, str] = {}
        self.function_names_: Dict[str, str] = {}
        self.is_initialized = False

    # ------------------------------------------------------------------
    # pass lifecycle
    # ------------------------------------------------------------------
    def init(self, workspace: Optional[Workspace]) -> None:
        """Start a generation pass."""
        self.definitions_ = {}
        self.function_names_ = {}
        self.is_initialized = True

    def finish(self, code: str) -> str:
        """End a generation pass and return the completed code."""
        self.definitions_ = {}
        self.function_names_ = {}
        self.name_db.reset()
        self.is_initialized = False
        return code

    def workspace_to_code(self, workspace: Workspace) -> str:
        """Generate the code for every top-level block of a workspace.

        Args:
            workspace: The program to translate

        Returns:
            str: Helper definitions followed by the program body
        """
        code: List[str] = []
        self.init(workspace)
        for block in workspace.top_blocks:
            line = self.block_to_code(block)
            if isinstance(line, tuple) and line[0]:
                # A value block left unconnected at top level.
                line = self.scrub_naked_value(line[0])
                if self.STATEMENT_PREFIX and not block.suppress_prefix_suffix:
                    line = self.inject_id(self.STATEMENT_PREFIX, block) + line
                if self.STATEMENT_SUFFIX and not block.suppress_prefix_suffix:
                    line = line + self.inject_id(self.STATEMENT_SUFFIX, block)
            if line and isinstance(line, str):
                code.append(line)
        text = self.finish("\n".join(code))
        text = re.sub(r"^\s+\n", "", text, count=1)
        text = re.sub(r"\n\s+\Z", "\n", text)
        text = re.sub(r"[ \t]+\n", "\n", text)
        return text

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------
    def block_to_code(self, block: Optional[Block], this_only: bool = False) -> Union[str, Fragment]:
        """Generate code for one block and, unless this_only, its successors.

        Args:
            block: Block to generate, or None
            this_only: When True, do not chain the next statement

        Returns:
            A (text, order) pair for value blocks, otherwise statement text

        Raises:
            UnknownBlockError: If no rule is registered for the block kind
            GenerationError: If the rule returns something unusable
        """
        if not self.is_initialized:
            logger.warning("Generator init was not called before block_to_code was called.")
        if block is None:
            return ""
        if not block.is_enabled():
            return "" if this_only else self.block_to_code(block.next_block)

        rule = self.for_block.get(block.type)
        if rule is None:
            raise UnknownBlockError(block.type, language=self.name)

        code = rule(block, self)
        if isinstance(code, tuple):
            text, order = code
            return self.scrub_(block, text, this_only), order
        if isinstance(code, str):
            if self.STATEMENT_PREFIX and not block.suppress_prefix_suffix:
                code = self.inject_id(self.STATEMENT_PREFIX, block) + code
            if self.STATEMENT_SUFFIX and not block.suppress_prefix_suffix:
                code = code + self.inject_id(self.STATEMENT_SUFFIX, block)
            return self.scrub_(block, code, this_only)
        if code is None:
            # Definition-only blocks (procedures) emit nothing in place.
            return ""
        raise GenerationError(f"Invalid code generated: {code!r}", block.type)

    def value_to_code(self, block: Block, name: str, order: int) -> str:
        """Generate the expression plugged into a value input.

        The child is parenthesised when its own precedence level is looser
        (numerically greater) than ``order``, the loosest level the slot
        accepts unparenthesised.

        Args:
            block: Block owning the input
            name: Input name
            order: Loosest precedence level the slot accepts

        Returns:
            str: The expression text, or "" when the slot is empty
        """
        target = block.get_input_target_block(name)
        if target is None:
            return ""
        result = self.block_to_code(target)
        if result == "":
            # Disabled child.
            return ""
        if not isinstance(result, tuple):
            raise GenerationError(
                f'Expecting (code, order) from value block "{target.type}"', target.type)
        code, inner_order = result
        if not code:
            return ""
        if inner_order > order:
            code = f"({code})"
        return code

    def value_to_type(self, block: Block, name: str) -> Optional[str]:
        """Return the kind tag of the block plugged into a value input."""
        target = block.get_input_target_block(name)
        return target.type if target is not None else None

    def statement_to_code(self, block: Block, name: str) -> str:
        """Generate the indented statement chain held by a statement input.

        Args:
            block: Block owning the input
            name: Input name

        Returns:
            str: Indented code, or "" when the input is empty
        """
        target = block.get_input_target_block(name)
        code = self.block_to_code(target)
        if not isinstance(code, str):
            raise GenerationError(
                f'Expecting code from statement block "{target.type}"', target.type)
        if code:
            code = self.prefix_lines(code, self.INDENT)
        return code

    # ------------------------------------------------------------------
    # scrubbing
    # ------------------------------------------------------------------
    def scrub_(self, block: Block, code: str, this_only: bool = False) -> str:
        """Attach comments to a block's code and chain the next statement.

        Comments are only collected for blocks that are not consumed as a
        value: the block's own comment (wrapped), then the nested comments
        of every expression in its value inputs. Statement inputs are left
        to their own scrub pass.

        Args:
            block: The block the code was generated for
            code: Code produced by the block's rule
            this_only: When True, do not append the next statement

        Returns:
            str: Comments, code and the following statements
        """
        comment_code = ""
        if not block.output_connected:
            comment = block.get_comment_text()
            if comment:
                comment = wrap(comment, self.COMMENT_WRAP - 3)
                comment_code += self.prefix_lines(comment, self.COMMENT_PREFIX) + "\n"
            for inp in block.input_list:
                if inp.type is InputType.VALUE and inp.block is not None:
                    comment = self.all_nested_comments(inp.block)
                    if comment:
                        comment_code += self.prefix_lines(comment, self.COMMENT_PREFIX)
        next_code = "" if this_only else self.block_to_code(block.next_block)
        return comment_code + code + next_code

    def all_nested_comments(self, block: Block) -> str:
        """Collect the comments of an expression and its sub-expressions.

        Returns:
            str: Newline-terminated comment lines, or "" when there are none
        """
        comments = [b.get_comment_text() for b in _value_subtree(block)
                    if b.get_comment_text()]
        if comments:
            comments.append("")
        return "\n".join(comments)

    def scrub_naked_value(self, line: str) -> str:
        """Make a free-standing expression legal as a statement."""
        return line + "\n"

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def provide_function_(self, desired_name: str, code: Union[str, List[str]]) -> str:
        """Register a helper routine and return its allocated name.

        The first call for a key allocates a distinct procedure name,
        substitutes it for FUNCTION_NAME_PLACEHOLDER_ in the template and
        stores the body. Later calls return the same name.

        Args:
            desired_name: Registry key, also the preferred helper name
            code: Helper template text (or lines), two-space indented

        Returns:
            str: The helper's name in the generated program
        """
        if desired_name not in self.definitions_:
            function_name = self.name_db.get_distinct_name(desired_name, NameType.PROCEDURE)
            self.function_names_[desired_name] = function_name
            if isinstance(code, (list, tuple)):
                code = "\n".join(code)
            text = code.strip().replace(self.FUNCTION_NAME_PLACEHOLDER_, function_name)
            self.definitions_[desired_name] = self._reindent(text)
            logger.debug("Registered helper %r as %r", desired_name, function_name)
        return self.function_names_[desired_name]

    def _reindent(self, text: str) -> str:
        # Templates are written with two-space indents.
        if self.INDENT == "  ":
            return text
        lines = []
        for line in text.split("\n"):
            stripped = line.lstrip(" ")
            width = len(line) - len(stripped)
            lines.append(self.INDENT * (width // 2) + " " * (width % 2) + stripped)
        return "\n".join(lines)

    def prefix_lines(self, text: str, prefix: str) -> str:
        return prefix_lines(text, prefix)

    def inject_id(self, message: str, block: Block) -> str:
        """Replace "%1" in an instrumentation message with the quoted block id."""
        return message.replace("%1", "'" + block.id + "'")

    def add_loop_trap(self, branch: str, block: Block) -> str:
        """Add the infinite-loop trap and statement hooks to a loop body.

        Args:
            branch: Generated loop body
            block: The loop block

        Returns:
            str: The instrumented loop body
        """
        if self.INFINITE_LOOP_TRAP:
            branch = self.prefix_lines(
                self.inject_id(self.INFINITE_LOOP_TRAP, block), self.INDENT) + branch
        if self.STATEMENT_SUFFIX and not block.suppress_prefix_suffix:
            branch = self.prefix_lines(
                self.inject_id(self.STATEMENT_SUFFIX, block), self.INDENT) + branch
        if self.STATEMENT_PREFIX and not block.suppress_prefix_suffix:
            branch = branch + self.prefix_lines(
                self.inject_id(self.STATEMENT_PREFIX, block), self.INDENT)
        return branch


def _value_subtree(block: Block) -> Iterator[Block]:
    """Yield a block and every block reachable through value inputs."""
    yield block
    for inp in block.input_list:
        if inp.type is InputType.VALUE and inp.block is not None:
            yield from _value_subtree(inp.block)
