"""
Block tree definitions for algen.

This module contains the data classes that represent a visually composed
program: blocks with fields and typed input slots, statement chains linked
through ``next_block``, and the workspace that owns the top-level blocks
and the variable list. The generator only reads these objects.
"""

import itertools
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional


_block_ids = itertools.count(1)

# Block kinds that behave as loops for break/continue purposes.
LOOP_TYPES = frozenset({
    "controls_repeat",
    "controls_repeat_ext",
    "controls_forEach",
    "controls_for",
    "controls_whileUntil",
})

# Block kinds that place statement prefix/suffix text themselves.
SUPPRESS_PREFIX_SUFFIX_TYPES = frozenset({
    "controls_if",
    "controls_ifelse",
    "controls_flow_statements",
    "procedures_ifreturn",
})

PROCEDURE_DEFINITION_TYPES = frozenset({
    "procedures_defreturn",
    "procedures_defnoreturn",
})


class InputType(Enum):
    """Kinds of input slots on a block."""
    VALUE = auto()      # Holds an expression block
    STATEMENT = auto()  # Holds a chain of statement blocks
    DUMMY = auto()      # Carries fields only, never a block


@dataclass(eq=False)
class Input:
    """A named input slot on a block.

    Attributes:
        name: Input name, e.g. "A", "IF0", "DO"
        type: Slot kind
        block: The connected child block, or None when empty
    """
    name: str
    type: InputType
    block: Optional["Block"] = None

    @classmethod
    def value(cls, name: str, block: Optional["Block"] = None) -> "Input":
        return cls(name, InputType.VALUE, block)

    @classmethod
    def statement(cls, name: str, block: Optional["Block"] = None) -> "Input":
        return cls(name, InputType.STATEMENT, block)

    @classmethod
    def dummy(cls, name: str = "") -> "Input":
        return cls(name, InputType.DUMMY, None)


@dataclass(eq=False)
class Block:
    """One visually composed program unit.

    Children passed in ``inputs`` and ``next_block`` are linked back to
    this block on construction, so a tree is built bottom-up.

    Attributes:
        type: Block kind tag, e.g. "math_arithmetic"
        id: Unique block id (generated when empty)
        fields: Field name to field value
        inputs: Ordered input slots
        next_block: Next statement in the chain, or None
        comment: Attached comment text, or None
        enabled: Disabled blocks produce no code
        extra_state: Mutation data (procedure params, else-if counts, ...)
        parent: Block this one hangs off (input owner or previous statement)
        parent_input: Input holding this block, None when linked via next
    """
    type: str
    id: str = ""
    fields: Dict[str, Any] = field(default_factory=dict)
    inputs: List[Input] = field(default_factory=list)
    next_block: Optional["Block"] = None
    comment: Optional[str] = None
    enabled: bool = True
    extra_state: Dict[str, Any] = field(default_factory=dict)
    parent: Optional["Block"] = field(default=None, repr=False)
    parent_input: Optional[Input] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.id:
            self.id = f"{self.type}_{next(_block_ids)}"
        for inp in self.inputs:
            if inp.block is not None:
                inp.block.parent = self
                inp.block.parent_input = inp
        if self.next_block is not None:
            self.next_block.parent = self
            self.next_block.parent_input = None

    # ------------------------------------------------------------------
    # fields and inputs
    # ------------------------------------------------------------------
    def get_field_value(self, name: str) -> Any:
        return self.fields.get(name)

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get_input(self, name: str) -> Optional[Input]:
        for inp in self.inputs:
            if inp.name == name:
                return inp
        return None

    def get_input_target_block(self, name: str) -> Optional["Block"]:
        inp = self.get_input(name)
        return inp.block if inp is not None else None

    @property
    def input_list(self) -> List[Input]:
        return self.inputs

    def get_comment_text(self) -> Optional[str]:
        return self.comment

    def is_enabled(self) -> bool:
        return self.enabled

    # ------------------------------------------------------------------
    # connections
    # ------------------------------------------------------------------
    @property
    def output_connected(self) -> bool:
        """True when this block is plugged into a value input."""
        return self.parent_input is not None and self.parent_input.type is InputType.VALUE

    def get_surround_parent(self) -> Optional["Block"]:
        """Return the block whose input (directly or via a chain) holds this one."""
        block = self
        while block.parent is not None and block.parent_input is None:
            block = block.parent
        return block.parent

    def get_surround_loop(self) -> Optional["Block"]:
        """Return the nearest enclosing loop block, or None."""
        block: Optional[Block] = self
        while block is not None:
            if block.type in LOOP_TYPES:
                return block
            block = block.get_surround_parent()
        return None

    def get_descendants(self) -> List["Block"]:
        """Return this block and everything attached below it, in tree order."""
        return list(self._walk())

    def _walk(self) -> Iterator["Block"]:
        yield self
        for inp in self.inputs:
            if inp.block is not None:
                yield from inp.block._walk()
        if self.next_block is not None:
            yield from self.next_block._walk()

    # ------------------------------------------------------------------
    # mutation data
    # ------------------------------------------------------------------
    @property
    def suppress_prefix_suffix(self) -> bool:
        if "suppressPrefixSuffix" in self.extra_state:
            return bool(self.extra_state["suppressPrefixSuffix"])
        return self.type in SUPPRESS_PREFIX_SUFFIX_TYPES

    def get_vars(self) -> List[str]:
        """Return procedure parameter names in declaration order."""
        params = self.extra_state.get("params", [])
        return [p["name"] if isinstance(p, dict) else str(p) for p in params]

    @property
    def has_return_value(self) -> bool:
        """Whether a procedures_ifreturn block returns a value.

        Follows the enclosing procedure definition unless the mutation
        data says otherwise.
        """
        if "hasReturnValue" in self.extra_state:
            return bool(self.extra_state["hasReturnValue"])
        block = self.get_surround_parent()
        while block is not None:
            if block.type in PROCEDURE_DEFINITION_TYPES:
                return block.type == "procedures_defreturn"
            block = block.get_surround_parent()
        return True


@dataclass(frozen=True)
class Variable:
    """A workspace variable.

    Attributes:
        id: Unique variable id referenced by VAR fields
        name: User-facing variable name
        type: Optional variable type tag
    """
    id: str
    name: str
    type: str = ""


@dataclass
class Workspace:
    """A visual program: ordered top-level blocks plus variables.

    Attributes:
        top_blocks: Top-level blocks in generation order
        variables: Declared variables
    """
    top_blocks: List[Block] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)

    def get_variable_by_id(self, var_id: str) -> Optional[Variable]:
        for variable in self.variables:
            if variable.id == var_id:
                return variable
        return None

    def get_all_blocks(self) -> List[Block]:
        blocks: List[Block] = []
        for top in self.top_blocks:
            blocks.extend(top.get_descendants())
        return blocks


# ==================== Loading ====================

class BlockLoadError(ValueError):
    """Raised when a serialized block program is malformed."""


_STATEMENT_INPUT_RE = re.compile(r"^(DO\d*|ELSE|STACK)$")


def _input_kind(name: str, data: Dict[str, Any]) -> InputType:
    kind = data.get("kind")
    if kind is not None:
        try:
            return InputType[str(kind).upper()]
        except KeyError:
            raise BlockLoadError(f"Unknown input kind {kind!r} on input {name!r}")
    if _STATEMENT_INPUT_RE.match(name):
        return InputType.STATEMENT
    return InputType.VALUE


def _field_value(value: Any) -> Any:
    # Variable fields are serialized as {"id": ...}.
    if isinstance(value, dict):
        if "id" in value:
            return value["id"]
        if "name" in value:
            return value["name"]
    return value


def _if_input_names(extra_state: Dict[str, Any]) -> List[str]:
    names = ["IF0", "DO0"]
    for i in range(1, int(extra_state.get("elseIfCount", 0)) + 1):
        names.extend([f"IF{i}", f"DO{i}"])
    if extra_state.get("hasElse"):
        names.append("ELSE")
    return names


def block_from_dict(data: Dict[str, Any]) -> Block:
    """Build a block tree from its JSON-style dictionary form.

    Args:
        data: Mapping with "type" and optional "id", "fields", "inputs",
              "next", "extraState", "comment" and "enabled" keys

    Returns:
        Block: The root of the loaded tree

    Raises:
        BlockLoadError: If the mapping is malformed
    """
    if not isinstance(data, dict) or "type" not in data:
        raise BlockLoadError(f"Block entry must be an object with a 'type': {data!r}")

    fields = {name: _field_value(value) for name, value in data.get("fields", {}).items()}
    extra_state = dict(data.get("extraState") or {})
    if "name" in extra_state and "NAME" not in fields:
        fields["NAME"] = extra_state["name"]

    raw_inputs: Dict[str, Any] = dict(data.get("inputs") or {})
    order = list(raw_inputs)
    if data["type"] in ("controls_if", "controls_ifelse"):
        declared = _if_input_names(extra_state) if extra_state else []
        order = declared + [name for name in order if name not in declared]

    inputs: List[Input] = []
    for name in order:
        entry = raw_inputs.get(name) or {}
        if not isinstance(entry, dict):
            raise BlockLoadError(f"Input {name!r} must be an object")
        child_data = entry.get("block") or entry.get("shadow")
        child = block_from_dict(child_data) if child_data else None
        inputs.append(Input(name, _input_kind(name, entry), child))

    next_data = (data.get("next") or {}).get("block")
    comment = data.get("comment")
    if comment is None:
        comment = ((data.get("icons") or {}).get("comment") or {}).get("text")

    return Block(
        type=data["type"],
        id=data.get("id", ""),
        fields=fields,
        inputs=inputs,
        next_block=block_from_dict(next_data) if next_data else None,
        comment=comment,
        enabled=data.get("enabled", True),
        extra_state=extra_state,
    )


def workspace_from_dict(data: Dict[str, Any]) -> Workspace:
    """Build a workspace from its JSON-style dictionary form.

    Accepts both ``{"blocks": {"blocks": [...]}}`` and ``{"blocks": [...]}``.

    Args:
        data: Mapping with "blocks" and optional "variables"

    Returns:
        Workspace: The loaded workspace

    Raises:
        BlockLoadError: If the mapping is malformed
    """
    if not isinstance(data, dict):
        raise BlockLoadError("Program must be a JSON object")
    blocks = data.get("blocks", [])
    if isinstance(blocks, dict):
        blocks = blocks.get("blocks", [])
    variables = []
    for entry in data.get("variables", []):
        try:
            variables.append(Variable(id=entry.get("id", entry["name"]),
                                      name=entry["name"],
                                      type=entry.get("type", "")))
        except (KeyError, AttributeError):
            raise BlockLoadError(f"Variable entry needs a 'name': {entry!r}")
    return Workspace(
        top_blocks=[block_from_dict(b) for b in blocks],
        variables=variables,
    )
