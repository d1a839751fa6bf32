"""
Name allocation for generated code.

Every variable, procedure and helper routine that ends up in the output
needs an identifier that is legal in the target language, is not one of its
keywords and does not clash with any other identifier in the same
generation pass. The :class:`NameDB` hands those identifiers out.

Two entry points exist:

* :meth:`NameDB.get_name` maps a logical name (or a variable id) to an
  identifier and keeps returning the same identifier for the rest of the
  pass.
* :meth:`NameDB.get_distinct_name` always mints a new identifier, for loop
  counters and helper routines that must not collide with anything.

Collisions are resolved by appending ``2``, ``3``, ... to the sanitised base
name. Comparison is case-insensitive because AL identifiers are.
"""

import logging
import re
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set
from urllib.parse import quote

from ..blocks.nodes import PROCEDURE_DEFINITION_TYPES, Workspace

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"

# Characters encodeURI leaves alone; they are mapped to "_" below anyway.
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"
_NON_WORD_RE = re.compile(r"[^A-Za-z0-9_]")


class NameType(Enum):
    """Kinds of names handed out by the allocator."""
    VARIABLE = "VARIABLE"
    PROCEDURE = "PROCEDURE"


def safe_name(name: Optional[str]) -> str:
    """Turn an arbitrary user-facing name into a legal identifier.

    Spaces become underscores, every other non-word character (including
    the escape sequences of non-ASCII characters) becomes an underscore,
    and a leading digit gains a ``my_`` prefix.

    Args:
        name: User-facing name

    Returns:
        str: A legal identifier, "unnamed" for empty input
    """
    if not name:
        return "unnamed"
    encoded = quote(name.replace(" ", "_"), safe=_URI_SAFE)
    cleaned = _NON_WORD_RE.sub("_", encoded)
    if cleaned[0].isdigit():
        cleaned = "my_" + cleaned
    return cleaned


class NameDB:
    """Collision-free identifier table for one generation pass.

    Args:
        reserved_words: Words that must never be emitted as identifiers
        namespaces: Mapping of NameType value to a namespace group. Kinds in
            the same group share one set of used names; unlisted kinds use
            the default group, so by default every kind shares one namespace

    Example:
        >>> db = NameDB(["begin", "end"])
        >>> db.get_name("end", NameType.VARIABLE)
        'end2'
        >>> db.get_distinct_name("count", NameType.VARIABLE)
        'count'
        >>> db.get_distinct_name("count", NameType.VARIABLE)
        'count2'
    """

    def __init__(self, reserved_words: Iterable[str],
                 namespaces: Optional[Dict[str, str]] = None) -> None:
        self._reserved: Set[str] = {word.lower() for word in reserved_words}
        self._namespaces: Dict[str, str] = dict(namespaces or {})
        self._workspace: Optional[Workspace] = None
        self._db: Dict[NameType, Dict[str, str]] = {}
        self._used: Dict[str, Set[str]] = {}

    def reset(self) -> None:
        """Forget every allocation and the bound variable map."""
        self._db = {}
        self._used = {}
        self._workspace = None

    def set_variable_map(self, workspace: Optional[Workspace]) -> None:
        """Resolve variable ids through this workspace's variable list."""
        self._workspace = workspace

    def populate_variables(self, workspace: Workspace) -> None:
        """Allocate names for all workspace variables, in declaration order."""
        for variable in workspace.variables:
            self.get_name(variable.id, NameType.VARIABLE)

    def populate_procedures(self, workspace: Workspace) -> None:
        """Allocate names for all procedures defined in the workspace."""
        for block in workspace.get_all_blocks():
            if block.type in PROCEDURE_DEFINITION_TYPES:
                self.get_name(block.get_field_value("NAME"), NameType.PROCEDURE)

    def get_name(self, name_or_id: str, kind: NameType) -> str:
        """Return the identifier for a logical name, allocating it once.

        Args:
            name_or_id: Logical name, or a variable id for VARIABLE names
            kind: Name kind

        Returns:
            str: The identifier, identical for repeated calls in this pass
        """
        name = name_or_id
        if kind is NameType.VARIABLE and self._workspace is not None:
            variable = self._workspace.get_variable_by_id(name_or_id)
            if variable is not None:
                name = variable.name
        normalized = (name or "").lower()
        table = self._db.setdefault(kind, {})
        if normalized in table:
            return table[normalized]
        identifier = self._allocate(name, kind, [self._group(kind)])
        table[normalized] = identifier
        return identifier

    def get_distinct_name(self, name: str, kind: NameType) -> str:
        """Return a new identifier that clashes with nothing handed out so far.

        Args:
            name: Desired base name
            kind: Name kind (decides which namespace records the result)

        Returns:
            str: A fresh identifier
        """
        groups = set(self._used) | {self._group(kind)}
        return self._allocate(name, kind, sorted(groups))

    def allocated(self, kind: NameType) -> List[str]:
        """Return identifiers handed out through get_name for a kind."""
        return list(self._db.get(kind, {}).values())

    def _group(self, kind: NameType) -> str:
        return self._namespaces.get(kind.value, DEFAULT_NAMESPACE)

    def _is_taken(self, candidate: str, groups: Iterable[str]) -> bool:
        lowered = candidate.lower()
        if lowered in self._reserved:
            return True
        return any(lowered in self._used.get(group, ()) for group in groups)

    def _allocate(self, name: Optional[str], kind: NameType, groups: List[str]) -> str:
        base = safe_name(name)
        candidate = base
        suffix = 1
        while self._is_taken(candidate, groups):
            suffix += 1
            candidate = f"{base}{suffix}"
        self._used.setdefault(self._group(kind), set()).add(candidate.lower())
        if candidate != name:
            logger.debug("Allocated %s name %r for %r", kind.value, candidate, name)
        return candidate
