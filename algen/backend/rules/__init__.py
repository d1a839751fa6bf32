"""
Emission rules for AL, one module per block category.

Each rule takes ``(block, generator)`` and returns a ``(text, Order)`` pair
for expression blocks, statement text for statement blocks, or None for
blocks that only register definitions. Rules are registered by block kind
with the :func:`rule` decorator; :func:`load_rules` returns the complete
table.
"""

from typing import Callable, Dict

from ...core.generator import Rule

RULES: Dict[str, Rule] = {}


def rule(*kinds: str) -> Callable[[Rule], Rule]:
    """Register the decorated function as the rule for the given block kinds."""
    def register(func: Rule) -> Rule:
        for kind in kinds:
            RULES[kind] = func
        return func
    return register


def load_rules() -> Dict[str, Rule]:
    """Return a copy of the rule table with every category loaded."""
    from . import logic, loops, math, procedures, text, variables  # noqa: F401
    return dict(RULES)


__all__ = [
    "RULES",
    "rule",
    "load_rules",
]
