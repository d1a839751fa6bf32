"""
Emission rules for variable blocks.

The dynamically typed variants share the rules of the plain ones.
"""

from ...blocks.nodes import Block
from ...core.generator import Generator, RuleResult
from ...core.names import NameType
from ..order import Order
from . import rule


@rule("variables_get", "variables_get_dynamic")
def variables_get(block: Block, generator: Generator) -> RuleResult:
    # Variable getter.
    code = generator.name_db.get_name(block.get_field_value("VAR"), NameType.VARIABLE)
    return code, Order.ATOMIC


@rule("variables_set", "variables_set_dynamic")
def variables_set(block: Block, generator: Generator) -> RuleResult:
    """Assign a value to a variable, 0 when the value input is empty."""
    argument0 = generator.value_to_code(block, "VALUE", Order.NONE) or "0"
    var_name = generator.name_db.get_name(block.get_field_value("VAR"), NameType.VARIABLE)
    return f"{var_name} := {argument0};\n"
