"""
Emission rules for text blocks.
"""

from ...blocks.nodes import Block
from ...core.generator import Generator, RuleResult, UnknownBlockError
from ...core.names import NameType
from ..order import Order
from . import rule

CASE_FUNCTIONS = {
    "UPPERCASE": "UpperCase",
    "LOWERCASE": "LowerCase",
    # No title-case builtin exists; upper-casing is the closest match.
    "TITLECASE": "UpperCase",
}


@rule("text")
def text(block: Block, generator: Generator) -> RuleResult:
    # Text value.
    return generator.quote_(block.get_field_value("TEXT") or ""), Order.ATOMIC


@rule("text_append")
def text_append(block: Block, generator: Generator) -> RuleResult:
    # Append to a variable in place.
    var_name = generator.name_db.get_name(block.get_field_value("VAR"), NameType.VARIABLE)
    value = generator.value_to_code(block, "TEXT", Order.MULTIPLICATIVE) or "''"
    return f"{var_name} := {var_name} + {value};\n"


@rule("text_length")
def text_length(block: Block, generator: Generator) -> RuleResult:
    # String or array length.
    value = generator.value_to_code(block, "VALUE", Order.NONE) or "''"
    return f"strlen({value})", Order.HIGH


@rule("text_isEmpty")
def text_is_empty(block: Block, generator: Generator) -> RuleResult:
    # Is the string null or array empty?
    value = generator.value_to_code(block, "VALUE", Order.CONCATENATION) or "''"
    return value + " = ''", Order.RELATIONAL


@rule("text_indexOf")
def text_index_of(block: Block, generator: Generator) -> RuleResult:
    # Search the text for a substring.
    substring = generator.value_to_code(block, "FIND", Order.NONE) or "''"
    value = generator.value_to_code(block, "VALUE", Order.NONE) or "''"
    return f"strpos({value}, {substring})", Order.HIGH


def _substring_bound(block: Block, generator: Generator, where_field: str, at_input: str,
                     edge_where: str, edge_value: str) -> str:
    """Render one end of a substring range.

    Args:
        block: The text_getSubstring block
        generator: Active generator
        where_field: Dropdown field selecting how the bound is given
        at_input: Value input holding the position
        edge_where: Dropdown value meaning the fixed edge of the text
        edge_value: Text emitted for that edge

    Returns:
        str: The bound expression

    Raises:
        UnknownBlockError: If the dropdown value is missing or unknown
    """
    where = block.get_field_value(where_field)
    at_order = Order.EXPONENTIATION if where == "FROM_END" else Order.NONE
    at = generator.value_to_code(block, at_input, at_order) or "1"
    if where == edge_where:
        return edge_value
    if where == "FROM_START":
        return at
    if where == "FROM_END":
        return "-" + at
    raise UnknownBlockError(block.type, where, field=where_field)


@rule("text_getSubstring")
def text_get_substring(block: Block, generator: Generator) -> RuleResult:
    # Get substring.
    value = generator.value_to_code(block, "STRING", Order.NONE) or "''"
    start = _substring_bound(block, generator, "WHERE1", "AT1", "FIRST", "1")
    end = _substring_bound(block, generator, "WHERE2", "AT2", "LAST", "-1")
    return f"string.sub({value}, {start}, {end})", Order.HIGH


@rule("text_changeCase")
def text_change_case(block: Block, generator: Generator) -> RuleResult:
    # Change capitalization.
    operator = block.get_field_value("CASE")
    if operator not in CASE_FUNCTIONS:
        raise UnknownBlockError(block.type, operator, field="CASE")
    value = generator.value_to_code(block, "TEXT", Order.NONE) or "''"
    return f"{CASE_FUNCTIONS[operator]}({value})", Order.HIGH


@rule("text_print")
def text_print(block: Block, generator: Generator) -> RuleResult:
    # Print statement.
    msg = generator.value_to_code(block, "TEXT", Order.NONE) or "''"
    return f"message({msg});\n"
