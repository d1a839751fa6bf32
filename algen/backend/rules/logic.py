"""
Emission rules for logic blocks.
"""

from ...blocks.nodes import Block
from ...core.generator import Generator, RuleResult, UnknownBlockError
from ..order import Order
from . import rule

COMPARE_OPERATORS = {
    "EQ": "=",
    "NEQ": "<>",
    "LT": "<",
    "LTE": "<=",
    "GT": ">",
    "GTE": ">=",
}


@rule("controls_if", "controls_ifelse")
def controls_if(block: Block, generator: Generator) -> RuleResult:
    """If/elseif/else chain.

    Every branch after the first closes the previous one with ``end else``;
    an ELSE branch is emitted when present, or when a statement suffix must
    run on the fall-through path.
    """
    n = 0
    code = ""
    if generator.STATEMENT_PREFIX:
        # Automatic prefix insertion is switched off for this block.
        code += generator.inject_id(generator.STATEMENT_PREFIX, block)
    while True:
        condition = generator.value_to_code(block, f"IF{n}", Order.NONE) or "false"
        branch = generator.statement_to_code(block, f"DO{n}")
        if generator.STATEMENT_SUFFIX:
            branch = generator.prefix_lines(
                generator.inject_id(generator.STATEMENT_SUFFIX, block), generator.INDENT) + branch
        code += ("end else " if n > 0 else "") + "if " + condition + " then begin\n" + branch
        n += 1
        if block.get_input(f"IF{n}") is None:
            break

    if block.get_input("ELSE") is not None or generator.STATEMENT_SUFFIX:
        branch = generator.statement_to_code(block, "ELSE")
        if generator.STATEMENT_SUFFIX:
            branch = generator.prefix_lines(
                generator.inject_id(generator.STATEMENT_SUFFIX, block), generator.INDENT) + branch
        code += "end else begin\n" + branch
    return code + "end;\n"


@rule("logic_compare")
def logic_compare(block: Block, generator: Generator) -> RuleResult:
    """Comparison of two values."""
    op = block.get_field_value("OP")
    operator = COMPARE_OPERATORS.get(op)
    if operator is None:
        raise UnknownBlockError(block.type, op, field="OP")
    # Comparisons do not chain, so operands must bind tighter.
    argument0 = generator.value_to_code(block, "A", Order.CONCATENATION) or "0"
    argument1 = generator.value_to_code(block, "B", Order.CONCATENATION) or "0"
    return f"{argument0} {operator} {argument1}", Order.RELATIONAL


@rule("logic_operation")
def logic_operation(block: Block, generator: Generator) -> RuleResult:
    # Operations 'and', 'or'.
    op = block.get_field_value("OP")
    if op == "AND":
        operator, order = "and", Order.AND
    elif op == "OR":
        operator, order = "or", Order.OR
    else:
        raise UnknownBlockError(block.type, op, field="OP")
    argument0 = generator.value_to_code(block, "A", order)
    argument1 = generator.value_to_code(block, "B", order)
    if not argument0 and not argument1:
        # If there are no arguments, then the return value is false.
        argument0 = "false"
        argument1 = "false"
    else:
        # Single missing arguments have no effect on the return value.
        default_argument = "true" if operator == "and" else "false"
        argument0 = argument0 or default_argument
        argument1 = argument1 or default_argument
    return f"{argument0} {operator} {argument1}", order


@rule("logic_negate")
def logic_negate(block: Block, generator: Generator) -> RuleResult:
    argument0 = generator.value_to_code(block, "BOOL", Order.UNARY) or "true"
    return "not " + argument0, Order.UNARY


@rule("logic_boolean")
def logic_boolean(block: Block, generator: Generator) -> RuleResult:
    code = "true" if block.get_field_value("BOOL") == "TRUE" else "false"
    return code, Order.ATOMIC


@rule("logic_null")
def logic_null(block: Block, generator: Generator) -> RuleResult:
    return "nil", Order.ATOMIC


@rule("logic_ternary")
def logic_ternary(block: Block, generator: Generator) -> RuleResult:
    # Emulated with and/or: the THEN value must not be false-like.
    value_if = generator.value_to_code(block, "IF", Order.RELATIONAL) or "false"
    value_then = generator.value_to_code(block, "THEN", Order.RELATIONAL) or "nil"
    value_else = generator.value_to_code(block, "ELSE", Order.AND) or "nil"
    return f"{value_if} and {value_then} or {value_else}", Order.OR
