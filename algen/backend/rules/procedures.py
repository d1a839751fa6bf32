"""
Emission rules for procedure blocks.

Definitions produce no code in place. The finished definition is stored in
``definitions_`` under a ``%``-prefixed key, so it cannot collide with a
helper routine's key, and is emitted ahead of the program body.
"""

from typing import Optional

from ...blocks.nodes import Block
from ...core.generator import Generator, RuleResult
from ...core.names import NameType
from ..order import Order
from . import rule

# Value kinds with a known AL return type.
RETURN_TYPES = {
    "math_number": "decimal",
    "math_arithmetic": "decimal",
    "logic_boolean": "Boolean",
}
FALLBACK_RETURN_TYPE = "Variant"


def return_type_for(kind: Optional[str]) -> Optional[str]:
    """Return the declared type for a procedure returning a block kind.

    Args:
        kind: Kind tag of the returned value block, or None

    Returns:
        The AL type name, or None when the procedure returns nothing
    """
    if kind is None:
        return None
    return RETURN_TYPES.get(kind, FALLBACK_RETURN_TYPE)


@rule("procedures_defreturn", "procedures_defnoreturn")
def procedures_defreturn(block: Block, generator: Generator) -> RuleResult:
    """Define a procedure with or without a return value.

    The definition is stored for :meth:`ALGenerator.finish` and nothing is
    emitted in place.
    """
    func_name = generator.name_db.get_name(block.get_field_value("NAME"), NameType.PROCEDURE)
    xfix1 = ""
    if generator.STATEMENT_PREFIX:
        xfix1 += generator.inject_id(generator.STATEMENT_PREFIX, block)
    if generator.STATEMENT_SUFFIX:
        xfix1 += generator.inject_id(generator.STATEMENT_SUFFIX, block)
    if xfix1:
        xfix1 = generator.prefix_lines(xfix1, generator.INDENT)
    loop_trap = ""
    if generator.INFINITE_LOOP_TRAP:
        loop_trap = generator.prefix_lines(
            generator.inject_id(generator.INFINITE_LOOP_TRAP, block), generator.INDENT)
    branch = generator.statement_to_code(block, "STACK")
    return_value = generator.value_to_code(block, "RETURN", Order.NONE)
    return_type = return_type_for(generator.value_to_type(block, "RETURN")) if return_value else None
    xfix2 = ""
    if branch and return_value:
        # After executing the function body, revisit this block for the return.
        xfix2 = xfix1
    if return_value:
        return_value = f"{generator.INDENT}exit({return_value});\n"
    args = [generator.name_db.get_name(var, NameType.VARIABLE) for var in block.get_vars()]
    signature = f"procedure {func_name}({', '.join(args)})"
    if return_type:
        signature += " : " + return_type
    code = (signature + "\nbegin\n" + xfix1 + loop_trap + branch
            + xfix2 + return_value + "end;\n")
    code = generator.scrub_(block, code)
    generator.definitions_["%" + func_name] = code
    return None


@rule("procedures_callreturn")
def procedures_callreturn(block: Block, generator: Generator) -> RuleResult:
    # Call a procedure with a return value.
    func_name = generator.name_db.get_name(block.get_field_value("NAME"), NameType.PROCEDURE)
    args = [generator.value_to_code(block, f"ARG{i}", Order.NONE) or "nil"
            for i in range(len(block.get_vars()))]
    return f"{func_name}({', '.join(args)})", Order.HIGH


@rule("procedures_callnoreturn")
def procedures_callnoreturn(block: Block, generator: Generator) -> RuleResult:
    # A call as a statement is the call expression plus a line ending.
    code, _ = procedures_callreturn(block, generator)
    return code + ";\n"


@rule("procedures_ifreturn")
def procedures_ifreturn(block: Block, generator: Generator) -> RuleResult:
    # Conditionally return value from a procedure.
    condition = generator.value_to_code(block, "CONDITION", Order.NONE) or "false"
    code = f"if {condition} then begin\n"
    if generator.STATEMENT_SUFFIX:
        # The regular suffix would never run once the return is taken.
        code += generator.prefix_lines(
            generator.inject_id(generator.STATEMENT_SUFFIX, block), generator.INDENT)
    if block.has_return_value:
        value = generator.value_to_code(block, "VALUE", Order.NONE) or "nil"
        code += f"{generator.INDENT}exit({value});\n"
    else:
        code += f"{generator.INDENT}exit;\n"
    return code + "end;\n"
