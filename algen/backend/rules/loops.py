"""
Emission rules for loop blocks.

AL-style output has no one-line ``continue``. A continue is emitted as the
CONTINUE_STATEMENT marker (a jump to a ``continue`` label), and every loop
rule scans its generated body for the marker and, when found, appends the
label at the end of the body so the jump lands just before the next
iteration. The scan is textual: a marker inside a string literal only adds
an unused label.
"""

import math

from ...blocks.nodes import Block
from ...core.generator import Generator, RuleResult, UnknownBlockError
from ...core.names import NameType
from ...utils.strings import is_number
from ..order import Order
from . import rule

CONTINUE_STATEMENT = "goto continue\n"
CONTINUE_LABEL = "::continue::\n"
INFINITY = "math.huge"


def add_continue_label(branch: str, indent: str) -> str:
    """Append the continue label to a loop body that uses the marker.

    Outer loops also receive a label when an inner loop continues, since
    the marker is still in their body text.

    Args:
        branch: Generated loop body
        indent: Indentation unit

    Returns:
        str: The loop body, with a trailing label when required
    """
    if CONTINUE_STATEMENT in branch:
        return branch + indent + CONTINUE_LABEL
    return branch


def number_field(block: Block, name: str) -> float:
    """Read a numeric field value.

    Args:
        block: Block holding the field
        name: Field name

    Returns:
        float: The field value; infinities are allowed

    Raises:
        UnknownBlockError: If the value is missing, not a number, or NaN
    """
    raw = block.get_field_value(name)
    try:
        number = float(raw)
    except (TypeError, ValueError):
        raise UnknownBlockError(block.type, raw, field=name) from None
    if math.isnan(number):
        raise UnknownBlockError(block.type, raw, field=name)
    return number


def format_number(value: float) -> str:
    """Render a number the way numeric literals appear in generated code."""
    if math.isinf(value):
        return INFINITY if value > 0 else "-" + INFINITY
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _loop_body(block: Block, generator: Generator) -> str:
    branch = generator.statement_to_code(block, "DO")
    branch = generator.add_loop_trap(branch, block)
    return add_continue_label(branch, generator.INDENT)


@rule("controls_repeat_ext", "controls_repeat")
def controls_repeat_ext(block: Block, generator: Generator) -> RuleResult:
    """Repeat the body a number of times, given by a field or an input."""
    if block.has_field("TIMES"):
        # Internal number.
        repeats = format_number(number_field(block, "TIMES"))
    else:
        # External number.
        repeats = generator.value_to_code(block, "TIMES", Order.NONE) or "0"
    if is_number(repeats):
        repeats = str(int(float(repeats)))
    else:
        repeats = f"math.floor({repeats})"
    branch = _loop_body(block, generator)
    loop_var = generator.name_db.get_distinct_name("count", NameType.VARIABLE)
    return f"for {loop_var} := 1 to {repeats} do begin\n{branch}end;\n"


@rule("controls_whileUntil")
def controls_while_until(block: Block, generator: Generator) -> RuleResult:
    # Do while/until loop.
    until = block.get_field_value("MODE") == "UNTIL"
    argument0 = generator.value_to_code(
        block, "BOOL", Order.UNARY if until else Order.NONE) or "false"
    branch = _loop_body(block, generator)
    if until:
        argument0 = "not " + argument0
    return f"while {argument0} do begin\n{branch}end;\n"


@rule("controls_for")
def controls_for(block: Block, generator: Generator) -> RuleResult:
    """Count a variable from one bound to the other.

    With literal bounds and step the direction is fixed at generation time;
    otherwise a step variable is set up and negated at run time when the
    loop counts down.
    """
    variable0 = generator.name_db.get_name(block.get_field_value("VAR"), NameType.VARIABLE)
    start = generator.value_to_code(block, "FROM", Order.NONE) or "0"
    end = generator.value_to_code(block, "TO", Order.NONE) or "0"
    increment = generator.value_to_code(block, "BY", Order.NONE) or "1"
    branch = _loop_body(block, generator)
    code = ""
    if is_number(start) and is_number(end) and is_number(increment):
        # All arguments are simple numbers.
        up = float(start) <= float(end)
        step = abs(float(increment))
        inc_value = ("" if up else "-") + format_number(step)
    else:
        # Determine loop direction at start, in case one of the bounds
        # changes during loop execution.
        inc_value = generator.name_db.get_distinct_name(variable0 + "_inc", NameType.VARIABLE)
        if is_number(increment):
            code += f"{inc_value} := {format_number(abs(float(increment)))};\n"
        else:
            code += f"{inc_value} := math.abs({increment});\n"
        code += f"if ({start}) > ({end}) then begin\n"
        code += f"{generator.INDENT}{inc_value} := -{inc_value};\n"
        code += "end;\n"
    code += f"for {variable0} := {start} to {end}, {inc_value} do begin\n{branch}end;\n"
    return code


@rule("controls_forEach")
def controls_for_each(block: Block, generator: Generator) -> RuleResult:
    # For each loop.
    variable0 = generator.name_db.get_name(block.get_field_value("VAR"), NameType.VARIABLE)
    argument0 = generator.value_to_code(block, "LIST", Order.NONE) or "{}"
    branch = _loop_body(block, generator)
    return f"foreach {variable0} in {argument0} do begin\n{branch}end;\n"


@rule("controls_flow_statements")
def controls_flow_statements(block: Block, generator: Generator) -> RuleResult:
    """Emit break, or a jump to the enclosing loop's continue label."""
    xfix = ""
    if generator.STATEMENT_PREFIX:
        # Automatic prefix insertion is switched off for this block.
        xfix += generator.inject_id(generator.STATEMENT_PREFIX, block)
    if generator.STATEMENT_SUFFIX:
        # The regular suffix would never run once the jump is taken.
        xfix += generator.inject_id(generator.STATEMENT_SUFFIX, block)
    if generator.STATEMENT_PREFIX:
        loop = block.get_surround_loop()
        if loop is not None and not loop.suppress_prefix_suffix:
            # The loop's own prefix at the end of its body is skipped too.
            xfix += generator.inject_id(generator.STATEMENT_PREFIX, loop)
    flow = block.get_field_value("FLOW")
    if flow == "BREAK":
        return xfix + "break;\n"
    if flow == "CONTINUE":
        return xfix + CONTINUE_STATEMENT
    raise UnknownBlockError(block.type, flow, field="FLOW")
