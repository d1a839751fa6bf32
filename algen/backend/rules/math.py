"""
Emission rules for math blocks.

List and number-theory blocks that have no single-expression rendering
call helper procedures registered through ``provide_function_``; the
helper bodies below are AL procedures over ``List of [Decimal]``.
"""

from ...blocks.nodes import Block
from ...core.generator import FUNCTION_NAME_PLACEHOLDER, Generator, RuleResult, UnknownBlockError
from ...core.names import NameType
from ..order import Order
from . import rule
from .loops import INFINITY, format_number, number_field

PH = FUNCTION_NAME_PLACEHOLDER

# op -> (operator, result order, left operand order, right operand order)
ARITHMETIC_OPERATORS = {
    "ADD": (" + ", Order.ADDITIVE, Order.ADDITIVE, Order.MULTIPLICATIVE),
    "MINUS": (" - ", Order.ADDITIVE, Order.ADDITIVE, Order.MULTIPLICATIVE),
    "MULTIPLY": (" * ", Order.MULTIPLICATIVE, Order.MULTIPLICATIVE, Order.UNARY),
    "DIVIDE": (" / ", Order.MULTIPLICATIVE, Order.MULTIPLICATIVE, Order.UNARY),
    "POWER": (" ^ ", Order.EXPONENTIATION, Order.HIGH, Order.HIGH),
}

# Single-argument functions rendered as plain calls.
SINGLE_FUNCTIONS = {
    "ABS": "math.abs({})",
    "ROOT": "math.sqrt({})",
    "LN": "math.log({})",
    "LOG10": "math.log({}, 10)",
    "EXP": "math.exp({})",
    "ROUNDUP": "math.ceil({})",
    "ROUNDDOWN": "math.floor({})",
    "SIN": "math.sin(math.rad({}))",
    "COS": "math.cos(math.rad({}))",
    "TAN": "math.tan(math.rad({}))",
    "ASIN": "math.deg(math.asin({}))",
    "ACOS": "math.deg(math.acos({}))",
    "ATAN": "math.deg(math.atan({}))",
}

CONSTANTS = {
    "PI": ("math.pi", Order.HIGH),
    "E": ("math.exp(1)", Order.HIGH),
    "GOLDEN_RATIO": ("(1 + math.sqrt(5)) / 2", Order.MULTIPLICATIVE),
    "SQRT2": ("math.sqrt(2)", Order.HIGH),
    "SQRT1_2": ("math.sqrt(1 / 2)", Order.HIGH),
    "INFINITY": (INFINITY, Order.HIGH),
}

# property -> (suffix, operand order, result order)
NUMBER_PROPERTIES = {
    "EVEN": (" % 2 = 0", Order.MULTIPLICATIVE, Order.RELATIONAL),
    "ODD": (" % 2 = 1", Order.MULTIPLICATIVE, Order.RELATIONAL),
    "WHOLE": (" % 1 = 0", Order.MULTIPLICATIVE, Order.RELATIONAL),
    "POSITIVE": (" > 0", Order.CONCATENATION, Order.RELATIONAL),
    "NEGATIVE": (" < 0", Order.CONCATENATION, Order.RELATIONAL),
}

IS_PRIME = f"""
procedure {PH}(n: Decimal): Boolean
var
  x: Integer;
begin
  // https://en.wikipedia.org/wiki/Primality_test#Naive_methods
  if (n = 2) or (n = 3) then
    exit(true);
  // False if n is negative, is 1, or not whole.
  // And false if n is divisible by 2 or 3.
  if (n <= 1) or (n mod 1 <> 0) or (n mod 2 = 0) or (n mod 3 = 0) then
    exit(false);
  // Check all the numbers of form 6k +/- 1, up to sqrt(n).
  x := 6;
  while x <= Power(n, 0.5) + 1.5 do begin
    if (n mod (x - 1) = 0) or (n mod (x + 1) = 0) then
      exit(false);
    x += 6;
  end;
  exit(true);
end;
"""

SUM = f"""
procedure {PH}(t: List of [Decimal]): Decimal
var
  v: Decimal;
  result: Decimal;
begin
  result := 0;
  foreach v in t do
    result += v;
  exit(result);
end;
"""

MIN = f"""
procedure {PH}(t: List of [Decimal]): Decimal
var
  v: Decimal;
  result: Decimal;
begin
  if t.Count() = 0 then
    exit(0);
  result := t.Get(1);
  foreach v in t do
    if v < result then
      result := v;
  exit(result);
end;
"""

MAX = f"""
procedure {PH}(t: List of [Decimal]): Decimal
var
  v: Decimal;
  result: Decimal;
begin
  if t.Count() = 0 then
    exit(0);
  result := t.Get(1);
  foreach v in t do
    if v > result then
      result := v;
  exit(result);
end;
"""

MEDIAN = f"""
procedure {PH}(t: List of [Decimal]): Decimal
var
  sorted: List of [Decimal];
  v: Decimal;
  i: Integer;
  j: Integer;
  count: Integer;
begin
  if t.Count() = 0 then
    exit(0);
  foreach v in t do
    sorted.Add(v);
  count := sorted.Count();
  for i := 1 to count - 1 do
    for j := 1 to count - i do
      if sorted.Get(j) > sorted.Get(j + 1) then begin
        v := sorted.Get(j);
        sorted.Set(j, sorted.Get(j + 1));
        sorted.Set(j + 1, v);
      end;
  if count mod 2 = 0 then
    exit((sorted.Get(count div 2) + sorted.Get(count div 2 + 1)) / 2);
  exit(sorted.Get(count div 2 + 1));
end;
"""

MODES = f"""
procedure {PH}(t: List of [Decimal]) modes: List of [Decimal]
var
  counts: Dictionary of [Decimal, Integer];
  v: Decimal;
  n: Integer;
  biggestCount: Integer;
begin
  foreach v in t do
    if counts.Get(v, n) then
      counts.Set(v, n + 1)
    else
      counts.Add(v, 1);
  foreach v in counts.Keys() do
    if counts.Get(v) > biggestCount then
      biggestCount := counts.Get(v);
  foreach v in counts.Keys() do
    if counts.Get(v) = biggestCount then
      modes.Add(v);
end;
"""

RANDOM_LIST = f"""
procedure {PH}(t: List of [Decimal]): Decimal
begin
  if t.Count() = 0 then
    exit(0);
  exit(t.Get(Random(t.Count())));
end;
"""


def _average(sum_name: str) -> str:
    return f"""
procedure {PH}(t: List of [Decimal]): Decimal
begin
  if t.Count() = 0 then
    exit(0);
  exit({sum_name}(t) / t.Count());
end;
"""


def _standard_deviation(sum_name: str) -> str:
    return f"""
procedure {PH}(t: List of [Decimal]): Decimal
var
  v: Decimal;
  m: Decimal;
  vm: Decimal;
  total: Decimal;
begin
  if t.Count() < 2 then
    exit(0);
  m := {sum_name}(t) / t.Count();
  foreach v in t do begin
    vm := v - m;
    total += vm * vm;
  end;
  exit(Power(total / (t.Count() - 1), 0.5));
end;
"""


@rule("math_number")
def math_number(block: Block, generator: Generator) -> RuleResult:
    """Numeric literal; infinities are written as the math.huge constant."""
    number = number_field(block, "NUM")
    code = format_number(number)
    if number < 0:
        return code, Order.UNARY
    if code == INFINITY:
        return code, Order.HIGH
    return code, Order.ATOMIC


@rule("math_arithmetic")
def math_arithmetic(block: Block, generator: Generator) -> RuleResult:
    # Basic arithmetic operators, and power.
    op = block.get_field_value("OP")
    if op not in ARITHMETIC_OPERATORS:
        raise UnknownBlockError(block.type, op, field="OP")
    operator, order, left, right = ARITHMETIC_OPERATORS[op]
    argument0 = generator.value_to_code(block, "A", left) or "0"
    argument1 = generator.value_to_code(block, "B", right) or "0"
    return argument0 + operator + argument1, order


@rule("math_single", "math_round", "math_trig")
def math_single(block: Block, generator: Generator) -> RuleResult:
    # Math operators with single operand.
    op = block.get_field_value("OP")
    if op == "NEG":
        # Negation is a special case given its different operator precedence.
        arg = generator.value_to_code(block, "NUM", Order.UNARY) or "0"
        if arg.startswith("-"):
            # --3 is not a negated negative number.
            arg = f"({arg})"
        return "-" + arg, Order.UNARY
    if op == "POW10":
        arg = generator.value_to_code(block, "NUM", Order.HIGH) or "0"
        return "10 ^ " + arg, Order.EXPONENTIATION
    if op == "ROUND":
        arg = generator.value_to_code(block, "NUM", Order.ADDITIVE) or "0"
        return f"math.floor({arg} + .5)", Order.HIGH
    if op not in SINGLE_FUNCTIONS:
        raise UnknownBlockError(block.type, op, field="OP")
    arg = generator.value_to_code(block, "NUM", Order.NONE) or "0"
    return SINGLE_FUNCTIONS[op].format(arg), Order.HIGH


@rule("math_constant")
def math_constant(block: Block, generator: Generator) -> RuleResult:
    # Constants: PI, E, the Golden Ratio, sqrt(2), 1/sqrt(2), INFINITY.
    constant = block.get_field_value("CONSTANT")
    if constant not in CONSTANTS:
        raise UnknownBlockError(block.type, constant, field="CONSTANT")
    return CONSTANTS[constant]


@rule("math_number_property")
def math_number_property(block: Block, generator: Generator) -> RuleResult:
    # Check if a number is even, odd, prime, whole, positive, negative
    # or if it is divisible by a certain number.
    prop = block.get_field_value("PROPERTY")
    if prop == "PRIME":
        number_to_check = generator.value_to_code(block, "NUMBER_TO_CHECK", Order.NONE) or "0"
        function_name = generator.provide_function_("math_isPrime", IS_PRIME)
        return f"{function_name}({number_to_check})", Order.HIGH
    if prop == "DIVISIBLE_BY":
        number_to_check = generator.value_to_code(
            block, "NUMBER_TO_CHECK", Order.MULTIPLICATIVE) or "0"
        divisor = generator.value_to_code(block, "DIVISOR", Order.UNARY)
        if not divisor or divisor == "0":
            # Divisibility by zero is undefined.
            return "nil", Order.ATOMIC
        return f"{number_to_check} % {divisor} = 0", Order.RELATIONAL
    if prop not in NUMBER_PROPERTIES:
        raise UnknownBlockError(block.type, prop, field="PROPERTY")
    suffix, input_order, output_order = NUMBER_PROPERTIES[prop]
    number_to_check = generator.value_to_code(block, "NUMBER_TO_CHECK", input_order) or "0"
    return number_to_check + suffix, output_order


@rule("math_change")
def math_change(block: Block, generator: Generator) -> RuleResult:
    # Add to a variable in place.
    argument0 = generator.value_to_code(block, "DELTA", Order.MULTIPLICATIVE) or "0"
    var_name = generator.name_db.get_name(block.get_field_value("VAR"), NameType.VARIABLE)
    return f"{var_name} := {var_name} + {argument0};\n"


@rule("math_on_list")
def math_on_list(block: Block, generator: Generator) -> RuleResult:
    # Math functions for lists.
    func = block.get_field_value("OP")
    list_code = generator.value_to_code(block, "LIST", Order.NONE) or "{}"
    if func == "SUM":
        function_name = generator.provide_function_("math_sum", SUM)
    elif func == "MIN":
        function_name = generator.provide_function_("math_min", MIN)
    elif func == "MAX":
        function_name = generator.provide_function_("math_max", MAX)
    elif func == "AVERAGE":
        sum_name = generator.provide_function_("math_sum", SUM)
        function_name = generator.provide_function_("math_average", _average(sum_name))
    elif func == "MEDIAN":
        function_name = generator.provide_function_("math_median", MEDIAN)
    elif func == "MODE":
        function_name = generator.provide_function_("math_modes", MODES)
    elif func == "STD_DEV":
        sum_name = generator.provide_function_("math_sum", SUM)
        function_name = generator.provide_function_(
            "math_standard_deviation", _standard_deviation(sum_name))
    elif func == "RANDOM":
        function_name = generator.provide_function_("math_random_list", RANDOM_LIST)
    else:
        raise UnknownBlockError(block.type, func, field="OP")
    return f"{function_name}({list_code})", Order.HIGH


@rule("math_modulo")
def math_modulo(block: Block, generator: Generator) -> RuleResult:
    # Remainder computation.
    argument0 = generator.value_to_code(block, "DIVIDEND", Order.MULTIPLICATIVE) or "0"
    argument1 = generator.value_to_code(block, "DIVISOR", Order.UNARY) or "0"
    return f"{argument0} % {argument1}", Order.MULTIPLICATIVE


@rule("math_constrain")
def math_constrain(block: Block, generator: Generator) -> RuleResult:
    # Constrain a number between two limits.
    argument0 = generator.value_to_code(block, "VALUE", Order.NONE) or "0"
    argument1 = generator.value_to_code(block, "LOW", Order.NONE) or "-math.huge"
    argument2 = generator.value_to_code(block, "HIGH", Order.NONE) or "math.huge"
    return f"math.min(math.max({argument0}, {argument1}), {argument2})", Order.HIGH


@rule("math_random_int")
def math_random_int(block: Block, generator: Generator) -> RuleResult:
    # Random integer between [X] and [Y].
    argument0 = generator.value_to_code(block, "FROM", Order.NONE) or "0"
    argument1 = generator.value_to_code(block, "TO", Order.NONE) or "0"
    return f"math.random({argument0}, {argument1})", Order.HIGH


@rule("math_random_float")
def math_random_float(block: Block, generator: Generator) -> RuleResult:
    # Random fraction between 0 and 1.
    return "math.random()", Order.HIGH


@rule("math_atan2")
def math_atan2(block: Block, generator: Generator) -> RuleResult:
    # Arctangent of point (X, Y) in degrees from -180 to 180.
    argument0 = generator.value_to_code(block, "X", Order.NONE) or "0"
    argument1 = generator.value_to_code(block, "Y", Order.NONE) or "0"
    return f"math.deg(math.atan2({argument1}, {argument0}))", Order.HIGH
