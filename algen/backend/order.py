"""
Operator precedence levels for AL output.

Lower values bind tighter. An expression fragment can be placed in a slot
without parentheses when its level is less than or equal to the level the
slot accepts.
"""

from enum import IntEnum


class Order(IntEnum):
    """Precedence levels, tightest first."""
    ATOMIC = 0            # literals
    HIGH = 1              # function calls, tables[]
    EXPONENTIATION = 2    # ^
    UNARY = 3             # not -
    MULTIPLICATIVE = 4    # * / %
    ADDITIVE = 5          # + -
    CONCATENATION = 6     # ..
    RELATIONAL = 7        # < > <= >= <> =
    AND = 8               # and
    OR = 9                # or
    NONE = 99             # any expression fits
