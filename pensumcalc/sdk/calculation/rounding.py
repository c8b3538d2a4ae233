"""Rounding used for payroll figures.

Payroll exports must match historical figures exactly, so rounding is
done half away from zero on the decimal representation of the float
(2.005 -> 2.01), never with binary float arithmetic or banker's rounding.
"""

from decimal import Decimal, ROUND_HALF_UP

LESSON_DECIMALS = 2
PERCENT_DECIMALS = 3


def round_half_away(value: float, decimals: int) -> float:
    """Round value to the given number of decimals, ties away from zero.

    Example:
        round_half_away(2.005, 2)   # 2.01
        round_half_away(-0.1235, 3) # -0.124
    """
    quant = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(value)).quantize(quant, rounding=ROUND_HALF_UP))


def round_lessons(lessons: float) -> float:
    return round_half_away(lessons, LESSON_DECIMALS)


def round_percent(percent: float) -> float:
    return round_half_away(percent, PERCENT_DECIMALS)
