"""Decimal helpers for monetary values."""

from decimal import Decimal
from fractions import Fraction

ZERO = Decimal("0")


def scale(amount: Decimal, factor: Fraction) -> Decimal:
    """Multiply ``amount`` by an exact fraction without intermediate rounding."""
    if factor.denominator == 1:
        return amount * factor.numerator
    return amount * factor.numerator / factor.denominator
