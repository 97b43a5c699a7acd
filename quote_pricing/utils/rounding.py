"""
Currency rounding helpers.

Unit prices keep 4 decimals, monetary totals 2. Both round half-up so that
a quote matches what a spreadsheet would show.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

_FOUR = Decimal("0.0001")
_TWO = Decimal("0.01")


def round4(value: float) -> float:
    """Round a unit price to 4 decimal places, half-up."""
    return float(Decimal(repr(value)).quantize(_FOUR, rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    """Round a monetary total to 2 decimal places, half-up."""
    return float(Decimal(repr(value)).quantize(_TWO, rounding=ROUND_HALF_UP))
