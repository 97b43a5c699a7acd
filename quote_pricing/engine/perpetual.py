"""
Perpetual Comparator: one-time license purchase vs. the recurring stream.

Break-even is a plain ratio (upfront / monthly). No interest or
amortization schedule is modeled. A zero recurring price has no
break-even point; that is reported on the result, not raised.
"""

from __future__ import annotations

import logging
import math

from quote_pricing.models.errors import ArithmeticDegenerateError, InvalidInputError
from quote_pricing.models.schemas import PerpetualComparison, PerpetualOffer, PerpetualTerms
from quote_pricing.utils.rounding import round2

logger = logging.getLogger(__name__)


def _require_non_negative(name: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value < 0:
        raise InvalidInputError(f"{name} must be a non-negative amount, got {value}")


def break_even_months(upfront_price: float, recurring_monthly: float) -> float:
    if recurring_monthly == 0:
        raise ArithmeticDegenerateError(
            "Recurring monthly price is zero; the upfront price never breaks even"
        )
    return upfront_price / recurring_monthly


def compare(upfront_price: float, recurring_monthly: float) -> PerpetualComparison:
    _require_non_negative("Upfront price", upfront_price)
    _require_non_negative("Recurring monthly price", recurring_monthly)

    try:
        months = break_even_months(upfront_price, recurring_monthly)
        reason = None
    except ArithmeticDegenerateError as e:
        logger.info(f"Break-even undefined: {e}")
        months = None
        reason = str(e)

    return PerpetualComparison(
        upfront_price=upfront_price,
        recurring_monthly_equivalent=recurring_monthly,
        break_even_months=months,
        undefined_reason=reason,
    )


def perpetual_offer(recurring_monthly: float, terms: PerpetualTerms) -> PerpetualOffer:
    """
    Derive an itemized upfront price from a recurring monthly price.

    The license portion of the subscription is capitalized over the
    compensation term; maintenance and upgrade protection are charged as
    percentages of that license.
    """
    _require_non_negative("Recurring monthly price", recurring_monthly)

    license_price = recurring_monthly * terms.license_share * terms.compensation_term_months
    annual_maintenance = license_price * terms.maintenance_pct / 100
    total_maintenance = annual_maintenance * terms.maintenance_term_years
    upgrade_protection = license_price * terms.upgrade_protection_pct / 100

    return PerpetualOffer(
        license=round2(license_price),
        annual_maintenance=round2(annual_maintenance),
        total_maintenance=round2(total_maintenance),
        upgrade_protection=round2(upgrade_protection),
        total_upfront=round2(license_price + total_maintenance + upgrade_protection),
    )
