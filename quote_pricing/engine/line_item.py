"""
Line Item Pricer: one SKU line to a unit price and monthly/annual totals.

Volume and term discounts add up on the list price; the environment
factor multiplies last:

    unit_price = list_price × (1 − (volume% + term%) / 100) × env_factor

A combined discount above 100% is clamped to 100% (price floors at zero)
and flagged on the result rather than rejected.

Base-charge SKUs are not priced by quantity. They bill a flat monthly
charge, optionally term-discounted, and report their discount against
the same charge at the 12-month list term.

When a bundle is sold at a base/usage split other than the reference
60/40, its base charges and usage SKUs are rescaled by

    base factor  = ratio / 0.60
    usage factor = (1 − ratio) / 0.40
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from quote_pricing.engine import environment, term_curve, volume_curve
from quote_pricing.models.errors import InvalidInputError
from quote_pricing.models.schemas import (
    BaseCharge,
    BaseUsageRatio,
    EnvironmentFactors,
    LineItemRequest,
    PricedLineItem,
    PricingLadder,
    TermFactorTable,
)
from quote_pricing.utils.rounding import round2, round4

logger = logging.getLogger(__name__)

MAX_TOTAL_DISCOUNT_PCT = 100.0
MONTHS_PER_YEAR = 12
LIST_TERM_MONTHS = 12
REFERENCE_BASE_RATIO = 0.60
REFERENCE_USAGE_RATIO = 0.40


def base_ratio_factor(ratio: float) -> float:
    return round4(ratio / REFERENCE_BASE_RATIO)


def usage_ratio_factor(ratio: float) -> float:
    return round4((1 - ratio) / REFERENCE_USAGE_RATIO)


def ratio_factor(
    split: Optional[BaseUsageRatio],
    sku: str,
    is_base_charge: bool,
) -> Optional[float]:
    """Multiplier the base/usage split applies to `sku`, or None when it does not apply."""
    if split is None or sku not in split.skus:
        return None
    if is_base_charge:
        return base_ratio_factor(split.ratio)
    return usage_ratio_factor(split.ratio)


def validate_request(request: LineItemRequest, base_charge: bool = False) -> None:
    """Reject non-positive price, quantity or term. Base charges carry no list price."""
    if not base_charge and (
        request.list_price is None
        or not math.isfinite(request.list_price)
        or request.list_price <= 0
    ):
        raise InvalidInputError(
            f"List price for '{request.sku}' must be positive, got {request.list_price}"
        )
    if request.quantity <= 0:
        raise InvalidInputError(
            f"Quantity for '{request.sku}' must be positive, got {request.quantity}"
        )
    if request.term_months <= 0:
        raise InvalidInputError(
            f"Term for '{request.sku}' must be positive, got {request.term_months}"
        )


def price(
    request: LineItemRequest,
    ladder: PricingLadder,
    term_table: TermFactorTable,
    env_table: EnvironmentFactors,
    ratio: Optional[float] = None,
) -> PricedLineItem:
    validate_request(request)

    volume_discount = volume_curve.resolve_discount(ladder, request.quantity)
    term_discount = term_curve.resolve_discount(term_table, request.term_months)
    env_factor = environment.resolve_factor(env_table, request.environment)

    total_discount = volume_discount + term_discount
    clamped = total_discount > MAX_TOTAL_DISCOUNT_PCT
    if clamped:
        logger.warning(
            f"Combined discount {total_discount:.2f}% for '{request.sku}' exceeds "
            f"{MAX_TOTAL_DISCOUNT_PCT:.0f}%, clamping; unit price floors at 0"
        )
        total_discount = MAX_TOTAL_DISCOUNT_PCT

    scale = 1.0 if ratio is None else ratio
    unit_price = round4(request.list_price * (1 - total_discount / 100) * env_factor * scale)
    monthly_total = round2(unit_price * request.quantity)
    annual_total = round2(monthly_total * MONTHS_PER_YEAR)

    logger.debug(
        f"Priced {request.sku}: qty={request.quantity} term={request.term_months} "
        f"env={request.environment} vol={volume_discount}% term={term_discount}% "
        f"factor={env_factor} → unit={unit_price} monthly={monthly_total}"
    )

    return PricedLineItem(
        sku=request.sku,
        quantity=request.quantity,
        term_months=request.term_months,
        environment=request.environment,
        list_price=request.list_price,
        unit_price=unit_price,
        volume_discount_pct=volume_discount,
        term_discount_pct=term_discount,
        environment_factor=env_factor,
        total_discount_pct=total_discount,
        discount_clamped=clamped,
        ratio_factor=ratio,
        monthly_total=monthly_total,
        annual_total=annual_total,
    )


def price_base_charge(
    request: LineItemRequest,
    charge: BaseCharge,
    term_table: TermFactorTable,
    ratio: Optional[float] = None,
) -> PricedLineItem:
    validate_request(request, base_charge=True)

    def monthly_at(term_months: float) -> float:
        if not charge.apply_term_discount:
            return charge.base_mrc
        discount = term_curve.resolve_discount(term_table, term_months)
        return round2(charge.base_mrc * (1 - discount / 100))

    mrc = monthly_at(request.term_months)
    list_mrc = monthly_at(LIST_TERM_MONTHS)
    term_discount = round2((1 - mrc / list_mrc) * 100) if list_mrc > 0 else 0.0

    scale = 1.0 if ratio is None else ratio
    unit_price = round4(mrc * scale)
    monthly_total = round2(unit_price)
    logger.debug(
        f"Base charge {request.sku}: term={request.term_months} mrc={mrc} "
        f"list={list_mrc} ratio={ratio} → monthly={monthly_total}"
    )

    return PricedLineItem(
        sku=request.sku,
        quantity=request.quantity,
        term_months=request.term_months,
        environment=request.environment,
        list_price=list_mrc,
        unit_price=unit_price,
        volume_discount_pct=0.0,
        term_discount_pct=term_discount,
        environment_factor=1.0,
        total_discount_pct=term_discount,
        base_charge=True,
        ratio_factor=ratio,
        monthly_total=monthly_total,
        annual_total=round2(monthly_total * MONTHS_PER_YEAR),
    )
