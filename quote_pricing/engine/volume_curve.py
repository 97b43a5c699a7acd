"""
Volume Curve: per-unit discount as a function of quantity.

Stepped ladders apply the discount of the highest threshold reached.
Smooth ladders interpolate between the two bracketing thresholds on the
logarithm of quantity, so each doubling of quantity moves the same
distance toward the next tier. Both modes agree exactly at every
threshold and pin to the top discount past the last threshold.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_right

from quote_pricing.models.enums import LadderMode
from quote_pricing.models.errors import ConfigurationError, InvalidInputError
from quote_pricing.models.schemas import LadderStep, PricingLadder

logger = logging.getLogger(__name__)

# Lowest quantity on the log scale; brackets starting at 0 are measured from here
MIN_LOG_QUANTITY = 1.0


def resolve_discount(ladder: PricingLadder, quantity: float) -> float:
    """Return the volume discount (percent) for `quantity` units."""
    if quantity is None or not math.isfinite(quantity) or quantity <= 0:
        raise InvalidInputError(f"Quantity must be positive, got {quantity}")

    steps = ladder.steps
    if quantity < steps[0].threshold:
        return 0.0

    thresholds = [step.threshold for step in steps]
    idx = bisect_right(thresholds, quantity) - 1

    if ladder.mode is LadderMode.STEPPED or idx == len(steps) - 1:
        discount = steps[idx].discount_pct
    else:
        discount = _interpolate(steps[idx], steps[idx + 1], quantity)

    logger.debug(f"Volume discount: qty={quantity} mode={ladder.mode.value} → {discount}%")
    return discount


def _interpolate(lower: LadderStep, upper: LadderStep, quantity: float) -> float:
    fraction = _log_fraction(lower.threshold, upper.threshold, quantity)
    return lower.discount_pct + fraction * (upper.discount_pct - lower.discount_pct)


def _log_fraction(low: float, high: float, quantity: float) -> float:
    """Progress of `quantity` from `low` to `high`, measured on a log scale."""
    base = max(low, MIN_LOG_QUANTITY)
    if high <= base:
        # Bracket lies entirely below one unit: no log scale to speak of
        return (quantity - low) / (high - low)
    if quantity <= base:
        return 0.0
    return (math.log(quantity) - math.log(base)) / (math.log(high) - math.log(base))


# ── Ladder construction helpers ──────────────────────────


def geometric_thresholds(base_qty: float, max_qty: float, steps: int) -> list[float]:
    """
    Lay out `steps` thresholds spaced geometrically from `base_qty` to `max_qty`.

    The first and last values are pinned exactly to the bounds so rounding
    never moves a tier edge.
    """
    if base_qty < 1 or not math.isfinite(base_qty):
        raise ConfigurationError(f"Base quantity must be at least 1, got {base_qty}")
    if max_qty < base_qty or not math.isfinite(max_qty):
        raise ConfigurationError(
            f"Maximum quantity {max_qty} must not be below base quantity {base_qty}"
        )
    if steps < 2:
        raise ConfigurationError(f"A geometric ladder needs at least 2 steps, got {steps}")

    if base_qty == max_qty:
        return [float(base_qty)]

    ratio = (max_qty / base_qty) ** (1 / (steps - 1))
    bounds = [base_qty * ratio ** i for i in range(steps)]
    bounds[0] = float(base_qty)
    bounds[-1] = float(max_qty)
    return bounds


def ladder_from_per_double_discount(
    base_qty: float,
    max_qty: float,
    steps: int,
    per_double_discount_pct: float,
    max_discount_pct: float = 100.0,
    mode: LadderMode = LadderMode.STEPPED,
) -> PricingLadder:
    """
    Build a ladder whose price falls by `per_double_discount_pct` for every
    doubling of quantity above `base_qty`, capped at `max_discount_pct`.
    """
    if not 0 <= per_double_discount_pct < 100:
        raise ConfigurationError(
            f"Per-double discount must be within [0, 100), got {per_double_discount_pct}"
        )

    factor_per_double = 1 - per_double_discount_pct / 100
    ladder_steps = []
    for threshold in geometric_thresholds(base_qty, max_qty, steps):
        doubles = math.log2(threshold / base_qty)
        discount = (1 - factor_per_double ** doubles) * 100
        ladder_steps.append(
            LadderStep(threshold=threshold, discount_pct=min(discount, max_discount_pct))
        )
    return PricingLadder(mode=mode, steps=ladder_steps)
