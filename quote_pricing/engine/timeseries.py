"""
Time-Series Pricer: billing from historical usage statistics.

- Pay-per-use bills realized usage: average × rate each period.
- Fixed commitment bills a committed tier anchored on one statistic
  (peak, average, P90, P95 or a custom percentile of the raw series) × rate,
  the same amount every period regardless of what is actually used. It is a commitment, not a true-up.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Union

from quote_pricing.engine.statistics import percentile
from quote_pricing.models.enums import CommitmentAnchor, PricingModelKind
from quote_pricing.models.errors import InvalidInputError
from quote_pricing.models.schemas import (
    FixedCommitmentModel,
    PayPerUseModel,
    PricingModelComparison,
    TimeSeriesPricingResult,
    UsageStatistics,
)
from quote_pricing.utils.rounding import round2

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
DEFAULT_CUSTOM_PERCENTILE = 90.0


def _require_rate(unit_rate: float) -> None:
    if unit_rate is None or not math.isfinite(unit_rate) or unit_rate <= 0:
        raise InvalidInputError(f"Unit rate must be positive, got {unit_rate}")


def _require_statistics(statistics: UsageStatistics) -> None:
    """Precomputed statistics must describe a real, non-negative series."""
    if statistics.count <= 0:
        raise InvalidInputError("Usage statistics cover no periods")
    for name in ("peak", "average", "p90", "p95"):
        value = getattr(statistics, name)
        if not math.isfinite(value) or value < 0:
            raise InvalidInputError(f"Usage statistic {name} must be non-negative, got {value}")
    if statistics.average > statistics.peak:
        raise InvalidInputError(
            f"Average usage {statistics.average} exceeds peak {statistics.peak}"
        )
    if not statistics.p90 <= statistics.p95 <= statistics.peak:
        raise InvalidInputError(
            f"Percentiles must satisfy p90 <= p95 <= peak, got "
            f"p90={statistics.p90} p95={statistics.p95} peak={statistics.peak}"
        )


def committed_quantity(
    statistics: UsageStatistics,
    model: FixedCommitmentModel,
    usage: Optional[Sequence[float]] = None,
) -> float:
    """The quantity a fixed commitment is sized on."""
    if model.anchor is not CommitmentAnchor.CUSTOM:
        if model.percentile is not None:
            raise InvalidInputError(
                f"A percentile only applies to a custom commitment, not '{model.anchor.value}'"
            )
        return getattr(statistics, model.anchor.value)

    if usage is None:
        raise InvalidInputError("A custom percentile commitment needs the raw usage series")
    p = DEFAULT_CUSTOM_PERCENTILE if model.percentile is None else model.percentile
    return percentile(usage, p)


def price(
    statistics: UsageStatistics,
    model: Union[PayPerUseModel, FixedCommitmentModel],
    usage: Optional[Sequence[float]] = None,
) -> TimeSeriesPricingResult:
    """
    Bill `model` over the periods `statistics` describe.

    `usage` is the raw series; it is only consulted for a custom percentile.
    """
    _require_statistics(statistics)
    _require_rate(model.unit_rate)

    if isinstance(model, FixedCommitmentModel):
        quantity = committed_quantity(statistics, model, usage)
        billed_monthly = round2(quantity * model.unit_rate)
        logger.debug(
            f"Fixed commitment on {model.anchor.value}: {quantity} × {model.unit_rate} "
            f"= {billed_monthly}/mo"
        )
        return TimeSeriesPricingResult(
            model_kind=PricingModelKind.FIXED_COMMITMENT.value,
            billed_monthly=billed_monthly,
            commitment_tier_used=model.anchor,
            committed_quantity=quantity,
            period_count=statistics.count,
            billed_total=round2(billed_monthly * statistics.count),
            statistics=statistics,
        )

    billed_monthly = round2(statistics.average * model.unit_rate)
    logger.debug(f"Pay-per-use: {statistics.average} × {model.unit_rate} = {billed_monthly}/mo")
    return TimeSeriesPricingResult(
        model_kind=PricingModelKind.PAY_PER_USE.value,
        billed_monthly=billed_monthly,
        period_count=statistics.count,
        billed_total=round2(billed_monthly * statistics.count),
        statistics=statistics,
    )


def compare_pricing_models(
    statistics: UsageStatistics,
    unit_rate: float,
    anchor: CommitmentAnchor,
    usage: Optional[Sequence[float]] = None,
    custom_percentile: Optional[float] = None,
) -> PricingModelComparison:
    """Price both models over the observed periods and report the commitment's savings."""
    pay_per_use = price(statistics, PayPerUseModel(unit_rate=unit_rate))
    commitment = FixedCommitmentModel(
        unit_rate=unit_rate, anchor=anchor, percentile=custom_percentile
    )
    fixed = price(statistics, commitment, usage)

    savings = round2(pay_per_use.billed_total - fixed.billed_total)
    savings_pct = savings / pay_per_use.billed_total * 100 if pay_per_use.billed_total > 0 else 0.0

    return PricingModelComparison(
        pay_per_use=pay_per_use,
        fixed_commitment=fixed,
        savings=savings,
        savings_pct=savings_pct,
    )


def interpolate_yearly_to_monthly(yearly_values: list[float]) -> list[float]:
    """
    Expand year-end values to monthly values.

    The first year is held flat at its value. Every later year steps
    linearly from the previous year-end, reaching its own year-end value
    in month 12.
    """
    if not yearly_values:
        return []

    for value in yearly_values:
        if value is None or not math.isfinite(value):
            raise InvalidInputError(f"Yearly value must be a number, got {value}")

    monthly = [float(yearly_values[0])] * MONTHS_PER_YEAR
    for previous, current in zip(yearly_values, yearly_values[1:]):
        increment = (current - previous) / MONTHS_PER_YEAR
        monthly.extend(previous + month * increment for month in range(1, MONTHS_PER_YEAR))
        monthly.append(float(current))
    return monthly
