"""
Statistic Extractor: reduces a usage series to peak, average, P90 and P95.

Percentiles use linear interpolation between closest ranks on the
ascending-sorted series: the value at fractional index p/100 × (n − 1).
For n = 1 every percentile equals the single observation.
"""

from __future__ import annotations

import math
from typing import Iterable

from quote_pricing.models.errors import InvalidInputError
from quote_pricing.models.schemas import UsageStatistics


def _validated(series: Iterable[float]) -> list[float]:
    values = list(series) if series is not None else []
    if not values:
        raise InvalidInputError("Usage series is empty")
    for i, value in enumerate(values):
        if value is None or not math.isfinite(value) or value < 0:
            raise InvalidInputError(
                f"Usage observation {i} must be a non-negative number, got {value}"
            )
    return values


def _percentile_sorted(ordered: list[float], p: float) -> float:
    index = p / 100 * (len(ordered) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return ordered[lower]
    weight = index - lower
    return ordered[lower] * (1 - weight) + ordered[upper] * weight


def percentile(series: Iterable[float], p: float) -> float:
    """Linear-interpolation percentile, 0 ≤ p ≤ 100."""
    if p is None or not 0 <= p <= 100:
        raise InvalidInputError(f"Percentile must be within [0, 100], got {p}")
    return _percentile_sorted(sorted(_validated(series)), p)


def extract(series: Iterable[float]) -> UsageStatistics:
    values = _validated(series)
    ordered = sorted(values)
    return UsageStatistics(
        count=len(values),
        peak=ordered[-1],
        average=math.fsum(values) / len(values),
        p90=_percentile_sorted(ordered, 90),
        p95=_percentile_sorted(ordered, 95),
    )
