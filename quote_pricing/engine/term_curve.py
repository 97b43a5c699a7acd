"""
Term Curve: discount as a function of commitment length.

Linear interpolation between bracketing anchors. Terms outside the table
pin to the nearest anchor; there is no extrapolation past either end.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_right

from quote_pricing.models.errors import InvalidInputError
from quote_pricing.models.schemas import TermFactorTable

logger = logging.getLogger(__name__)

# A term within this many months of an anchor returns the anchor's value verbatim
TERM_EPSILON = 1e-9


def resolve_discount(table: TermFactorTable, term_months: float) -> float:
    """Return the term discount (percent) for a `term_months` commitment."""
    if term_months is None or not math.isfinite(term_months) or term_months <= 0:
        raise InvalidInputError(f"Term must be a positive number of months, got {term_months}")

    anchors = table.anchors
    for anchor in anchors:
        if abs(anchor.term_months - term_months) <= TERM_EPSILON:
            return anchor.discount_pct

    if term_months < anchors[0].term_months:
        return anchors[0].discount_pct
    if term_months > anchors[-1].term_months:
        return anchors[-1].discount_pct

    idx = bisect_right([a.term_months for a in anchors], term_months) - 1
    lower, upper = anchors[idx], anchors[idx + 1]
    fraction = (term_months - lower.term_months) / (upper.term_months - lower.term_months)
    discount = lower.discount_pct + fraction * (upper.discount_pct - lower.discount_pct)

    logger.debug(
        f"Term discount: {term_months}mo between {lower.term_months} and "
        f"{upper.term_months} → {discount}%"
    )
    return discount
