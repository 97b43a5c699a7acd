"""
Phase Aggregator: blends per-phase subtotals into one package run rate.

    subtotal_monthly = Σ(phase_subtotal_i × months_i) / Σ(months_i)
    subtotal_annual  = subtotal_monthly × 12

A single-phase package reduces to the plain sum of its line items.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from quote_pricing.engine import line_item
from quote_pricing.models.errors import InvalidInputError
from quote_pricing.models.schemas import (
    LineItemRequest,
    Phase,
    PricedLineItem,
    PricedPackage,
    PricedPhase,
    PricingSnapshot,
)
from quote_pricing.utils.hashing import model_digest
from quote_pricing.utils.rounding import round2

logger = logging.getLogger(__name__)


def aggregate(phases: list[Phase], snapshot: PricingSnapshot) -> PricedPackage:
    """Price every phase independently and return the time-weighted package."""
    if not phases:
        raise InvalidInputError("A package needs at least one phase")

    priced_phases: list[PricedPhase] = []
    weighted_sum = 0.0
    total_months = 0.0

    for index, phase in enumerate(phases):
        duration = phase.duration_months
        if not math.isfinite(duration) or duration <= 0:
            raise InvalidInputError(
                f"Phase {index} duration must be positive, got {duration}"
            )

        items = [_price_item(request, snapshot) for request in phase.items]
        subtotal = round2(sum(item.monthly_total for item in items))
        logger.debug(f"Phase {index}: {len(items)} items, {duration}mo, subtotal={subtotal}")

        priced_phases.append(
            PricedPhase(
                index=index,
                duration_months=duration,
                line_items=items,
                subtotal_monthly=subtotal,
            )
        )
        weighted_sum += subtotal * duration
        total_months += duration

    subtotal_monthly = round2(weighted_sum / total_months)

    return PricedPackage(
        phases=priced_phases,
        subtotal_monthly=subtotal_monthly,
        subtotal_annual=round2(subtotal_monthly * line_item.MONTHS_PER_YEAR),
        contract_months=total_months,
        total_contract_value=round2(weighted_sum),
        snapshot_digest=model_digest(snapshot),
    )


def _price_item(request: LineItemRequest, snapshot: PricingSnapshot) -> PricedLineItem:
    is_base = snapshot.is_base_charge(request.sku)
    ratio = line_item.ratio_factor(snapshot.base_usage_ratio, request.sku, is_base)
    if is_base:
        return line_item.price_base_charge(
            request, snapshot.base_charges[request.sku], snapshot.term_table, ratio
        )
    return line_item.price(
        request,
        snapshot.ladder_for(request.sku),
        snapshot.term_table,
        snapshot.environments,
        ratio,
    )


def phases_from_terms(items: Iterable[LineItemRequest]) -> list[Phase]:
    """
    Split line items with different term lengths into contiguous phases.

    Phase edges sit at month 1 and one month past every distinct term end.
    An item is active in every phase that starts within its term, so a
    12-month and a 36-month item give phases 1-12 (both) and 13-36 (one).
    """
    items = list(items)
    for request in items:
        if request.term_months <= 0:
            raise InvalidInputError(
                f"Term for '{request.sku}' must be positive, got {request.term_months}"
            )
    if not items:
        return []

    edges = sorted({1} | {request.term_months + 1 for request in items})

    phases = []
    for index, (start, next_start) in enumerate(zip(edges, edges[1:])):
        active = [
            request.model_copy(update={"phase_index": index})
            for request in items
            if start <= request.term_months
        ]
        phases.append(Phase(duration_months=next_start - start, items=active))
    return phases
