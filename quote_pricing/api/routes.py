"""
API routes: a thin HTTP layer over the pricing engine.

Routes:
  GET  /health                         → API health check
  POST /api/pricing/quote              → Price a phased or time-series package
  POST /api/pricing/statistics         → Peak / average / P90 / P95 of a usage series
  POST /api/pricing/compare-models     → Pay-per-use vs. fixed commitment
  POST /api/pricing/perpetual-offer    → Itemized one-time license from a monthly price
  POST /api/pricing/ladder             → Volume ladder from a per-doubling discount
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body
from pydantic import BaseModel

from quote_pricing.config import get_settings
from quote_pricing.engine import perpetual, statistics, timeseries, volume_curve
from quote_pricing.engine.orchestrator import parse_request, price_package
from quote_pricing.models.enums import CommitmentAnchor, LadderMode
from quote_pricing.models.schemas import (
    PerpetualOffer,
    PerpetualTerms,
    PricingLadder,
    PricingModelComparison,
    UsageStatistics,
)

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
pricing_router = APIRouter()


# ── Request schemas ──────────────────────────────────────
class UsageRequest(BaseModel):
    usage: list[float]


class CompareModelsRequest(BaseModel):
    usage: list[float]
    unit_rate: float
    anchor: CommitmentAnchor = CommitmentAnchor.PEAK
    percentile: Optional[float] = None  # with anchor=custom


class LadderRequest(BaseModel):
    base_quantity: float
    max_quantity: float
    steps: int
    per_double_discount_pct: float
    max_discount_pct: float = 100.0
    mode: LadderMode = LadderMode.STEPPED


class PerpetualOfferRequest(BaseModel):
    recurring_monthly: float
    terms: Optional[PerpetualTerms] = None  # falls back to configured defaults


def default_perpetual_terms() -> PerpetualTerms:
    settings = get_settings()
    return PerpetualTerms(
        compensation_term_months=settings.perpetual_compensation_term_months,
        license_share=settings.perpetual_license_share,
        maintenance_pct=settings.perpetual_maintenance_pct,
        maintenance_term_years=settings.perpetual_maintenance_term_years,
        upgrade_protection_pct=settings.perpetual_upgrade_protection_pct,
    )


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Pricing ──────────────────────────────────────────────

@pricing_router.post("/quote")
async def quote(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Price a full package (phased or time-series) and return the itemized result."""
    request = parse_request(payload)
    logger.info(f"Quote request received: mode={request.mode}")
    return price_package(request).model_dump(mode="json")


@pricing_router.post("/statistics", response_model=UsageStatistics)
async def usage_statistics(body: UsageRequest):
    return statistics.extract(body.usage)


@pricing_router.post("/compare-models", response_model=PricingModelComparison)
async def compare_models(body: CompareModelsRequest):
    stats = statistics.extract(body.usage)
    return timeseries.compare_pricing_models(
        stats, body.unit_rate, body.anchor, usage=body.usage, custom_percentile=body.percentile
    )


@pricing_router.post("/perpetual-offer", response_model=PerpetualOffer)
async def perpetual_offer(body: PerpetualOfferRequest):
    terms = body.terms or default_perpetual_terms()
    return perpetual.perpetual_offer(body.recurring_monthly, terms)


@pricing_router.post("/ladder", response_model=PricingLadder)
async def build_ladder(body: LadderRequest):
    """Lay out a geometric volume ladder for a snapshot's `ladders` table."""
    return volume_curve.ladder_from_per_double_discount(
        body.base_quantity,
        body.max_quantity,
        body.steps,
        body.per_double_discount_pct,
        max_discount_pct=body.max_discount_pct,
        mode=body.mode,
    )
