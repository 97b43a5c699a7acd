"""
Pricing Orchestrator: the single entry point for pricing a package.

Checks that the request is complete and positive, dispatches to the
phase aggregator or the time-series pricer, and attaches a perpetual
comparison when an alternative is requested. It does no arithmetic and
never catches engine errors; they reach the caller unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from pydantic import TypeAdapter

from quote_pricing.engine import line_item, perpetual, phases, statistics, timeseries
from quote_pricing.models.errors import InvalidInputError
from quote_pricing.models.schemas import (
    LineItemRequest,
    PackageRequest,
    Phase,
    PhasedPackageRequest,
    PricedPackage,
    TimeSeriesPackageRequest,
    TimeSeriesPricingResult,
)

logger = logging.getLogger(__name__)

_request_adapter: TypeAdapter = TypeAdapter(PackageRequest)


def parse_request(payload: dict[str, Any]) -> Union[PhasedPackageRequest, TimeSeriesPackageRequest]:
    """Build a typed package request from its serialized (JSON) form."""
    return _request_adapter.validate_python(payload)


def price_package(
    request: Union[PhasedPackageRequest, TimeSeriesPackageRequest],
) -> Union[PricedPackage, TimeSeriesPricingResult]:
    if isinstance(request, PhasedPackageRequest):
        return _price_phased(request)
    if isinstance(request, TimeSeriesPackageRequest):
        return _price_time_series(request)
    raise InvalidInputError(f"Unsupported package request type: {type(request).__name__}")


def price_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Serialized boundary: JSON-ready request in, JSON-ready result out."""
    return price_package(parse_request(payload)).model_dump(mode="json")


# ── Phased packages ──────────────────────────────────────


def _resolve_phases(request: PhasedPackageRequest) -> list[Phase]:
    """Explicit phases as given, or phases derived from the line items' terms."""
    if (request.phases is None) == (request.items is None):
        raise InvalidInputError("Phased package needs exactly one of phases or line items")
    if request.items is not None:
        if not request.items:
            raise InvalidInputError("Phased package has no line items")
        for item in request.items:
            _validate_item(item, request)
        return phases.phases_from_terms(request.items)

    if not request.phases:
        raise InvalidInputError("Phased package has no phases")
    for phase in request.phases:
        for item in phase.items:
            _validate_item(item, request)
    return request.phases


def _validate_item(item: LineItemRequest, request: PhasedPackageRequest) -> None:
    line_item.validate_request(item, base_charge=request.snapshot.is_base_charge(item.sku))


def _price_phased(request: PhasedPackageRequest) -> PricedPackage:
    if request.perpetual_price is not None and request.perpetual_terms is not None:
        raise InvalidInputError("Give either a perpetual price or perpetual terms, not both")
    package_phases = _resolve_phases(request)
    logger.info(f"Pricing phased package: {len(package_phases)} phase(s)")

    package = phases.aggregate(package_phases, request.snapshot)

    if request.perpetual_price is not None:
        comparison = perpetual.compare(request.perpetual_price, package.subtotal_monthly)
        return package.model_copy(update={"perpetual": comparison})

    if request.perpetual_terms is not None:
        offer = perpetual.perpetual_offer(package.subtotal_monthly, request.perpetual_terms)
        comparison = perpetual.compare(offer.total_upfront, package.subtotal_monthly)
        return package.model_copy(update={"perpetual": comparison, "perpetual_offer": offer})

    return package


# ── Time-series packages ─────────────────────────────────


def _usage_series(request: TimeSeriesPackageRequest) -> Optional[list[float]]:
    """The raw monthly series, expanding year-end values when those are given."""
    if request.yearly_usage is not None:
        if not request.yearly_usage:
            raise InvalidInputError("Yearly usage is empty")
        return timeseries.interpolate_yearly_to_monthly(request.yearly_usage)
    return request.usage


def _price_time_series(request: TimeSeriesPackageRequest) -> TimeSeriesPricingResult:
    sources = [request.usage, request.yearly_usage, request.statistics]
    if sum(source is not None for source in sources) != 1:
        raise InvalidInputError(
            "Time-series package needs exactly one of a usage series, yearly usage "
            "or precomputed statistics"
        )
    logger.info(f"Pricing time-series package: model={request.pricing_model.kind}")

    usage = _usage_series(request)
    stats = statistics.extract(usage) if usage is not None else request.statistics

    result = timeseries.price(stats, request.pricing_model, usage)

    if request.perpetual_price is not None:
        comparison = perpetual.compare(request.perpetual_price, result.billed_monthly)
        return result.model_copy(update={"perpetual": comparison})
    return result
