"""
Value objects for the pricing engine.

Every schema is frozen: configuration snapshots are passed by value into a
pricing call, and a priced result is never mutated after it is produced.
Composition is strictly tree-shaped (package → phase → line item).
"""

from __future__ import annotations

import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from .enums import CommitmentAnchor, LadderMode
from .errors import ConfigurationError


# ── Configuration tables ─────────────────────────────────


class LadderStep(BaseModel):
    """One rung of a volume ladder: from `threshold` units on, `discount_pct` off."""
    threshold: float
    discount_pct: float

    model_config = {"frozen": True}


class PricingLadder(BaseModel):
    """Quantity thresholds mapped to discount percentages."""
    mode: LadderMode = LadderMode.STEPPED
    steps: list[LadderStep]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ordering(self) -> "PricingLadder":
        if not self.steps:
            raise ConfigurationError("Pricing ladder has no steps")

        previous: Optional[LadderStep] = None
        for step in self.steps:
            if not math.isfinite(step.threshold) or step.threshold < 0:
                raise ConfigurationError(
                    f"Ladder threshold must be a non-negative number, got {step.threshold}"
                )
            if not math.isfinite(step.discount_pct) or step.discount_pct < 0:
                raise ConfigurationError(
                    f"Ladder discount must be a non-negative number, got {step.discount_pct}"
                )
            if previous is not None:
                if step.threshold <= previous.threshold:
                    raise ConfigurationError(
                        f"Ladder thresholds must be strictly increasing "
                        f"({previous.threshold} then {step.threshold})"
                    )
                if step.discount_pct < previous.discount_pct:
                    raise ConfigurationError(
                        f"Ladder discounts must not decrease with quantity "
                        f"({previous.discount_pct}% at {previous.threshold}, "
                        f"{step.discount_pct}% at {step.threshold})"
                    )
            previous = step
        return self


class TermAnchor(BaseModel):
    term_months: float
    discount_pct: float

    model_config = {"frozen": True}


class TermFactorTable(BaseModel):
    """Anchor points for term-length discount interpolation."""
    anchors: list[TermAnchor]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ordering(self) -> "TermFactorTable":
        if not self.anchors:
            raise ConfigurationError("Term factor table has no anchors")

        previous: Optional[TermAnchor] = None
        for anchor in self.anchors:
            if not math.isfinite(anchor.term_months) or anchor.term_months <= 0:
                raise ConfigurationError(
                    f"Term anchor months must be positive, got {anchor.term_months}"
                )
            if not math.isfinite(anchor.discount_pct):
                raise ConfigurationError(
                    f"Term anchor discount must be a number, got {anchor.discount_pct}"
                )
            if previous is not None and anchor.term_months <= previous.term_months:
                raise ConfigurationError(
                    f"Term anchors must be strictly increasing "
                    f"({previous.term_months} then {anchor.term_months})"
                )
            previous = anchor
        return self


class EnvironmentFactors(BaseModel):
    """Environment tag → price multiplier, e.g. {"production": 1.0, "reference": 0.5}."""
    factors: dict[str, float]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_factors(self) -> "EnvironmentFactors":
        if not self.factors:
            raise ConfigurationError("Environment factor table is empty")
        for tag, factor in self.factors.items():
            if not math.isfinite(factor) or factor <= 0:
                raise ConfigurationError(
                    f"Environment factor for '{tag}' must be positive, got {factor}"
                )
        return self


class BaseCharge(BaseModel):
    """Flat monthly charge for a SKU that is not priced by quantity."""
    base_mrc: float
    apply_term_discount: bool = True

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_amount(self) -> "BaseCharge":
        if not math.isfinite(self.base_mrc) or self.base_mrc < 0:
            raise ConfigurationError(
                f"Base charge must be a non-negative amount, got {self.base_mrc}"
            )
        return self


class BaseUsageRatio(BaseModel):
    """
    Split of a bundle's price between its base charges and its usage SKUs.

    Catalog prices are entered at the reference split (60% base, 40% usage);
    a different `ratio` rescales both sides for the listed SKUs only.
    """
    ratio: float
    skus: list[str]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ratio(self) -> "BaseUsageRatio":
        if not math.isfinite(self.ratio) or not 0 <= self.ratio <= 1:
            raise ConfigurationError(f"Base/usage ratio must be within [0, 1], got {self.ratio}")
        return self


class PricingSnapshot(BaseModel):
    """
    Immutable configuration for one pricing call.

    Callers build a snapshot from the live configuration and pass it in;
    the engine never consults shared state.
    """
    ladders: dict[str, PricingLadder] = {}
    term_table: TermFactorTable
    environments: EnvironmentFactors
    base_charges: dict[str, BaseCharge] = {}
    base_usage_ratio: Optional[BaseUsageRatio] = None

    model_config = {"frozen": True}

    def ladder_for(self, sku: str) -> PricingLadder:
        try:
            return self.ladders[sku]
        except KeyError:
            raise ConfigurationError(f"No pricing ladder configured for SKU '{sku}'") from None

    def is_base_charge(self, sku: str) -> bool:
        return sku in self.base_charges


class PerpetualTerms(BaseModel):
    """Parameters for deriving a one-time license price from a subscription."""
    compensation_term_months: float = 48
    license_share: float = 0.7  # rest of the subscription is maintenance/support
    maintenance_pct: float = 20.0  # annual, % of license
    maintenance_term_years: float = 3
    upgrade_protection_pct: float = 15.0

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_terms(self) -> "PerpetualTerms":
        if not math.isfinite(self.compensation_term_months) or self.compensation_term_months <= 0:
            raise ConfigurationError(
                f"Compensation term must be positive, got {self.compensation_term_months}"
            )
        if not math.isfinite(self.license_share) or not 0 < self.license_share <= 1:
            raise ConfigurationError(
                f"License share must be within (0, 1], got {self.license_share}"
            )
        for name in ("maintenance_pct", "maintenance_term_years", "upgrade_protection_pct"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative number, got {value}")
        return self


# ── Line items and phases ────────────────────────────────


class LineItemRequest(BaseModel):
    """A single SKU line as entered by the sales user (catalog-resolved)."""
    sku: str
    list_price: Optional[float] = None  # not used for base-charge SKUs
    quantity: int
    term_months: int
    environment: str = "production"
    phase_index: Optional[int] = None

    model_config = {"frozen": True}


class Phase(BaseModel):
    """A slice of the contract timeline with its own active line items."""
    duration_months: float
    items: list[LineItemRequest] = []

    model_config = {"frozen": True}


class PricedLineItem(BaseModel):
    sku: str
    quantity: int
    term_months: int
    environment: str
    list_price: float
    unit_price: float
    volume_discount_pct: float
    term_discount_pct: float
    environment_factor: float
    total_discount_pct: float
    discount_clamped: bool = False  # True when volume + term exceeded 100%
    base_charge: bool = False
    ratio_factor: Optional[float] = None  # set when a base/usage ratio rescaled the price
    monthly_total: float
    annual_total: float

    model_config = {"frozen": True}


class PricedPhase(BaseModel):
    index: int
    duration_months: float
    line_items: list[PricedLineItem] = []
    subtotal_monthly: float = 0.0

    model_config = {"frozen": True}


# ── Perpetual ────────────────────────────────────────────


class PerpetualComparison(BaseModel):
    upfront_price: float
    recurring_monthly_equivalent: float
    break_even_months: Optional[float] = None  # None when undefined
    undefined_reason: Optional[str] = None

    model_config = {"frozen": True}


class PerpetualOffer(BaseModel):
    """Itemized one-time purchase derived from a recurring price."""
    license: float
    annual_maintenance: float
    total_maintenance: float
    upgrade_protection: float
    total_upfront: float

    model_config = {"frozen": True}


class PricedPackage(BaseModel):
    mode: Literal["phased"] = "phased"
    phases: list[PricedPhase] = []
    subtotal_monthly: float = 0.0  # duration-weighted run rate
    subtotal_annual: float = 0.0
    contract_months: float = 0.0
    total_contract_value: float = 0.0
    snapshot_digest: str = ""  # SHA-256 of the configuration snapshot used
    perpetual: Optional[PerpetualComparison] = None
    perpetual_offer: Optional[PerpetualOffer] = None

    model_config = {"frozen": True}


# ── Time-series ──────────────────────────────────────────


class UsageStatistics(BaseModel):
    count: int
    peak: float
    average: float
    p90: float
    p95: float

    model_config = {"frozen": True}


class PayPerUseModel(BaseModel):
    kind: Literal["pay_per_use"] = "pay_per_use"
    unit_rate: float

    model_config = {"frozen": True}


class FixedCommitmentModel(BaseModel):
    kind: Literal["fixed_commitment"] = "fixed_commitment"
    unit_rate: float
    anchor: CommitmentAnchor = CommitmentAnchor.PEAK
    percentile: Optional[float] = None  # only with anchor=custom; defaults to 90

    model_config = {"frozen": True}


PricingModel = Annotated[
    Union[PayPerUseModel, FixedCommitmentModel],
    Field(discriminator="kind"),
]


class TimeSeriesPricingResult(BaseModel):
    mode: Literal["time_series"] = "time_series"
    model_kind: str
    billed_monthly: float
    commitment_tier_used: Optional[CommitmentAnchor] = None
    committed_quantity: Optional[float] = None
    period_count: int
    billed_total: float
    statistics: UsageStatistics
    perpetual: Optional[PerpetualComparison] = None

    model_config = {"frozen": True, "protected_namespaces": ()}


class PricingModelComparison(BaseModel):
    pay_per_use: TimeSeriesPricingResult
    fixed_commitment: TimeSeriesPricingResult
    savings: float  # positive when the commitment is cheaper
    savings_pct: float

    model_config = {"frozen": True}


# ── Package requests ─────────────────────────────────────


class PhasedPackageRequest(BaseModel):
    mode: Literal["phased"] = "phased"
    phases: Optional[list[Phase]] = None
    items: Optional[list[LineItemRequest]] = None  # split into phases by term
    snapshot: PricingSnapshot
    perpetual_price: Optional[float] = None
    perpetual_terms: Optional[PerpetualTerms] = None

    model_config = {"frozen": True}


class TimeSeriesPackageRequest(BaseModel):
    mode: Literal["time_series"] = "time_series"
    usage: Optional[list[float]] = None
    yearly_usage: Optional[list[float]] = None  # year-end values, expanded to months
    statistics: Optional[UsageStatistics] = None
    pricing_model: PricingModel
    perpetual_price: Optional[float] = None

    model_config = {"frozen": True}


PackageRequest = Annotated[
    Union[PhasedPackageRequest, TimeSeriesPackageRequest],
    Field(discriminator="mode"),
]

PricingResult = Union[PricedPackage, TimeSeriesPricingResult]
