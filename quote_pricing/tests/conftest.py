"""Shared fixtures: small, hand-checkable pricing configurations."""

import pytest

from quote_pricing.models.enums import LadderMode
from quote_pricing.models.schemas import (
    EnvironmentFactors,
    LadderStep,
    PricingLadder,
    PricingSnapshot,
    TermAnchor,
    TermFactorTable,
)


def make_ladder(points: dict[float, float], mode: LadderMode = LadderMode.STEPPED) -> PricingLadder:
    return PricingLadder(
        mode=mode,
        steps=[LadderStep(threshold=t, discount_pct=d) for t, d in points.items()],
    )


def make_terms(points: dict[float, float]) -> TermFactorTable:
    return TermFactorTable(
        anchors=[TermAnchor(term_months=t, discount_pct=d) for t, d in points.items()]
    )


@pytest.fixture
def standard_ladder() -> PricingLadder:
    return make_ladder({0: 0, 100: 10, 500: 20})


@pytest.fixture
def standard_terms() -> TermFactorTable:
    return make_terms({1: 0, 12: 5, 36: 15})


@pytest.fixture
def environments() -> EnvironmentFactors:
    return EnvironmentFactors(factors={"production": 1.0, "reference": 0.5})


@pytest.fixture
def flat_snapshot(environments) -> PricingSnapshot:
    """No volume or term discounts: monthly totals are simply price × quantity."""
    return PricingSnapshot(
        ladders={"SKU-A": make_ladder({0: 0}), "SKU-B": make_ladder({0: 0})},
        term_table=make_terms({1: 0}),
        environments=environments,
    )


@pytest.fixture
def discount_snapshot(standard_ladder, standard_terms, environments) -> PricingSnapshot:
    return PricingSnapshot(
        ladders={"SKU-A": standard_ladder},
        term_table=standard_terms,
        environments=environments,
    )
