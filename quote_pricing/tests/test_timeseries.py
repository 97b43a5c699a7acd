"""
Tests: time-series pricing (pay-per-use vs. fixed commitment).

Run with:
    pytest quote_pricing/tests/test_timeseries.py -v
"""

import pytest

from quote_pricing.engine.statistics import extract
from quote_pricing.engine.timeseries import (
    compare_pricing_models,
    interpolate_yearly_to_monthly,
    price,
)
from quote_pricing.models.enums import CommitmentAnchor
from quote_pricing.models.errors import InvalidInputError
from quote_pricing.models.schemas import FixedCommitmentModel, PayPerUseModel, UsageStatistics

SERIES = [10, 20, 30, 40, 50]


class TestFixedCommitment:
    def test_peak_anchor(self):
        result = price(extract(SERIES), FixedCommitmentModel(unit_rate=2.0, anchor="peak"))
        assert result.model_kind == "fixed_commitment"
        assert result.commitment_tier_used is CommitmentAnchor.PEAK
        assert result.committed_quantity == 50
        assert result.billed_monthly == pytest.approx(100.0)
        assert result.billed_total == pytest.approx(500.0)
        assert result.period_count == 5

    @pytest.mark.parametrize("anchor, expected", [
        (CommitmentAnchor.AVERAGE, 60.0),
        (CommitmentAnchor.P90, 92.0),
        (CommitmentAnchor.P95, 96.0),
        (CommitmentAnchor.PEAK, 100.0),
    ])
    def test_each_anchor(self, anchor, expected):
        result = price(extract(SERIES), FixedCommitmentModel(unit_rate=2.0, anchor=anchor))
        assert result.billed_monthly == pytest.approx(expected)

    def test_commitment_ignores_usage_shape(self):
        model = FixedCommitmentModel(unit_rate=1.5, anchor=CommitmentAnchor.PEAK)
        spiky = price(extract([1, 1, 1, 1, 50]), model)
        steady = price(extract([50, 50, 50, 50, 50]), model)
        assert spiky.billed_monthly == steady.billed_monthly == pytest.approx(75.0)

    def test_custom_percentile(self):
        model = FixedCommitmentModel(unit_rate=2.0, anchor="custom", percentile=50)
        result = price(extract(SERIES), model, usage=SERIES)
        assert result.commitment_tier_used is CommitmentAnchor.CUSTOM
        assert result.committed_quantity == pytest.approx(30.0)
        assert result.billed_monthly == pytest.approx(60.0)

    def test_custom_percentile_defaults_to_p90(self):
        model = FixedCommitmentModel(unit_rate=2.0, anchor="custom")
        result = price(extract(SERIES), model, usage=SERIES)
        assert result.committed_quantity == pytest.approx(46.0)

    def test_custom_percentile_needs_raw_series(self):
        model = FixedCommitmentModel(unit_rate=2.0, anchor="custom", percentile=75)
        with pytest.raises(InvalidInputError, match="raw usage"):
            price(extract(SERIES), model)

    def test_percentile_only_with_custom_anchor(self):
        model = FixedCommitmentModel(unit_rate=2.0, anchor="peak", percentile=75)
        with pytest.raises(InvalidInputError):
            price(extract(SERIES), model, usage=SERIES)

    def test_custom_percentile_out_of_range(self):
        model = FixedCommitmentModel(unit_rate=2.0, anchor="custom", percentile=120)
        with pytest.raises(InvalidInputError):
            price(extract(SERIES), model, usage=SERIES)


class TestPayPerUse:
    def test_tracks_average(self):
        result = price(extract(SERIES), PayPerUseModel(unit_rate=2.0))
        assert result.model_kind == "pay_per_use"
        assert result.commitment_tier_used is None
        assert result.committed_quantity is None
        assert result.billed_monthly == pytest.approx(60.0)
        assert result.billed_total == pytest.approx(300.0)

    def test_cheaper_than_peak_commitment_for_spiky_usage(self):
        stats = extract([1, 1, 1, 1, 50])
        ppu = price(stats, PayPerUseModel(unit_rate=1.0))
        fixed = price(stats, FixedCommitmentModel(unit_rate=1.0, anchor="peak"))
        assert ppu.billed_monthly < fixed.billed_monthly

    @pytest.mark.parametrize("rate", [0, -1.0])
    def test_non_positive_rate(self, rate):
        with pytest.raises(InvalidInputError):
            price(extract(SERIES), PayPerUseModel(unit_rate=rate))


class TestPrecomputedStatistics:
    @pytest.mark.parametrize("stats", [
        dict(count=3, peak=-5, average=-10, p90=-6, p95=-5),
        dict(count=3, peak=10, average=12, p90=9, p95=10),
        dict(count=3, peak=10, average=5, p90=9, p95=11),
        dict(count=3, peak=10, average=5, p90=9.5, p95=9),
        dict(count=3, peak=float("inf"), average=5, p90=9, p95=10),
        dict(count=0, peak=10, average=5, p90=9, p95=10),
    ])
    def test_inconsistent_statistics_rejected(self, stats):
        with pytest.raises(InvalidInputError):
            price(UsageStatistics(**stats), PayPerUseModel(unit_rate=2.0))

    def test_consistent_statistics_accepted(self):
        stats = UsageStatistics(count=3, peak=10, average=5, p90=9, p95=10)
        assert price(stats, PayPerUseModel(unit_rate=2.0)).billed_total == pytest.approx(30.0)


class TestCompareModels:
    def test_peak_commitment_costs_more(self):
        comparison = compare_pricing_models(extract(SERIES), 2.0, CommitmentAnchor.PEAK)
        assert comparison.pay_per_use.billed_total == pytest.approx(300.0)
        assert comparison.fixed_commitment.billed_total == pytest.approx(500.0)
        assert comparison.savings == pytest.approx(-200.0)
        assert comparison.savings_pct == pytest.approx(-200 / 3)

    def test_average_commitment_breaks_even(self):
        comparison = compare_pricing_models(extract(SERIES), 2.0, CommitmentAnchor.AVERAGE)
        assert comparison.savings == pytest.approx(0.0)

    def test_custom_percentile_commitment(self):
        comparison = compare_pricing_models(
            extract(SERIES), 2.0, CommitmentAnchor.CUSTOM, usage=SERIES, custom_percentile=25
        )
        # P25 of 10..50 is 20 → 40/mo × 5 = 200 against 300 pay-per-use
        assert comparison.fixed_commitment.billed_total == pytest.approx(200.0)
        assert comparison.savings == pytest.approx(100.0)


class TestYearlyInterpolation:
    def test_two_years(self):
        monthly = interpolate_yearly_to_monthly([100, 160])
        assert len(monthly) == 24
        assert monthly[:12] == [100.0] * 12
        assert monthly[12] == pytest.approx(105.0)
        assert monthly[17] == pytest.approx(130.0)
        assert monthly[-1] == 160.0

    def test_single_year_is_flat(self):
        assert interpolate_yearly_to_monthly([42]) == [42.0] * 12

    def test_empty(self):
        assert interpolate_yearly_to_monthly([]) == []

    def test_feeds_statistics(self):
        stats = extract(interpolate_yearly_to_monthly([100, 160]))
        assert stats.peak == 160.0
        assert stats.count == 24
