"""
Tests for the Statistical Analyzer.

Verifies:
- Descriptive statistics (population standard deviation)
- Outliers beyond 2 standard deviations are rejected
- A value exactly on the boundary is kept
- Floor retention keeps every sample when fewer than 3 would remain
- Reliability classification by coefficient of variation
"""

import math
import pytest

from core.market_study import (
    Money,
    PrecisionGrade,
    Reliability,
    SampleHomogenizer,
    StatisticalAnalyzer,
    StatisticalInvariantError,
    ValuationInputError,
)
from core.market_study.statistics import (
    calculate_cv,
    calculate_mean,
    calculate_median,
    calculate_std_dev,
    classify_reliability,
)


@pytest.fixture
def analyzer():
    return StatisticalAnalyzer()


@pytest.fixture
def homogenized(create_sample, target_characteristics):
    """Build homogenized samples from unit prices (area 100)."""
    def _build(unit_prices):
        samples = [
            create_sample(price * 100, sample_id=f"s{i}")
            for i, price in enumerate(unit_prices)
        ]
        return SampleHomogenizer().homogenize(samples, target_characteristics)
    return _build


# =============================================================================
# Descriptive Statistics
# =============================================================================

class TestDescriptiveStatistics:
    """Tests for the helper functions."""

    def test_mean(self):
        assert calculate_mean([1, 2, 3, 4]) == 2.5

    def test_median_odd_and_even(self):
        assert calculate_median([5, 1, 3]) == 3
        assert calculate_median([4, 1, 3, 2]) == 2.5

    def test_population_std_dev(self):
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        assert calculate_std_dev(values, calculate_mean(values)) == 2.0

    def test_cv_percentage(self):
        assert calculate_cv(20, 200) == 10.0

    def test_cv_requires_positive_mean(self):
        with pytest.raises(ValuationInputError):
            calculate_cv(1, 0)

    @pytest.mark.parametrize("fn", [calculate_mean, calculate_median])
    def test_empty_values_rejected(self, fn):
        with pytest.raises(ValuationInputError):
            fn([])

    def test_classify_reliability(self):
        assert classify_reliability(29.99, 3) == Reliability.HIGH
        assert classify_reliability(30.0, 10) == Reliability.LOW
        assert classify_reliability(5.0, 2) == Reliability.LOW


# =============================================================================
# Outlier Rejection
# =============================================================================

class TestOutlierRejection:
    """Tests for the 2-sigma rejection rule."""

    def test_no_outliers_in_tight_set(self, analyzer, homogenized):
        analysis = analyzer.analyze(homogenized([100, 102, 98, 101]))
        assert analysis.rejected == ()
        assert len(analysis.accepted) == 4

    def test_far_outlier_rejected(self, analyzer, homogenized):
        # mean 190, sigma 270: upper bound 730
        analysis = analyzer.analyze(homogenized([100] * 9 + [1000]))

        assert analysis.rejected_ids == ["s9"]
        assert len(analysis.accepted) == 9
        assert analysis.mean == Money(100)
        assert analysis.coefficient_of_variation == 0
        assert analysis.upper_bound == pytest.approx(730)

    def test_value_on_boundary_is_kept(self, analyzer, homogenized):
        # mean 200, sigma 200: upper bound exactly 600
        analysis = analyzer.analyze(homogenized([100, 100, 100, 100, 600]))

        assert analysis.rejected == ()
        assert analysis.upper_bound == 600
        assert analysis.mean == Money(200)

    def test_statistics_use_accepted_set_only(self, analyzer, homogenized):
        analysis = analyzer.analyze(homogenized([100] * 9 + [1000]))
        assert analysis.maximum == Money(100)
        assert analysis.minimum == Money(100)
        assert analysis.median == Money(100)

    def test_partition_covers_input(self, analyzer, homogenized):
        samples = homogenized([100] * 9 + [1000])
        analysis = analyzer.analyze(samples)
        assert sorted(analysis.accepted_ids + analysis.rejected_ids) == sorted(s.id for s in samples)
        assert analysis.sample_counts == {"total": 10, "accepted": 9, "rejected": 1}


# =============================================================================
# Floor Retention
# =============================================================================

class TestFloorRetention:
    """Tests for the minimum accepted sample floor."""

    def test_floor_keeps_all_samples(self, homogenized):
        # With k=0.5 only 200 and 300 fall inside [194.1, 305.9]
        analyzer = StatisticalAnalyzer(outlier_std_deviations=0.5)
        samples = homogenized([100, 200, 300, 400])
        analysis = analyzer.analyze(samples)

        assert analysis.floor_applied
        assert analysis.rejected == ()
        assert analysis.accepted == tuple(samples)
        assert analysis.mean == Money(250)

    def test_floor_not_applied_when_enough_remain(self, homogenized):
        analyzer = StatisticalAnalyzer(outlier_std_deviations=0.5)
        analysis = analyzer.analyze(homogenized([100, 100, 100, 100, 400]))
        assert not analysis.floor_applied
        assert analysis.rejected_ids == ["s4"]

    def test_fewer_than_three_samples_does_not_crash(self, analyzer, homogenized):
        analysis = analyzer.analyze(homogenized([100, 120]))
        assert len(analysis.accepted) == 2
        assert analysis.reliability == Reliability.LOW
        assert not analysis.is_reliable

    def test_single_sample(self, analyzer, homogenized):
        analysis = analyzer.analyze(homogenized([150]))
        assert analysis.mean == Money(150)
        assert analysis.std_dev == Money(0)


# =============================================================================
# Reliability
# =============================================================================

class TestReliability:
    """Tests for reliability and precision grading."""

    def test_tight_set_is_reliable(self, analyzer, homogenized):
        analysis = analyzer.analyze(homogenized([100, 102, 98, 101]))
        assert analysis.reliability == Reliability.HIGH
        assert analysis.is_reliable
        assert analysis.precision_grade == PrecisionGrade.EXCELLENT

    def test_dispersed_set_is_unreliable(self, analyzer, homogenized):
        # mean 200, sigma 81.65: CV 40.8%
        analysis = analyzer.analyze(homogenized([100, 200, 300]))
        assert analysis.coefficient_of_variation == pytest.approx(40.82, abs=0.01)
        assert analysis.reliability == Reliability.LOW
        assert analysis.precision_grade == PrecisionGrade.LOW

    def test_confidence_interval_is_two_sigma(self, analyzer, homogenized):
        lower, upper = analyzer.analyze(homogenized([100, 200, 300])).confidence_interval
        assert lower == Money(36.70)
        assert upper == Money(363.30)

    def test_to_dict(self, analyzer, homogenized):
        data = analyzer.analyze(homogenized([100] * 9 + [1000])).to_dict()
        assert data["mean"] == 100.0
        assert data["reliability"] == "High"
        assert data["rejected_ids"] == ["s9"]
        assert data["floor_applied"] is False


# =============================================================================
# Input Validation
# =============================================================================

class TestInputValidation:
    """Tests for invalid analyzer input."""

    def test_empty_batch_rejected(self, analyzer):
        with pytest.raises(ValuationInputError):
            analyzer.analyze([])

    def test_unhomogenized_sample_rejected(self, analyzer, create_sample):
        with pytest.raises(ValuationInputError, match="has not been homogenized"):
            analyzer.analyze([create_sample(10000)])

    def test_zero_homogenized_price_rejected(self, analyzer, create_sample, target_characteristics):
        homogenizer = SampleHomogenizer(weights={"bedrooms": 0.9})
        samples = homogenizer.homogenize(
            [create_sample(10000, bedrooms=10, sample_id="tiny"), create_sample(10000)],
            target_characteristics,
        )
        with pytest.raises(ValuationInputError, match="tiny: homogenized price rounds to zero"):
            analyzer.analyze(samples)

    def test_non_positive_threshold_rejected(self):
        with pytest.raises(ValuationInputError):
            StatisticalAnalyzer(outlier_std_deviations=0)

    def test_empty_accepted_set_is_invariant_error(self, analyzer, homogenized):
        analysis = analyzer.analyze(homogenized([100, 110, 120]))
        with pytest.raises(StatisticalInvariantError):
            type(analysis)(
                samples=analysis.samples,
                accepted=(),
                rejected=analysis.samples,
                mean=analysis.mean,
                median=analysis.median,
                std_dev=analysis.std_dev,
                minimum=analysis.minimum,
                maximum=analysis.maximum,
                coefficient_of_variation=0.0,
                reliability=Reliability.LOW,
            )

    def test_results_are_finite(self, analyzer, homogenized):
        analysis = analyzer.analyze(homogenized([100, 105, 110]))
        assert math.isfinite(analysis.coefficient_of_variation)
        assert math.isfinite(float(analysis.mean))
