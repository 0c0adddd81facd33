"""
Statistical Analyzer

Implements:
- Descriptive statistics over homogenized unit prices (R$/m²)
- Outlier rejection (mean ± 2 population standard deviations)
- Minimum accepted sample floor
- Reliability classification by coefficient of variation
"""

from __future__ import annotations

import logging
import math
from typing import Final, List, Sequence, Tuple

from .errors import StatisticalInvariantError, ValuationInputError
from .money import Money
from .models import (
    MarketSample,
    Reliability,
    StatisticalAnalysis,
    MIN_ACCEPTED_SAMPLES,
    RELIABILITY_CV_THRESHOLD,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

# Samples further than this many standard deviations from the mean are outliers.
# A value exactly on the boundary is kept.
OUTLIER_STD_DEVIATIONS: Final[float] = 2.0


# =============================================================================
# Descriptive Statistics
# =============================================================================

def calculate_mean(values: Sequence[float]) -> float:
    """Arithmetic mean."""
    if not values:
        raise ValuationInputError("Cannot calculate mean of no values")
    return math.fsum(values) / len(values)


def calculate_median(values: Sequence[float]) -> float:
    """Median; average of the two middle values for an even count."""
    if not values:
        raise ValuationInputError("Cannot calculate median of no values")

    ordered = sorted(values)
    n = len(ordered)
    mid = n // 2

    if n % 2 == 1:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def calculate_std_dev(values: Sequence[float], mean: float) -> float:
    """Population standard deviation (divides by n)."""
    if not values:
        raise ValuationInputError("Cannot calculate standard deviation of no values")
    variance = math.fsum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def calculate_cv(std_dev: float, mean: float) -> float:
    """Coefficient of variation as a percentage."""
    if mean <= 0:
        raise ValuationInputError("Cannot calculate coefficient of variation for a non-positive mean")
    return std_dev / mean * 100


def classify_reliability(cv: float, accepted_count: int) -> Reliability:
    if cv < RELIABILITY_CV_THRESHOLD and accepted_count >= MIN_ACCEPTED_SAMPLES:
        return Reliability.HIGH
    return Reliability.LOW


# =============================================================================
# Analyzer
# =============================================================================

class StatisticalAnalyzer:
    """
    Analyzes homogenized samples.

    Pipeline order:
    1. UNIT PRICES - homogenized price / area per sample
    2. OUTLIERS - reject samples outside mean ± k·σ
    3. FLOOR - keep every sample if fewer than 3 would remain
    4. STATISTICS - recompute on the accepted set
    5. RELIABILITY - classify by coefficient of variation
    """

    def __init__(
        self,
        outlier_std_deviations: float = OUTLIER_STD_DEVIATIONS,
        min_accepted: int = MIN_ACCEPTED_SAMPLES,
    ):
        if outlier_std_deviations <= 0:
            raise ValuationInputError("Outlier threshold must be positive")
        self._k = outlier_std_deviations
        self._min_accepted = min_accepted

    def analyze(self, samples: List[MarketSample]) -> StatisticalAnalysis:
        """
        Perform statistical analysis on homogenized samples.

        Args:
            samples: Homogenized market samples

        Returns:
            StatisticalAnalysis over the accepted samples

        Raises:
            ValuationInputError: if no samples are given or a sample
                has not been homogenized or its homogenized price is zero
        """
        if not samples:
            raise ValuationInputError("Cannot analyze statistics: no samples provided")

        for sample in samples:
            if not sample.is_homogenized:
                raise ValuationInputError(f"Sample {sample.id} has not been homogenized")
            if sample.homogenized_price.is_zero:
                raise ValuationInputError(
                    f"Sample {sample.id}: homogenized price rounds to zero "
                    f"(original price {sample.price.format()})"
                )

        unit_prices = [s.homogenized_unit_price for s in samples]
        currency = samples[0].homogenized_price.currency

        # Step 1: Initial mean and deviation over every sample
        mean = calculate_mean(unit_prices)
        std_dev = calculate_std_dev(unit_prices, mean)
        lower_bound, upper_bound = self.outlier_bounds(mean, std_dev)

        # Step 2: Partition into accepted and rejected
        accepted, rejected = self._partition(samples, unit_prices, lower_bound, upper_bound)

        # Step 3: Floor retention
        floor_applied = False
        if rejected and len(accepted) < self._min_accepted:
            logger.info(
                "Outlier rejection would leave %d of %d samples; keeping all",
                len(accepted), len(samples),
            )
            accepted, rejected = list(samples), []
            floor_applied = True

        if not accepted:
            raise StatisticalInvariantError("Outlier rejection produced no accepted samples")

        if rejected:
            logger.info(
                "Rejected %d outlier(s) outside [%.2f, %.2f]: %s",
                len(rejected), lower_bound, upper_bound, [s.id for s in rejected],
            )

        # Step 4: Final statistics on the accepted set
        accepted_prices = [s.homogenized_unit_price for s in accepted]
        final_mean = calculate_mean(accepted_prices)
        final_median = calculate_median(accepted_prices)
        final_std_dev = calculate_std_dev(accepted_prices, final_mean)
        cv = calculate_cv(final_std_dev, final_mean)

        # Step 5: Reliability
        reliability = classify_reliability(cv, len(accepted))

        return StatisticalAnalysis(
            samples=tuple(samples),
            accepted=tuple(accepted),
            rejected=tuple(rejected),
            mean=Money(final_mean, currency),
            median=Money(final_median, currency),
            std_dev=Money(final_std_dev, currency),
            minimum=Money(min(accepted_prices), currency),
            maximum=Money(max(accepted_prices), currency),
            coefficient_of_variation=cv,
            reliability=reliability,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
            floor_applied=floor_applied,
        )

    def outlier_bounds(self, mean: float, std_dev: float) -> Tuple[float, float]:
        """Inclusive acceptance interval around the mean."""
        spread = self._k * std_dev
        return mean - spread, mean + spread

    @staticmethod
    def _partition(
        samples: List[MarketSample],
        unit_prices: List[float],
        lower_bound: float,
        upper_bound: float,
    ) -> Tuple[List[MarketSample], List[MarketSample]]:
        accepted = []
        rejected = []
        for sample, value in zip(samples, unit_prices):
            if lower_bound <= value <= upper_bound:
                accepted.append(sample)
            else:
                rejected.append(sample)
        return accepted, rejected
