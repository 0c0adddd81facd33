"""
Valuation Calculator

Projects the analyzed mean unit price across the fixed property
standards and multiplies by the subject area.

Standard multipliers (relative to renovated = 1.0):
- Original: 0.90x (no renovations)
- Basic: 0.95x (basic renovations)
- Renovated: 1.00x (baseline)
- Modernized: 1.05x (modern finishes)
- High-end: 1.10x (luxury finishes)

The perception factor is a manual percentage adjustment applied
uniformly to every standard.
"""

from __future__ import annotations

import math
from typing import Dict, Final, Mapping, Optional

from .errors import StandardNotAvailableError, ValuationInputError
from .money import Money
from .models import (
    DEFAULT_STANDARD,
    PropertyArea,
    PropertyStandard,
    StatisticalAnalysis,
    Valuation,
)


# =============================================================================
# Configuration Constants
# =============================================================================

MIN_PERCEPTION_FACTOR: Final[float] = -50.0
MAX_PERCEPTION_FACTOR: Final[float] = 50.0


def perception_multiplier(perception_factor: float) -> float:
    """
    Multiplier for a perception factor given in percent.

    Raises:
        ValuationInputError: if the factor is not finite or outside [-50, 50]
    """
    if isinstance(perception_factor, bool) or not isinstance(perception_factor, (int, float)):
        raise ValuationInputError("Perception factor must be numeric")
    if not math.isfinite(perception_factor):
        raise ValuationInputError("Perception factor must be a finite number")
    if not MIN_PERCEPTION_FACTOR <= perception_factor <= MAX_PERCEPTION_FACTOR:
        raise ValuationInputError("Perception factor must be between -50% and 50%")
    return 1 + perception_factor / 100


class ValuationCalculator:
    """Calculates one valuation per property standard."""

    def calculate_valuations(
        self,
        analysis: StatisticalAnalysis,
        subject_area: PropertyArea,
        perception_factor: float = 0,
    ) -> Dict[PropertyStandard, Valuation]:
        """
        Calculate valuations for every property standard.

        Args:
            analysis: Statistical analysis of the homogenized samples
            subject_area: Area of the subject property
            perception_factor: Market perception adjustment (%, -50 to +50)

        Returns:
            Valuations keyed by standard, ordered from original to high_end
        """
        adjustment = perception_multiplier(perception_factor)
        base_price_per_sqm = float(analysis.mean)
        currency = analysis.mean.currency
        area = subject_area.square_meters

        valuations = {}
        for standard in PropertyStandard:
            price_per_sqm = base_price_per_sqm * standard.multiplier * adjustment
            valuations[standard] = Valuation(
                standard=standard,
                price_per_sqm=Money(price_per_sqm, currency),
                total_value=Money(price_per_sqm * area, currency),
            )

        return valuations


def recommended_valuation(
    valuations: Mapping[PropertyStandard, Valuation],
    standard: Optional[PropertyStandard] = None,
) -> Valuation:
    """
    Valuation for the subject's selected condition.

    Defaults to renovated, matching comparables in as-is average condition.
    """
    chosen = standard or DEFAULT_STANDARD
    if chosen not in valuations:
        raise StandardNotAvailableError(chosen.value)
    return valuations[chosen]
