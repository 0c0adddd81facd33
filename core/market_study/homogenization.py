"""
Sample Homogenizer

Adjusts each comparable sample's price for the differences between its
characteristics and the subject property's characteristics, producing
the price the sample would have had with the subject's characteristics.

Adjustment (per characteristic shared by subject and sample):
- Each unit the sample is inferior to the subject: multiply by (1 + weight)
- Each unit the sample is superior to the subject: multiply by (1 - weight)
- Equal values: no adjustment
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Final, List, Mapping, Optional

from .errors import ValuationInputError
from .models import MarketSample, validate_characteristics


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

# Weight applied to any shared characteristic without an explicit entry
DEFAULT_ADJUSTMENT_WEIGHT: Final[float] = 0.10

# Per-unit adjustment weights for the subject characteristics
DEFAULT_CHARACTERISTIC_WEIGHTS: Final[Dict[str, float]] = {
    "bedrooms": 0.10,
    "bathrooms": 0.10,
    "parking_spots": 0.10,
}


def _validate_weight(name: str, weight: float) -> float:
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise ValuationInputError(f"Adjustment weight for '{name}' must be numeric")
    if not math.isfinite(weight) or not 0 <= weight < 1:
        raise ValuationInputError(
            f"Adjustment weight for '{name}' must be in [0, 1), got {weight}"
        )
    return float(weight)


class SampleHomogenizer:
    """
    Homogenizes comparable samples against a subject property.

    Weights are fixed per instance; homogenize() holds no state between calls.
    """

    def __init__(
        self,
        weights: Optional[Mapping[str, float]] = None,
        default_weight: float = DEFAULT_ADJUSTMENT_WEIGHT,
    ):
        """
        Initialize the homogenizer.

        Args:
            weights: Per-characteristic weights, merged over the defaults
            default_weight: Weight for shared characteristics not in the table
        """
        merged = dict(DEFAULT_CHARACTERISTIC_WEIGHTS)
        if weights:
            merged.update(weights)
        self._weights = {name: _validate_weight(name, w) for name, w in merged.items()}
        self._default_weight = _validate_weight("default", default_weight)

    @property
    def weights(self) -> Dict[str, float]:
        return dict(self._weights)

    def weight_for(self, characteristic: str) -> float:
        return self._weights.get(characteristic, self._default_weight)

    def homogenize(
        self,
        samples: List[MarketSample],
        characteristics: Mapping[str, float],
    ) -> List[MarketSample]:
        """
        Homogenize samples against the target characteristics.

        Args:
            samples: Comparable samples (homogenized price ignored)
            characteristics: Subject characteristic map

        Returns:
            New samples in the same order with homogenized prices populated
        """
        target = validate_characteristics(characteristics)
        result = []

        for sample in samples:
            self._check_area(sample)
            factor = self.adjustment_factor(sample.characteristics, target)
            homogenized = sample.with_homogenized_price(sample.price.multiply(factor))
            logger.debug(
                "Homogenized sample %s: factor=%.4f unit_price=%.2f -> %.2f",
                sample.id, factor, sample.unit_price, homogenized.homogenized_unit_price,
            )
            result.append(homogenized)

        return result

    def adjustment_factor(
        self,
        sample_characteristics: Mapping[str, float],
        target: Mapping[str, float],
    ) -> float:
        """
        Combined multiplicative adjustment factor for one sample.

        Characteristics missing on either side contribute no adjustment.
        """
        factor = 1.0

        for name, sample_value in sample_characteristics.items():
            target_value = target.get(name)
            if target_value is None:
                continue

            difference = target_value - sample_value
            if difference == 0:
                continue

            weight = self.weight_for(name)
            if difference > 0:
                # Sample is inferior, increase its value
                factor *= (1 + weight) ** difference
            else:
                # Sample is superior, decrease its value
                factor *= (1 - weight) ** (-difference)

        return factor

    @staticmethod
    def _check_area(sample: MarketSample) -> None:
        area = sample.area.square_meters
        if not math.isfinite(area) or area <= 0:
            raise ValuationInputError(f"Sample {sample.id}: area must be positive")
