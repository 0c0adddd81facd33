"""
Valuation Service

Comparative method valuation (NBR 14653-2 style) composed of three
independent, stateless stages:

1. HOMOGENIZE - adjust sample prices to the subject's characteristics
2. ANALYZE - outlier-robust statistics over homogenized unit prices
3. VALUATE - project the mean unit price across property standards

The service performs no I/O and holds no per-call state, so a single
instance can be shared by concurrent requests.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from .homogenization import SampleHomogenizer
from .models import (
    MarketSample,
    PropertyArea,
    PropertyStandard,
    StatisticalAnalysis,
    Valuation,
)
from .statistics import StatisticalAnalyzer
from .valuation import ValuationCalculator, recommended_valuation


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValuationOutcome:
    """
    Complete result of a valuation run.

    Either every field is populated or the run raised; there are no
    partial outcomes.
    """
    samples: Tuple[MarketSample, ...]
    analysis: StatisticalAnalysis
    valuations: Dict[PropertyStandard, Valuation]
    recommended: Valuation
    perception_factor: float = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "samples": [s.to_dict() for s in self.samples],
            "analysis": self.analysis.to_dict(),
            "valuations": {
                standard.value: valuation.to_dict()
                for standard, valuation in self.valuations.items()
            },
            "recommended": self.recommended.to_dict(),
            "perception_factor": self.perception_factor,
        }


class ValuationService:
    """
    Entry points used by the market study handlers.

    Usage:
        service = ValuationService()
        homogenized = service.homogenize_samples(samples, characteristics)
        analysis = service.analyze_statistics(homogenized)
        valuations = service.calculate_valuations(analysis, area)
    """

    def __init__(
        self,
        homogenizer: Optional[SampleHomogenizer] = None,
        analyzer: Optional[StatisticalAnalyzer] = None,
        calculator: Optional[ValuationCalculator] = None,
    ):
        self._homogenizer = homogenizer or SampleHomogenizer()
        self._analyzer = analyzer or StatisticalAnalyzer()
        self._calculator = calculator or ValuationCalculator()

    @classmethod
    def from_config(cls, config) -> "ValuationService":
        """Build a service using the homogenization weights from config."""
        return cls(homogenizer=SampleHomogenizer(weights=config.homogenization_weights))

    def homogenize_samples(
        self,
        samples: List[MarketSample],
        characteristics: Mapping[str, float],
    ) -> List[MarketSample]:
        return self._homogenizer.homogenize(samples, characteristics)

    def analyze_statistics(self, samples: List[MarketSample]) -> StatisticalAnalysis:
        return self._analyzer.analyze(samples)

    def calculate_valuations(
        self,
        analysis: StatisticalAnalysis,
        subject_area: PropertyArea,
        perception_factor: float = 0,
    ) -> Dict[PropertyStandard, Valuation]:
        return self._calculator.calculate_valuations(analysis, subject_area, perception_factor)

    def valuate(
        self,
        samples: List[MarketSample],
        characteristics: Mapping[str, float],
        subject_area: PropertyArea,
        perception_factor: float = 0,
        selected_standard: Optional[PropertyStandard] = None,
    ) -> ValuationOutcome:
        """
        Run homogenization, analysis and valuation in order.

        Args:
            samples: Raw comparable samples
            characteristics: Subject characteristic map
            subject_area: Area of the subject property
            perception_factor: Market perception adjustment (%, -50 to +50)
            selected_standard: Subject condition (default: renovated)

        Returns:
            ValuationOutcome with homogenized samples, analysis and valuations
        """
        homogenized = self.homogenize_samples(samples, characteristics)
        analysis = self.analyze_statistics(homogenized)
        valuations = self.calculate_valuations(analysis, subject_area, perception_factor)
        recommended = recommended_valuation(valuations, selected_standard)

        logger.info(
            "Valuated %d samples (%d accepted, CV %.2f%%, %s): %s = %s",
            len(samples),
            len(analysis.accepted),
            analysis.coefficient_of_variation,
            analysis.reliability.value,
            recommended.standard.value,
            recommended.total_value.format(),
        )

        return ValuationOutcome(
            samples=tuple(homogenized),
            analysis=analysis,
            valuations=valuations,
            recommended=recommended,
            perception_factor=perception_factor,
        )
