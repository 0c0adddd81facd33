"""
Market Valuation Engine - Core Business Logic

This module provides the comparative-method valuation pipeline:
1. Homogenization (adjust comparables to the subject's characteristics)
2. Statistical Analysis (outlier rejection, reliability by CV)
3. Valuation (five property-condition standards, perception factor)
4. Market Study aggregate (selected standard, serialization)
"""

from .market_study import (
    Money,
    PropertyArea,
    PropertyCharacteristics,
    PropertyStandard,
    SampleStatus,
    EvaluationType,
    Reliability,
    PrecisionGrade,
    MarketSample,
    StatisticalAnalysis,
    Valuation,
    SampleHomogenizer,
    StatisticalAnalyzer,
    ValuationCalculator,
    ValuationService,
    ValuationOutcome,
    MarketStudy,
    build_market_study,
    ValuationError,
    ValuationInputError,
    StatisticalInvariantError,
    StandardNotAvailableError,
)

__all__ = [
    "Money",
    "PropertyArea",
    "PropertyCharacteristics",
    "PropertyStandard",
    "SampleStatus",
    "EvaluationType",
    "Reliability",
    "PrecisionGrade",
    "MarketSample",
    "StatisticalAnalysis",
    "Valuation",
    "SampleHomogenizer",
    "StatisticalAnalyzer",
    "ValuationCalculator",
    "ValuationService",
    "ValuationOutcome",
    "MarketStudy",
    "build_market_study",
    "ValuationError",
    "ValuationInputError",
    "StatisticalInvariantError",
    "StandardNotAvailableError",
]
