"""
Market Study Valuation Engine

Comparative method valuation: comparable samples are homogenized against
the subject property, analyzed with outlier rejection, and projected
across five property-condition standards.
"""

from .errors import (
    ValuationError,
    ValuationInputError,
    StatisticalInvariantError,
    StandardNotAvailableError,
)
from .money import Money
from .models import (
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
    DEFAULT_STANDARD,
)
from .homogenization import SampleHomogenizer
from .statistics import StatisticalAnalyzer
from .valuation import ValuationCalculator, recommended_valuation
from .service import ValuationService, ValuationOutcome
from .study import MarketStudy, build_market_study

__all__ = [
    # Errors
    "ValuationError",
    "ValuationInputError",
    "StatisticalInvariantError",
    "StandardNotAvailableError",
    # Models
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
    "DEFAULT_STANDARD",
    # Engine
    "SampleHomogenizer",
    "StatisticalAnalyzer",
    "ValuationCalculator",
    "recommended_valuation",
    "ValuationService",
    "ValuationOutcome",
    # Aggregate
    "MarketStudy",
    "build_market_study",
]

__version__ = "1.0"
