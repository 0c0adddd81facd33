"""
Market Study aggregate.

A market study is a completed comparative valuation: the subject
property, its comparables, the statistical analysis and one valuation
per property standard. It also builds studies from plain request data
(JSON bodies and CLI input files).
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Final, Optional, Tuple

from .errors import StandardNotAvailableError, ValuationInputError
from .models import (
    DEFAULT_STANDARD,
    EvaluationType,
    MarketSample,
    PropertyArea,
    PropertyCharacteristics,
    PropertyStandard,
    SampleStatus,
    StatisticalAnalysis,
    Valuation,
)
from .money import DEFAULT_CURRENCY, Money
from .service import ValuationService


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

MIN_SAMPLES: Final[int] = 3
MAX_SAMPLES: Final[int] = 50

DEFAULT_FACTOR_NAMES: Final[Tuple[str, ...]] = ("bedrooms", "bathrooms", "parking_spots")


@dataclass
class MarketStudy:
    """
    Aggregate root for a market study.

    Everything except the selected standard is fixed once the study
    has been built.
    """
    address: str
    property_area: PropertyArea
    characteristics: PropertyCharacteristics
    evaluation_type: EvaluationType
    factor_names: Tuple[str, ...]
    samples: Tuple[MarketSample, ...]
    analysis: StatisticalAnalysis
    valuations: Dict[PropertyStandard, Valuation]
    selected_standard: Optional[PropertyStandard] = None
    perception_factor: float = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.address or not self.address.strip():
            raise ValuationInputError("Property address is required")
        if len(self.samples) < MIN_SAMPLES:
            raise ValuationInputError(
                f"Minimum {MIN_SAMPLES} samples required for reliable valuation"
            )
        if not self.factor_names:
            raise ValuationInputError("At least one comparison factor is required")
        if not self.valuations:
            raise ValuationInputError("At least one valuation is required")
        if self.selected_standard is not None and self.selected_standard not in self.valuations:
            raise StandardNotAvailableError(self.selected_standard.value)

        if not self.analysis.is_reliable:
            logger.warning(
                "Market study %s: statistical analysis is not reliable "
                "(CV %.2f%%, %d accepted samples)",
                self.id,
                self.analysis.coefficient_of_variation,
                len(self.analysis.accepted),
            )

    @property
    def recommended_valuation(self) -> Valuation:
        """Valuation for the selected standard, renovated when none is selected."""
        standard = self.selected_standard or DEFAULT_STANDARD
        if standard not in self.valuations:
            raise StandardNotAvailableError(standard.value)
        return self.valuations[standard]

    def select_standard(self, standard: PropertyStandard) -> None:
        if standard not in self.valuations:
            raise StandardNotAvailableError(standard.value)
        self.selected_standard = standard

    def valuation_range(self) -> Tuple[Valuation, Valuation]:
        """Lowest and highest valuation by total value."""
        ordered = sorted(self.valuations.values(), key=lambda v: v.total_value.amount)
        return ordered[0], ordered[-1]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        low, high = self.valuation_range()
        return {
            "id": self.id,
            "address": self.address,
            "property_area": self.property_area.square_meters,
            "property_characteristics": self.characteristics.to_dict(),
            "evaluation_type": self.evaluation_type.value,
            "factor_names": list(self.factor_names),
            "perception_factor": self.perception_factor,
            "samples": [s.to_dict() for s in self.samples],
            "analysis": self.analysis.to_dict(),
            "valuations": [v.to_dict() for v in self.valuations.values()],
            "selected_standard": self.selected_standard.value if self.selected_standard else None,
            "recommended_valuation": self.recommended_valuation.to_dict(),
            "valuation_range": {"min": low.to_dict(), "max": high.to_dict()},
            "created_at": self.created_at.isoformat(),
        }


# =============================================================================
# Building Studies From Request Data
# =============================================================================

def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _parse_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        raise ValuationInputError(f"Invalid date: {value!r}")


def parse_sample(data: dict, index: int, currency: str = DEFAULT_CURRENCY) -> MarketSample:
    """
    Parse one sample from request data.

    Samples without an id get a positional one ("sample-1", ...).
    """
    try:
        status = SampleStatus(data.get("status", SampleStatus.FOR_SALE.value))
    except ValueError:
        raise ValuationInputError(f"Invalid sample status: {data.get('status')!r}")

    characteristics = {
        _snake_case(name): value
        for name, value in (data.get("characteristics") or {}).items()
    }

    try:
        area = data["area"]
        price = data["price"]
        location = data["location"]
    except KeyError as e:
        raise ValuationInputError(f"Sample {index + 1}: missing field {e.args[0]}")

    return MarketSample(
        id=str(data.get("id") or f"sample-{index + 1}"),
        location=location,
        area=PropertyArea(area),
        price=Money(price, currency),
        status=status,
        characteristics=characteristics,
        listing_date=_parse_date(data.get("listing_date")),
        sale_date=_parse_date(data.get("sale_date")),
    )


def build_market_study(
    data: dict,
    service: ValuationService,
    currency: str = DEFAULT_CURRENCY,
) -> MarketStudy:
    """
    Build and valuate a market study from request data.

    Args:
        data: Study data (address, property_area, property_characteristics,
            evaluation_type, factor_names, samples, perception_factor,
            selected_standard)
        service: Valuation service used for the calculation
        currency: Currency code of the sample prices

    Returns:
        Fully valuated MarketStudy

    Raises:
        ValuationInputError: if the data cannot be valued
    """
    raw_samples = data.get("samples") or []
    if not MIN_SAMPLES <= len(raw_samples) <= MAX_SAMPLES:
        raise ValuationInputError(
            f"Between {MIN_SAMPLES} and {MAX_SAMPLES} samples are required, got {len(raw_samples)}"
        )
    samples = [parse_sample(s, i, currency) for i, s in enumerate(raw_samples)]

    if "property_area" not in data:
        raise ValuationInputError("Property area is required")
    area = PropertyArea(data["property_area"])
    characteristics = PropertyCharacteristics.from_dict(data.get("property_characteristics") or {
        "bedrooms": 0, "bathrooms": 0, "parking_spots": 0,
    })

    factor_names = tuple(_snake_case(f) for f in (data.get("factor_names") or DEFAULT_FACTOR_NAMES))
    subject_map = characteristics.to_target_map()
    target = {name: subject_map[name] for name in factor_names if name in subject_map}

    try:
        evaluation_type = EvaluationType(data.get("evaluation_type", EvaluationType.SALE.value))
    except ValueError:
        raise ValuationInputError(f"Invalid evaluation type: {data.get('evaluation_type')!r}")

    selected_standard = None
    if data.get("selected_standard"):
        selected_standard = PropertyStandard.from_string(data["selected_standard"])
        if selected_standard is None:
            raise ValuationInputError(f"Invalid property standard: {data['selected_standard']!r}")

    perception_factor = data.get("perception_factor", 0) or 0

    outcome = service.valuate(
        samples,
        target,
        area,
        perception_factor=perception_factor,
        selected_standard=selected_standard,
    )

    kwargs = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])

    return MarketStudy(
        address=data.get("address", ""),
        property_area=area,
        characteristics=characteristics,
        evaluation_type=evaluation_type,
        factor_names=factor_names,
        samples=outcome.samples,
        analysis=outcome.analysis,
        valuations=outcome.valuations,
        selected_standard=selected_standard,
        perception_factor=perception_factor,
        **kwargs,
    )
