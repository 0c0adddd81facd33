"""
Data models for the market valuation engine.

Defines the subject property value objects, comparable market samples,
the statistical analysis produced from them and the per-standard
valuations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Dict, Final, List, Mapping, Optional, Tuple

from utils.formatting import format_area

from .errors import StatisticalInvariantError, ValuationInputError
from .money import Money


# =============================================================================
# Configuration Constants
# =============================================================================

# Subject characteristic limits
MAX_CHARACTERISTIC_COUNT: Final[int] = 50

# Coefficient of variation thresholds (%)
RELIABILITY_CV_THRESHOLD: Final[float] = 30.0
PRECISION_EXCELLENT_CV: Final[float] = 10.0
PRECISION_GOOD_CV: Final[float] = 20.0
PRECISION_ACCEPTABLE_CV: Final[float] = 30.0

# A reliable estimate needs at least this many comparables
MIN_ACCEPTED_SAMPLES: Final[int] = 3

# Standard multipliers relative to renovated (baseline = 1.0)
MULTIPLIER_ORIGINAL: Final[float] = 0.90
MULTIPLIER_BASIC: Final[float] = 0.95
MULTIPLIER_RENOVATED: Final[float] = 1.00
MULTIPLIER_MODERNIZED: Final[float] = 1.05
MULTIPLIER_HIGH_END: Final[float] = 1.10


class PropertyStandard(Enum):
    """
    Property finish/condition standard.

    Declaration order is the ordering of finish quality, lowest first.
    """
    ORIGINAL = "original"
    BASIC = "basic"
    RENOVATED = "renovated"
    MODERNIZED = "modernized"
    HIGH_END = "high_end"

    @classmethod
    def from_string(cls, value: str) -> Optional["PropertyStandard"]:
        """Convert string to PropertyStandard, case-insensitive."""
        normalised = value.lower().strip().replace("-", "_")
        for member in cls:
            if member.value == normalised:
                return member
        return None

    @property
    def multiplier(self) -> float:
        return STANDARD_MULTIPLIERS[self]

    @property
    def description(self) -> str:
        return STANDARD_DESCRIPTIONS[self]


STANDARD_MULTIPLIERS: Final[Dict[PropertyStandard, float]] = {
    PropertyStandard.ORIGINAL: MULTIPLIER_ORIGINAL,
    PropertyStandard.BASIC: MULTIPLIER_BASIC,
    PropertyStandard.RENOVATED: MULTIPLIER_RENOVATED,
    PropertyStandard.MODERNIZED: MULTIPLIER_MODERNIZED,
    PropertyStandard.HIGH_END: MULTIPLIER_HIGH_END,
}

STANDARD_DESCRIPTIONS: Final[Dict[PropertyStandard, str]] = {
    PropertyStandard.ORIGINAL: "Original (Sem Reformas)",
    PropertyStandard.BASIC: "Básico (Reformas Básicas)",
    PropertyStandard.RENOVATED: "Reformado (Completamente Renovado)",
    PropertyStandard.MODERNIZED: "Modernizado (Acabamentos Modernos)",
    PropertyStandard.HIGH_END: "Alto Padrão (Acabamentos de Luxo)",
}

# Comparables are assumed to be in as-is, average condition
DEFAULT_STANDARD: Final[PropertyStandard] = PropertyStandard.RENOVATED


class SampleStatus(Enum):
    """Market status of a comparable sample."""
    FOR_SALE = "for_sale"
    SOLD = "sold"
    RENTED = "rented"


class EvaluationType(Enum):
    """Whether a study values the property for sale or for rent."""
    SALE = "sale"
    RENT = "rent"


class Reliability(Enum):
    """
    Reliability of a statistical analysis.

    High: CV < 30% with at least 3 accepted samples
    Low: anything else
    """
    HIGH = "High"
    LOW = "Low"


class PrecisionGrade(Enum):
    """
    Precision grade derived from the coefficient of variation.

    Excellent: CV <= 10%
    Good: 10% < CV <= 20%
    Acceptable: 20% < CV <= 30%
    Low: CV > 30%
    """
    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    LOW = "low"

    @property
    def description(self) -> str:
        return {
            PrecisionGrade.EXCELLENT: "Excelente precisão (CV até 10%)",
            PrecisionGrade.GOOD: "Boa precisão (CV entre 10% e 20%)",
            PrecisionGrade.ACCEPTABLE: "Precisão aceitável (CV entre 20% e 30%)",
            PrecisionGrade.LOW: "Baixa precisão (CV acima de 30%)",
        }[self]


# =============================================================================
# Value Objects
# =============================================================================

@dataclass(frozen=True)
class PropertyArea:
    """Property area in square meters, rounded to two decimal places."""
    square_meters: float

    def __post_init__(self):
        value = self.square_meters
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValuationInputError(f"Area must be numeric, got {value!r}")
        if not math.isfinite(value):
            raise ValuationInputError("Area must be a finite number")
        rounded = round(float(value), 2)
        if rounded <= 0:
            raise ValuationInputError(f"Area must be positive, got {value!r}")
        object.__setattr__(self, "square_meters", rounded)

    def format(self) -> str:
        return format_area(self.square_meters)

    def __float__(self) -> float:
        return self.square_meters


@dataclass(frozen=True)
class PropertyCharacteristics:
    """
    Subject property characteristics.

    Bedrooms, bathrooms and parking spots are non-negative integers;
    additional features are free-form and stored lower-cased.
    """
    bedrooms: int
    bathrooms: int
    parking_spots: int
    additional_features: Tuple[str, ...] = ()

    def __post_init__(self):
        for name in ("bedrooms", "bathrooms", "parking_spots"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValuationInputError(f"{name} must be a non-negative integer")
            if value > MAX_CHARACTERISTIC_COUNT:
                raise ValuationInputError(
                    f"{name} cannot exceed {MAX_CHARACTERISTIC_COUNT}"
                )
        features = tuple(f.strip().lower() for f in self.additional_features if f.strip())
        object.__setattr__(self, "additional_features", features)

    @property
    def total_rooms(self) -> int:
        return self.bedrooms + self.bathrooms

    def has_feature(self, feature: str) -> bool:
        return feature.strip().lower() in self.additional_features

    def to_target_map(self) -> Dict[str, float]:
        """Characteristic map used as the homogenization target."""
        return {
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parking_spots": self.parking_spots,
        }

    def describe(self) -> str:
        """Human readable summary, e.g. "3 quartos, 2 banheiros, 1 vaga"."""
        text = f"{self.bedrooms} quarto{'s' if self.bedrooms != 1 else ''}"
        text += f", {self.bathrooms} banheiro{'s' if self.bathrooms != 1 else ''}"
        text += f", {self.parking_spots} vaga{'s' if self.parking_spots != 1 else ''}"
        if self.additional_features:
            text += f" ({', '.join(self.additional_features)})"
        return text

    def to_dict(self) -> dict:
        return {
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parking_spots": self.parking_spots,
            "additional_features": list(self.additional_features),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PropertyCharacteristics":
        try:
            bedrooms = data["bedrooms"]
            bathrooms = data["bathrooms"]
        except KeyError as e:
            raise ValuationInputError(f"Property characteristics missing field {e.args[0]}")
        return cls(
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            parking_spots=data.get("parking_spots", data.get("parkingSpots", 0)),
            additional_features=tuple(data.get("additional_features") or ()),
        )


def validate_characteristics(characteristics: Mapping[str, float]) -> Dict[str, float]:
    """Return a plain copy of a characteristic map, rejecting non-numeric values."""
    result = {}
    for name, value in characteristics.items():
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValuationInputError(
                f"Characteristic '{name}' must be numeric, got {value!r}"
            )
        if not math.isfinite(value):
            raise ValuationInputError(f"Characteristic '{name}' must be finite")
        result[str(name)] = value
    return result


# =============================================================================
# Market Samples
# =============================================================================

@dataclass(frozen=True)
class MarketSample:
    """
    A comparable property observation.

    The homogenized price is None until the sample has been through the
    homogenizer. Samples are immutable; homogenization returns a copy.
    """
    id: str
    location: str
    area: PropertyArea
    price: Money
    status: SampleStatus
    characteristics: Mapping[str, float] = field(default_factory=dict)
    homogenized_price: Optional[Money] = None
    listing_date: Optional[date] = None
    sale_date: Optional[date] = None

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise ValuationInputError("Market sample ID is required")
        if not self.location or not self.location.strip():
            raise ValuationInputError("Market sample location is required")
        if self.price.is_zero:
            raise ValuationInputError(f"Sample {self.id}: price must be positive")
        if self.status == SampleStatus.SOLD and self.sale_date is None:
            raise ValuationInputError(f"Sample {self.id}: sale date is required for sold samples")
        object.__setattr__(
            self,
            "characteristics",
            MappingProxyType(validate_characteristics(self.characteristics)),
        )

    @property
    def unit_price(self) -> float:
        """Original price per square meter."""
        return float(self.price) / self.area.square_meters

    @property
    def homogenized_unit_price(self) -> float:
        """Homogenized price per square meter."""
        if self.homogenized_price is None:
            raise ValuationInputError(f"Sample {self.id} has not been homogenized")
        return float(self.homogenized_price) / self.area.square_meters

    @property
    def is_homogenized(self) -> bool:
        return self.homogenized_price is not None

    def characteristic(self, name: str) -> Optional[float]:
        return self.characteristics.get(name)

    def with_homogenized_price(self, homogenized_price: Money) -> "MarketSample":
        """Return a copy of this sample carrying the given homogenized price."""
        return MarketSample(
            id=self.id,
            location=self.location,
            area=self.area,
            price=self.price,
            status=self.status,
            characteristics=dict(self.characteristics),
            homogenized_price=homogenized_price,
            listing_date=self.listing_date,
            sale_date=self.sale_date,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "location": self.location,
            "area": self.area.square_meters,
            "price": float(self.price),
            "status": self.status.value,
            "characteristics": dict(self.characteristics),
            "homogenized_price": float(self.homogenized_price) if self.is_homogenized else None,
            "unit_price": round(self.unit_price, 2),
            "homogenized_unit_price": (
                round(self.homogenized_unit_price, 2) if self.is_homogenized else None
            ),
            "listing_date": self.listing_date.isoformat() if self.listing_date else None,
            "sale_date": self.sale_date.isoformat() if self.sale_date else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MarketSample":
        listing_date = data.get("listing_date")
        sale_date = data.get("sale_date")
        homogenized_price = data.get("homogenized_price")
        return cls(
            id=data["id"],
            location=data["location"],
            area=PropertyArea(data["area"]),
            price=Money(data["price"]),
            status=SampleStatus(data["status"]),
            characteristics=data.get("characteristics") or {},
            homogenized_price=(
                Money(homogenized_price) if homogenized_price is not None else None
            ),
            listing_date=date.fromisoformat(listing_date) if listing_date else None,
            sale_date=date.fromisoformat(sale_date) if sale_date else None,
        )


# =============================================================================
# Analysis and Valuation Results
# =============================================================================

@dataclass(frozen=True)
class StatisticalAnalysis:
    """
    Statistical analysis of homogenized unit prices.

    All price statistics are per square meter and computed over the
    accepted samples only.
    """
    samples: Tuple[MarketSample, ...]
    accepted: Tuple[MarketSample, ...]
    rejected: Tuple[MarketSample, ...]
    mean: Money
    median: Money
    std_dev: Money
    minimum: Money
    maximum: Money
    coefficient_of_variation: float
    reliability: Reliability
    lower_bound: float = 0.0
    upper_bound: float = 0.0
    floor_applied: bool = False

    def __post_init__(self):
        if not self.accepted:
            raise StatisticalInvariantError("Statistical analysis has no accepted samples")
        if not math.isfinite(self.coefficient_of_variation) or self.coefficient_of_variation < 0:
            raise StatisticalInvariantError(
                f"Invalid coefficient of variation: {self.coefficient_of_variation}"
            )

    @property
    def is_reliable(self) -> bool:
        return (
            self.reliability == Reliability.HIGH
            and len(self.accepted) >= MIN_ACCEPTED_SAMPLES
        )

    @property
    def precision_grade(self) -> PrecisionGrade:
        cv = self.coefficient_of_variation
        if cv <= PRECISION_EXCELLENT_CV:
            return PrecisionGrade.EXCELLENT
        if cv <= PRECISION_GOOD_CV:
            return PrecisionGrade.GOOD
        if cv <= PRECISION_ACCEPTABLE_CV:
            return PrecisionGrade.ACCEPTABLE
        return PrecisionGrade.LOW

    @property
    def confidence_interval(self) -> Tuple[Money, Money]:
        """Mean ± 2 standard deviations, lower bound floored at zero."""
        two_std = float(self.std_dev) * 2
        lower = max(float(self.mean) - two_std, 0.0)
        upper = float(self.mean) + two_std
        return Money(lower, self.mean.currency), Money(upper, self.mean.currency)

    @property
    def accepted_ids(self) -> List[str]:
        return [s.id for s in self.accepted]

    @property
    def rejected_ids(self) -> List[str]:
        return [s.id for s in self.rejected]

    @property
    def sample_counts(self) -> Dict[str, int]:
        return {
            "total": len(self.samples),
            "accepted": len(self.accepted),
            "rejected": len(self.rejected),
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        lower, upper = self.confidence_interval
        return {
            "mean": float(self.mean),
            "median": float(self.median),
            "std_dev": float(self.std_dev),
            "min": float(self.minimum),
            "max": float(self.maximum),
            "coefficient_of_variation": round(self.coefficient_of_variation, 4),
            "reliability": self.reliability.value,
            "is_reliable": self.is_reliable,
            "precision_grade": self.precision_grade.value,
            "precision_description": self.precision_grade.description,
            "confidence_interval": {"lower": float(lower), "upper": float(upper)},
            "outlier_bounds": {
                "lower": round(self.lower_bound, 2),
                "upper": round(self.upper_bound, 2),
            },
            "floor_applied": self.floor_applied,
            "sample_counts": self.sample_counts,
            "accepted_ids": self.accepted_ids,
            "rejected_ids": self.rejected_ids,
        }


@dataclass(frozen=True)
class Valuation:
    """Valuation of the subject property for one standard."""
    standard: PropertyStandard
    price_per_sqm: Money
    total_value: Money

    @property
    def multiplier(self) -> float:
        return self.standard.multiplier

    @property
    def description(self) -> str:
        return self.standard.description

    def value_for_area(self, area: PropertyArea) -> Money:
        """Total value this valuation implies for a different area."""
        return self.price_per_sqm.multiply(area.square_meters)

    def difference_from(self, other: "Valuation") -> Money:
        """Absolute difference in total value."""
        if self.total_value > other.total_value:
            return self.total_value.subtract(other.total_value)
        return other.total_value.subtract(self.total_value)

    def percentage_difference_from(self, other: "Valuation") -> float:
        if other.total_value.is_zero:
            raise ValuationInputError("Cannot compare against a zero valuation")
        diff = float(self.difference_from(other)) / float(other.total_value) * 100
        return round(diff, 2)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "standard": self.standard.value,
            "description": self.description,
            "multiplier": self.multiplier,
            "price_per_sqm": float(self.price_per_sqm),
            "price_per_sqm_formatted": self.price_per_sqm.format(),
            "total_value": float(self.total_value),
            "total_value_formatted": self.total_value.format(),
        }
