"""
Shared fixtures for the market study test suite.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.market_study import (
    Money,
    MarketSample,
    PropertyArea,
    SampleStatus,
)


@pytest.fixture
def create_sample():
    """Factory fixture for creating comparable samples."""
    counter = {"n": 0}

    def _create(
        price: float,
        area: float = 100,
        bedrooms: int = 3,
        bathrooms: int = 2,
        parking_spots: int = 1,
        sample_id: str = None,
        status: SampleStatus = SampleStatus.FOR_SALE,
        **extra_characteristics,
    ) -> MarketSample:
        counter["n"] += 1
        characteristics = {
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "parking_spots": parking_spots,
        }
        characteristics.update(extra_characteristics)
        return MarketSample(
            id=sample_id or f"sample-{counter['n']}",
            location=f"Rua Teste, {counter['n'] * 10}",
            area=PropertyArea(area),
            price=Money(price),
            status=status,
            characteristics=characteristics,
        )

    return _create


@pytest.fixture
def target_characteristics():
    """Subject characteristics matching the factory defaults."""
    return {"bedrooms": 3, "bathrooms": 2, "parking_spots": 1}


@pytest.fixture
def study_data():
    """Request data for a three-sample study with identical characteristics."""
    characteristics = {"bedrooms": 3, "bathrooms": 2, "parkingSpots": 1}
    return {
        "address": "Rua Augusta, 500 - Consolação, São Paulo/SP",
        "property_area": 88,
        "property_characteristics": {"bedrooms": 3, "bathrooms": 2, "parking_spots": 1},
        "evaluation_type": "sale",
        "factor_names": ["bedrooms", "bathrooms", "parking_spots"],
        "samples": [
            {"id": "a", "location": "Rua A, 10", "area": 85, "price": 450000,
             "status": "for_sale", "characteristics": dict(characteristics)},
            {"id": "b", "location": "Rua B, 20", "area": 90, "price": 470000,
             "status": "for_sale", "characteristics": dict(characteristics)},
            {"id": "c", "location": "Rua C, 30", "area": 80, "price": 440000,
             "status": "for_sale", "characteristics": dict(characteristics)},
        ],
    }
