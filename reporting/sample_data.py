"""
Sample market study data for demos and tests.
"""


def create_sample_study_data() -> dict:
    """
    Create a sample market study request for testing.

    Five comparables around a 3-bedroom apartment in Jardins with
    mixed bathroom and parking counts.
    """
    return {
        "address": "Rua Oscar Freire, 1200, apto 81 - Jardins, São Paulo/SP",
        "property_area": 88,
        "property_characteristics": {
            "bedrooms": 3,
            "bathrooms": 2,
            "parking_spots": 1,
            "additional_features": ["varanda", "portaria 24h"],
        },
        "evaluation_type": "sale",
        "factor_names": ["bedrooms", "bathrooms", "parkingSpots"],
        "perception_factor": 0,
        "selected_standard": "renovated",
        "samples": [
            {
                "id": "oscar-freire-1100",
                "location": "Rua Oscar Freire, 1100",
                "area": 85,
                "price": 1050000,
                "status": "for_sale",
                "characteristics": {"bedrooms": 3, "bathrooms": 2, "parkingSpots": 1},
                "listing_date": "2026-08-02",
            },
            {
                "id": "bela-cintra-2050",
                "location": "Rua Bela Cintra, 2050",
                "area": 92,
                "price": 1120000,
                "status": "sold",
                "characteristics": {"bedrooms": 3, "bathrooms": 2, "parkingSpots": 2},
                "sale_date": "2026-06-18",
            },
            {
                "id": "haddock-lobo-1500",
                "location": "Rua Haddock Lobo, 1500",
                "area": 80,
                "price": 940000,
                "status": "for_sale",
                "characteristics": {"bedrooms": 2, "bathrooms": 2, "parkingSpots": 1},
                "listing_date": "2026-09-10",
            },
            {
                "id": "augusta-2700",
                "location": "Rua Augusta, 2700",
                "area": 90,
                "price": 1080000,
                "status": "for_sale",
                "characteristics": {"bedrooms": 3, "bathrooms": 1, "parkingSpots": 1},
                "listing_date": "2026-07-21",
            },
            {
                "id": "lorena-1300",
                "location": "Alameda Lorena, 1300",
                "area": 87,
                "price": 1390000,
                "status": "for_sale",
                "characteristics": {"bedrooms": 3, "bathrooms": 3, "parkingSpots": 2},
                "listing_date": "2026-09-28",
            },
        ],
    }
