"""
Tests for the price estimation formula.
"""

import pytest

from estateiq.utils.pricing import (
    estimate_price,
    round_half_up,
    city_multiplier,
    type_multiplier,
    room_multiplier,
    age_multiplier,
    CONFIDENCE_SCORE,
    METHODOLOGY,
)


class TestMultipliers:
    """Test the individual multipliers."""

    @pytest.mark.parametrize("city,expected", [
        ("București", 1.8),
        ("Cluj-Napoca", 1.5),
        ("Galați", 0.9),
        ("cluj-napoca", 1.0),
        ("bucurești", 1.0),
        ("  Brașov ", 1.4),
        ("Sibiu", 1.0),
        ("", 1.0),
    ])
    def test_city_multiplier(self, city, expected):
        assert city_multiplier(city) == expected

    @pytest.mark.parametrize("property_type,expected", [
        ("apartment", 1.0),
        ("Villa", 1.5),
        ("PENTHOUSE", 1.8),
        ("studio", 0.8),
        ("castle", 1.0),
    ])
    def test_type_multiplier(self, property_type, expected):
        assert type_multiplier(property_type) == expected

    def test_room_multiplier_is_clamped(self):
        assert room_multiplier(0) == 0.8
        assert room_multiplier(1) == pytest.approx(0.85)
        assert room_multiplier(3) == pytest.approx(1.15)
        assert room_multiplier(10) == 1.4

    def test_age_multiplier_has_floor(self):
        assert age_multiplier(2025, 2025) == 1.0
        assert age_multiplier(2005, 2025) == pytest.approx(0.9)
        assert age_multiplier(1900, 2025) == 0.7

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2
        assert round_half_up(-2.5) == -2


class TestEstimatePrice:
    """Test complete estimates."""

    def test_bucharest_apartment(self):
        estimate = estimate_price("apartment", "București", 80, 3)

        assert estimate.predicted_price == 165600
        assert estimate.price_range == {"min": 140760, "max": 190440}
        assert estimate.confidence == CONFIDENCE_SCORE
        assert estimate.methodology == METHODOLOGY
        assert "age" not in estimate.multipliers

    def test_old_house_gets_age_factor(self):
        estimate = estimate_price("house", "Cluj-Napoca", 100, 4, year_built=1980, current_year=2025)

        assert estimate.predicted_price == 181350
        assert estimate.multipliers["age"] == pytest.approx(0.775)
        assert estimate.factors["negative"] == [{
            "factor": "Property Age",
            "impact": "-8%",
            "description": "Built in 1980, may require modernization",
        }]

    def test_recent_building_has_no_negative_factors(self):
        estimate = estimate_price("apartment", "Iași", 60, 2, year_built=2010, current_year=2025)

        assert estimate.factors["negative"] == []

    def test_positive_factors(self):
        estimate = estimate_price("apartment", "Cluj-Napoca", 75.5, 3)

        location, size = estimate.factors["positive"]
        assert location == {
            "factor": "Prime Location",
            "impact": "+50%",
            "description": "Cluj-Napoca is a desirable location with good market demand",
        }
        assert size["impact"] == "+12%"
        assert size["description"] == "75.5m² provides comfortable living space"

    def test_location_impact_sign_for_cheaper_cities(self):
        galati = estimate_price("apartment", "Galați", 50, 2)
        unknown = estimate_price("apartment", "Sibiu", 50, 2)

        assert galati.factors["positive"][0]["impact"] == "-10%"
        assert unknown.factors["positive"][0]["impact"] == "+0%"

    def test_whole_surface_is_formatted_without_decimals(self):
        estimate = estimate_price("studio", "Oradea", 40.0, 1)

        assert estimate.factors["positive"][1]["description"] == "40m² provides comfortable living space"

    def test_to_dict(self):
        estimate = estimate_price("villa", "Brașov", 200, 6)
        estimate.comparable_properties = 4

        result = estimate.to_dict()

        assert set(result) == {
            "predicted_price",
            "confidence",
            "price_range",
            "factors",
            "methodology",
            "comparable_properties",
        }
        assert result["comparable_properties"] == 4
