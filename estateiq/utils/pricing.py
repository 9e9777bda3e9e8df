"""
Deterministic price estimation formula.

The estimate is surface * 1000 EUR, scaled by multipliers for the city,
the property type, the room count and the building age. No I/O happens here;
the prediction service adds comparables and persistence around it.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import math


MODEL_VERSION = "mock-formula-v1"
BASE_PRICE_PER_SQM = 1000
CONFIDENCE_SCORE = 0.85
PRICE_RANGE_SPREAD = 0.15
OLD_BUILDING_AGE = 30

METHODOLOGY = (
    "Our AI model analyzes over 50 factors including property characteristics, "
    "location data, recent sales, and market trends to provide accurate price predictions."
)

CITY_MULTIPLIERS: Dict[str, float] = {
    "București": 1.8,
    "Cluj-Napoca": 1.5,
    "Timișoara": 1.3,
    "Constanța": 1.2,
    "Iași": 1.1,
    "Craiova": 1.0,
    "Brașov": 1.4,
    "Galați": 0.9,
    "Ploiești": 1.0,
    "Oradea": 1.1,
}

TYPE_MULTIPLIERS: Dict[str, float] = {
    "apartment": 1.0,
    "house": 1.2,
    "villa": 1.5,
    "duplex": 1.3,
    "studio": 0.8,
    "penthouse": 1.8,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def city_multiplier(city: str) -> float:
    """Multiplier for a city name; unknown cities count as 1.0."""
    return CITY_MULTIPLIERS.get((city or "").strip(), 1.0)


def type_multiplier(property_type: str) -> float:
    return TYPE_MULTIPLIERS.get((property_type or "").strip().lower(), 1.0)


def room_multiplier(rooms: int) -> float:
    """0.15 per room on top of 0.7, clamped to [0.8, 1.4]."""
    return max(0.8, min(1.4, rooms * 0.15 + 0.7))


def age_multiplier(year_built: int, current_year: int) -> float:
    """Half a percent off per year of age, never below 0.7."""
    age = current_year - year_built
    return max(0.7, 1 - (age * 0.005))


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class PriceEstimate:
    """Result of the pricing formula for one set of inputs."""

    def __init__(
        self,
        predicted_price: int,
        price_range: Dict[str, int],
        factors: Dict[str, List[Dict[str, str]]],
        multipliers: Dict[str, float],
        confidence: float = CONFIDENCE_SCORE,
        methodology: str = METHODOLOGY,
        comparable_properties: Optional[int] = None
    ):
        self.predicted_price = predicted_price
        self.price_range = price_range
        self.factors = factors
        self.multipliers = multipliers
        self.confidence = confidence
        self.methodology = methodology
        self.comparable_properties = comparable_properties

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predicted_price": self.predicted_price,
            "confidence": self.confidence,
            "price_range": self.price_range,
            "factors": self.factors,
            "methodology": self.methodology,
            "comparable_properties": self.comparable_properties,
        }


def estimate_price(
    property_type: str,
    city: str,
    surface: float,
    rooms: int,
    year_built: Optional[int] = None,
    current_year: Optional[int] = None
) -> PriceEstimate:
    """
    Run the pricing formula.

    Args:
        property_type: apartment, house, villa, duplex, studio, penthouse (case-insensitive)
        city: City name as listed (e.g. "Cluj-Napoca")
        surface: Surface in square meters
        rooms: Number of rooms
        year_built: Optional construction year; enables the age multiplier
        current_year: Year used for the age computation (defaults to this year)

    Returns:
        PriceEstimate with price, ±15% range and the factors that drove it
    """
    if current_year is None:
        current_year = datetime.now().year

    multipliers = {
        "city": city_multiplier(city),
        "type": type_multiplier(property_type),
        "rooms": room_multiplier(rooms),
    }

    base_price = surface * BASE_PRICE_PER_SQM
    base_price *= multipliers["city"]
    base_price *= multipliers["type"]
    base_price *= multipliers["rooms"]

    if year_built:
        multipliers["age"] = age_multiplier(year_built, current_year)
        base_price *= multipliers["age"]

    final_price = round_half_up(base_price)
    spread = final_price * PRICE_RANGE_SPREAD
    price_range = {
        "min": round_half_up(final_price - spread),
        "max": round_half_up(final_price + spread),
    }

    location_impact = round_half_up((multipliers["city"] - 1) * 100)
    factors: Dict[str, List[Dict[str, str]]] = {
        "positive": [
            {
                "factor": "Prime Location",
                "impact": f"{location_impact:+d}%",
                "description": f"{city} is a desirable location with good market demand",
            },
            {
                "factor": "Good Size",
                "impact": "+12%",
                "description": f"{_format_number(surface)}m² provides comfortable living space",
            },
        ],
        "negative": [],
    }

    if year_built and (current_year - year_built) > OLD_BUILDING_AGE:
        factors["negative"].append({
            "factor": "Property Age",
            "impact": "-8%",
            "description": f"Built in {year_built}, may require modernization",
        })

    return PriceEstimate(
        predicted_price=final_price,
        price_range=price_range,
        factors=factors,
        multipliers=multipliers,
    )
