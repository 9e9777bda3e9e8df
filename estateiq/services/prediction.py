"""
Prediction service: runs the pricing formula on request payloads or stored
listings, persists listing estimates and serves the factor catalogue and
market trend summaries.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from estateiq.repositories.property import PropertyRepository
from estateiq.repositories.prediction import PredictionRepository
from estateiq.models.prediction import PricePrediction
from estateiq.schemas.prediction import PricePredictionRequest
from estateiq.utils.pricing import estimate_price, PriceEstimate, MODEL_VERSION
from estateiq.utils.exceptions import (
    APIException,
    InternalServerError,
    PropertyNotFoundError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

DEFAULT_TRENDS_CITY = "București"
DEFAULT_TIMEFRAME = "12months"

# Used for categories with no active listings in the requested city
DEFAULT_AVERAGE_PRICES: Dict[str, float] = {
    "apartment": 125000,
    "house": 180000,
    "villa": 320000,
}


def _factor(name: str, description: str, weight: str, category: str) -> Dict[str, str]:
    return {"name": name, "description": description, "weight": weight, "category": category}


PREDICTION_FACTORS: Dict[str, List[Dict[str, str]]] = {
    "property_specific": [
        _factor("Surface Area", "Larger properties typically command higher prices", "High", "Physical"),
        _factor("Number of Rooms", "More rooms generally increase property value", "High", "Physical"),
        _factor(
            "Year Built",
            "Newer properties often have higher values due to modern amenities",
            "Medium",
            "Physical",
        ),
        _factor("Property Condition", "Well-maintained properties command premium prices", "High", "Physical"),
    ],
    "location_based": [
        _factor(
            "Neighborhood Desirability",
            "Prime locations with good reputation increase value",
            "Very High",
            "Location",
        ),
        _factor("Proximity to Schools", "Access to quality education increases family appeal", "Medium", "Amenities"),
        _factor("Transport Links", "Easy access to public transport and highways", "Medium", "Accessibility"),
        _factor("Local Amenities", "Shops, restaurants, and services nearby", "Medium", "Amenities"),
    ],
    "market_factors": [
        _factor("Supply and Demand", "Balance of available properties vs buyer interest", "Very High", "Market"),
        _factor("Interest Rates", "Lower rates increase buying power and demand", "High", "Economic"),
        _factor("Local Economic Growth", "Job market and economic health of the area", "Medium", "Economic"),
    ],
}

MARKET_TREND_FACTORS: List[Dict[str, str]] = [
    {
        "name": "Interest Rates",
        "impact": "positive",
        "description": "Historically low interest rates driving demand",
    },
    {
        "name": "Supply Shortage",
        "impact": "positive",
        "description": "Limited new construction increasing property values",
    },
    {
        "name": "Economic Growth",
        "impact": "positive",
        "description": "Strong local economy supporting price growth",
    },
]


class PredictionService:
    """
    Price estimates for ad-hoc requests and stored listings.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.prediction_repo = PredictionRepository(db_session)

    async def predict_price(self, request: PricePredictionRequest) -> PriceEstimate:
        """
        Estimate a price from the request payload.

        Raises:
            ValidationError: If propertyType, location.city, surface or rooms is missing
        """
        city = request.location.city if request.location else None
        if (
            not request.property_type
            or not city
            or not request.surface
            or not request.rooms
        ):
            raise ValidationError(
                "Missing required fields: propertyType, location.city, surface, and rooms are required"
            )

        try:
            estimate = estimate_price(
                property_type=request.property_type,
                city=city,
                surface=request.surface,
                rooms=request.rooms,
                year_built=request.year_built,
            )
            estimate.comparable_properties = await self.property_repo.count_comparables(
                city,
                request.property_type
            )

            logger.info(
                f"Price predicted for {request.property_type} in {city}: "
                f"{estimate.predicted_price} ({estimate.comparable_properties} comparables)"
            )
            return estimate

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Price prediction failed: {e}", exc_info=True)
            raise InternalServerError()

    async def predict_for_property(self, property_id: uuid.UUID) -> Tuple[PricePrediction, PriceEstimate]:
        """
        Run the formula on a stored listing and persist the result.

        Raises:
            PropertyNotFoundError: If the listing does not exist
            ValidationError: If the listing lacks the data the formula needs
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError()

        if not property_obj.total_surface_area or property_obj.number_of_rooms is None:
            raise ValidationError("Property is missing surface area or room count required for prediction")

        estimate = estimate_price(
            property_type=property_obj.property_category,
            city=property_obj.city,
            surface=property_obj.total_surface_area,
            rooms=property_obj.number_of_rooms,
            year_built=property_obj.construction_year,
        )
        estimate.comparable_properties = await self.property_repo.count_comparables(
            property_obj.city,
            property_obj.property_category,
            exclude_property_id=property_obj.id
        )

        prediction = await self.prediction_repo.create_prediction(
            property_id=property_obj.id,
            predicted_price=estimate.predicted_price,
            confidence_score=estimate.confidence,
            model_version=MODEL_VERSION,
            feature_importance=estimate.multipliers,
        )
        return prediction, estimate

    async def get_prediction_history(self, property_id: uuid.UUID, limit: int = 20) -> List[PricePrediction]:
        if not await self.property_repo.exists(property_id):
            raise PropertyNotFoundError()
        return await self.prediction_repo.list_for_property(property_id, limit=limit)

    @staticmethod
    def get_factors() -> Dict[str, List[Dict[str, str]]]:
        return PREDICTION_FACTORS

    async def get_market_trends(
        self,
        city: Optional[str] = None,
        timeframe: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Market summary for a city.
        Average prices come from active listings where there are any; the
        index, metrics and outlook figures are fixed reference values.
        """
        city = (city or "").strip() or DEFAULT_TRENDS_CITY
        timeframe = timeframe or DEFAULT_TIMEFRAME

        statistics = await self.property_repo.get_price_statistics(city)

        average_prices = dict(DEFAULT_AVERAGE_PRICES)
        for category, stats in statistics.items():
            average_prices[category] = round(stats["average_price"], 2)
        listings_analyzed = sum(stats["count"] for stats in statistics.values())

        logger.debug(f"Market trends for {city} ({timeframe}) from {listings_analyzed} listings")

        return {
            "city": city,
            "timeframe": timeframe,
            "price_index": {
                "current": 156.7,
                "change": "+5.2%",
                "change_direction": "up",
            },
            "average_prices": average_prices,
            "listings_analyzed": listings_analyzed,
            "market_metrics": {
                "days_on_market": 45,
                "price_reduction": "12%",
                "demand_index": 78,
                "supply_index": 65,
            },
            "predictions": {
                "next_quarter": "+3.1%",
                "next_year": "+8.5%",
                "confidence": 0.73,
            },
            "factors": MARKET_TREND_FACTORS,
        }
