"""
Pydantic schemas for price predictions, prediction factors and market trends.
"""

from pydantic import Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from estateiq.schemas.common import CamelModel


class PredictionLocation(CamelModel):
    city: Optional[str] = Field(None, examples=["Cluj-Napoca"])
    county: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class NearbyAmenities(CamelModel):
    has_school: Optional[bool] = None
    has_park: Optional[bool] = None
    has_transport: Optional[bool] = None
    has_supermarket: Optional[bool] = None


class PricePredictionRequest(CamelModel):
    """
    Inputs for the pricing formula.
    Required fields are checked by the service so that a single message lists them.
    """

    property_type: Optional[str] = Field(None, examples=["apartment"])
    location: Optional[PredictionLocation] = None
    surface: Optional[float] = Field(None, ge=0, examples=[75])
    rooms: Optional[int] = Field(None, ge=0, examples=[3])
    bathrooms: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    condition: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    nearby_amenities: Optional[NearbyAmenities] = None


class PriceRange(CamelModel):
    min: int
    max: int


class PredictionFactor(CamelModel):
    factor: str
    impact: str
    description: str


class PredictionFactors(CamelModel):
    positive: List[PredictionFactor] = Field(default_factory=list)
    negative: List[PredictionFactor] = Field(default_factory=list)


class PricePredictionResult(CamelModel):
    predicted_price: int
    confidence: float
    price_range: PriceRange
    factors: PredictionFactors
    methodology: str
    comparable_properties: Optional[int] = None


class PricePredictionResponse(CamelModel):
    success: bool = True
    data: PricePredictionResult


class StoredPrediction(CamelModel):
    """A row from ml_price_predictions."""

    id: int
    property_id: str
    model_version: str
    predicted_price: float
    prediction_date: datetime
    confidence_score: Optional[float] = None
    feature_importance: Optional[Dict[str, Any]] = None


class PropertyPredictionResult(CamelModel):
    prediction: StoredPrediction
    estimate: PricePredictionResult


class PropertyPredictionResponse(CamelModel):
    success: bool = True
    data: PropertyPredictionResult
    message: Optional[str] = None


class PredictionHistoryResponse(CamelModel):
    success: bool = True
    data: List[StoredPrediction]


class FactorInfo(CamelModel):
    name: str
    description: str
    weight: str
    category: str


class FactorCatalogue(CamelModel):
    property_specific: List[FactorInfo]
    location_based: List[FactorInfo]
    market_factors: List[FactorInfo]


class FactorCatalogueResponse(CamelModel):
    success: bool = True
    data: FactorCatalogue


class PriceIndex(CamelModel):
    current: float
    change: str
    change_direction: str


class MarketMetrics(CamelModel):
    days_on_market: int
    price_reduction: str
    demand_index: int
    supply_index: int


class MarketOutlook(CamelModel):
    next_quarter: str
    next_year: str
    confidence: float


class MarketFactor(CamelModel):
    name: str
    impact: str
    description: str


class MarketTrends(CamelModel):
    city: str
    timeframe: str
    price_index: PriceIndex
    # Keyed by property category, so the keys are not camel-cased
    average_prices: Dict[str, float]
    listings_analyzed: int = 0
    market_metrics: MarketMetrics
    predictions: MarketOutlook
    factors: List[MarketFactor]


class MarketTrendsResponse(CamelModel):
    success: bool = True
    data: MarketTrends
