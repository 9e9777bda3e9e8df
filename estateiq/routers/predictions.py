"""
Price prediction endpoints: ad-hoc estimates, stored listing estimates,
the factor catalogue and market trends.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional
from uuid import UUID
import logging

from estateiq.services.prediction import PredictionService, DEFAULT_TIMEFRAME
from estateiq.schemas.prediction import (
    PricePredictionRequest,
    PricePredictionResult,
    PricePredictionResponse,
    StoredPrediction,
    PropertyPredictionResult,
    PropertyPredictionResponse,
    PredictionHistoryResponse,
    FactorCatalogue,
    FactorCatalogueResponse,
    MarketTrends,
    MarketTrendsResponse,
)
from estateiq.schemas.error import get_common_error_responses
from estateiq.utils.dependencies import get_prediction_service
from estateiq.utils.exceptions import APIException, InternalServerError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/predict", tags=["Predictions"])


@router.post(
    "/price",
    response_model=PricePredictionResponse,
    status_code=status.HTTP_200_OK,
    summary="Estimate a property price",
    description="Deterministic estimate from surface, city, type, rooms and construction year",
    responses=get_common_error_responses()
)
async def predict_price(
    prediction_request: PricePredictionRequest,
    prediction_service: PredictionService = Depends(get_prediction_service)
) -> PricePredictionResponse:
    """
    Raises:
        ValidationError: If propertyType, location.city, surface or rooms is missing
    """
    estimate = await prediction_service.predict_price(prediction_request)
    return PricePredictionResponse(data=PricePredictionResult.model_validate(estimate.to_dict()))


@router.get(
    "/factors",
    response_model=FactorCatalogueResponse,
    summary="List the factors that influence prices"
)
async def get_prediction_factors() -> FactorCatalogueResponse:
    return FactorCatalogueResponse(data=FactorCatalogue.model_validate(PredictionService.get_factors()))


@router.get(
    "/market-trends",
    response_model=MarketTrendsResponse,
    summary="Market trends for a city",
    responses=get_common_error_responses()
)
async def get_market_trends(
    city: Optional[str] = Query(None, description="City name, defaults to București"),
    timeframe: str = Query(DEFAULT_TIMEFRAME),
    prediction_service: PredictionService = Depends(get_prediction_service)
) -> MarketTrendsResponse:
    try:
        trends = await prediction_service.get_market_trends(city=city, timeframe=timeframe)
        return MarketTrendsResponse(data=MarketTrends.model_validate(trends))

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Error fetching market trends: {e}", exc_info=True)
        raise InternalServerError()


@router.post(
    "/properties/{property_id}",
    response_model=PropertyPredictionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Estimate and store a price for a listing",
    responses=get_common_error_responses()
)
async def predict_property_price(
    property_id: UUID = Path(..., description="Property ID"),
    prediction_service: PredictionService = Depends(get_prediction_service)
) -> PropertyPredictionResponse:
    """
    Raises:
        PropertyNotFoundError: If the listing does not exist
    """
    prediction, estimate = await prediction_service.predict_for_property(property_id)
    return PropertyPredictionResponse(
        data=PropertyPredictionResult(
            prediction=StoredPrediction.model_validate(prediction.to_dict()),
            estimate=PricePredictionResult.model_validate(estimate.to_dict())
        ),
        message="Prediction stored successfully"
    )


@router.get(
    "/properties/{property_id}/history",
    response_model=PredictionHistoryResponse,
    summary="Stored predictions for a listing",
    responses=get_common_error_responses()
)
async def get_prediction_history(
    property_id: UUID = Path(..., description="Property ID"),
    limit: int = Query(20, ge=1, le=100),
    prediction_service: PredictionService = Depends(get_prediction_service)
) -> PredictionHistoryResponse:
    predictions = await prediction_service.get_prediction_history(property_id, limit=limit)
    return PredictionHistoryResponse(
        data=[StoredPrediction.model_validate(prediction.to_dict()) for prediction in predictions]
    )
