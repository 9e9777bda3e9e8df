"""
Prediction repository for stored listing estimates.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from estateiq.repositories.base import BaseRepository
from estateiq.models.prediction import PricePrediction
from typing import Any, Dict, List, Optional
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class PredictionRepository(BaseRepository[PricePrediction]):
    """Repository for ``ml_price_predictions`` rows."""

    def __init__(self, db: AsyncSession):
        super().__init__(PricePrediction, db)

    async def create_prediction(
        self,
        property_id: uuid.UUID,
        predicted_price: int,
        confidence_score: float,
        model_version: str,
        feature_importance: Optional[Dict[str, Any]] = None
    ) -> PricePrediction:
        prediction = await self.create({
            "property_id": property_id,
            "predicted_price": Decimal(predicted_price),
            "confidence_score": confidence_score,
            "model_version": model_version,
            "feature_importance": feature_importance,
        })
        logger.info(f"Stored prediction {prediction.id} for property {property_id}: {predicted_price}")
        return prediction

    async def list_for_property(self, property_id: uuid.UUID, limit: int = 20) -> List[PricePrediction]:
        """Stored predictions for a listing, newest first."""
        try:
            query = (
                select(PricePrediction)
                .where(PricePrediction.property_id == property_id)
                .order_by(desc(PricePrediction.prediction_date), desc(PricePrediction.id))
                .limit(limit)
            )
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to list predictions for property {property_id}: {e}")
            raise

    async def get_latest_for_property(self, property_id: uuid.UUID) -> Optional[PricePrediction]:
        predictions = await self.list_for_property(property_id, limit=1)
        return predictions[0] if predictions else None
