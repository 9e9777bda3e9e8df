"""
Stored price predictions for listings.
"""

from sqlalchemy import String, Integer, Numeric, Float, ForeignKey, Uuid, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estateiq.database import Base, utcnow
from decimal import Decimal
from datetime import datetime
import uuid
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estateiq.models.property import Property


class PricePrediction(Base):
    """
    One estimate produced by the pricing formula for a stored listing.
    ``feature_importance`` keeps the multipliers that went into the estimate.
    """

    __tablename__ = "ml_price_predictions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    model_version: Mapped[str] = mapped_column(String(50), nullable=False)

    predicted_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False
    )

    prediction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True
    )

    confidence_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    feature_importance: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="predictions"
    )

    def __repr__(self) -> str:
        return f"<PricePrediction(id={self.id}, property_id={self.property_id}, price={self.predicted_price})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": str(self.property_id),
            "model_version": self.model_version,
            "predicted_price": float(self.predicted_price),
            "prediction_date": self.prediction_date.isoformat() if self.prediction_date else None,
            "confidence_score": self.confidence_score,
            "feature_importance": self.feature_importance,
        }
