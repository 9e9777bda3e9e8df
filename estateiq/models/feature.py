"""
Features and amenities catalogue and its link table to properties.
"""

from sqlalchemy import Table, Column, String, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estateiq.database import Base
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estateiq.models.property import Property


property_feature_link = Table(
    "property_to_feature_link",
    Base.metadata,
    Column("property_id", Uuid, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    Column("feature_id", Integer, ForeignKey("features_and_amenities.id", ondelete="CASCADE"), primary_key=True),
)


class Feature(Base):
    """Named amenity such as "Parking" or "Balcony"."""

    __tablename__ = "features_and_amenities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    feature_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    properties: Mapped[List["Property"]] = relationship(
        "Property",
        secondary=property_feature_link,
        back_populates="features",
        lazy="noload"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "feature_name": self.feature_name,
            "category": self.category,
        }
