"""
PropertyImage model for listing photos.
Images are stored externally; the table keeps the URL, the primary flag and gallery order.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estateiq.database import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from estateiq.models.property import Property


class PropertyImage(Base):
    """Photo attached to a listing."""

    __tablename__ = "property_images"
    __table_args__ = (
        UniqueConstraint("property_id", "image_url", name="uq_property_images_property_url"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    image_url: Mapped[str] = mapped_column(String(1000), nullable=False)

    is_primary: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether this is the cover image for the listing"
    )

    sort_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Display order for image gallery"
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="images"
    )

    def __repr__(self) -> str:
        return f"<PropertyImage(id={self.id}, property_id={self.property_id}, primary={self.is_primary})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": str(self.property_id),
            "image_url": self.image_url,
            "is_primary": self.is_primary,
            "sort_order": self.sort_order,
        }
