"""
Saved listings (favorites) linking users to properties.
"""

from sqlalchemy import Integer, Text, ForeignKey, Uuid, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estateiq.database import Base, utcnow
from datetime import datetime
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estateiq.models.user import User
    from estateiq.models.property import Property


class SavedListing(Base):
    """A property a user saved, with optional private notes. One row per (user, property)."""

    __tablename__ = "user_saved_listings"
    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_user_saved_listings_user_property"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    date_saved: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="saved_listings")

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="saved_listings",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<SavedListing(user_id={self.user_id}, property_id={self.property_id})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": str(self.user_id),
            "property_id": str(self.property_id),
            "date_saved": self.date_saved.isoformat() if self.date_saved else None,
            "notes": self.notes,
        }
