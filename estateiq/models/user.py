"""
User model with authentication and account type management.
Handles buyer/seller accounts and administrators.
"""

from sqlalchemy import String, Boolean, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estateiq.database import Base
from estateiq.config import settings
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estateiq.models.property import Property
    from estateiq.models.saved_listing import SavedListing

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)

DEFAULT_PROFILE_PICTURE_URL = "https://ui-avatars.com/api/?name=User&background=random"


class UserType(str, enum.Enum):
    """Account type enumeration for access control."""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    User model for authentication and authorization.
    Regular users manage their own listings and favorites; admins manage everything.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # User identification and authentication
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # User profile information
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    phone_number: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        index=True,
        comment="Contact phone number - unique per account when set"
    )

    user_type: Mapped[UserType] = mapped_column(
        SQLEnum(UserType),
        nullable=False,
        default=UserType.USER,
        index=True
    )

    profile_picture_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        default=DEFAULT_PROFILE_PICTURE_URL
    )

    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False
    )

    # Relationships
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="owner",
        lazy="noload"
    )

    saved_listings: Mapped[List["SavedListing"]] = relationship(
        "SavedListing",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="noload"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, type={self.user_type})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Raises:
            ValueError: If the password is shorter than 8 characters
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        self.hashed_password = self.hash_password(password)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        """Check if user has admin account type."""
        return self.user_type == UserType.ADMIN

    def can_manage_property(self, property_owner_id: Optional[uuid.UUID]) -> bool:
        """
        Check if user can modify or delete a specific listing.

        Args:
            property_owner_id: UUID of the listing's owner (None for unowned listings)

        Returns:
            True if user is an admin or owns the listing
        """
        if self.is_admin:
            return True

        return property_owner_id is not None and self.id == property_owner_id

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone_number": self.phone_number,
            "user_type": self.user_type.value,
            "profile_picture_url": self.profile_picture_url,
            "is_verified": self.is_verified,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
