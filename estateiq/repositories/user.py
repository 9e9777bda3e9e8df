"""
User repository for authentication and profile management operations.
Provides secure user operations with password handling and uniqueness checks.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from estateiq.repositories.base import BaseRepository
from estateiq.models.user import User, UserType
from typing import Optional, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication support.
    Emails are stored lower-cased; phone numbers are unique per account when set.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: email, password, first_name, last_name
                      Optional: phone_number, user_type (defaults to USER)

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
            Exception: If database operation fails
        """
        try:
            data = dict(user_data)
            email = User.validate_email_format(data.pop("email"))

            existing_user = await self.get_by_email(email)
            if existing_user:
                raise ValueError(f"User with email {email} already exists")

            password = data.pop("password")

            create_data = {
                **data,
                "email": email,
                "hashed_password": User.hash_password(password),
                "user_type": data.get("user_type") or UserType.USER,
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.error(f"User validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address (case-insensitive).

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()

            result = await self.db.execute(select(User).where(User.email == normalized_email))
            user = result.scalar_one_or_none()

            if user:
                logger.debug(f"Retrieved user by email: {email}")
            else:
                logger.debug(f"User with email {email} not found")

            return user
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def get_by_phone_number(
        self,
        phone_number: str,
        exclude_user_id: Optional[uuid.UUID] = None
    ) -> Optional[User]:
        """
        Get a user owning the given phone number.

        Args:
            phone_number: Phone number to look for
            exclude_user_id: Optional user ID to ignore (for profile updates)
        """
        try:
            query = select(User).where(User.phone_number == phone_number.strip())
            if exclude_user_id:
                query = query.where(User.id != exclude_user_id)

            result = await self.db.execute(query.limit(1))
            return result.scalars().first()
        except Exception as e:
            logger.error(f"Failed to get user by phone number: {e}")
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User instance if authentication successful, None otherwise
        """
        try:
            user = await self.get_by_email(email)

            if not user:
                logger.debug(f"Authentication failed: user {email} not found")
                return None

            if not user.verify_password(password):
                logger.debug(f"Authentication failed: invalid password for {email}")
                return None

            logger.debug(f"User authenticated successfully: {email}")
            return user
        except Exception as e:
            logger.error(f"Authentication error for {email}: {e}")
            raise

    async def update_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        """
        Update user's password with proper hashing.

        Returns:
            Updated user instance or None if not found

        Raises:
            ValueError: If password validation fails
        """
        try:
            hashed_password = User.hash_password(new_password)
            updated_user = await self.update(user_id, {"hashed_password": hashed_password})

            if updated_user:
                logger.info(f"Password updated for user: {updated_user.email}")

            return updated_user
        except ValueError as e:
            logger.error(f"Password validation failed for user {user_id}: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to update password for user {user_id}: {e}")
            raise

    async def update_profile(self, user_id: uuid.UUID, profile_data: Dict[str, Any]) -> Optional[User]:
        """
        Update profile fields (names, phone number, picture).
        Other keys are ignored.
        """
        allowed_fields = {"first_name", "last_name", "phone_number", "profile_picture_url"}
        update_data = {k: v for k, v in profile_data.items() if k in allowed_fields}

        updated_user = await self.update(user_id, update_data)
        if updated_user:
            logger.info(f"Profile updated for user: {updated_user.email}")
        return updated_user
