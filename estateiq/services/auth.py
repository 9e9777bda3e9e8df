"""
Authentication service for registration, login and token handling.
Tokens are stateless: logout only tells the client to drop its copy.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from estateiq.repositories.user import UserRepository
from estateiq.models.user import User
from estateiq.schemas.auth import RegisterRequest
from estateiq.schemas.user import ProfileUpdateRequest
from estateiq.utils.auth import create_access_token, verify_token, TokenPayload
from estateiq.utils.exceptions import (
    APIException,
    InternalServerError,
    DuplicateResourceError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserNotFoundError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service handling account creation, credential checks and tokens.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    def create_token(self, user: User) -> str:
        return create_access_token(user)

    async def register(self, data: RegisterRequest) -> Tuple[User, str]:
        """
        Register a new account and issue a token.

        Raises:
            ValidationError: If the password is shorter than 8 characters
            DuplicateResourceError: If the email or phone number is taken
        """
        try:
            if len(data.password) < 8:
                raise ValidationError("Password must be at least 8 characters long")

            if await self.user_repo.get_by_email(data.email):
                logger.warning(f"Registration rejected, email in use: {data.email}")
                raise DuplicateResourceError("Email already in use")

            if await self.user_repo.get_by_phone_number(data.phone_number):
                logger.warning(f"Registration rejected, phone number in use for {data.email}")
                raise DuplicateResourceError("Phone number already in use")

            user = await self.user_repo.create_user({
                "email": data.email,
                "password": data.password,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "phone_number": data.phone_number,
            })

            logger.info(f"User registered: {user.email}")
            return user, self.create_token(user)

        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Registration failed for {data.email}: {e}")
            raise InternalServerError()

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            ValidationError: If email or password is empty
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        if not password:
            raise ValidationError("Password is required")

        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        user = await self.authenticate_user(email, password)
        return user, self.create_token(user)

    def decode_token(self, token: str) -> TokenPayload:
        """
        Verify a token without touching the database.

        Raises:
            InvalidTokenError, TokenExpiredError
        """
        return verify_token(token)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            InvalidTokenError: If the token is invalid or its user no longer exists
            TokenExpiredError: If the token is expired
        """
        payload = self.decode_token(token)

        try:
            user_id = uuid.UUID(payload.user_id)
        except ValueError:
            raise InvalidTokenError("Invalid token payload")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            logger.warning(f"Token refers to unknown user {payload.user_id}")
            raise InvalidTokenError("User not found")

        return user

    async def get_user_by_id(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()
        return user

    async def update_profile(self, user: User, data: ProfileUpdateRequest) -> Tuple[User, str]:
        """
        Update whichever profile fields were given and re-issue the token
        so its embedded profile stays current.

        Raises:
            DuplicateResourceError: If the phone number belongs to another account
        """
        try:
            updates = {}
            if data.first_name:
                updates["first_name"] = data.first_name.strip()
            if data.last_name:
                updates["last_name"] = data.last_name.strip()
            if data.profile_picture_url:
                updates["profile_picture_url"] = data.profile_picture_url
            if data.phone_number:
                phone_number = data.phone_number.strip()
                if await self.user_repo.get_by_phone_number(phone_number, exclude_user_id=user.id):
                    raise DuplicateResourceError("Phone number already in use")
                updates["phone_number"] = phone_number

            updated_user = await self.user_repo.update_profile(user.id, updates)
            if not updated_user:
                raise UserNotFoundError()

            logger.info(f"Profile updated through auth endpoint: {updated_user.email}")
            return updated_user, self.create_token(updated_user)

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update profile for {user.id}: {e}")
            raise InternalServerError()
