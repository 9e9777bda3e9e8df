"""
Authentication utilities for JWT token management.
Tokens carry the public user profile so /auth/me can answer without a database hit.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, ExpiredSignatureError, jwt
from estateiq.config import settings
from estateiq.models.user import User
from estateiq.utils.exceptions import InvalidTokenError, TokenExpiredError


class TokenPayload:
    """JWT token payload structure."""

    def __init__(
        self,
        user_id: str,
        email: str,
        first_name: str,
        last_name: str,
        phone_number: Optional[str],
        user_type: str,
        profile_picture_url: Optional[str],
        is_verified: bool,
        created_at: Optional[str],
        updated_at: Optional[str],
        exp: datetime
    ):
        self.user_id = user_id
        self.email = email
        self.first_name = first_name
        self.last_name = last_name
        self.phone_number = phone_number
        self.user_type = user_type
        self.profile_picture_url = profile_picture_url
        self.is_verified = is_verified
        self.created_at = created_at
        self.updated_at = updated_at
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from a decoded JWT claim set."""
        return cls(
            user_id=data["id"],
            email=data["email"],
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            phone_number=data.get("phoneNumber"),
            user_type=data.get("userType", "user"),
            profile_picture_url=data.get("profilePictureUrl"),
            is_verified=bool(data.get("isVerified", False)),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )

    def to_user_dict(self) -> Dict[str, Any]:
        """User fields in the same shape as ``User.to_dict``."""
        return {
            "id": self.user_id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone_number": self.phone_number,
            "user_type": self.user_type,
            "profile_picture_url": self.profile_picture_url,
            "is_verified": self.is_verified,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token carrying the user's public profile.

    Args:
        user: Authenticated user
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(days=settings.access_token_expire_days)

    to_encode = {
        "sub": str(user.id),
        "id": str(user.id),
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "phoneNumber": user.phone_number,
        "userType": user.user_type.value,
        "profilePictureUrl": user.profile_picture_url,
        "isVerified": user.is_verified,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
        "updatedAt": user.updated_at.isoformat() if user.updated_at else None,
        "exp": expire,
        "iat": now,
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def verify_token(token: str) -> TokenPayload:
    """
    Verify and decode JWT token.

    Raises:
        TokenExpiredError: If the token signature is valid but expired
        InvalidTokenError: If the token is malformed, tampered with or lacks identity claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    if not payload.get("id") or not payload.get("email") or not payload.get("exp"):
        raise InvalidTokenError("Invalid token payload")

    return TokenPayload.from_dict(payload)
