"""
Test configuration and fixtures for the EstateIQ API.
Provides an in-memory database per test, data factories and authenticated clients.
"""

import os

# Must be set before estateiq.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "estateiq-test-secret-key-0123456789abcdef")

import pytest
import uuid
from typing import AsyncGenerator, Dict, List, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from estateiq.main import app
from estateiq.database import Base, get_db
from estateiq.models.user import User, UserType
from estateiq.models.property import Property
from estateiq.repositories.user import UserRepository
from estateiq.repositories.property import PropertyRepository
from estateiq.repositories.prediction import PredictionRepository
from estateiq.repositories.favorite import FavoriteRepository
from estateiq.services.auth import AuthService
from estateiq.services.property import PropertyService
from estateiq.services.prediction import PredictionService
from estateiq.services.user import UserService
from estateiq.utils.auth import create_access_token


@pytest.fixture
async def test_engine():
    """Fresh in-memory SQLite database for every test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used by fixtures and by repository/service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client bound to the app. Every request gets its own session on the
    test database, like it would from ``get_db`` in production.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def prediction_repository(db_session: AsyncSession) -> PredictionRepository:
    return PredictionRepository(db_session)


@pytest.fixture
def favorite_repository(db_session: AsyncSession) -> FavoriteRepository:
    return FavoriteRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def prediction_service(db_session: AsyncSession) -> PredictionService:
    return PredictionService(db_session)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        password: str = "testpassword123",
        first_name: str = "Ana",
        last_name: str = "Popescu",
        phone_number: str = None,
        user_type: UserType = UserType.USER
    ) -> dict:
        return {
            "email": email or f"user{uuid.uuid4().hex[:8]}@estateiq.ro",
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "phone_number": phone_number or f"+407{uuid.uuid4().int % 10**8:08d}",
            "user_type": user_type,
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **kwargs) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**kwargs))


class PropertyFactory:
    """Factory for creating test listings."""

    @staticmethod
    def create_property_data(
        title: str = "Apartament 3 camere Floreasca",
        description: Optional[str] = "Bright apartment close to the park",
        property_category: str = "apartment",
        price: Decimal = Decimal("185000.00"),
        total_surface_area: float = 80.0,
        number_of_rooms: int = 3,
        bathrooms: Optional[int] = 2,
        construction_year: Optional[int] = 2015,
        address_text: str = "Strada Barbu Văcărescu 120",
        city: str = "București",
        county: Optional[str] = "Ilfov",
        latitude: Optional[float] = 44.4701,
        longitude: Optional[float] = 26.1037,
        owner_id: Optional[uuid.UUID] = None,
        is_active: bool = True
    ) -> dict:
        return {
            "title": title,
            "description": description,
            "property_category": property_category,
            "price": price,
            "total_surface_area": total_surface_area,
            "number_of_rooms": number_of_rooms,
            "bathrooms": bathrooms,
            "construction_year": construction_year,
            "address_text": address_text,
            "city": city,
            "county": county,
            "latitude": latitude,
            "longitude": longitude,
            "owner_id": owner_id,
            "is_active": is_active,
        }

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        image_urls: Optional[List[str]] = None,
        feature_names: Optional[List[str]] = None,
        **kwargs
    ) -> Property:
        """Create a test listing in the database."""
        return await property_repo.create_property(
            PropertyFactory.create_property_data(**kwargs),
            image_urls=image_urls,
            feature_names=feature_names
        )


# Common test fixtures
@pytest.fixture
async def test_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="ana.popescu@estateiq.ro",
        phone_number="+40712345678"
    )


@pytest.fixture
async def other_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="mihai.ionescu@estateiq.ro",
        first_name="Mihai",
        last_name="Ionescu",
        phone_number="+40722222222"
    )


@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="admin@estateiq.ro",
        first_name="Admin",
        last_name="EstateIQ",
        phone_number="+40733333333",
        user_type=UserType.ADMIN
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_user: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        owner_id=test_user.id,
        image_urls=[
            "https://images.estateiq.ro/floreasca/1.jpg",
            "https://images.estateiq.ro/floreasca/2.jpg",
            "https://images.estateiq.ro/floreasca/3.jpg",
            "https://images.estateiq.ro/floreasca/4.jpg",
        ],
        feature_names=["Balcony", "Parking"]
    )


@pytest.fixture
async def test_inactive_property(property_repository: PropertyRepository, test_user: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        owner_id=test_user.id,
        title="Casa retrasa de la vanzare",
        property_category="house",
        is_active=False
    )


def auth_headers_for(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def user_headers(test_user: User) -> Dict[str, str]:
    return auth_headers_for(test_user)


@pytest.fixture
def other_user_headers(other_user: User) -> Dict[str, str]:
    return auth_headers_for(other_user)


@pytest.fixture
def admin_headers(test_admin: User) -> Dict[str, str]:
    return auth_headers_for(test_admin)
