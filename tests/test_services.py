"""
Tests for service layer classes.
Tests business rules, permissions and error mapping.
"""

import pytest
import uuid
from decimal import Decimal
from datetime import timedelta

from estateiq.models.user import User
from estateiq.schemas.auth import RegisterRequest
from estateiq.schemas.user import ProfileUpdateRequest, ChangePasswordRequest
from estateiq.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    AreaSearchRequest,
    AreaSearchFilters,
    Coordinate,
)
from estateiq.schemas.prediction import PricePredictionRequest, PredictionLocation
from estateiq.services.auth import AuthService
from estateiq.services.property import PropertyService
from estateiq.services.prediction import PredictionService, DEFAULT_AVERAGE_PRICES
from estateiq.services.user import UserService
from estateiq.utils.auth import create_access_token
from estateiq.utils.exceptions import (
    DuplicateResourceError,
    FavoriteNotFoundError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidTokenError,
    PropertyNotFoundError,
    TokenExpiredError,
    ValidationError,
)
from tests.conftest import PropertyFactory


def register_request(**overrides) -> RegisterRequest:
    data = {
        "email": "maria.dinu@estateiq.ro",
        "password": "parolasigura1",
        "first_name": "Maria",
        "last_name": "Dinu",
        "phone_number": "+40744444444",
    }
    data.update(overrides)
    return RegisterRequest(**data)


class TestAuthService:
    """Test registration, login and token resolution."""

    async def test_register_returns_user_and_token(self, auth_service: AuthService):
        user, token = await auth_service.register(register_request())

        assert user.email == "maria.dinu@estateiq.ro"
        assert user.verify_password("parolasigura1")
        assert auth_service.decode_token(token).user_id == str(user.id)

    async def test_register_rejects_short_password(self, auth_service: AuthService):
        with pytest.raises(ValidationError, match="at least 8 characters"):
            await auth_service.register(register_request(password="scurt"))

    async def test_register_rejects_duplicate_email(self, auth_service: AuthService, test_user: User):
        with pytest.raises(DuplicateResourceError, match="Email already in use"):
            await auth_service.register(register_request(email="ana.popescu@estateiq.ro"))

    async def test_register_rejects_duplicate_phone(self, auth_service: AuthService, test_user: User):
        with pytest.raises(DuplicateResourceError, match="Phone number already in use"):
            await auth_service.register(register_request(phone_number="+40712345678"))

    async def test_login(self, auth_service: AuthService, test_user: User):
        user, token = await auth_service.login("ana.popescu@estateiq.ro", "testpassword123")

        assert user.id == test_user.id
        assert token

    @pytest.mark.parametrize("email,password", [
        ("ana.popescu@estateiq.ro", "wrongpassword"),
        ("nobody@estateiq.ro", "testpassword123"),
    ])
    async def test_login_invalid_credentials(self, auth_service: AuthService, test_user: User, email, password):
        with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
            await auth_service.login(email, password)

    async def test_get_current_user(self, auth_service: AuthService, test_user: User):
        user = await auth_service.get_current_user(create_access_token(test_user))

        assert user.id == test_user.id

    async def test_get_current_user_for_deleted_account(
        self,
        auth_service: AuthService,
        user_repository,
        test_user: User
    ):
        token = create_access_token(test_user)
        await user_repository.delete(test_user.id)

        with pytest.raises(InvalidTokenError, match="User not found"):
            await auth_service.get_current_user(token)

    async def test_expired_token(self, auth_service: AuthService, test_user: User):
        token = create_access_token(test_user, expires_delta=timedelta(seconds=-10))

        with pytest.raises(TokenExpiredError):
            auth_service.decode_token(token)

    async def test_update_profile_reissues_token(self, auth_service: AuthService, test_user: User):
        user, token = await auth_service.update_profile(test_user, ProfileUpdateRequest(first_name="Ioana"))

        assert user.first_name == "Ioana"
        assert user.last_name == "Popescu"
        assert auth_service.decode_token(token).first_name == "Ioana"

    async def test_update_profile_phone_in_use(self, auth_service: AuthService, test_user: User, other_user: User):
        with pytest.raises(DuplicateResourceError, match="Phone number already in use"):
            await auth_service.update_profile(test_user, ProfileUpdateRequest(phone_number="+40722222222"))


class TestPropertyService:
    """Test listing operations and ownership rules."""

    def _create_request(self, **overrides) -> PropertyCreate:
        data = {
            "title": "Vila cu gradina in Pipera",
            "description": "Villa with a large garden",
            "property_type": "Villa",
            "price": Decimal("420000"),
            "surface": 240,
            "bedrooms": 6,
            "bathrooms": 3,
            "year_built": 2018,
            "address": "Strada Pipera 10",
            "city": "București",
            "latitude": 44.51,
            "longitude": 26.12,
            "images": ["https://images.estateiq.ro/pipera/1.jpg"],
            "features": ["Garden"],
        }
        data.update(overrides)
        return PropertyCreate(**data)

    async def test_create_property_sets_owner(self, property_service: PropertyService, test_user: User):
        property_obj = await property_service.create_property(self._create_request(), test_user)

        assert property_obj.owner_id == test_user.id
        assert property_obj.property_category == "villa"
        assert [f.feature_name for f in property_obj.features] == ["Garden"]

    async def test_list_properties_caps_limit(self, property_service: PropertyService, test_property):
        _, pagination = await property_service.list_properties(page=1, limit=500)

        assert pagination["limit"] == 50
        assert pagination["total"] == 1
        assert pagination["has_more"] is False

    async def test_list_properties_has_more(self, property_service: PropertyService, property_repository, test_user: User):
        for _ in range(3):
            await PropertyFactory.create_property(property_repository, owner_id=test_user.id)

        first_page, pagination = await property_service.list_properties(page=1, limit=2)
        last_page, last_pagination = await property_service.list_properties(page=2, limit=2)

        assert len(first_page) == 2
        assert pagination["has_more"] is True
        assert len(last_page) == 1
        assert last_pagination["has_more"] is False

    async def test_get_property_not_found(self, property_service: PropertyService):
        with pytest.raises(PropertyNotFoundError, match="Property not found"):
            await property_service.get_property(uuid.uuid4())

    async def test_inactive_property_visible_to_owner_only(
        self,
        property_service: PropertyService,
        test_inactive_property,
        test_user: User,
        other_user: User
    ):
        assert (await property_service.get_property(test_inactive_property.id, test_user)).id == test_inactive_property.id

        with pytest.raises(PropertyNotFoundError):
            await property_service.get_property(test_inactive_property.id, other_user)

        with pytest.raises(PropertyNotFoundError):
            await property_service.get_property(test_inactive_property.id)

    async def test_search_by_area_requires_three_points(self, property_service: PropertyService):
        request = AreaSearchRequest(coordinates=[Coordinate(lat=44.4, lng=26.0), Coordinate(lat=44.5, lng=26.2)])

        with pytest.raises(ValidationError, match="at least 3 coordinate pairs"):
            await property_service.search_by_area(request)

    async def test_search_by_area_applies_filters(
        self,
        property_service: PropertyService,
        property_repository,
        test_user: User
    ):
        cheap = await PropertyFactory.create_property(
            property_repository, owner_id=test_user.id, price=Decimal("90000"), latitude=44.45, longitude=26.1
        )
        await PropertyFactory.create_property(
            property_repository, owner_id=test_user.id, price=Decimal("400000"), latitude=44.46, longitude=26.1
        )

        request = AreaSearchRequest(
            coordinates=[
                Coordinate(lat=44.40, lng=26.00),
                Coordinate(lat=44.50, lng=26.00),
                Coordinate(lat=44.50, lng=26.20),
            ],
            filters=AreaSearchFilters(property_type="apartment", max_price=Decimal("100000"))
        )
        properties, bounds = await property_service.search_by_area(request)

        assert [p.id for p in properties] == [cheap.id]
        assert bounds.to_dict() == {"north": 44.50, "south": 44.40, "east": 26.20, "west": 26.00}

    async def test_update_property_by_owner(self, property_service: PropertyService, test_property, test_user: User):
        updated = await property_service.update_property(
            test_property.id,
            PropertyUpdate(price=Decimal("179000"), title="Apartament renovat Floreasca"),
            test_user
        )

        assert updated.price == Decimal("179000")
        assert updated.title == "Apartament renovat Floreasca"

    async def test_update_property_forbidden_for_other_user(
        self,
        property_service: PropertyService,
        test_property,
        other_user: User
    ):
        with pytest.raises(InsufficientPermissionsError):
            await property_service.update_property(test_property.id, PropertyUpdate(price=Decimal("1")), other_user)

    async def test_update_property_requires_a_field(self, property_service: PropertyService, test_property, test_user: User):
        with pytest.raises(ValidationError, match="No valid fields"):
            await property_service.update_property(test_property.id, PropertyUpdate(), test_user)

    async def test_admin_can_delete_any_property(self, property_service: PropertyService, test_property, test_admin: User):
        assert await property_service.delete_property(test_property.id, test_admin) is True

        with pytest.raises(PropertyNotFoundError):
            await property_service.get_property(test_property.id)

    async def test_delete_property_forbidden_for_other_user(
        self,
        property_service: PropertyService,
        test_property,
        other_user: User
    ):
        with pytest.raises(InsufficientPermissionsError):
            await property_service.delete_property(test_property.id, other_user)

    async def test_to_summary_limits_images(self, test_property):
        summary = PropertyService.to_summary(test_property, image_limit=3)

        assert summary["images"] == [
            "https://images.estateiq.ro/floreasca/1.jpg",
            "https://images.estateiq.ro/floreasca/2.jpg",
            "https://images.estateiq.ro/floreasca/3.jpg",
        ]
        assert summary["new_listing"] is True
        assert summary["type"] == "apartment"
        assert "features" not in summary

    async def test_to_summary_omits_unrequested_sections(self, test_property):
        summary = PropertyService.to_summary(test_property, include_images=False, include_predictions=False)

        assert "images" not in summary
        assert "predicted_price" not in summary

    async def test_to_detail_defaults_description(self, property_repository, test_user: User):
        property_obj = await PropertyFactory.create_property(
            property_repository, owner_id=test_user.id, description=None
        )

        detail = PropertyService.to_detail(property_obj)

        assert detail["description"] == "No description available"
        assert detail["features"] == []
        assert detail["predicted_price"] is None


class TestPredictionService:
    """Test estimates, persistence and market trends."""

    async def test_predict_price_counts_comparables(self, prediction_service: PredictionService, test_property):
        estimate = await prediction_service.predict_price(PricePredictionRequest(
            property_type="apartment",
            location=PredictionLocation(city="București"),
            surface=80,
            rooms=3
        ))

        assert estimate.predicted_price == 165600
        assert estimate.comparable_properties == 1

    @pytest.mark.parametrize("payload", [
        {"location": {"city": "București"}, "surface": 80, "rooms": 3},
        {"property_type": "apartment", "surface": 80, "rooms": 3},
        {"property_type": "apartment", "location": {"city": "București"}, "rooms": 3},
        {"property_type": "apartment", "location": {"city": "București"}, "surface": 80},
        {"property_type": "apartment", "location": {"city": "București"}, "surface": 80, "rooms": 0},
    ])
    async def test_predict_price_missing_fields(self, prediction_service: PredictionService, payload):
        with pytest.raises(ValidationError, match="Missing required fields"):
            await prediction_service.predict_price(PricePredictionRequest(**payload))

    async def test_predict_for_property_persists(self, prediction_service: PredictionService, test_property):
        prediction, estimate = await prediction_service.predict_for_property(test_property.id)

        assert prediction.property_id == test_property.id
        assert prediction.predicted_price == Decimal(estimate.predicted_price)
        assert prediction.model_version == "mock-formula-v1"
        assert prediction.feature_importance["city"] == 1.8
        assert estimate.comparable_properties == 0

        history = await prediction_service.get_prediction_history(test_property.id)
        assert [p.id for p in history] == [prediction.id]

    async def test_predict_for_unknown_property(self, prediction_service: PredictionService):
        with pytest.raises(PropertyNotFoundError):
            await prediction_service.predict_for_property(uuid.uuid4())

    async def test_factors_catalogue(self):
        factors = PredictionService.get_factors()

        assert [f["name"] for f in factors["property_specific"]] == [
            "Surface Area", "Number of Rooms", "Year Built", "Property Condition"
        ]
        assert len(factors["location_based"]) == 4
        assert len(factors["market_factors"]) == 3

    async def test_market_trends_defaults(self, prediction_service: PredictionService):
        trends = await prediction_service.get_market_trends()

        assert trends["city"] == "București"
        assert trends["timeframe"] == "12months"
        assert trends["average_prices"] == DEFAULT_AVERAGE_PRICES
        assert trends["listings_analyzed"] == 0

    async def test_market_trends_use_listing_averages(
        self,
        prediction_service: PredictionService,
        property_repository,
        test_user: User
    ):
        await PropertyFactory.create_property(
            property_repository, owner_id=test_user.id, city="Timișoara", price=Decimal("100000")
        )
        await PropertyFactory.create_property(
            property_repository, owner_id=test_user.id, city="Timișoara", price=Decimal("120000")
        )

        trends = await prediction_service.get_market_trends(city="Timișoara", timeframe="6months")

        assert trends["average_prices"]["apartment"] == 110000.0
        assert trends["average_prices"]["villa"] == DEFAULT_AVERAGE_PRICES["villa"]
        assert trends["listings_analyzed"] == 2
        assert trends["timeframe"] == "6months"


class TestUserService:
    """Test account self-service."""

    async def test_update_profile_requires_names(self, user_service: UserService, test_user: User):
        with pytest.raises(ValidationError, match="First name and last name are required"):
            await user_service.update_profile(test_user, ProfileUpdateRequest(first_name="Ioana"))

    async def test_update_profile_phone_conflict(self, user_service: UserService, test_user: User, other_user: User):
        with pytest.raises(DuplicateResourceError, match="already in use by another account"):
            await user_service.update_profile(
                test_user,
                ProfileUpdateRequest(first_name="Ana", last_name="Popescu", phone_number="+40722222222")
            )

    async def test_update_profile_keeps_own_phone(self, user_service: UserService, test_user: User):
        user = await user_service.update_profile(
            test_user,
            ProfileUpdateRequest(first_name="Ana", last_name="Pop", phone_number="+40712345678")
        )

        assert user.last_name == "Pop"
        assert user.phone_number == "+40712345678"

    @pytest.mark.parametrize("payload,message", [
        ({"current_password": "testpassword123", "new_password": "newpassword1"}, "All password fields are required"),
        (
            {"current_password": "testpassword123", "new_password": "newpassword1", "confirm_password": "newpassword2"},
            "do not match",
        ),
        ({"current_password": "testpassword123", "new_password": "short", "confirm_password": "short"}, "at least 8"),
        (
            {"current_password": "wrongpassword", "new_password": "newpassword1", "confirm_password": "newpassword1"},
            "Current password is incorrect",
        ),
    ])
    async def test_change_password_rules(self, user_service: UserService, test_user: User, payload, message):
        with pytest.raises(ValidationError, match=message):
            await user_service.change_password(test_user, ChangePasswordRequest(**payload))

    async def test_change_password(self, user_service: UserService, user_repository, test_user: User):
        await user_service.change_password(test_user, ChangePasswordRequest(
            current_password="testpassword123",
            new_password="newpassword1",
            confirm_password="newpassword1"
        ))

        assert await user_repository.authenticate_user(test_user.email, "newpassword1") is not None

    async def test_favorites_lifecycle(self, user_service: UserService, other_user: User, test_property):
        favorite = await user_service.add_favorite(other_user, test_property.id, "Nice view")
        assert favorite.notes == "Nice view"
        assert await user_service.is_favorite(other_user, test_property.id) is True

        items = await user_service.list_favorites(other_user)
        assert items[0]["id"] == str(test_property.id)
        assert items[0]["image"] == "https://images.estateiq.ro/floreasca/1.jpg"
        assert items[0]["notes"] == "Nice view"

        updated = await user_service.update_favorite_notes(other_user, test_property.id, None)
        assert updated.notes is None

        await user_service.remove_favorite(other_user, test_property.id)
        assert await user_service.is_favorite(other_user, test_property.id) is False

    async def test_add_favorite_twice(self, user_service: UserService, other_user: User, test_property):
        await user_service.add_favorite(other_user, test_property.id)

        with pytest.raises(DuplicateResourceError, match="already in your favorites"):
            await user_service.add_favorite(other_user, test_property.id)

    async def test_add_favorite_unknown_property(self, user_service: UserService, other_user: User):
        with pytest.raises(PropertyNotFoundError):
            await user_service.add_favorite(other_user, uuid.uuid4())

    async def test_remove_missing_favorite(self, user_service: UserService, other_user: User, test_property):
        with pytest.raises(FavoriteNotFoundError, match="not found in your favorites"):
            await user_service.remove_favorite(other_user, test_property.id)
