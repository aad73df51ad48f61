"""
Test configuration and fixtures for the Room Rental API.
Every test gets its own in-memory SQLite database, application and storage directory.
"""

import io
import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image as PILImage
from sqlalchemy.ext.asyncio import AsyncSession

from room_rental.config import Settings
from room_rental.database import create_tables
from room_rental.main import create_app
from room_rental.services.auth import AuthService
from room_rental.services.identity import AuthUser, LocalIdentityProvider
from room_rental.store.base import RoomStore
from room_rental.store.sql import SQLRoomStore
from room_rental.utils.security import create_access_token
from tests.fakes import InMemoryRoomStore


TEST_JWT_SECRET = "test-secret-key-for-room-rental-suite-0123456789"
DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for an isolated in-memory database and a temporary bucket."""
    return Settings(
        _env_file=None,
        environment="testing",
        testing=True,
        log_level="WARNING",
        database_url="sqlite+aiosqlite:///:memory:",
        auto_create_tables=False,
        jwt_secret_key=TEST_JWT_SECRET,
        password_hash_rounds=4,
        require_email_confirmation=False,
        storage_dir=str(tmp_path / "storage"),
    )


@pytest.fixture
async def app(settings: Settings):
    """Application with its schema created."""
    application = create_app(settings)
    await create_tables(application.state.context.engine)
    yield application
    await application.state.context.dispose()


@pytest.fixture
async def db_session(app) -> AsyncGenerator[AsyncSession, None]:
    """Session on the same database the application uses."""
    async with app.state.context.session_factory() as session:
        yield session


@pytest.fixture
def store(db_session: AsyncSession) -> SQLRoomStore:
    return SQLRoomStore(db_session)


@pytest.fixture
def fake_store() -> InMemoryRoomStore:
    return InMemoryRoomStore()


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async client talking to the application in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# Test data factories
class UserFactory:
    """Factory for identities with their profiles."""
    
    @staticmethod
    async def create_user(
        db_session: AsyncSession,
        settings: Settings,
        user_type: str = "owner",
        email: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User"
    ) -> AuthUser:
        """Sign a user up through the auth service."""
        auth_service = AuthService(LocalIdentityProvider(db_session, settings), SQLRoomStore(db_session))
        return await auth_service.sign_up(
            email=email or f"test{uuid.uuid4().hex[:8]}@example.com",
            password=password,
            first_name=first_name,
            last_name=last_name,
            user_type=user_type,
        )
    
    @staticmethod
    def auth_headers(settings: Settings, user: AuthUser) -> Dict[str, str]:
        token = create_access_token(settings, user.id, user.email)
        return {"Authorization": f"Bearer {token}"}


class ProfileFactory:
    """Factory for bare profile rows (no identity)."""
    
    @staticmethod
    async def create_profile(
        store: RoomStore,
        user_type: str = "owner",
        first_name: str = "Olive",
        last_name: str = "Owner",
        email: Optional[str] = None,
        phone_number: Optional[str] = "+91 90000 00000"
    ) -> dict:
        return await store.create_profile({
            "id": uuid.uuid4(),
            "email": email or f"profile{uuid.uuid4().hex[:8]}@example.com",
            "first_name": first_name,
            "last_name": last_name,
            "user_type": user_type,
            "phone_number": phone_number,
        })


class RoomFactory:
    """Factory for creating test rooms."""
    
    @staticmethod
    def create_room_data(**overrides) -> dict:
        data = {
            "title": "Test Room",
            "description": "A bright test room",
            "location": "Koramangala, Bengaluru",
            "rent_price": 12000,
            "property_type": "1 BHK",
            "tenant_preference": "Working",
            "owner_contact_number": "+91 98765 43210",
            "amenities": ["WiFi", "AC"],
            "area_sqft": 450,
            "floor_number": 2,
            "is_available": True,
        }
        data.update(overrides)
        return data
    
    @staticmethod
    async def create_room(store: RoomStore, owner_id, **overrides) -> dict:
        data = RoomFactory.create_room_data(**overrides)
        data["owner_id"] = uuid.UUID(str(owner_id))
        return await store.create_room(data)
    
    @staticmethod
    def timestamps(count: int):
        """Distinct created_at values, oldest first."""
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        return [start + timedelta(minutes=index) for index in range(count)]


def make_image_bytes(image_format: str = "PNG", size=(120, 80)) -> bytes:
    """Encode a small solid-colour image."""
    buffer = io.BytesIO()
    PILImage.new("RGB", size, color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


# Common test fixtures
@pytest.fixture
async def owner(db_session: AsyncSession, settings: Settings) -> AuthUser:
    return await UserFactory.create_user(db_session, settings, user_type="owner", first_name="Olive", last_name="Owner")


@pytest.fixture
async def other_owner(db_session: AsyncSession, settings: Settings) -> AuthUser:
    return await UserFactory.create_user(db_session, settings, user_type="owner", first_name="Oscar", last_name="Other")


@pytest.fixture
async def finder(db_session: AsyncSession, settings: Settings) -> AuthUser:
    return await UserFactory.create_user(db_session, settings, user_type="finder", first_name="Fiona", last_name="Finder")


@pytest.fixture
def owner_headers(settings: Settings, owner: AuthUser) -> Dict[str, str]:
    return UserFactory.auth_headers(settings, owner)


@pytest.fixture
def other_owner_headers(settings: Settings, other_owner: AuthUser) -> Dict[str, str]:
    return UserFactory.auth_headers(settings, other_owner)


@pytest.fixture
def finder_headers(settings: Settings, finder: AuthUser) -> Dict[str, str]:
    return UserFactory.auth_headers(settings, finder)


@pytest.fixture
async def test_room(store: SQLRoomStore, owner: AuthUser) -> dict:
    return await RoomFactory.create_room(store, owner.id, title="Sunny 1 BHK")
