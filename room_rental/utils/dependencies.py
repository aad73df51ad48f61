"""
FastAPI dependency injection utilities.
Resolves the application context, database sessions, store, services and the caller's identity.
"""

from typing import AsyncGenerator, Optional
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from room_rental.config import Settings
from room_rental.context import AppContext
from room_rental.services.auth import AuthService
from room_rental.services.identity import AuthUser, IdentityProvider, LocalIdentityProvider
from room_rental.services.image import ImageAttachmentManager
from room_rental.services.listing import ListingQueryBuilder
from room_rental.services.profile import ProfileService
from room_rental.services.room import RoomService
from room_rental.services.saved_room import SavedRoomManager
from room_rental.services.session import SessionAccessor
from room_rental.store.base import RoomStore
from room_rental.store.sql import SQLRoomStore
from room_rental.utils.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings_dependency(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings


async def get_db(context: AppContext = Depends(get_context)) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session for one request.
    Rolls back on error and always closes the session.
    """
    async with context.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_store(
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context)
) -> RoomStore:
    return SQLRoomStore(db, relational_joins=context.settings.store_relational_joins)


def get_identity_provider(
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context)
) -> IdentityProvider:
    return LocalIdentityProvider(db, context.settings)


def get_session_accessor(provider: IdentityProvider = Depends(get_identity_provider)) -> SessionAccessor:
    return SessionAccessor(provider)


def get_listing_builder(store: RoomStore = Depends(get_store)) -> ListingQueryBuilder:
    return ListingQueryBuilder(store)


def get_room_service(
    store: RoomStore = Depends(get_store),
    context: AppContext = Depends(get_context)
) -> RoomService:
    return RoomService(store, storage=context.storage)


def get_image_manager(
    store: RoomStore = Depends(get_store),
    context: AppContext = Depends(get_context)
) -> ImageAttachmentManager:
    return ImageAttachmentManager(store, storage=context.storage, validator=context.file_validator)


def get_saved_room_manager(store: RoomStore = Depends(get_store)) -> SavedRoomManager:
    return SavedRoomManager(store)


def get_profile_service(store: RoomStore = Depends(get_store)) -> ProfileService:
    return ProfileService(store)


def get_auth_service(
    provider: IdentityProvider = Depends(get_identity_provider),
    store: RoomStore = Depends(get_store)
) -> AuthService:
    return AuthService(provider, store)


async def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    accessor: SessionAccessor = Depends(get_session_accessor),
    context: AppContext = Depends(get_context)
) -> Optional[AuthUser]:
    """
    Identity of the caller if a valid credential is present, otherwise None.
    The Authorization header takes precedence over the session cookie.
    """
    token = credentials.credentials if credentials else request.cookies.get(context.settings.session_cookie_name)
    return await accessor.current_identity(token)


async def get_current_identity(
    identity: Optional[AuthUser] = Depends(get_optional_identity)
) -> AuthUser:
    """
    Identity of the caller for protected routes.
    
    Raises:
        UnauthorizedError: If no valid session credential is present
    """
    if identity is None:
        raise UnauthorizedError()
    return identity
