"""
Service layer: session access, authorization, listing, rooms, images, saved rooms and auth.
"""

from room_rental.services.identity import (
    AuthUser,
    AuthSession,
    IdentityProvider,
    IdentityProviderError,
    LocalIdentityProvider,
)
from room_rental.services.session import SessionAccessor
from room_rental.services.authorization import AuthorizationGate
from room_rental.services.listing import ListingQueryBuilder
from room_rental.services.room import RoomAggregateFetcher, RoomService
from room_rental.services.image import ImageAttachmentManager
from room_rental.services.saved_room import SavedRoomManager
from room_rental.services.profile import ProfileService
from room_rental.services.auth import AuthService

__all__ = [
    "AuthUser",
    "AuthSession",
    "IdentityProvider",
    "IdentityProviderError",
    "LocalIdentityProvider",
    "SessionAccessor",
    "AuthorizationGate",
    "ListingQueryBuilder",
    "RoomAggregateFetcher",
    "RoomService",
    "ImageAttachmentManager",
    "SavedRoomManager",
    "ProfileService",
    "AuthService",
]
