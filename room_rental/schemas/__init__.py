"""
Pydantic schemas for request and response validation.
"""

from room_rental.schemas.base import CamelRequest, SuccessResponse
from room_rental.schemas.auth import (
    SignUpRequest,
    SignUpResponse,
    LoginRequest,
    RefreshRequest,
    IdentityResponse,
    SessionResponse,
)
from room_rental.schemas.profile import ProfileResponse, ProfileUpdate, ProfileEnvelope
from room_rental.schemas.image import ImageCreate, ImageResponse, ImageEnvelope, ImageListResponse
from room_rental.schemas.room import (
    RoomCreate,
    RoomUpdate,
    OwnerSummary,
    RoomResponse,
    RoomEnvelope,
    RoomListResponse,
)
from room_rental.schemas.saved_room import (
    SavedRoomRequest,
    SavedRoomRecord,
    SaveResponse,
    ToggleResponse,
    SavedRoomResponse,
    SavedRoomListResponse,
    SavedRoomIdsResponse,
)

__all__ = [
    "CamelRequest",
    "SuccessResponse",
    "SignUpRequest",
    "SignUpResponse",
    "LoginRequest",
    "RefreshRequest",
    "IdentityResponse",
    "SessionResponse",
    "ProfileResponse",
    "ProfileUpdate",
    "ProfileEnvelope",
    "ImageCreate",
    "ImageResponse",
    "ImageEnvelope",
    "ImageListResponse",
    "RoomCreate",
    "RoomUpdate",
    "OwnerSummary",
    "RoomResponse",
    "RoomEnvelope",
    "RoomListResponse",
    "SavedRoomRequest",
    "SavedRoomRecord",
    "SaveResponse",
    "ToggleResponse",
    "SavedRoomResponse",
    "SavedRoomListResponse",
    "SavedRoomIdsResponse",
]
