"""
Database models for the Room Rental API.
Includes Profile, Room, RoomImage, SavedRoom and the provider-owned Identity.
"""

from room_rental.models.profile import Profile, UserType, PROFILE_FIELDS
from room_rental.models.room import Room, PropertyType, TenantPreference
from room_rental.models.image import RoomImage
from room_rental.models.saved_room import SavedRoom
from room_rental.models.identity import Identity

__all__ = [
    "Profile",
    "UserType",
    "PROFILE_FIELDS",
    "Room",
    "PropertyType",
    "TenantPreference",
    "RoomImage",
    "SavedRoom",
    "Identity",
]
