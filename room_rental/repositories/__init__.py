"""
SQLAlchemy repositories backing the SQL store adapter and the local identity provider.
"""

from room_rental.repositories.base import BaseRepository
from room_rental.repositories.room import RoomRepository
from room_rental.repositories.image import ImageRepository
from room_rental.repositories.profile import ProfileRepository
from room_rental.repositories.saved_room import SavedRoomRepository
from room_rental.repositories.identity import IdentityRepository

__all__ = [
    "BaseRepository",
    "RoomRepository",
    "ImageRepository",
    "ProfileRepository",
    "SavedRoomRepository",
    "IdentityRepository",
]
