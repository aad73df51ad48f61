"""
SQLAlchemy implementation of the RoomStore interface.
Composes the per-model repositories and translates database errors into StoreError.
"""

from functools import wraps
from typing import Any, Dict, List, Optional, Sequence
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from room_rental.repositories import (
    RoomRepository,
    ImageRepository,
    ProfileRepository,
    SavedRoomRepository,
)
from room_rental.store.base import RoomStore, RoomFilters, StoreError, JoinUnsupportedError

logger = logging.getLogger(__name__)


def _translate_errors(func):
    """Re-raise SQLAlchemy failures as StoreError."""
    
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except StoreError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Store operation {func.__name__} failed: {e}")
            raise StoreError(f"Database error during {func.__name__}", code="DATABASE_ERROR") from e
    
    return wrapper


class SQLRoomStore(RoomStore):
    """
    RoomStore backed by the application database.
    
    When relational_joins is False the store behaves like a backend without a
    declared rooms -> profiles relation: any request that embeds the owner
    raises JoinUnsupportedError and callers fall back to separate lookups.
    """
    
    def __init__(self, db: AsyncSession, relational_joins: bool = True):
        self.db = db
        self.relational_joins = relational_joins
        self.rooms = RoomRepository(db)
        self.images = ImageRepository(db)
        self.profiles = ProfileRepository(db)
        self.saved_rooms = SavedRoomRepository(db)
    
    def _check_join(self, owner_fields: Optional[Sequence[str]]) -> None:
        if owner_fields is not None and not self.relational_joins:
            raise JoinUnsupportedError()
    
    # Rooms
    
    @_translate_errors
    async def find_rooms(
        self,
        filters: RoomFilters,
        owner_fields: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        self._check_join(owner_fields)
        rooms = await self.rooms.search_rooms(filters, include_owner=owner_fields is not None)
        return [room.to_dict(include_images=True, owner_fields=owner_fields) for room in rooms]
    
    @_translate_errors
    async def get_room(
        self,
        room_id: uuid.UUID,
        owner_fields: Optional[Sequence[str]] = None
    ) -> Optional[Dict[str, Any]]:
        self._check_join(owner_fields)
        room = await self.rooms.get_room_with_details(room_id, include_owner=owner_fields is not None)
        if room is None:
            return None
        return room.to_dict(include_images=True, owner_fields=owner_fields)
    
    @_translate_errors
    async def get_rooms_by_ids(self, room_ids: Sequence[uuid.UUID]) -> List[Dict[str, Any]]:
        rooms = await self.rooms.get_rooms_by_ids(room_ids)
        return [room.to_dict(include_images=True) for room in rooms]
    
    @_translate_errors
    async def get_room_owner_id(self, room_id: uuid.UUID) -> Optional[uuid.UUID]:
        return await self.rooms.get_owner_id(room_id)
    
    @_translate_errors
    async def create_room(self, data: Dict[str, Any]) -> Dict[str, Any]:
        room = await self.rooms.create_room(data)
        return room.to_dict()
    
    @_translate_errors
    async def update_room(self, room_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        room = await self.rooms.update(room_id, data)
        return room.to_dict() if room else None
    
    @_translate_errors
    async def delete_room(self, room_id: uuid.UUID) -> bool:
        return await self.rooms.delete(room_id)
    
    # Images
    
    @_translate_errors
    async def list_images(self, room_id: uuid.UUID) -> List[Dict[str, Any]]:
        images = await self.images.get_by_room_id(room_id)
        return [image.to_dict() for image in images]
    
    @_translate_errors
    async def add_image(
        self,
        room_id: uuid.UUID,
        image_url: str,
        display_order: int = 0,
        storage_path: Optional[str] = None
    ) -> Dict[str, Any]:
        image = await self.images.create({
            "room_id": room_id,
            "image_url": image_url,
            "display_order": display_order,
            "storage_path": storage_path,
        })
        return image.to_dict()
    
    @_translate_errors
    async def get_image(self, image_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        image = await self.images.get_by_id(image_id)
        return image.to_dict() if image else None
    
    @_translate_errors
    async def delete_image(self, image_id: uuid.UUID) -> bool:
        return await self.images.delete(image_id)
    
    # Profiles
    
    @_translate_errors
    async def get_profile(
        self,
        profile_id: uuid.UUID,
        fields: Optional[Sequence[str]] = None
    ) -> Optional[Dict[str, Any]]:
        profile = await self.profiles.get_by_id(profile_id)
        return profile.to_dict(fields) if profile else None
    
    @_translate_errors
    async def create_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        profile = await self.profiles.create_profile(data)
        return profile.to_dict()
    
    @_translate_errors
    async def update_profile(self, profile_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        profile = await self.profiles.update(profile_id, data)
        return profile.to_dict() if profile else None
    
    # Saved rooms
    
    @_translate_errors
    async def find_saved(self, user_id: uuid.UUID, room_id: uuid.UUID) -> List[Dict[str, Any]]:
        saved = await self.saved_rooms.find_pair(user_id, room_id)
        return [record.to_dict() for record in saved]
    
    @_translate_errors
    async def add_saved(self, user_id: uuid.UUID, room_id: uuid.UUID) -> Dict[str, Any]:
        saved = await self.saved_rooms.save(user_id, room_id)
        return saved.to_dict()
    
    @_translate_errors
    async def remove_saved(self, user_id: uuid.UUID, room_id: uuid.UUID) -> int:
        return await self.saved_rooms.delete_pair(user_id, room_id)
    
    @_translate_errors
    async def list_saved(self, user_id: uuid.UUID) -> List[Dict[str, Any]]:
        saved = await self.saved_rooms.get_by_user(user_id)
        return [record.to_dict() for record in saved]
