"""
Saved-room relation manager: a finder's bookmarks.
"""

from typing import Any, Dict, List
import logging
import uuid

from room_rental.store.base import RoomStore
from room_rental.utils.exceptions import RoomNotFoundError

logger = logging.getLogger(__name__)


class SavedRoomManager:
    """
    Manages the user <-> room bookmark relation.
    
    Concurrent toggles of the same pair are not serialized; the store's
    unique (user_id, room_id) constraint keeps the relation free of duplicates.
    """
    
    def __init__(self, store: RoomStore):
        self.store = store
    
    async def _ensure_room_exists(self, room_id: uuid.UUID) -> None:
        if await self.store.get_room_owner_id(room_id) is None:
            raise RoomNotFoundError(str(room_id))
    
    async def toggle_save(self, user_id: uuid.UUID, room_id: uuid.UUID) -> Dict[str, bool]:
        """
        Flip the bookmark for (user_id, room_id).
        
        Returns:
            {"saved": False} if a bookmark existed and was removed,
            {"saved": True} if one was created
            
        Raises:
            RoomNotFoundError: If saving a room that does not exist
        """
        existing = await self.store.find_saved(user_id, room_id)
        if existing:
            await self.store.remove_saved(user_id, room_id)
            logger.info(f"User {user_id} unsaved room {room_id}")
            return {"saved": False}
        
        await self._ensure_room_exists(room_id)
        await self.store.add_saved(user_id, room_id)
        logger.info(f"User {user_id} saved room {room_id}")
        return {"saved": True}
    
    async def save(self, user_id: uuid.UUID, room_id: uuid.UUID) -> Dict[str, Any]:
        """Idempotent save; returns the bookmark record."""
        await self._ensure_room_exists(room_id)
        return await self.store.add_saved(user_id, room_id)
    
    async def unsave(self, user_id: uuid.UUID, room_id: uuid.UUID) -> int:
        removed = await self.store.remove_saved(user_id, room_id)
        logger.debug(f"Removed {removed} bookmark(s) of room {room_id} for {user_id}")
        return removed
    
    async def list_saved(self, user_id: uuid.UUID) -> List[Dict[str, Any]]:
        """
        Saved rooms of a user with their images, most recently saved first.
        Bookmarks whose room has been deleted are skipped.
        """
        saved = await self.store.list_saved(user_id)
        if not saved:
            return []
        
        rooms = await self.store.get_rooms_by_ids([uuid.UUID(record["room_id"]) for record in saved])
        rooms_by_id = {room["id"]: room for room in rooms}
        
        result = []
        for record in saved:
            room = rooms_by_id.get(record["room_id"])
            if room is None:
                continue
            result.append(dict(room, saved_at=record["created_at"]))
        return result
    
    async def saved_room_ids(self, user_id: uuid.UUID) -> List[str]:
        saved = await self.store.list_saved(user_id)
        return [record["room_id"] for record in saved]
