"""
Repository for SavedRoom bookmarks.
"""

import uuid
import logging
from typing import List
from sqlalchemy import select, delete, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from room_rental.models.saved_room import SavedRoom
from room_rental.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class SavedRoomRepository(BaseRepository[SavedRoom]):
    """Repository for the user <-> room bookmark relation."""
    
    def __init__(self, db: AsyncSession):
        super().__init__(SavedRoom, db)
    
    async def find_pair(self, user_id: uuid.UUID, room_id: uuid.UUID) -> List[SavedRoom]:
        query = select(SavedRoom).where(
            and_(
                SavedRoom.user_id == user_id,
                SavedRoom.room_id == room_id
            )
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
    
    async def save(self, user_id: uuid.UUID, room_id: uuid.UUID) -> SavedRoom:
        """
        Insert a bookmark, returning the existing row if the pair is already saved.
        
        The unique (user_id, room_id) constraint settles concurrent inserts; the
        loser reads back the winner's row.
        """
        existing = await self.find_pair(user_id, room_id)
        if existing:
            return existing[0]
        
        try:
            return await self.create({"user_id": user_id, "room_id": room_id})
        except IntegrityError:
            logger.info(f"Room {room_id} already saved by {user_id}")
            existing = await self.find_pair(user_id, room_id)
            if not existing:
                raise
            return existing[0]
    
    async def delete_pair(self, user_id: uuid.UUID, room_id: uuid.UUID) -> int:
        try:
            stmt = delete(SavedRoom).where(
                and_(
                    SavedRoom.user_id == user_id,
                    SavedRoom.room_id == room_id
                )
            )
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete saved room {room_id} for {user_id}: {e}")
            raise
    
    async def get_by_user(self, user_id: uuid.UUID) -> List[SavedRoom]:
        """Bookmarks of a user, newest first."""
        query = (
            select(SavedRoom)
            .where(SavedRoom.user_id == user_id)
            .order_by(SavedRoom.created_at.desc(), SavedRoom.id.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
