"""
Repository for RoomImage model operations.
"""

import uuid
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from room_rental.models.image import RoomImage
from room_rental.repositories.base import BaseRepository


class ImageRepository(BaseRepository[RoomImage]):
    """Repository for RoomImage database operations."""
    
    def __init__(self, db: AsyncSession):
        super().__init__(RoomImage, db)
    
    async def get_by_room_id(self, room_id: uuid.UUID) -> List[RoomImage]:
        """
        Get all images for a room in gallery order.
        
        Args:
            room_id: ID of the room
            
        Returns:
            Images ordered by display_order, ties in insertion order
        """
        query = (
            select(RoomImage)
            .where(RoomImage.room_id == room_id)
            .order_by(
                RoomImage.display_order.asc(),
                RoomImage.created_at.asc(),
                RoomImage.id.asc()
            )
        )
        
        result = await self.db.execute(query)
        return list(result.scalars().all())
