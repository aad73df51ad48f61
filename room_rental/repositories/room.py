"""
Room repository for listing queries and owner lookups.
Builds the filter conditions used by the listing search.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, asc, desc
from sqlalchemy.orm import selectinload
from room_rental.repositories.base import BaseRepository
from room_rental.models.room import Room
from room_rental.store.base import RoomFilters
from typing import Optional, List, Dict, Any, Sequence
import uuid
import logging

logger = logging.getLogger(__name__)


class RoomRepository(BaseRepository[Room]):
    """Repository for room listings with search and filtering."""
    
    def __init__(self, db: AsyncSession):
        super().__init__(Room, db)
    
    def _loader_options(self, include_owner: bool) -> list:
        options = [selectinload(Room.images)]
        if include_owner:
            options.append(selectinload(Room.owner))
        return options
    
    async def create_room(self, room_data: Dict[str, Any]) -> Room:
        """
        Create a new room with validation.
        
        Args:
            room_data: Dictionary containing room columns
            
        Returns:
            Created room instance
            
        Raises:
            ValueError: If validation fails
        """
        Room(**room_data).validate_all()
        
        created_room = await self.create(room_data)
        logger.info(f"Created room: {created_room.title} (ID: {created_room.id})")
        return created_room
    
    async def get_room_with_details(self, room_id: uuid.UUID, include_owner: bool = False) -> Optional[Room]:
        """
        Get room with its images and, optionally, its owner profile.
        
        Args:
            room_id: UUID of the room
            include_owner: Whether to load the owner profile
            
        Returns:
            Room with loaded relationships or None if not found
        """
        try:
            query = (
                select(Room)
                .options(*self._loader_options(include_owner))
                .where(Room.id == room_id)
                .execution_options(populate_existing=True)
            )
            
            result = await self.db.execute(query)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get room with details {room_id}: {e}")
            raise
    
    async def get_owner_id(self, room_id: uuid.UUID) -> Optional[uuid.UUID]:
        """Single-column lookup of a room's owner."""
        try:
            result = await self.db.execute(select(Room.owner_id).where(Room.id == room_id))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get owner of room {room_id}: {e}")
            raise
    
    async def get_rooms_by_ids(self, room_ids: Sequence[uuid.UUID]) -> List[Room]:
        if not room_ids:
            return []
        
        try:
            query = (
                select(Room)
                .options(selectinload(Room.images))
                .where(Room.id.in_(list(room_ids)))
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to get rooms by ids: {e}")
            raise
    
    async def search_rooms(self, filters: RoomFilters, include_owner: bool = False) -> List[Room]:
        """
        Search rooms matching every supplied filter.
        
        Args:
            filters: RoomFilters with search criteria
            include_owner: Whether to load the owner profile of each room
            
        Returns:
            Rooms ordered newest first, ties by id
        """
        try:
            query = select(Room).options(*self._loader_options(include_owner))
            
            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))
            
            query = query.order_by(desc(Room.created_at), asc(Room.id))
            
            if filters.limit is not None:
                query = query.limit(filters.limit)
            
            result = await self.db.execute(query.execution_options(populate_existing=True))
            rooms = list(result.scalars().all())
            
            logger.debug(f"Room search returned {len(rooms)} results")
            return rooms
        except Exception as e:
            logger.error(f"Failed to search rooms: {e}")
            raise
    
    def _build_filter_conditions(self, filters: RoomFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.
        
        Args:
            filters: RoomFilters instance
            
        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []
        
        if filters.only_available:
            conditions.append(Room.is_available.is_(True))
        
        # Location filter (case-insensitive substring, LIKE wildcards escaped)
        if filters.location:
            conditions.append(Room.location.icontains(filters.location, autoescape=True))
        
        # Inclusive rent bounds
        if filters.min_price is not None:
            conditions.append(Room.rent_price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Room.rent_price <= filters.max_price)
        
        if filters.property_type:
            conditions.append(Room.property_type == filters.property_type)
        
        if filters.tenant_preference:
            conditions.append(Room.tenant_preference == filters.tenant_preference)
        
        if filters.owner_id:
            conditions.append(Room.owner_id == filters.owner_id)
        
        return conditions
