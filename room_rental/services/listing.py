"""
Listing query builder for room search.
Runs the filtered listing with the owner summary, falling back to a plain
listing when the store cannot join owner profiles.
"""

from typing import Any, Dict, List
import logging
import uuid

from room_rental.store.base import (
    RoomStore,
    RoomFilters,
    StoreError,
    JOIN_UNSUPPORTED_CODE,
    OWNER_SUMMARY_FIELDS,
)

logger = logging.getLogger(__name__)

FEATURED_ROOMS_LIMIT = 6


class ListingQueryBuilder:
    """Builds and runs room listing queries against a RoomStore."""
    
    def __init__(self, store: RoomStore):
        self.store = store
    
    async def build_and_run(self, filters: RoomFilters) -> List[Dict[str, Any]]:
        """
        Run a listing query.
        
        Every room carries its ordered images and an "owner" summary
        (first_name, last_name, email), or owner None when the store had to
        answer without the join.
        
        Args:
            filters: Search criteria; unset fields do not constrain
            
        Returns:
            Available rooms, newest first
            
        Raises:
            StoreError: For any store failure other than a missing join
        """
        try:
            return await self.store.find_rooms(filters, owner_fields=OWNER_SUMMARY_FIELDS)
        except StoreError as e:
            if e.code != JOIN_UNSUPPORTED_CODE:
                raise
            logger.info(f"Owner join unavailable ({e.code}); listing rooms without owner summary")
        
        rooms = await self.store.find_rooms(filters)
        for room in rooms:
            room["owner"] = None
        return rooms
    
    async def featured(self, limit: int = FEATURED_ROOMS_LIMIT) -> List[Dict[str, Any]]:
        """Newest available rooms for the landing page."""
        return await self.build_and_run(RoomFilters(limit=limit))
    
    async def owner_rooms(self, owner_id: uuid.UUID) -> List[Dict[str, Any]]:
        """All rooms of an owner, including unavailable ones."""
        filters = RoomFilters(owner_id=owner_id, only_available=False)
        return await self.store.find_rooms(filters)
