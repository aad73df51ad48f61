"""
Authorization gate for room mutations.
"""

from typing import Optional
import logging
import uuid

from room_rental.store.base import RoomStore
from room_rental.utils.exceptions import RoomOwnershipError

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Permits a mutation only when the caller owns the room."""
    
    def __init__(self, store: RoomStore):
        self.store = store
    
    async def authorize_mutation(
        self,
        room_id: uuid.UUID,
        caller_id: uuid.UUID,
        action: Optional[str] = "update this room"
    ) -> None:
        """
        Check that caller_id owns room_id.
        
        A missing room is denied exactly like a room owned by someone else, so
        the response never reveals whether the id exists.
        
        Args:
            room_id: Room about to be mutated
            caller_id: Identity of the caller
            action: Wording for the denial message
            
        Raises:
            RoomOwnershipError: If the room is missing or owned by someone else
            StoreError: If the owner lookup fails
        """
        owner_id = await self.store.get_room_owner_id(room_id)
        
        if owner_id is None or str(owner_id) != str(caller_id):
            logger.warning(f"Denied mutation of room {room_id} by {caller_id}")
            raise RoomOwnershipError(action)
