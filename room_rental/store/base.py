"""
Store interface used by the listing, room, image and saved-room services.

Services depend only on RoomStore; the SQL adapter in room_rental.store.sql is
one implementation and tests provide an in-memory one. Records cross this
boundary as plain dictionaries shaped like the models' to_dict() output.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
import uuid


# Owner fields denormalized into listing results
OWNER_SUMMARY_FIELDS = ("first_name", "last_name", "email")

# Owner fields denormalized into the room detail aggregate
OWNER_CONTACT_FIELDS = ("first_name", "last_name", "email", "phone_number")

# Error code a store reports when it cannot resolve the room -> profile relation
JOIN_UNSUPPORTED_CODE = "PGRST200"


class StoreError(Exception):
    """Failure reported by the backing store."""
    
    def __init__(
        self,
        message: str,
        code: str = "STORE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
    
    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class JoinUnsupportedError(StoreError):
    """The store cannot embed the owner profile in a room query."""
    
    def __init__(self, message: str = "Could not find a relationship between 'rooms' and 'profiles'"):
        super().__init__(message, code=JOIN_UNSUPPORTED_CODE)


@dataclass
class RoomFilters:
    """Criteria for room queries. Unset fields do not constrain the result."""
    
    location: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    property_type: Optional[str] = None
    tenant_preference: Optional[str] = None
    owner_id: Optional[uuid.UUID] = None
    only_available: bool = True
    limit: Optional[int] = None


class RoomStore(ABC):
    """
    Persistence contract for rooms, images, profiles and saved rooms.
    
    Methods taking owner_fields embed the owner profile under "owner" when the
    argument is given, and raise JoinUnsupportedError if the store cannot do so
    in the same request. Any other failure is raised as StoreError.
    """
    
    # Rooms
    
    @abstractmethod
    async def find_rooms(
        self,
        filters: RoomFilters,
        owner_fields: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        """
        Rooms matching every filter, each with its ordered "images".
        Ordered by created_at descending, then id ascending.
        """
    
    @abstractmethod
    async def get_room(
        self,
        room_id: uuid.UUID,
        owner_fields: Optional[Sequence[str]] = None
    ) -> Optional[Dict[str, Any]]:
        """Single room with its ordered "images", or None when absent."""
    
    @abstractmethod
    async def get_rooms_by_ids(self, room_ids: Sequence[uuid.UUID]) -> List[Dict[str, Any]]:
        """Rooms (with images) for the ids that still exist, in no particular order."""
    
    @abstractmethod
    async def get_room_owner_id(self, room_id: uuid.UUID) -> Optional[uuid.UUID]:
        """owner_id of the room, or None when the room does not exist."""
    
    @abstractmethod
    async def create_room(self, data: Dict[str, Any]) -> Dict[str, Any]:
        ...
    
    @abstractmethod
    async def update_room(self, room_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...
    
    @abstractmethod
    async def delete_room(self, room_id: uuid.UUID) -> bool:
        ...
    
    # Images
    
    @abstractmethod
    async def list_images(self, room_id: uuid.UUID) -> List[Dict[str, Any]]:
        """Images of a room by display_order, ties in insertion order."""
    
    @abstractmethod
    async def add_image(
        self,
        room_id: uuid.UUID,
        image_url: str,
        display_order: int = 0,
        storage_path: Optional[str] = None
    ) -> Dict[str, Any]:
        ...
    
    @abstractmethod
    async def get_image(self, image_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        ...
    
    @abstractmethod
    async def delete_image(self, image_id: uuid.UUID) -> bool:
        ...
    
    # Profiles
    
    @abstractmethod
    async def get_profile(
        self,
        profile_id: uuid.UUID,
        fields: Optional[Sequence[str]] = None
    ) -> Optional[Dict[str, Any]]:
        ...
    
    @abstractmethod
    async def create_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        ...
    
    @abstractmethod
    async def update_profile(self, profile_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...
    
    # Saved rooms
    
    @abstractmethod
    async def find_saved(self, user_id: uuid.UUID, room_id: uuid.UUID) -> List[Dict[str, Any]]:
        ...
    
    @abstractmethod
    async def add_saved(self, user_id: uuid.UUID, room_id: uuid.UUID) -> Dict[str, Any]:
        """Insert a bookmark; returns the existing one if the pair is already saved."""
    
    @abstractmethod
    async def remove_saved(self, user_id: uuid.UUID, room_id: uuid.UUID) -> int:
        """Delete every bookmark for the pair and return how many were removed."""
    
    @abstractmethod
    async def list_saved(self, user_id: uuid.UUID) -> List[Dict[str, Any]]:
        """Bookmarks of a user, newest first."""
