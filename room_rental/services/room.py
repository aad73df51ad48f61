"""
Room service and aggregate fetcher.
Handles room detail assembly, creation with images, owner-only updates and deletion.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging
import uuid

from room_rental.services.authorization import AuthorizationGate
from room_rental.store.base import (
    RoomStore,
    StoreError,
    JOIN_UNSUPPORTED_CODE,
    OWNER_CONTACT_FIELDS,
)
from room_rental.utils.exceptions import RoomNotFoundError, ValidationError
from room_rental.utils.file_utils import LocalObjectStorage

logger = logging.getLogger(__name__)

REQUIRED_ROOM_FIELDS = (
    "title",
    "location",
    "rent_price",
    "property_type",
    "tenant_preference",
    "owner_contact_number",
)

# Columns an owner may change on an existing room
UPDATABLE_ROOM_FIELDS = REQUIRED_ROOM_FIELDS + (
    "description",
    "amenities",
    "area_sqft",
    "floor_number",
    "is_available",
)


def dedupe_amenities(amenities: Optional[Sequence[str]]) -> List[str]:
    """Drop blank and repeated amenities, keeping the first occurrence."""
    seen = []
    for amenity in amenities or []:
        name = amenity.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


class RoomAggregateFetcher:
    """Assembles a room with its ordered images and owner contact profile."""
    
    def __init__(self, store: RoomStore):
        self.store = store
    
    async def fetch_room(self, room_id: uuid.UUID) -> Dict[str, Any]:
        """
        Fetch the room detail aggregate.
        
        Tries a single joined read first. When the store cannot join profiles
        the room is read on its own and the owner profile is looked up
        separately; owner is None if that lookup fails or finds nothing.
        
        Args:
            room_id: UUID of the room
            
        Returns:
            Room dictionary with "images" and "owner"
            
        Raises:
            RoomNotFoundError: If the room does not exist
            StoreError: For store failures other than a missing join
        """
        try:
            room = await self.store.get_room(room_id, owner_fields=OWNER_CONTACT_FIELDS)
        except StoreError as e:
            if e.code != JOIN_UNSUPPORTED_CODE:
                raise
            logger.info(f"Owner join unavailable ({e.code}); fetching room {room_id} and owner separately")
            room = await self.store.get_room(room_id)
            if room is not None:
                room["owner"] = await self._lookup_owner(room["owner_id"])
        
        if room is None:
            raise RoomNotFoundError(str(room_id))
        
        return room
    
    async def _lookup_owner(self, owner_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.store.get_profile(uuid.UUID(str(owner_id)), fields=OWNER_CONTACT_FIELDS)
        except StoreError as e:
            logger.warning(f"Owner profile lookup failed for {owner_id}: {e}")
            return None


class RoomService:
    """
    Room lifecycle operations.
    Creation is open to any signed-in profile; updates and deletes go through
    the authorization gate.
    """
    
    def __init__(self, store: RoomStore, storage: Optional[LocalObjectStorage] = None):
        self.store = store
        self.storage = storage
        self.gate = AuthorizationGate(store)
        self.fetcher = RoomAggregateFetcher(store)
    
    def _validate_room_values(self, data: Dict[str, Any]) -> None:
        if data.get("rent_price") is not None and data["rent_price"] < 0:
            raise ValidationError("Rent price cannot be negative")
        if data.get("area_sqft") is not None and data["area_sqft"] < 0:
            raise ValidationError("Area cannot be negative")
    
    async def create_room(
        self,
        owner_id: uuid.UUID,
        room_data: Dict[str, Any],
        image_urls: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]:
        """
        Create a room owned by the caller and attach its images.
        
        Images are attached one by one after the room exists, in the order
        given. A failing image is logged and skipped; the room and the other
        images are kept.
        
        Args:
            owner_id: Identity of the caller
            room_data: Room fields in snake_case
            image_urls: Optional image URLs to attach
            
        Returns:
            Created room with the images that were attached
            
        Raises:
            ValidationError: If required fields are missing or values are invalid
        """
        missing = [name for name in REQUIRED_ROOM_FIELDS if room_data.get(name) in (None, "")]
        if missing:
            raise ValidationError.missing_fields(missing)
        
        self._validate_room_values(room_data)
        
        create_data = {
            key: value for key, value in room_data.items()
            if key in UPDATABLE_ROOM_FIELDS and value is not None
        }
        create_data["amenities"] = dedupe_amenities(room_data.get("amenities"))
        create_data["owner_id"] = owner_id
        
        room = await self.store.create_room(create_data)
        room_id = uuid.UUID(room["id"])
        logger.info(f"Room created by {owner_id}: {room['title']} (ID: {room_id})")
        
        room["images"] = []
        for position, image_url in enumerate(image_urls or []):
            try:
                image = await self.store.add_image(room_id, image_url, display_order=position)
            except StoreError as e:
                logger.error(f"Failed to attach image {position} to room {room_id}: {e}")
                continue
            room["images"].append(image)
        
        return room
    
    async def update_room(
        self,
        room_id: uuid.UUID,
        caller_id: uuid.UUID,
        room_data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Partially update a room owned by the caller.
        
        Raises:
            RoomOwnershipError: If the caller does not own the room
            ValidationError: If a value is invalid or a required field is cleared
        """
        await self.gate.authorize_mutation(room_id, caller_id, action="update this room")
        
        update_data = {key: value for key, value in room_data.items() if key in UPDATABLE_ROOM_FIELDS}
        
        cleared = [name for name in REQUIRED_ROOM_FIELDS if name in update_data and update_data[name] in (None, "")]
        if cleared:
            raise ValidationError.missing_fields(cleared)
        
        for name in ("amenities", "is_available"):
            if name in update_data and update_data[name] is None:
                del update_data[name]

        self._validate_room_values(update_data)
        if "amenities" in update_data:
            update_data["amenities"] = dedupe_amenities(update_data["amenities"])
        
        if update_data:
            updated = await self.store.update_room(room_id, update_data)
            if updated is None:
                raise RoomNotFoundError(str(room_id))
            logger.info(f"Room {room_id} updated by {caller_id}: {sorted(update_data)}")
        
        return await self.fetcher.fetch_room(room_id)
    
    async def delete_room(self, room_id: uuid.UUID, caller_id: uuid.UUID) -> None:
        """
        Delete a room owned by the caller.
        Uploaded image files are removed from object storage on a best-effort basis.
        
        Raises:
            RoomOwnershipError: If the caller does not own the room
        """
        await self.gate.authorize_mutation(room_id, caller_id, action="delete this room")
        
        images = await self.store.list_images(room_id)
        await self.store.delete_room(room_id)
        logger.info(f"Room {room_id} deleted by {caller_id}")
        
        storage_keys = [image["storage_path"] for image in images if image.get("storage_path")]
        if storage_keys and self.storage is not None:
            removed = await self.storage.remove(storage_keys)
            logger.debug(f"Removed {sum(removed.values())} of {len(storage_keys)} stored images")
    
    async def get_room(self, room_id: uuid.UUID) -> Dict[str, Any]:
        return await self.fetcher.fetch_room(room_id)
