"""
In-memory RoomStore used to exercise services without a database.
Records have the same shape as the SQL adapter's output.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Set
import uuid

from room_rental.models.profile import PROFILE_FIELDS
from room_rental.store.base import RoomStore, RoomFilters, StoreError, JoinUnsupportedError

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _value(value):
    return getattr(value, "value", value)


def _timestamp(value):
    return value.isoformat() if isinstance(value, datetime) else value


class InMemoryRoomStore(RoomStore):
    """
    Dictionary-backed store.
    
    Flags let tests reproduce store behaviour:
        join_supported: when False, owner joins raise JoinUnsupportedError
        fail_profile_lookup: get_profile raises StoreError
        fail_find_rooms: find_rooms raises a non-join StoreError
        fail_owner_lookup: get_room_owner_id raises StoreError
        fail_profile_create: create_profile raises StoreError
        failing_image_urls: add_image raises StoreError for these URLs
    """
    
    def __init__(self, join_supported: bool = True):
        self.join_supported = join_supported
        self.fail_profile_lookup = False
        self.fail_find_rooms = False
        self.fail_owner_lookup = False
        self.fail_profile_create = False
        self.failing_image_urls: Set[str] = set()
        
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.rooms: Dict[str, Dict[str, Any]] = {}
        self.images: Dict[str, Dict[str, Any]] = {}
        self.saved: Dict[str, Dict[str, Any]] = {}
        self.calls: List[str] = []
        self._tick = 0
    
    def _now(self) -> datetime:
        self._tick += 1
        return BASE_TIME + timedelta(seconds=self._tick)
    
    def _check_join(self, owner_fields) -> None:
        if owner_fields is not None and not self.join_supported:
            raise JoinUnsupportedError()
    
    def _images_of(self, room_id: str) -> List[Dict[str, Any]]:
        images = [dict(image) for image in self.images.values() if image["room_id"] == room_id]
        return sorted(images, key=lambda image: (image["display_order"], image["created_at"], image["id"]))
    
    def _room_view(self, room: Dict[str, Any], owner_fields=None) -> Dict[str, Any]:
        result = dict(room)
        result["amenities"] = list(room["amenities"])
        result["images"] = self._images_of(room["id"])
        if owner_fields is not None:
            owner = self.profiles.get(room["owner_id"])
            result["owner"] = {key: owner[key] for key in owner_fields} if owner else None
        return result
    
    # Rooms
    
    async def find_rooms(self, filters: RoomFilters, owner_fields: Optional[Sequence[str]] = None):
        self.calls.append(f"find_rooms:{'joined' if owner_fields is not None else 'plain'}")
        if self.fail_find_rooms:
            raise StoreError("connection reset", code="DATABASE_ERROR")
        self._check_join(owner_fields)
        
        matches = []
        for room in self.rooms.values():
            if filters.only_available and not room["is_available"]:
                continue
            if filters.location and filters.location.lower() not in room["location"].lower():
                continue
            if filters.min_price is not None and room["rent_price"] < filters.min_price:
                continue
            if filters.max_price is not None and room["rent_price"] > filters.max_price:
                continue
            if filters.property_type and room["property_type"] != _value(filters.property_type):
                continue
            if filters.tenant_preference and room["tenant_preference"] != _value(filters.tenant_preference):
                continue
            if filters.owner_id and room["owner_id"] != str(filters.owner_id):
                continue
            matches.append(room)
        
        matches.sort(key=lambda room: room["id"])
        matches.sort(key=lambda room: room["created_at"], reverse=True)
        if filters.limit is not None:
            matches = matches[:filters.limit]
        return [self._room_view(room, owner_fields) for room in matches]
    
    async def get_room(self, room_id: uuid.UUID, owner_fields: Optional[Sequence[str]] = None):
        self.calls.append(f"get_room:{'joined' if owner_fields is not None else 'plain'}")
        self._check_join(owner_fields)
        room = self.rooms.get(str(room_id))
        return self._room_view(room, owner_fields) if room else None
    
    async def get_rooms_by_ids(self, room_ids: Sequence[uuid.UUID]):
        return [self._room_view(self.rooms[str(rid)]) for rid in room_ids if str(rid) in self.rooms]
    
    async def get_room_owner_id(self, room_id: uuid.UUID):
        if self.fail_owner_lookup:
            raise StoreError("owner lookup failed")
        room = self.rooms.get(str(room_id))
        return uuid.UUID(room["owner_id"]) if room else None
    
    async def create_room(self, data: Dict[str, Any]) -> Dict[str, Any]:
        now = self._now()
        room = {
            "id": str(data.get("id") or uuid.uuid4()),
            "owner_id": str(data["owner_id"]),
            "title": data["title"],
            "description": data.get("description"),
            "location": data["location"],
            "rent_price": data["rent_price"],
            "property_type": _value(data["property_type"]),
            "tenant_preference": _value(data["tenant_preference"]),
            "owner_contact_number": data["owner_contact_number"],
            "amenities": list(data.get("amenities") or []),
            "area_sqft": data.get("area_sqft"),
            "floor_number": data.get("floor_number"),
            "is_available": True if data.get("is_available") is None else data["is_available"],
            "created_at": _timestamp(data.get("created_at")) or now.isoformat(),
            "updated_at": now.isoformat(),
        }
        self.rooms[room["id"]] = room
        return dict(room)
    
    async def update_room(self, room_id: uuid.UUID, data: Dict[str, Any]):
        room = self.rooms.get(str(room_id))
        if room is None:
            return None
        room.update({key: _value(value) for key, value in data.items()})
        room["updated_at"] = self._now().isoformat()
        return dict(room)
    
    async def delete_room(self, room_id: uuid.UUID) -> bool:
        room = self.rooms.pop(str(room_id), None)
        if room is None:
            return False
        for image_id in [i for i, image in self.images.items() if image["room_id"] == str(room_id)]:
            del self.images[image_id]
        return True
    
    # Images
    
    async def list_images(self, room_id: uuid.UUID):
        return self._images_of(str(room_id))
    
    async def add_image(self, room_id, image_url, display_order=0, storage_path=None):
        if image_url in self.failing_image_urls:
            raise StoreError(f"insert failed for {image_url}")
        image = {
            "id": str(uuid.uuid4()),
            "room_id": str(room_id),
            "image_url": image_url,
            "display_order": display_order,
            "storage_path": storage_path,
            "created_at": self._now().isoformat(),
        }
        self.images[image["id"]] = image
        return dict(image)
    
    async def get_image(self, image_id: uuid.UUID):
        image = self.images.get(str(image_id))
        return dict(image) if image else None
    
    async def delete_image(self, image_id: uuid.UUID) -> bool:
        return self.images.pop(str(image_id), None) is not None
    
    # Profiles
    
    async def get_profile(self, profile_id: uuid.UUID, fields: Optional[Sequence[str]] = None):
        if self.fail_profile_lookup:
            raise StoreError("profile lookup failed")
        profile = self.profiles.get(str(profile_id))
        if profile is None:
            return None
        return {key: profile[key] for key in fields} if fields is not None else dict(profile)
    
    async def create_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_profile_create:
            raise StoreError("profile insert failed")
        now = self._now().isoformat()
        profile = {field: _value(data.get(field)) for field in PROFILE_FIELDS}
        profile["id"] = str(data["id"])
        profile["created_at"] = now
        profile["updated_at"] = now
        self.profiles[profile["id"]] = profile
        return dict(profile)
    
    async def update_profile(self, profile_id: uuid.UUID, data: Dict[str, Any]):
        profile = self.profiles.get(str(profile_id))
        if profile is None:
            return None
        profile.update({key: _value(value) for key, value in data.items()})
        return dict(profile)
    
    # Saved rooms
    
    async def find_saved(self, user_id, room_id):
        return [
            dict(record) for record in self.saved.values()
            if record["user_id"] == str(user_id) and record["room_id"] == str(room_id)
        ]
    
    async def add_saved(self, user_id, room_id):
        existing = await self.find_saved(user_id, room_id)
        if existing:
            return existing[0]
        record = {
            "id": str(uuid.uuid4()),
            "user_id": str(user_id),
            "room_id": str(room_id),
            "created_at": self._now().isoformat(),
        }
        self.saved[record["id"]] = record
        return dict(record)
    
    async def remove_saved(self, user_id, room_id) -> int:
        matching = [key for key, record in self.saved.items()
                    if record["user_id"] == str(user_id) and record["room_id"] == str(room_id)]
        for key in matching:
            del self.saved[key]
        return len(matching)
    
    async def list_saved(self, user_id):
        records = [dict(record) for record in self.saved.values() if record["user_id"] == str(user_id)]
        return sorted(records, key=lambda record: record["created_at"], reverse=True)
