"""
Tests for the room aggregate fetcher and its separate-lookup fallback.
"""

import pytest
import uuid

from room_rental.services.room import RoomAggregateFetcher
from room_rental.store.base import StoreError
from room_rental.store.sql import SQLRoomStore
from room_rental.utils.exceptions import RoomNotFoundError
from tests.conftest import ProfileFactory, RoomFactory
from tests.fakes import InMemoryRoomStore


async def seed_room(store) -> dict:
    profile = await ProfileFactory.create_profile(
        store, first_name="Priya", last_name="Shah", phone_number="+91 99999 11111"
    )
    room = await RoomFactory.create_room(store, profile["id"], title="Garden studio")
    room_id = uuid.UUID(room["id"])
    await store.add_image(room_id, "https://img.example.com/2.jpg", display_order=2)
    await store.add_image(room_id, "https://img.example.com/0.jpg", display_order=0)
    return room


class TestRoomAggregateFetcher:
    
    @pytest.mark.asyncio
    async def test_joined_read_includes_owner_contact(self, store: SQLRoomStore):
        room = await seed_room(store)
        
        aggregate = await RoomAggregateFetcher(store).fetch_room(uuid.UUID(room["id"]))
        
        assert aggregate["title"] == "Garden studio"
        assert aggregate["owner"]["first_name"] == "Priya"
        assert aggregate["owner"]["phone_number"] == "+91 99999 11111"
        assert set(aggregate["owner"]) == {"first_name", "last_name", "email", "phone_number"}
        assert [image["display_order"] for image in aggregate["images"]] == [0, 2]
    
    @pytest.mark.asyncio
    async def test_fallback_produces_same_aggregate(self, db_session):
        joined_store = SQLRoomStore(db_session, relational_joins=True)
        plain_store = SQLRoomStore(db_session, relational_joins=False)
        room = await seed_room(joined_store)
        room_id = uuid.UUID(room["id"])
        
        primary = await RoomAggregateFetcher(joined_store).fetch_room(room_id)
        fallback = await RoomAggregateFetcher(plain_store).fetch_room(room_id)
        
        assert fallback == primary
    
    @pytest.mark.asyncio
    async def test_fallback_uses_separate_profile_lookup(self):
        fake = InMemoryRoomStore(join_supported=False)
        room = await seed_room(fake)
        
        aggregate = await RoomAggregateFetcher(fake).fetch_room(uuid.UUID(room["id"]))
        
        assert fake.calls == ["get_room:joined", "get_room:plain"]
        assert aggregate["owner"]["last_name"] == "Shah"
    
    @pytest.mark.asyncio
    async def test_fallback_owner_none_when_profile_lookup_fails(self):
        fake = InMemoryRoomStore(join_supported=False)
        room = await seed_room(fake)
        fake.fail_profile_lookup = True
        
        aggregate = await RoomAggregateFetcher(fake).fetch_room(uuid.UUID(room["id"]))
        
        assert aggregate["owner"] is None
        assert len(aggregate["images"]) == 2
    
    @pytest.mark.asyncio
    async def test_fallback_owner_none_when_profile_missing(self):
        fake = InMemoryRoomStore(join_supported=False)
        room = await RoomFactory.create_room(fake, uuid.uuid4())
        
        aggregate = await RoomAggregateFetcher(fake).fetch_room(uuid.UUID(room["id"]))
        
        assert aggregate["owner"] is None
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("join_supported", [True, False])
    async def test_missing_room_is_not_found(self, join_supported):
        fake = InMemoryRoomStore(join_supported=join_supported)
        
        with pytest.raises(RoomNotFoundError) as exc_info:
            await RoomAggregateFetcher(fake).fetch_room(uuid.uuid4())
        
        assert exc_info.value.status_code == 404
    
    @pytest.mark.asyncio
    async def test_non_join_errors_propagate(self):
        class BrokenStore(InMemoryRoomStore):
            async def get_room(self, room_id, owner_fields=None):
                raise StoreError("timeout", code="DATABASE_ERROR")
        
        with pytest.raises(StoreError):
            await RoomAggregateFetcher(BrokenStore()).fetch_room(uuid.uuid4())
