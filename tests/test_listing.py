"""
Tests for the listing query builder: filters, ordering and the owner-join fallback.
"""

import pytest
import uuid

from room_rental.models.room import PropertyType, TenantPreference
from room_rental.services.listing import ListingQueryBuilder
from room_rental.store.base import RoomFilters, StoreError
from room_rental.store.sql import SQLRoomStore
from tests.conftest import ProfileFactory, RoomFactory
from tests.fakes import InMemoryRoomStore


PRICES = [5000, 12000, 15000, 25000, 18000]
TYPES = ["2 BHK", "1 BHK", "1 BHK", "1 BHK", "2 BHK"]


async def seed_price_fixture(store) -> dict:
    """Five rooms with the price/type combinations used across the listing tests."""
    profile = await ProfileFactory.create_profile(store, first_name="Olive", last_name="Owner")
    for price, property_type, created_at in zip(PRICES, TYPES, RoomFactory.timestamps(len(PRICES))):
        await RoomFactory.create_room(
            store,
            profile["id"],
            title=f"{property_type} at {price}",
            rent_price=price,
            property_type=property_type,
            created_at=created_at,
        )
    return profile


@pytest.fixture
def target_store(request):
    """Resolve the store fixture named by the parameter during setup."""
    return request.getfixturevalue(request.param)


class TestListingFilters:
    """Filter semantics against the SQL store."""
    
    @pytest.mark.asyncio
    async def test_price_bounds_and_type(self, store: SQLRoomStore):
        await seed_price_fixture(store)
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.build_and_run(
            RoomFilters(min_price=10000, max_price=20000, property_type=PropertyType.ONE_BHK)
        )
        
        assert sorted(room["rent_price"] for room in rooms) == [12000, 15000]
        assert all(room["property_type"] == "1 BHK" for room in rooms)
    
    @pytest.mark.asyncio
    async def test_price_bounds_are_inclusive(self, store: SQLRoomStore):
        await seed_price_fixture(store)
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.build_and_run(RoomFilters(min_price=12000, max_price=18000))
        
        assert sorted(room["rent_price"] for room in rooms) == [12000, 15000, 18000]
    
    @pytest.mark.asyncio
    async def test_min_above_max_returns_nothing(self, store: SQLRoomStore):
        await seed_price_fixture(store)
        builder = ListingQueryBuilder(store)
        
        assert await builder.build_and_run(RoomFilters(min_price=20000, max_price=10000)) == []
    
    @pytest.mark.asyncio
    async def test_location_is_case_insensitive_substring(self, store: SQLRoomStore):
        profile = await ProfileFactory.create_profile(store)
        await RoomFactory.create_room(store, profile["id"], location="Koramangala, Bengaluru")
        await RoomFactory.create_room(store, profile["id"], location="Bandra West, Mumbai")
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.build_and_run(RoomFilters(location="KORAMANGALA"))
        
        assert [room["location"] for room in rooms] == ["Koramangala, Bengaluru"]
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("target_store", ["store", "fake_store"], indirect=True)
    @pytest.mark.parametrize("location, expected", [
        ("100%", []),
        ("_", ["50% off_lane"]),
        ("%", ["50% off_lane"]),
        ("feet road", ["100 Feet Road"]),
        ("50% off", ["50% off_lane"]),
        ("off_lane", ["50% off_lane"]),
    ])
    async def test_location_wildcards_match_literally(self, target_store, location, expected):
        target = target_store
        profile = await ProfileFactory.create_profile(target)
        for name in ("100 Feet Road", "MG Road", "50% off_lane"):
            await RoomFactory.create_room(target, profile["id"], location=name)
        builder = ListingQueryBuilder(target)
        
        rooms = await builder.build_and_run(RoomFilters(location=location))
        
        assert [room["location"] for room in rooms] == expected

    @pytest.mark.asyncio
    async def test_tenant_preference_exact_match(self, store: SQLRoomStore):
        profile = await ProfileFactory.create_profile(store)
        await RoomFactory.create_room(store, profile["id"], tenant_preference="Girls")
        await RoomFactory.create_room(store, profile["id"], tenant_preference="Family")
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.build_and_run(RoomFilters(tenant_preference=TenantPreference.GIRLS))
        
        assert [room["tenant_preference"] for room in rooms] == ["Girls"]
    
    @pytest.mark.asyncio
    async def test_unavailable_rooms_are_excluded(self, store: SQLRoomStore):
        profile = await ProfileFactory.create_profile(store)
        await RoomFactory.create_room(store, profile["id"], title="Open", is_available=True)
        await RoomFactory.create_room(store, profile["id"], title="Taken", is_available=False)
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.build_and_run(RoomFilters())
        
        assert [room["title"] for room in rooms] == ["Open"]
    
    @pytest.mark.asyncio
    async def test_newest_first(self, store: SQLRoomStore):
        await seed_price_fixture(store)
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.build_and_run(RoomFilters())
        
        assert [room["rent_price"] for room in rooms] == list(reversed(PRICES))
    
    @pytest.mark.asyncio
    async def test_owner_summary_and_images_included(self, store: SQLRoomStore):
        profile = await ProfileFactory.create_profile(store, first_name="Priya", last_name="Shah")
        room = await RoomFactory.create_room(store, profile["id"])
        await store.add_image(uuid.UUID(room["id"]), "https://img.example.com/b.jpg", display_order=1)
        await store.add_image(uuid.UUID(room["id"]), "https://img.example.com/a.jpg", display_order=0)
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.build_and_run(RoomFilters())
        
        assert rooms[0]["owner"] == {
            "first_name": "Priya",
            "last_name": "Shah",
            "email": profile["email"],
        }
        assert [image["image_url"] for image in rooms[0]["images"]] == [
            "https://img.example.com/a.jpg",
            "https://img.example.com/b.jpg",
        ]
    
    @pytest.mark.asyncio
    async def test_featured_limits_results(self, store: SQLRoomStore):
        await seed_price_fixture(store)
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.featured(limit=2)
        
        assert [room["rent_price"] for room in rooms] == [18000, 25000]
    
    @pytest.mark.asyncio
    async def test_owner_rooms_include_unavailable(self, store: SQLRoomStore):
        profile = await ProfileFactory.create_profile(store)
        other = await ProfileFactory.create_profile(store)
        await RoomFactory.create_room(store, profile["id"], title="Mine open")
        await RoomFactory.create_room(store, profile["id"], title="Mine taken", is_available=False)
        await RoomFactory.create_room(store, other["id"], title="Theirs")
        builder = ListingQueryBuilder(store)
        
        rooms = await builder.owner_rooms(uuid.UUID(profile["id"]))
        
        assert sorted(room["title"] for room in rooms) == ["Mine open", "Mine taken"]


class TestJoinFallback:
    """Behaviour when the store cannot embed the owner profile."""
    
    @pytest.mark.asyncio
    async def test_fallback_returns_same_rooms_without_owner(self):
        joined_store = InMemoryRoomStore(join_supported=True)
        plain_store = InMemoryRoomStore(join_supported=False)
        for fake in (joined_store, plain_store):
            await seed_price_fixture(fake)
        filters = RoomFilters(min_price=10000, max_price=20000, property_type=PropertyType.ONE_BHK)
        
        joined = await ListingQueryBuilder(joined_store).build_and_run(filters)
        fallback = await ListingQueryBuilder(plain_store).build_and_run(filters)
        
        assert [room["rent_price"] for room in fallback] == [room["rent_price"] for room in joined]
        assert all(room["owner"] is None for room in fallback)
        assert all(room["owner"] is not None for room in joined)
        assert plain_store.calls == ["find_rooms:joined", "find_rooms:plain"]
    
    @pytest.mark.asyncio
    async def test_sql_store_without_joins_falls_back(self, db_session):
        store = SQLRoomStore(db_session, relational_joins=False)
        await seed_price_fixture(store)
        
        rooms = await ListingQueryBuilder(store).build_and_run(
            RoomFilters(min_price=10000, max_price=20000, property_type=PropertyType.ONE_BHK)
        )
        
        assert sorted(room["rent_price"] for room in rooms) == [12000, 15000]
        assert all(room["owner"] is None for room in rooms)
    
    @pytest.mark.asyncio
    async def test_fallback_is_logged(self, caplog):
        fake = InMemoryRoomStore(join_supported=False)
        
        with caplog.at_level("INFO", logger="room_rental.services.listing"):
            await ListingQueryBuilder(fake).build_and_run(RoomFilters())
        
        assert "PGRST200" in caplog.text
    
    @pytest.mark.asyncio
    async def test_other_store_errors_are_not_swallowed(self):
        fake = InMemoryRoomStore()
        fake.fail_find_rooms = True
        
        with pytest.raises(StoreError) as exc_info:
            await ListingQueryBuilder(fake).build_and_run(RoomFilters())
        
        assert exc_info.value.code == "DATABASE_ERROR"
        assert fake.calls == ["find_rooms:joined"]
