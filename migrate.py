#!/usr/bin/env python3
"""
Database management script.
Creates, drops, resets and seeds the Room Rental database.
"""

import asyncio
import argparse
import logging
from datetime import datetime, timezone

from room_rental.config import Settings, get_settings
from room_rental.database import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
    drop_tables,
)
from room_rental.repositories.identity import IdentityRepository
from room_rental.services.auth import AuthService
from room_rental.services.identity import LocalIdentityProvider
from room_rental.services.room import RoomService
from room_rental.store.sql import SQLRoomStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEMO_OWNER_EMAIL = "owner@example.com"
DEMO_OWNER_PASSWORD = "owner123456"

DEMO_ROOMS = [
    {
        "title": "Sunny 1 BHK near metro",
        "description": "Bright corner flat, five minutes from the metro station.",
        "location": "Koramangala, Bengaluru",
        "rent_price": 15000,
        "property_type": "1 BHK",
        "tenant_preference": "Working",
        "owner_contact_number": "+91 98765 43210",
        "amenities": ["WiFi", "AC", "Kitchen", "Parking"],
        "area_sqft": 550,
        "floor_number": 3,
    },
    {
        "title": "Shared room for students",
        "description": None,
        "location": "Indiranagar, Bengaluru",
        "rent_price": 7000,
        "property_type": "1 Bed",
        "tenant_preference": "Bachelor",
        "owner_contact_number": "+91 98765 43210",
        "amenities": ["WiFi", "Laundry"],
        "area_sqft": None,
        "floor_number": 1,
    },
    {
        "title": "Family 2 BHK with balcony",
        "description": "Quiet street, covered parking and a garden view.",
        "location": "HSR Layout, Bengaluru",
        "rent_price": 28000,
        "property_type": "2 BHK",
        "tenant_preference": "Family",
        "owner_contact_number": "+91 91234 56780",
        "amenities": ["Balcony", "Parking", "Geyser", "Garden"],
        "area_sqft": 1100,
        "floor_number": 2,
    },
]


class DatabaseManager:
    """Manages schema creation and demo data."""
    
    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine = create_engine_from_settings(settings)
        self.session_factory = create_session_factory(self.engine)
    
    async def create(self) -> None:
        await create_tables(self.engine)
    
    async def drop(self) -> None:
        await drop_tables(self.engine, self.settings)
    
    async def seed(self) -> None:
        """Create a confirmed demo owner and a few listings."""
        logger.info("Seeding database with demo data")
        
        async with self.session_factory() as session:
            identities = IdentityRepository(session)
            if await identities.get_by_email(DEMO_OWNER_EMAIL):
                logger.info("Demo owner already exists, skipping seed")
                return
            
            store = SQLRoomStore(session)
            auth_service = AuthService(LocalIdentityProvider(session, self.settings), store)
            owner = await auth_service.sign_up(
                email=DEMO_OWNER_EMAIL,
                password=DEMO_OWNER_PASSWORD,
                first_name="Demo",
                last_name="Owner",
                user_type="owner",
            )
            await identities.update(owner.id, {"email_confirmed_at": datetime.now(timezone.utc)})
            
            room_service = RoomService(store)
            for room_data in DEMO_ROOMS:
                await room_service.create_room(owner.id, dict(room_data))
            
            logger.info("Database seeded successfully")
            logger.info(f"  Email: {DEMO_OWNER_EMAIL}")
            logger.info(f"  Password: {DEMO_OWNER_PASSWORD}")
            logger.warning("Demo credentials are for local development only!")
    
    async def reset(self) -> None:
        """Drop and recreate all tables, then seed."""
        logger.warning("Resetting database - all data will be lost!")
        await self.drop()
        await self.create()
        await self.seed()
        logger.info("Database reset completed")
    
    async def run(self, command: str) -> None:
        try:
            await getattr(self, command)()
        finally:
            await self.engine.dispose()


def main():
    """Command line interface for database management."""
    parser = argparse.ArgumentParser(description="Room Rental database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    
    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("drop", help="Drop all tables (development/testing only)")
    subparsers.add_parser("seed", help="Seed demo owner and rooms")
    reset_parser = subparsers.add_parser("reset", help="Drop, recreate and seed (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")
    
    args = parser.parse_args()
    
    if not args.command:
        parser.print_help()
        return
    
    if args.command == "reset" and not args.confirm:
        print("Database reset requires --confirm flag")
        return
    
    manager = DatabaseManager(get_settings())
    asyncio.run(manager.run(args.command))


if __name__ == "__main__":
    main()
