"""
API routers.
"""

from room_rental.routers import auth, profile, rooms, images, saved_rooms

__all__ = ["auth", "profile", "rooms", "images", "saved_rooms"]
