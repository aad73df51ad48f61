"""
Backing store interface.
The SQL adapter lives in room_rental.store.sql and is imported from there.
"""

from room_rental.store.base import (
    RoomStore,
    RoomFilters,
    StoreError,
    JoinUnsupportedError,
    JOIN_UNSUPPORTED_CODE,
    OWNER_SUMMARY_FIELDS,
    OWNER_CONTACT_FIELDS,
)

__all__ = [
    "RoomStore",
    "RoomFilters",
    "StoreError",
    "JoinUnsupportedError",
    "JOIN_UNSUPPORTED_CODE",
    "OWNER_SUMMARY_FIELDS",
    "OWNER_CONTACT_FIELDS",
]
