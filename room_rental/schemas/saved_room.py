"""
Pydantic schemas for saved-room requests and responses.
"""

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
import uuid

from room_rental.schemas.base import CamelRequest
from room_rental.schemas.room import RoomResponse


class SavedRoomRequest(CamelRequest):
    room_id: uuid.UUID = Field(..., description="Room to bookmark")


class SavedRoomRecord(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    room_id: uuid.UUID
    created_at: datetime


class SaveResponse(BaseModel):
    saved: bool = True
    saved_room: SavedRoomRecord


class ToggleResponse(BaseModel):
    saved: bool


class SavedRoomResponse(RoomResponse):
    saved_at: datetime


class SavedRoomListResponse(BaseModel):
    saved_rooms: List[SavedRoomResponse]
    count: int


class SavedRoomIdsResponse(BaseModel):
    room_ids: List[uuid.UUID]
