"""
Pydantic schemas for room image requests and responses.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
import uuid

from room_rental.schemas.base import CamelRequest


class ImageCreate(CamelRequest):
    image_url: Optional[str] = Field(None, max_length=1024, examples=["https://cdn.example.com/rooms/1.jpg"])
    display_order: Optional[int] = Field(None, ge=0, description="Gallery position, 0 when omitted")


class ImageResponse(BaseModel):
    id: uuid.UUID
    room_id: uuid.UUID
    image_url: str
    display_order: int
    storage_path: Optional[str] = None
    created_at: datetime


class ImageEnvelope(BaseModel):
    image: ImageResponse


class ImageListResponse(BaseModel):
    images: List[ImageResponse]
