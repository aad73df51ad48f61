"""
Pydantic schemas for room requests and responses.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from room_rental.models.room import PropertyType, TenantPreference
from room_rental.schemas.base import CamelRequest
from room_rental.schemas.image import ImageResponse


class RoomFields(CamelRequest):
    """
    Room attributes sent by the owner dashboard.
    All optional at the schema level; the room service reports missing
    required fields together in one message.
    """
    
    title: Optional[str] = Field(None, max_length=255, examples=["Sunny 1 BHK near metro"])
    description: Optional[str] = Field(None, max_length=5000)
    location: Optional[str] = Field(None, max_length=255, examples=["Koramangala, Bengaluru"])
    rent_price: Optional[int] = Field(None, ge=0, description="Monthly rent", examples=[15000])
    property_type: Optional[PropertyType] = Field(None, examples=["1 BHK"])
    tenant_preference: Optional[TenantPreference] = Field(None, examples=["Working"])
    owner_contact_number: Optional[str] = Field(None, max_length=32, examples=["+91 98765 43210"])
    amenities: Optional[List[str]] = Field(None, examples=[["WiFi", "AC", "Parking"]])
    area_sqft: Optional[int] = Field(None, ge=0, examples=[450])
    floor_number: Optional[int] = Field(None, examples=[2])
    is_available: Optional[bool] = None
    
    @field_validator('amenities')
    @classmethod
    def validate_amenities(cls, v):
        """Reject amenity names that are empty or too long."""
        if v is None:
            return v
        for amenity in v:
            if not amenity or len(amenity) > 50:
                raise ValueError("Amenity names must be 1-50 characters")
        return v


class RoomCreate(RoomFields):
    image_urls: Optional[List[str]] = Field(None, description="Image URLs attached in the given order")


class RoomUpdate(RoomFields):
    """Partial update; only the keys present in the body are changed."""


class OwnerSummary(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class RoomResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: Optional[str] = None
    location: str
    rent_price: int
    property_type: PropertyType
    tenant_preference: TenantPreference
    owner_contact_number: str
    amenities: List[str] = Field(default_factory=list)
    area_sqft: Optional[int] = None
    floor_number: Optional[int] = None
    is_available: bool
    created_at: datetime
    updated_at: datetime
    images: List[ImageResponse] = Field(default_factory=list)
    owner: Optional[OwnerSummary] = None


class RoomEnvelope(BaseModel):
    room: RoomResponse


class RoomListResponse(BaseModel):
    rooms: List[RoomResponse]
    count: int
