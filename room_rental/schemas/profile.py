"""
Pydantic schemas for profile requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

from room_rental.models.profile import UserType
from room_rental.schemas.base import CamelRequest


class ProfileResponse(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    user_type: UserType
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(CamelRequest):
    """Changes to the caller's own profile. Omitted fields are left untouched."""
    
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=32, examples=["+91 98765 43210"])
    user_type: Optional[UserType] = None


class ProfileEnvelope(BaseModel):
    profile: ProfileResponse
