"""
Pydantic schemas for sign-up, login and session responses.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
import uuid

from room_rental.schemas.base import CamelRequest


class SignUpRequest(CamelRequest):
    """
    Sign-up form. Fields are optional here so missing values produce the
    sign-up specific error message instead of a generic validation error.
    """
    
    email: Optional[str] = Field(None, max_length=255, examples=["owner@example.com"])
    password: Optional[str] = Field(None, max_length=128, examples=["securepassword123"])
    first_name: Optional[str] = Field(None, max_length=100, examples=["Asha"])
    last_name: Optional[str] = Field(None, max_length=100, examples=["Rao"])
    user_type: Optional[str] = Field(None, description="owner or finder", examples=["owner"])


class SignUpResponse(BaseModel):
    success: bool = True
    message: str = Field(..., examples=["Sign up successful. Please check your email."])


class LoginRequest(CamelRequest):
    email: Optional[str] = Field(None, examples=["owner@example.com"])
    password: Optional[str] = Field(None, examples=["securepassword123"])


class RefreshRequest(CamelRequest):
    refresh_token: Optional[str] = Field(None, description="Refresh token from a previous session")


class IdentityResponse(BaseModel):
    id: uuid.UUID
    email: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SessionResponse(BaseModel):
    """Session issued by login, refresh and the confirmation callback."""
    
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: IdentityResponse
