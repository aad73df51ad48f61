"""
Token and password utilities for the local identity provider.
Issues and verifies JWT access/refresh tokens and hashes passwords with bcrypt.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from room_rental.config import Settings
import secrets
import uuid


ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenPayload:
    """JWT token payload structure."""
    
    def __init__(self, user_id: str, email: str, token_type: str, exp: datetime):
        self.user_id = user_id
        self.email = email
        self.token_type = token_type
        self.exp = exp
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        return cls(
            user_id=data["sub"],
            email=data["email"],
            token_type=data["type"],
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def build_password_context(rounds: int) -> CryptContext:
    """bcrypt context with the configured cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def _encode(settings: Settings, claims: Dict[str, Any], expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = dict(claims)
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,  # Issued at
        "jti": secrets.token_hex(8),
    })
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    settings: Settings,
    user_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token with identity claims.
    
    Args:
        settings: Application settings holding the signing key
        user_id: Identity UUID
        email: Identity email address
        expires_delta: Optional custom expiration time
        
    Returns:
        Encoded JWT token string
    """
    expires = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),  # Subject (identity ID)
        "email": email,
        "type": ACCESS_TOKEN_TYPE,
    }
    return _encode(settings, claims, expires)


def create_refresh_token(
    settings: Settings,
    user_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT refresh token."""
    expires = expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days)
    claims = {
        "sub": str(user_id),
        "email": email,
        "type": REFRESH_TOKEN_TYPE,
    }
    return _encode(settings, claims, expires)


def verify_token(settings: Settings, token: str, token_type: str = ACCESS_TOKEN_TYPE) -> TokenPayload:
    """
    Verify and decode JWT token.
    
    Args:
        settings: Application settings holding the signing key
        token: JWT token string
        token_type: Expected token type ("access" or "refresh")
        
    Returns:
        Decoded TokenPayload
        
    Raises:
        JWTError: If token is invalid, expired or of the wrong type
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        raise
    except Exception as e:
        raise JWTError(f"Token validation error: {str(e)}")
    
    if payload.get("type") != token_type:
        raise JWTError(f"Invalid token type. Expected {token_type}")
    
    if not payload.get("sub") or not payload.get("email") or not payload.get("exp"):
        raise JWTError("Invalid token payload")
    
    return TokenPayload.from_dict(payload)


def generate_confirmation_code() -> str:
    """One-time code sent in the email confirmation link."""
    return secrets.token_urlsafe(32)
