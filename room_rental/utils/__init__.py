"""
Utility modules for the Room Rental API.
"""

from .security import (
    build_password_context,
    create_access_token,
    create_refresh_token,
    verify_token,
    generate_confirmation_code,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    UpstreamFailureError,
    InvalidCredentialsError,
    EmailNotConfirmedError,
    InvalidTokenError,
    RoomNotFoundError,
    RoomOwnershipError,
    ImageNotFoundError,
    ProfileNotFoundError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Token and password utilities
    "build_password_context",
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "generate_confirmation_code",
    "TokenPayload",
    
    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "UpstreamFailureError",
    "InvalidCredentialsError",
    "EmailNotConfirmedError",
    "InvalidTokenError",
    "RoomNotFoundError",
    "RoomOwnershipError",
    "ImageNotFoundError",
    "ProfileNotFoundError",
]
