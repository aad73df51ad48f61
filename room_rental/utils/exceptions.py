"""
Custom exception classes for the Room Rental API.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status
from pydantic.alias_generators import to_camel


class APIException(HTTPException):
    """Base API exception class."""
    
    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Missing or malformed input."""
    
    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []
    
    @classmethod
    def missing_fields(cls, names: List[str]) -> "ValidationError":
        """Missing-field error naming the request keys the client sends."""
        return cls(f"Missing required fields: {', '.join(to_camel(name) for name in names)}")


class NotFoundError(APIException):
    """Resource not found exception."""
    
    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"
        
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Authentication required exception."""
    
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):
    """Access forbidden exception."""
    
    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN"
        )


class UpstreamFailureError(APIException):
    """Store, identity provider or object storage failure not otherwise classified."""
    
    def __init__(self, detail: str = "Upstream service failure"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="UPSTREAM_FAILURE"
        )


# Authentication specific exceptions
class InvalidCredentialsError(UnauthorizedError):
    """Invalid login credentials exception."""
    
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class EmailNotConfirmedError(UnauthorizedError):
    
    def __init__(self, detail: str = "Email not confirmed"):
        super().__init__(detail)


class InvalidTokenError(UnauthorizedError):
    """Invalid or expired JWT token exception."""
    
    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


# Room specific exceptions
class RoomNotFoundError(NotFoundError):
    """Room not found exception."""
    
    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room", room_id)


class RoomOwnershipError(ForbiddenError):
    """
    Caller does not own the room.
    
    Also raised when the room does not exist, so a denial never reveals
    whether the id is taken.
    """
    
    def __init__(self, action: Optional[str] = "update this room"):
        super().__init__(f"Not authorized to {action}" if action else "Not authorized")


class ImageNotFoundError(NotFoundError):
    
    def __init__(self, image_id: Optional[str] = None):
        super().__init__("Image", image_id)


class ProfileNotFoundError(NotFoundError):
    
    def __init__(self, profile_id: Optional[str] = None):
        super().__init__("Profile", profile_id)


# File upload exceptions
class FileUploadError(ValidationError):
    """File upload error exception."""
    
    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(ValidationError):
    """Unsupported file type exception."""
    
    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"Unsupported file type '{file_type}'. Supported types: {supported}")


class FileSizeExceededError(ValidationError):
    """File size exceeded exception."""
    
    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")
