"""
File upload utilities for room images.
Validates uploads with Pillow and stores them in the local object-storage bucket.
"""

import io
import logging
import os
import re
import time
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import aiofiles
from fastapi import UploadFile
from PIL import Image

from room_rental.config import Settings
from room_rental.utils.exceptions import (
    ValidationError,
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
)

logger = logging.getLogger(__name__)


class FileValidator:
    """Validation of uploaded image files against the configured limits."""
    
    # Supported image formats and their extensions
    SUPPORTED_FORMATS = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/webp': ['.webp']
    }
    
    # Pillow format names per MIME type
    PIL_FORMATS = {
        'image/jpeg': 'jpeg',
        'image/png': 'png',
        'image/webp': 'webp'
    }
    
    MAX_WIDTH = 10000
    MAX_HEIGHT = 10000
    
    def __init__(self, allowed_types: List[str], max_file_size: int):
        self.allowed_types = [t for t in allowed_types if t in self.SUPPORTED_FORMATS]
        self.max_file_size = max_file_size
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "FileValidator":
        return cls(settings.allowed_file_types, settings.max_file_size)
    
    def validate_extension(self, filename: str, mime_type: str) -> str:
        """
        Check the filename extension agrees with the declared MIME type.
        
        Returns:
            Lowercase file extension
        """
        if not filename:
            raise ValidationError("Filename is required")
        
        extension = Path(filename).suffix.lower()
        if not extension:
            raise ValidationError("File must have an extension")
        
        if extension not in self.SUPPORTED_FORMATS.get(mime_type, []):
            raise ValidationError(
                f"File extension '{extension}' doesn't match MIME type '{mime_type}'"
            )
        
        return extension
    
    def validate_mime_type(self, mime_type: Optional[str]) -> str:
        if not mime_type or mime_type not in self.allowed_types:
            raise UnsupportedFileTypeError(mime_type or "unknown", self.allowed_types)
        return mime_type
    
    def validate_file_size(self, file_size: int) -> int:
        if file_size <= 0:
            raise ValidationError("File size must be greater than 0")
        if file_size > self.max_file_size:
            raise FileSizeExceededError(file_size, self.max_file_size)
        return file_size
    
    def validate_image_content(self, content: bytes, mime_type: str) -> Tuple[int, int]:
        """
        Open the bytes with Pillow and confirm they are the declared format.
        
        Returns:
            Tuple of (width, height)
            
        Raises:
            ValidationError: If the content is not a readable image of that type
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                width, height = img.size
                pil_format = img.format.lower() if img.format else ""
                img.verify()
        except Exception as e:
            raise ValidationError(f"Invalid image file: {str(e)}")
        
        if pil_format != self.PIL_FORMATS[mime_type]:
            raise ValidationError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )
        
        if width > self.MAX_WIDTH or height > self.MAX_HEIGHT:
            raise ValidationError(
                f"Image dimensions {width}x{height} exceed maximum {self.MAX_WIDTH}x{self.MAX_HEIGHT}"
            )
        
        return width, height
    
    async def validate_upload_file(self, file: UploadFile) -> Tuple[bytes, str]:
        """
        Comprehensive validation of an uploaded file.
        
        Args:
            file: FastAPI UploadFile object
            
        Returns:
            Tuple of (content, mime_type)
            
        Raises:
            ValidationError: If any validation fails
        """
        mime_type = self.validate_mime_type(file.content_type)
        self.validate_extension(file.filename or "", mime_type)
        
        await file.seek(0)
        content = await file.read()
        
        self.validate_file_size(len(content))
        self.validate_image_content(content, mime_type)
        
        return content, mime_type


_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class LocalObjectStorage:
    """
    Object storage bucket kept on the local filesystem.
    
    Objects are addressed by keys of the form "<user_id>/<timestamp>_<filename>"
    and served publicly under settings.storage_public_path.
    """
    
    def __init__(self, root_dir: str, bucket: str, public_path: str):
        self.root_dir = Path(root_dir)
        self.bucket = bucket
        self.public_path = public_path.rstrip("/")
        self.bucket_dir = self.root_dir / bucket
        self.bucket_dir.mkdir(parents=True, exist_ok=True)
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalObjectStorage":
        return cls(settings.storage_dir, settings.storage_bucket, settings.storage_public_path)
    
    @staticmethod
    def build_object_key(user_id: uuid.UUID, filename: str) -> str:
        """Key for a new upload: owner directory plus a millisecond timestamp prefix."""
        safe_name = _UNSAFE_FILENAME_CHARS.sub("_", Path(filename).name) or "upload"
        timestamp = int(time.time() * 1000)
        return f"{user_id}/{timestamp}_{safe_name}"
    
    def _resolve(self, key: str) -> Path:
        path = (self.bucket_dir / key).resolve()
        if self.bucket_dir.resolve() not in path.parents:
            raise ValidationError(f"Invalid storage path: {key}")
        return path
    
    def public_url(self, key: str) -> str:
        return f"{self.public_path}/{self.bucket}/{key}"
    
    async def upload(self, key: str, content: bytes) -> str:
        """
        Write an object and return its public URL.
        
        Raises:
            FileUploadError: If the object cannot be written
        """
        path = self._resolve(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, 'wb') as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Failed to store object {key}: {e}")
            if path.exists():
                path.unlink()
            raise FileUploadError(f"Failed to save file: {str(e)}")
        
        logger.info(f"Stored object {key} ({len(content)} bytes)")
        return self.public_url(key)
    
    async def remove(self, keys: List[str]) -> Dict[str, bool]:
        """
        Delete objects by key.
        
        Returns:
            Mapping of key to whether a file was removed
        """
        results = {}
        for key in keys:
            try:
                path = self._resolve(key)
                if path.exists():
                    os.remove(path)
                    results[key] = True
                else:
                    results[key] = False
            except (OSError, ValidationError) as e:
                logger.warning(f"Failed to remove object {key}: {e}")
                results[key] = False
        return results
    
    def exists(self, key: str) -> bool:
        return self._resolve(key).exists()
