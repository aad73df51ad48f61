"""
Image attachment manager for room galleries.
Attaches image URLs or uploaded files to rooms owned by the caller.
"""

from typing import Any, Dict, List, Optional
import logging
import uuid

from fastapi import UploadFile

from room_rental.services.authorization import AuthorizationGate
from room_rental.store.base import RoomStore
from room_rental.utils.exceptions import ImageNotFoundError, ValidationError
from room_rental.utils.file_utils import FileValidator, LocalObjectStorage

logger = logging.getLogger(__name__)


class ImageAttachmentManager:
    """Manages the images of a room on behalf of its owner."""
    
    def __init__(
        self,
        store: RoomStore,
        storage: Optional[LocalObjectStorage] = None,
        validator: Optional[FileValidator] = None
    ):
        self.store = store
        self.storage = storage
        self.validator = validator
        self.gate = AuthorizationGate(store)
    
    async def list_images(self, room_id: uuid.UUID) -> List[Dict[str, Any]]:
        """Images of a room in gallery order."""
        return await self.store.list_images(room_id)
    
    async def attach_image(
        self,
        room_id: uuid.UUID,
        caller_id: uuid.UUID,
        image_url: Optional[str],
        display_order: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Attach an image URL to a room owned by the caller.
        
        Existing images are never renumbered; equal display orders keep
        insertion order.
        
        Args:
            room_id: UUID of the room
            caller_id: Identity of the caller
            image_url: Public image URL
            display_order: Gallery position, 0 when omitted
            
        Returns:
            Created image record
            
        Raises:
            RoomOwnershipError: If the caller does not own the room
            ValidationError: If image_url is missing
        """
        await self.gate.authorize_mutation(room_id, caller_id, action=None)
        
        if not image_url or not image_url.strip():
            raise ValidationError.missing_fields(["image_url"])
        
        image = await self.store.add_image(room_id, image_url.strip(), display_order=display_order or 0)
        logger.info(f"Image {image['id']} attached to room {room_id}")
        return image
    
    async def upload_image(
        self,
        room_id: uuid.UUID,
        caller_id: uuid.UUID,
        file: UploadFile,
        display_order: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Validate an uploaded image, store it and attach its public URL.
        
        The object key is "<caller_id>/<timestamp>_<filename>". If attaching
        fails the stored file is removed again.
        
        Raises:
            RoomOwnershipError: If the caller does not own the room
            ValidationError: If the file is not an acceptable image
        """
        if self.storage is None or self.validator is None:
            raise RuntimeError("Object storage is not configured")
        
        await self.gate.authorize_mutation(room_id, caller_id, action=None)
        
        content, mime_type = await self.validator.validate_upload_file(file)
        key = LocalObjectStorage.build_object_key(caller_id, file.filename or "upload")
        public_url = await self.storage.upload(key, content)
        
        try:
            image = await self.store.add_image(
                room_id,
                public_url,
                display_order=display_order or 0,
                storage_path=key
            )
        except Exception:
            await self.storage.remove([key])
            raise
        
        logger.info(f"Uploaded {mime_type} image {key} for room {room_id}")
        return image
    
    async def delete_image(self, room_id: uuid.UUID, image_id: uuid.UUID, caller_id: uuid.UUID) -> None:
        """
        Remove an image from a room owned by the caller.
        
        Raises:
            RoomOwnershipError: If the caller does not own the room
            ImageNotFoundError: If the image does not belong to the room
        """
        await self.gate.authorize_mutation(room_id, caller_id, action=None)
        
        image = await self.store.get_image(image_id)
        if image is None or image["room_id"] != str(room_id):
            raise ImageNotFoundError(str(image_id))
        
        await self.store.delete_image(image_id)
        
        if image.get("storage_path") and self.storage is not None:
            await self.storage.remove([image["storage_path"]])
        
        logger.info(f"Image {image_id} removed from room {room_id}")
