"""
Room image endpoints: list, attach by URL, upload and remove.
"""

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from typing import Optional
from uuid import UUID

from room_rental.services.identity import AuthUser
from room_rental.services.image import ImageAttachmentManager
from room_rental.schemas.base import SuccessResponse
from room_rental.schemas.image import ImageCreate, ImageEnvelope, ImageListResponse
from room_rental.services.error_handler import ERROR_RESPONSES
from room_rental.utils.dependencies import get_current_identity, get_image_manager

router = APIRouter(prefix="/rooms/{room_id}/images", tags=["Images"])


@router.get("", response_model=ImageListResponse, summary="Images of a room in gallery order")
async def list_images(
    room_id: UUID = Path(..., description="Room ID"),
    image_manager: ImageAttachmentManager = Depends(get_image_manager)
) -> ImageListResponse:
    images = await image_manager.list_images(room_id)
    return ImageListResponse.model_validate({"images": images})


@router.post(
    "",
    response_model=ImageEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Attach an image URL (owner only)",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 403)}
)
async def attach_image(
    payload: ImageCreate,
    room_id: UUID = Path(..., description="Room ID"),
    identity: AuthUser = Depends(get_current_identity),
    image_manager: ImageAttachmentManager = Depends(get_image_manager)
) -> ImageEnvelope:
    image = await image_manager.attach_image(room_id, identity.id, payload.image_url, payload.display_order)
    return ImageEnvelope.model_validate({"image": image})


@router.post(
    "/upload",
    response_model=ImageEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image file (owner only)",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 403)}
)
async def upload_image(
    room_id: UUID = Path(..., description="Room ID"),
    file: UploadFile = File(..., description="JPEG, PNG or WebP image"),
    display_order: Optional[int] = Form(None, alias="displayOrder", ge=0),
    identity: AuthUser = Depends(get_current_identity),
    image_manager: ImageAttachmentManager = Depends(get_image_manager)
) -> ImageEnvelope:
    """
    Store the file in the image bucket under the caller's directory and attach its public URL.
    """
    image = await image_manager.upload_image(room_id, identity.id, file, display_order)
    return ImageEnvelope.model_validate({"image": image})


@router.delete(
    "/{image_id}",
    response_model=SuccessResponse,
    summary="Remove an image (owner only)",
    responses={code: ERROR_RESPONSES[code] for code in (401, 403, 404)}
)
async def delete_image(
    room_id: UUID = Path(..., description="Room ID"),
    image_id: UUID = Path(..., description="Image ID"),
    identity: AuthUser = Depends(get_current_identity),
    image_manager: ImageAttachmentManager = Depends(get_image_manager)
) -> SuccessResponse:
    await image_manager.delete_image(room_id, image_id, identity.id)
    return SuccessResponse(success=True)
