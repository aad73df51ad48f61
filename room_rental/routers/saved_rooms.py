"""
Saved-room endpoints for the signed-in user's bookmarks.
"""

from fastapi import APIRouter, Depends, Path, status
from uuid import UUID

from room_rental.services.identity import AuthUser
from room_rental.services.saved_room import SavedRoomManager
from room_rental.schemas.base import SuccessResponse
from room_rental.schemas.saved_room import (
    SavedRoomRequest,
    SaveResponse,
    ToggleResponse,
    SavedRoomListResponse,
    SavedRoomIdsResponse,
)
from room_rental.services.error_handler import ERROR_RESPONSES
from room_rental.utils.dependencies import get_current_identity, get_saved_room_manager

router = APIRouter(prefix="/saved-rooms", tags=["Saved Rooms"])


@router.get("", response_model=SavedRoomListResponse, summary="Rooms saved by the caller")
async def list_saved_rooms(
    identity: AuthUser = Depends(get_current_identity),
    saved_manager: SavedRoomManager = Depends(get_saved_room_manager)
) -> SavedRoomListResponse:
    """Most recently saved first; rooms deleted since are left out."""
    rooms = await saved_manager.list_saved(identity.id)
    return SavedRoomListResponse.model_validate({"saved_rooms": rooms, "count": len(rooms)})


@router.get("/ids", response_model=SavedRoomIdsResponse, summary="IDs of rooms saved by the caller")
async def saved_room_ids(
    identity: AuthUser = Depends(get_current_identity),
    saved_manager: SavedRoomManager = Depends(get_saved_room_manager)
) -> SavedRoomIdsResponse:
    room_ids = await saved_manager.saved_room_ids(identity.id)
    return SavedRoomIdsResponse.model_validate({"room_ids": room_ids})


@router.post(
    "",
    response_model=SaveResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a room",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 404)}
)
async def save_room(
    payload: SavedRoomRequest,
    identity: AuthUser = Depends(get_current_identity),
    saved_manager: SavedRoomManager = Depends(get_saved_room_manager)
) -> SaveResponse:
    """Saving an already saved room returns the existing bookmark."""
    record = await saved_manager.save(identity.id, payload.room_id)
    return SaveResponse.model_validate({"saved": True, "saved_room": record})


@router.post(
    "/toggle",
    response_model=ToggleResponse,
    summary="Save or unsave a room",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 404)}
)
async def toggle_saved_room(
    payload: SavedRoomRequest,
    identity: AuthUser = Depends(get_current_identity),
    saved_manager: SavedRoomManager = Depends(get_saved_room_manager)
) -> ToggleResponse:
    result = await saved_manager.toggle_save(identity.id, payload.room_id)
    return ToggleResponse.model_validate(result)


@router.delete("/{room_id}", response_model=SuccessResponse, summary="Unsave a room")
async def unsave_room(
    room_id: UUID = Path(..., description="Room ID"),
    identity: AuthUser = Depends(get_current_identity),
    saved_manager: SavedRoomManager = Depends(get_saved_room_manager)
) -> SuccessResponse:
    await saved_manager.unsave(identity.id, room_id)
    return SuccessResponse(success=True)
