"""
Room listing endpoints: search, featured, owner dashboard, detail and owner-only mutations.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from typing import Optional
from uuid import UUID

from room_rental.models.room import PropertyType, TenantPreference
from room_rental.services.identity import AuthUser
from room_rental.services.listing import ListingQueryBuilder, FEATURED_ROOMS_LIMIT
from room_rental.services.room import RoomService
from room_rental.schemas.base import SuccessResponse
from room_rental.schemas.room import RoomCreate, RoomUpdate, RoomEnvelope, RoomListResponse
from room_rental.services.error_handler import ERROR_RESPONSES
from room_rental.store.base import RoomFilters
from room_rental.utils.dependencies import (
    get_current_identity,
    get_listing_builder,
    get_room_service,
)

router = APIRouter(prefix="/rooms", tags=["Rooms"])


def _listing(rooms) -> RoomListResponse:
    return RoomListResponse.model_validate({"rooms": rooms, "count": len(rooms)})


@router.get(
    "",
    response_model=RoomListResponse,
    summary="Search available rooms",
    responses={code: ERROR_RESPONSES[code] for code in (400, 500)}
)
async def list_rooms(
    location: Optional[str] = Query(None, description="Case-insensitive substring of the location"),
    min_price: Optional[int] = Query(None, alias="minPrice", ge=0, description="Minimum rent, inclusive"),
    max_price: Optional[int] = Query(None, alias="maxPrice", ge=0, description="Maximum rent, inclusive"),
    property_type: Optional[PropertyType] = Query(None, alias="propertyType"),
    tenant_preference: Optional[TenantPreference] = Query(None, alias="tenantPref"),
    listing_builder: ListingQueryBuilder = Depends(get_listing_builder)
) -> RoomListResponse:
    """
    List available rooms matching every given filter, newest first.
    Each room carries its images and an owner summary when the store can provide it.
    """
    filters = RoomFilters(
        location=location.strip() if location and location.strip() else None,
        min_price=min_price,
        max_price=max_price,
        property_type=property_type,
        tenant_preference=tenant_preference,
    )
    rooms = await listing_builder.build_and_run(filters)
    return _listing(rooms)


@router.get("/featured", response_model=RoomListResponse, summary="Newest available rooms")
async def featured_rooms(
    limit: int = Query(FEATURED_ROOMS_LIMIT, ge=1, le=50),
    listing_builder: ListingQueryBuilder = Depends(get_listing_builder)
) -> RoomListResponse:
    rooms = await listing_builder.featured(limit)
    return _listing(rooms)


@router.get(
    "/mine",
    response_model=RoomListResponse,
    summary="Rooms owned by the caller",
    responses={code: ERROR_RESPONSES[code] for code in (401,)}
)
async def my_rooms(
    identity: AuthUser = Depends(get_current_identity),
    listing_builder: ListingQueryBuilder = Depends(get_listing_builder)
) -> RoomListResponse:
    """Owner dashboard listing, including rooms marked unavailable."""
    rooms = await listing_builder.owner_rooms(identity.id)
    return _listing(rooms)


@router.post(
    "",
    response_model=RoomEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a room listing",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 500)}
)
async def create_room(
    payload: RoomCreate,
    identity: AuthUser = Depends(get_current_identity),
    room_service: RoomService = Depends(get_room_service)
) -> RoomEnvelope:
    """
    Create a room owned by the caller.
    imageUrls, when given, are attached afterwards in order; images that fail are skipped.
    """
    room_data = payload.model_dump(exclude={"image_urls"})
    room = await room_service.create_room(identity.id, room_data, image_urls=payload.image_urls)
    return RoomEnvelope.model_validate({"room": room})


@router.get(
    "/{room_id}",
    response_model=RoomEnvelope,
    summary="Room detail with images and owner contact",
    responses={code: ERROR_RESPONSES[code] for code in (404, 500)}
)
async def get_room(
    room_id: UUID = Path(..., description="Room ID"),
    room_service: RoomService = Depends(get_room_service)
) -> RoomEnvelope:
    room = await room_service.get_room(room_id)
    return RoomEnvelope.model_validate({"room": room})


@router.put(
    "/{room_id}",
    response_model=RoomEnvelope,
    summary="Update a room (owner only)",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 403)}
)
async def update_room(
    payload: RoomUpdate,
    room_id: UUID = Path(..., description="Room ID"),
    identity: AuthUser = Depends(get_current_identity),
    room_service: RoomService = Depends(get_room_service)
) -> RoomEnvelope:
    room = await room_service.update_room(room_id, identity.id, payload.to_update_dict())
    return RoomEnvelope.model_validate({"room": room})


@router.delete(
    "/{room_id}",
    response_model=SuccessResponse,
    summary="Delete a room (owner only)",
    responses={code: ERROR_RESPONSES[code] for code in (401, 403)}
)
async def delete_room(
    room_id: UUID = Path(..., description="Room ID"),
    identity: AuthUser = Depends(get_current_identity),
    room_service: RoomService = Depends(get_room_service)
) -> SuccessResponse:
    await room_service.delete_room(room_id, identity.id)
    return SuccessResponse(success=True)
