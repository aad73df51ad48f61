"""
Profile endpoints for the signed-in user.
"""

from fastapi import APIRouter, Depends

from room_rental.services.identity import AuthUser
from room_rental.services.profile import ProfileService
from room_rental.schemas.profile import ProfileEnvelope, ProfileUpdate
from room_rental.services.error_handler import ERROR_RESPONSES
from room_rental.utils.dependencies import get_current_identity, get_profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get(
    "",
    response_model=ProfileEnvelope,
    summary="Get the caller's profile",
    responses={code: ERROR_RESPONSES[code] for code in (401, 404)}
)
async def get_profile(
    identity: AuthUser = Depends(get_current_identity),
    profile_service: ProfileService = Depends(get_profile_service)
) -> ProfileEnvelope:
    profile = await profile_service.get_profile(identity.id)
    return ProfileEnvelope.model_validate({"profile": profile})


@router.put(
    "",
    response_model=ProfileEnvelope,
    summary="Update the caller's profile",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 404)}
)
async def update_profile(
    payload: ProfileUpdate,
    identity: AuthUser = Depends(get_current_identity),
    profile_service: ProfileService = Depends(get_profile_service)
) -> ProfileEnvelope:
    """Only the caller's own profile row is ever updated."""
    profile = await profile_service.update_profile(identity.id, payload.to_update_dict())
    return ProfileEnvelope.model_validate({"profile": profile})
