"""
Profile service: read and update the caller's own profile.
"""

from typing import Any, Dict
import logging
import uuid

from room_rental.store.base import RoomStore
from room_rental.utils.exceptions import ProfileNotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Profile columns a user may change; email and id follow the identity
UPDATABLE_PROFILE_FIELDS = ("first_name", "last_name", "phone_number", "user_type")
REQUIRED_PROFILE_FIELDS = ("first_name", "last_name", "user_type")


class ProfileService:
    
    def __init__(self, store: RoomStore):
        self.store = store
    
    async def get_profile(self, user_id: uuid.UUID) -> Dict[str, Any]:
        profile = await self.store.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(str(user_id))
        return profile
    
    async def update_profile(self, user_id: uuid.UUID, profile_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update the caller's profile.
        
        Args:
            user_id: Identity of the caller; only this profile is touched
            profile_data: Changed fields in snake_case
            
        Returns:
            Updated profile
            
        Raises:
            ValidationError: If a required field is cleared
            ProfileNotFoundError: If the caller has no profile row
        """
        update_data = {key: value for key, value in profile_data.items() if key in UPDATABLE_PROFILE_FIELDS}
        
        cleared = [name for name in REQUIRED_PROFILE_FIELDS if name in update_data and not update_data[name]]
        if cleared:
            raise ValidationError.missing_fields(cleared)
        
        if not update_data:
            return await self.get_profile(user_id)
        
        profile = await self.store.update_profile(user_id, update_data)
        if profile is None:
            raise ProfileNotFoundError(str(user_id))
        
        logger.info(f"Profile {user_id} updated: {sorted(update_data)}")
        return profile
