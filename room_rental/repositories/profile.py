"""
Repository for Profile records.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from room_rental.repositories.base import BaseRepository
from room_rental.models.profile import Profile
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository[Profile]):
    """Repository for profile rows keyed by identity id."""
    
    def __init__(self, db: AsyncSession):
        super().__init__(Profile, db)
    
    async def create_profile(self, profile_data: Dict[str, Any]) -> Profile:
        """
        Insert the profile created alongside a new identity.
        
        Args:
            profile_data: Profile columns; "id" must be the identity id
            
        Returns:
            Created profile
        """
        if not profile_data.get("id"):
            raise ValueError("Profile id is required")
        
        profile = await self.create(profile_data)
        logger.info(f"Created profile for {profile.email} (ID: {profile.id})")
        return profile
