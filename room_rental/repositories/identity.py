"""
Repository for identities held by the local identity provider.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from room_rental.repositories.base import BaseRepository
from room_rental.models.identity import Identity
from typing import Optional


class IdentityRepository(BaseRepository[Identity]):
    
    def __init__(self, db: AsyncSession):
        super().__init__(Identity, db)
    
    async def get_by_email(self, email: str) -> Optional[Identity]:
        return await self.get_by_field("email", email.lower().strip())
    
    async def get_by_confirmation_code(self, code: str) -> Optional[Identity]:
        return await self.get_by_field("confirmation_code", code)
