"""
Session accessor: resolves the caller's identity from request credentials.
"""

from typing import Optional
import logging

from room_rental.services.identity import AuthUser, IdentityProvider

logger = logging.getLogger(__name__)


class SessionAccessor:
    """
    Read-only view of the current session.
    
    Unauthenticated callers are reported as None so handlers can branch on
    the result instead of catching exceptions.
    """
    
    def __init__(self, provider: IdentityProvider):
        self.provider = provider
    
    async def current_identity(self, token: Optional[str]) -> Optional[AuthUser]:
        """
        Args:
            token: Access token from the Authorization header or session cookie
            
        Returns:
            The identity behind a valid token, None otherwise
        """
        if not token:
            return None
        
        identity = await self.provider.get_user(token)
        if identity is None:
            logger.debug("Session credential present but not valid")
        return identity
