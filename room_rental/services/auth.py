"""
Authentication service for sign-up, login, email confirmation and token refresh.
Validates input, delegates credentials to the identity provider and keeps the
profile row in step with the identity.
"""

from typing import Optional
import logging

from room_rental.models.profile import UserType
from room_rental.services.identity import (
    AuthSession,
    AuthUser,
    IdentityProvider,
    IdentityProviderError,
)
from room_rental.store.base import RoomStore, StoreError
from room_rental.utils.exceptions import (
    ValidationError,
    InvalidCredentialsError,
    EmailNotConfirmedError,
    InvalidTokenError,
    UpstreamFailureError,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    """
    Authentication flows on top of an IdentityProvider.
    """
    
    def __init__(self, provider: IdentityProvider, store: RoomStore):
        self.provider = provider
        self.store = store
    
    async def sign_up(
        self,
        email: Optional[str],
        password: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
        user_type: Optional[str],
        redirect_to: Optional[str] = None
    ) -> AuthUser:
        """
        Register an identity and create its profile.
        
        If the profile cannot be written the identity is deleted again, so a
        failed sign-up leaves neither record behind.
        
        Args:
            email: Login email
            password: Plain text password, at least 8 characters
            first_name: Profile first name
            last_name: Profile last name
            user_type: "owner" or "finder"
            redirect_to: Landing URL for the confirmation link
            
        Returns:
            The new identity
            
        Raises:
            ValidationError: If input is missing or invalid, or the provider rejects it
            UpstreamFailureError: If the provider or the store fails
        """
        if not email or not password or not first_name or not last_name or not user_type:
            raise ValidationError("Missing required fields")
        
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        
        try:
            user_type = UserType(user_type).value
        except ValueError:
            allowed = ", ".join(member.value for member in UserType)
            raise ValidationError(f"Invalid user type '{user_type}'. Must be one of: {allowed}")
        
        metadata = {"first_name": first_name, "last_name": last_name, "user_type": user_type}
        
        try:
            identity = await self.provider.sign_up(email, password, metadata, redirect_to=redirect_to)
        except IdentityProviderError as e:
            if e.status >= 500:
                raise UpstreamFailureError(e.message)
            logger.warning(f"Sign up rejected for {email}: {e.message}")
            raise ValidationError(e.message)
        
        try:
            await self.store.create_profile({
                "id": identity.id,
                "email": identity.email,
                "first_name": first_name,
                "last_name": last_name,
                "user_type": user_type,
            })
        except StoreError as e:
            logger.error(f"Profile creation failed for {identity.id}, rolling back identity: {e}")
            try:
                await self.provider.delete_user(identity.id)
            except Exception as rollback_error:
                logger.error(f"Identity rollback failed for {identity.id}: {rollback_error}")
            raise UpstreamFailureError("Failed to create profile")
        
        logger.info(f"User signed up: {identity.email} ({user_type})")
        return identity
    
    async def login(self, email: Optional[str], password: Optional[str]) -> AuthSession:
        """
        Authenticate with email and password.
        
        Raises:
            ValidationError: If email or password is missing
            InvalidCredentialsError: If credentials are wrong
            EmailNotConfirmedError: If the email has not been confirmed yet
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        
        try:
            session = await self.provider.sign_in_with_password(email, password)
        except IdentityProviderError as e:
            if e.status >= 500:
                raise UpstreamFailureError(e.message)
            if e.code == "email_not_confirmed":
                raise EmailNotConfirmedError()
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()
        
        logger.info(f"User authenticated successfully: {session.user.email}")
        return session
    
    async def exchange_code(self, code: str) -> AuthSession:
        """
        Raises:
            IdentityProviderError: If the code cannot be exchanged
        """
        return await self.provider.exchange_code_for_session(code)
    
    async def refresh(self, refresh_token: Optional[str]) -> AuthSession:
        if not refresh_token:
            raise ValidationError.missing_fields(["refresh_token"])
        
        try:
            return await self.provider.refresh_session(refresh_token)
        except IdentityProviderError as e:
            raise InvalidTokenError(e.message)
