"""
Identity provider interface and the local password/JWT implementation.
The provider owns credentials; application data lives in profiles.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging
import uuid

from email_validator import validate_email, EmailNotValidError
from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from room_rental.database import as_utc
from room_rental.config import Settings
from room_rental.models.identity import Identity
from room_rental.repositories.identity import IdentityRepository
from room_rental.utils.security import (
    build_password_context,
    create_access_token,
    create_refresh_token,
    verify_token,
    generate_confirmation_code,
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    """Identity as seen by request handlers."""
    
    id: uuid.UUID
    email: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    def to_dict(self) -> Dict[str, Any]:
        return {"id": str(self.id), "email": self.email, "metadata": dict(self.metadata)}


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str
    expires_in: int
    user: AuthUser
    token_type: str = "bearer"
    
    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["user"] = self.user.to_dict()
        return result


class IdentityProviderError(Exception):
    """
    Failure reported by the identity provider.
    
    status is the HTTP status the provider would answer with: 4xx for
    rejections of the caller's input, 500 for the provider's own failures.
    """
    
    def __init__(self, message: str, code: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status


class IdentityProvider(ABC):
    """Contract for credential management and session issuance."""
    
    @abstractmethod
    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Dict[str, Any],
        redirect_to: Optional[str] = None
    ) -> AuthUser:
        ...
    
    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...
    
    @abstractmethod
    async def exchange_code_for_session(self, code: str) -> AuthSession:
        ...
    
    @abstractmethod
    async def refresh_session(self, refresh_token: str) -> AuthSession:
        ...
    
    @abstractmethod
    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Identity behind a valid access token, or None."""
    
    @abstractmethod
    async def delete_user(self, user_id: uuid.UUID) -> None:
        ...


class LocalIdentityProvider(IdentityProvider):
    """
    Identity provider backed by the identities table.
    
    Passwords are bcrypt hashes, sessions are signed JWT pairs. Email
    confirmation links are written to the log instead of being mailed.
    """
    
    def __init__(self, db: AsyncSession, settings: Settings):
        self.settings = settings
        self.identities = IdentityRepository(db)
        self.pwd_context = build_password_context(settings.password_hash_rounds)
    
    def _normalize_email(self, email: str) -> str:
        try:
            return validate_email(email, check_deliverability=False).normalized.lower()
        except EmailNotValidError as e:
            raise IdentityProviderError(str(e), code="invalid_email")
    
    def _to_user(self, identity: Identity) -> AuthUser:
        return AuthUser(id=identity.id, email=identity.email, metadata=dict(identity.user_metadata or {}))
    
    def _issue_session(self, identity: Identity) -> AuthSession:
        return AuthSession(
            access_token=create_access_token(self.settings, identity.id, identity.email),
            refresh_token=create_refresh_token(self.settings, identity.id, identity.email),
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=self._to_user(identity),
        )
    
    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Dict[str, Any],
        redirect_to: Optional[str] = None
    ) -> AuthUser:
        """
        Register a new identity.
        
        Args:
            email: Login email
            password: Plain text password
            metadata: Sign-up metadata stored with the identity
            redirect_to: Where the confirmation link should land
            
        Returns:
            The created identity
            
        Raises:
            IdentityProviderError: If the email is invalid or already registered
        """
        normalized_email = self._normalize_email(email)
        
        try:
            if await self.identities.get_by_email(normalized_email):
                raise IdentityProviderError("User already registered", code="user_already_exists")
            
            now = datetime.now(timezone.utc)
            confirmation_code = generate_confirmation_code()
            identity = await self.identities.create({
                "email": normalized_email,
                "hashed_password": self.pwd_context.hash(password),
                "user_metadata": dict(metadata),
                "confirmation_code": confirmation_code,
                "confirmation_sent_at": now,
                "email_confirmed_at": None if self.settings.require_email_confirmation else now,
            })
        except IntegrityError:
            raise IdentityProviderError("User already registered", code="user_already_exists")
        except SQLAlchemyError as e:
            logger.error(f"Identity store failure during sign up: {e}")
            raise IdentityProviderError("Identity store unavailable", code="unexpected_failure", status=500)
        
        callback = redirect_to or f"{self.settings.app_url}/auth/callback"
        logger.info(f"Confirmation link for {normalized_email}: {callback}?code={confirmation_code}")
        return self._to_user(identity)
    
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        try:
            identity = await self.identities.get_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"Identity store failure during sign in: {e}")
            raise IdentityProviderError("Identity store unavailable", code="unexpected_failure", status=500)
        
        if identity is None or not self.pwd_context.verify(password, identity.hashed_password):
            raise IdentityProviderError("Invalid login credentials", code="invalid_credentials", status=401)
        
        if not identity.is_confirmed:
            raise IdentityProviderError("Email not confirmed", code="email_not_confirmed", status=401)
        
        await self.identities.update(identity.id, {"last_sign_in_at": datetime.now(timezone.utc)})
        return self._issue_session(identity)
    
    async def exchange_code_for_session(self, code: str) -> AuthSession:
        """
        Confirm the email behind a one-time code and start a session.
        
        Raises:
            IdentityProviderError: If the code is unknown or expired
        """
        identity = await self.identities.get_by_confirmation_code(code)
        if identity is None:
            raise IdentityProviderError("Invalid or used confirmation code", code="invalid_grant", status=401)
        
        now = datetime.now(timezone.utc)
        sent_at = as_utc(identity.confirmation_sent_at)
        expiry = timedelta(hours=self.settings.confirmation_code_expire_hours)
        if sent_at is None or now - sent_at > expiry:
            raise IdentityProviderError("Confirmation code has expired", code="invalid_grant", status=401)
        
        identity = await self.identities.update(identity.id, {
            "email_confirmed_at": identity.email_confirmed_at or now,
            "confirmation_code": None,
            "last_sign_in_at": now,
        })
        logger.info(f"Email confirmed for {identity.email}")
        return self._issue_session(identity)
    
    async def refresh_session(self, refresh_token: str) -> AuthSession:
        try:
            payload = verify_token(self.settings, refresh_token, token_type=REFRESH_TOKEN_TYPE)
            identity = await self.identities.get_by_id(uuid.UUID(payload.user_id))
        except (JWTError, ValueError) as e:
            raise IdentityProviderError(f"Invalid refresh token: {e}", code="invalid_grant", status=401)
        
        if identity is None:
            raise IdentityProviderError("User not found", code="user_not_found", status=401)
        
        return self._issue_session(identity)
    
    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        try:
            payload = verify_token(self.settings, access_token, token_type=ACCESS_TOKEN_TYPE)
            user_id = uuid.UUID(payload.user_id)
        except (JWTError, ValueError) as e:
            logger.debug(f"Rejected access token: {e}")
            return None
        
        identity = await self.identities.get_by_id(user_id)
        if identity is None:
            return None
        
        return self._to_user(identity)
    
    async def delete_user(self, user_id: uuid.UUID) -> None:
        deleted = await self.identities.delete(user_id)
        if deleted:
            logger.info(f"Deleted identity {user_id}")
