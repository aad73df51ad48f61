"""
Identity model backing the local identity provider.
Holds credentials and sign-up metadata; application data lives in Profile.
"""

from sqlalchemy import String, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from room_rental.database import Base
from datetime import datetime
from typing import Any, Dict, Optional


class Identity(Base):
    """Credential record owned by the identity provider."""
    
    __tablename__ = "identities"
    
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login email, normalized to lowercase"
    )
    
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )
    
    user_metadata: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Sign-up metadata (names, user type)"
    )
    
    email_confirmed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    
    confirmation_code: Mapped[Optional[str]] = mapped_column(
        String(64),
        unique=True,
        nullable=True,
        index=True,
        comment="One-time code exchanged at the auth callback"
    )
    
    confirmation_sent_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    
    last_sign_in_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    
    def __repr__(self) -> str:
        return f"<Identity(id={self.id}, email={self.email})>"
    
    @property
    def is_confirmed(self) -> bool:
        return self.email_confirmed_at is not None
