"""
Profile model for marketplace users.
One profile per identity; the profile id is the identity id issued at sign-up.
"""

from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from room_rental.database import Base, as_utc
from typing import Iterable, List, Optional, TYPE_CHECKING
import enum

if TYPE_CHECKING:
    from room_rental.models.room import Room


class UserType(str, enum.Enum):
    """Marketplace role chosen at sign-up."""
    OWNER = "owner"
    FINDER = "finder"


PROFILE_FIELDS = ("id", "email", "first_name", "last_name", "user_type", "phone_number")


class Profile(Base):
    """
    Profile record for owners and finders.
    Created at sign-up and updated by its owner; never deleted by the application.
    """
    
    __tablename__ = "profiles"
    
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Email address copied from the identity"
    )
    
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="User's first name"
    )
    
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="User's last name"
    )
    
    user_type: Mapped[UserType] = mapped_column(
        SQLEnum(
            UserType,
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        index=True,
        comment="owner or finder"
    )
    
    phone_number: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True,
        comment="Optional contact number"
    )
    
    # Relationships
    rooms: Mapped[List["Room"]] = relationship(
        "Room",
        back_populates="owner",
        lazy="raise"
    )
    
    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email}, user_type={self.user_type})>"
    
    @property
    def is_owner(self) -> bool:
        return self.user_type == UserType.OWNER
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
    
    def to_dict(self, fields: Optional[Iterable[str]] = None) -> dict:
        """
        Convert profile to dictionary.
        
        Args:
            fields: Optional subset of fields to include (all profile fields by default)
            
        Returns:
            Dictionary representation of the profile
        """
        result = {
            "id": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "user_type": self.user_type.value if self.user_type else None,
            "phone_number": self.phone_number,
            "created_at": as_utc(self.created_at).isoformat() if self.created_at else None,
            "updated_at": as_utc(self.updated_at).isoformat() if self.updated_at else None,
        }
        
        if fields is not None:
            return {key: result[key] for key in fields}
        
        return result
