"""
Room model for rental listings.
Handles listing data, availability and the image/owner relationships.
"""

from sqlalchemy import String, Text, Integer, Boolean, JSON, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from room_rental.database import Base, as_utc
import enum
import uuid
from typing import Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from room_rental.models.profile import Profile
    from room_rental.models.image import RoomImage


def _enum_values(members) -> List[str]:
    return [member.value for member in members]


class PropertyType(str, enum.Enum):
    """Layout of the rented unit."""
    ONE_BHK = "1 BHK"
    TWO_BHK = "2 BHK"
    ONE_BED = "1 Bed"
    TWO_BED = "2 Bed"
    THREE_BED = "3 Bed"


class TenantPreference(str, enum.Enum):
    """Tenants the owner is looking for."""
    BACHELOR = "Bachelor"
    FAMILY = "Family"
    GIRLS = "Girls"
    WORKING = "Working"


class Room(Base):
    """
    Room listing owned by a single profile.
    Only the owner may update or delete it; deletion cascades to its images.
    """
    
    __tablename__ = "rooms"
    
    # Ownership
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Profile that owns this listing"
    )
    
    # Basic listing information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Listing title"
    )
    
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Free-form listing description"
    )
    
    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Area / address of the room"
    )
    
    rent_price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Monthly rent in whole currency units"
    )
    
    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, native_enum=False, length=16, values_callable=_enum_values),
        nullable=False,
        index=True,
        comment="Unit layout"
    )
    
    tenant_preference: Mapped[TenantPreference] = mapped_column(
        SQLEnum(TenantPreference, native_enum=False, length=16, values_callable=_enum_values),
        nullable=False,
        index=True,
        comment="Preferred tenant type"
    )
    
    owner_contact_number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Phone number finders should call"
    )
    
    amenities: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered list of amenity names"
    )
    
    area_sqft: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Carpet area in square feet"
    )
    
    floor_number: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Floor the room is on"
    )
    
    is_available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the listing is shown in search"
    )
    
    # Relationships
    owner: Mapped["Profile"] = relationship(
        "Profile",
        back_populates="rooms",
        lazy="raise"
    )
    
    images: Mapped[List["RoomImage"]] = relationship(
        "RoomImage",
        back_populates="room",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
        order_by="[RoomImage.display_order, RoomImage.created_at, RoomImage.id]"
    )
    
    def __repr__(self) -> str:
        return f"<Room(id={self.id}, title={self.title[:30]}, rent_price={self.rent_price})>"
    
    def validate_rent_price(self) -> None:
        """
        Raises:
            ValueError: If rent is negative
        """
        if self.rent_price is None or self.rent_price < 0:
            raise ValueError("Rent price cannot be negative")
    
    def validate_area(self) -> None:
        """
        Raises:
            ValueError: If area is negative
        """
        if self.area_sqft is not None and self.area_sqft < 0:
            raise ValueError("Area cannot be negative")
    
    def validate_all(self) -> None:
        """
        Run all validation checks on the room.
        
        Raises:
            ValueError: If any validation fails
        """
        self.validate_rent_price()
        self.validate_area()
    
    def to_dict(
        self,
        include_images: bool = False,
        owner_fields: Optional[Iterable[str]] = None
    ) -> dict:
        """
        Convert room to dictionary.
        
        Args:
            include_images: Whether to include the ordered image list (must be loaded)
            owner_fields: Owner profile fields to denormalize under "owner" (must be loaded)
            
        Returns:
            Dictionary representation of the room
        """
        result = {
            "id": str(self.id),
            "owner_id": str(self.owner_id),
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "rent_price": self.rent_price,
            "property_type": self.property_type.value,
            "tenant_preference": self.tenant_preference.value,
            "owner_contact_number": self.owner_contact_number,
            "amenities": list(self.amenities or []),
            "area_sqft": self.area_sqft,
            "floor_number": self.floor_number,
            "is_available": self.is_available,
            "created_at": as_utc(self.created_at).isoformat(),
            "updated_at": as_utc(self.updated_at).isoformat(),
        }
        
        if include_images:
            result["images"] = [image.to_dict() for image in self.images]
        
        if owner_fields is not None:
            result["owner"] = self.owner.to_dict(owner_fields) if self.owner else None
        
        return result


# Search filters always include availability and newest-first ordering
available_created_index = Index(
    'idx_rooms_available_created',
    Room.is_available,
    Room.created_at.desc()
)

search_optimization_index = Index(
    'idx_rooms_search',
    Room.is_available,
    Room.property_type,
    Room.tenant_preference,
    Room.rent_price
)
