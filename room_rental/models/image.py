"""
RoomImage model for listing galleries.
Stores the public image reference and its position in the gallery.
"""

from sqlalchemy import String, Integer, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from room_rental.database import Base, as_utc
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from room_rental.models.room import Room


class RoomImage(Base):
    """
    Image attached to a room.
    display_order defines the gallery sequence; ties keep insertion order.
    """
    
    __tablename__ = "room_images"
    
    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Room this image belongs to"
    )
    
    image_url: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Public URL of the image"
    )
    
    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Position in the gallery"
    )
    
    storage_path: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
        comment="Object storage key when the file was uploaded through this service"
    )
    
    room: Mapped["Room"] = relationship(
        "Room",
        back_populates="images",
        lazy="raise"
    )
    
    def __repr__(self) -> str:
        return f"<RoomImage(id={self.id}, room_id={self.room_id}, display_order={self.display_order})>"
    
    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "room_id": str(self.room_id),
            "image_url": self.image_url,
            "display_order": self.display_order,
            "storage_path": self.storage_path,
            "created_at": as_utc(self.created_at).isoformat(),
        }


room_images_order_index = Index(
    'idx_room_images_room_order',
    RoomImage.room_id,
    RoomImage.display_order.asc(),
    RoomImage.created_at.asc()
)
