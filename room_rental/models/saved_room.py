"""
SavedRoom model: a finder's bookmark on a room.
"""

from sqlalchemy import ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from room_rental.database import Base, as_utc
import uuid


class SavedRoom(Base):
    """
    Join record between a profile and a room.
    
    room_id is a weak reference with no foreign key: deleting a room leaves its
    bookmarks in place and readers skip the dangling ones.
    """
    
    __tablename__ = "saved_rooms"
    __table_args__ = (
        UniqueConstraint("user_id", "room_id", name="uq_saved_rooms_user_room"),
    )
    
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Profile that saved the room"
    )
    
    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        comment="Saved room (weak reference)"
    )
    
    def __repr__(self) -> str:
        return f"<SavedRoom(user_id={self.user_id}, room_id={self.room_id})>"
    
    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "room_id": str(self.room_id),
            "created_at": as_utc(self.created_at).isoformat(),
        }


saved_rooms_user_created_index = Index(
    'idx_saved_rooms_user_created',
    SavedRoom.user_id,
    SavedRoom.created_at.desc()
)
