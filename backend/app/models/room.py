"""
Room model.

Key design decisions:
- `is_available` is an owner/admin toggle and says nothing about bookings;
  date availability is computed from the bookings table.
- `version` is bumped by every booking claim on the room. Booking creation
  only commits if the version it read is still current (optimistic locking).
"""

from sqlalchemy import Column, Integer, String, Numeric, Boolean, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)
    room_type = Column(String(100), nullable=False)
    price_per_night = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False, default=2)
    amenities = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    hotel = relationship("Hotel", back_populates="rooms", lazy="joined")
    bookings = relationship("Booking", back_populates="room")

    __table_args__ = (
        CheckConstraint("price_per_night > 0", name="check_room_price_positive"),
        CheckConstraint("capacity > 0", name="check_room_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, hotel={self.hotel_id}, type={self.room_type}, v={self.version})>"
