"""
Booking model representing a guest's stay in a room.

Key design decisions:
- check_in/check_out are calendar dates; time of day never matters
- Status fields allow cancellation and refunds without deleting records
- pending/confirmed bookings occupy the calendar, cancelled/refunded do not
- Overlap between active bookings is prevented by the booking service
  (per-room lock plus the room version check), not by a table constraint
"""

from enum import Enum

from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    AWAITING = "awaiting"
    PAID = "paid"
    FAILED = "failed"


class RefundStatus(str, Enum):
    NONE = "none"
    REQUESTED = "requested"
    REFUNDED = "refunded"


# Statuses that still hold the room's calendar
ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    guests = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    payment_method = Column(String(50), nullable=False, default="Pay At Hotel")
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.AWAITING.value)
    refund_status = Column(String(20), nullable=False, default=RefundStatus.NONE.value)

    user = relationship("User", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("check_out > check_in", name="check_booking_dates_ordered"),
        CheckConstraint("guests > 0", name="check_booking_guests_positive"),
        CheckConstraint("total_price > 0", name="check_booking_price_positive"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'refunded')",
            name="check_booking_status",
        ),
        CheckConstraint(
            "payment_status IN ('awaiting', 'paid', 'failed')",
            name="check_booking_payment_status",
        ),
        CheckConstraint(
            "refund_status IN ('none', 'requested', 'refunded')",
            name="check_booking_refund_status",
        ),
        # Availability lookups: active bookings of one room by date
        Index("ix_bookings_room_status_dates", "room_id", "status", "check_in", "check_out"),
    )

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, room={self.room_id}, {self.check_in}..{self.check_out}, "
            f"status={self.status}, payment={self.payment_status})>"
        )
