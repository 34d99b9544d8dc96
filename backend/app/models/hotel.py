"""
Hotel listing. A registration starts pending and only approved hotels are
shown to guests or may add rooms.
"""

from enum import Enum

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class HotelStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class Hotel(Base, TimestampMixin):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    contact = Column(String(50), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=HotelStatus.PENDING.value, index=True)
    # One hotel per owner
    owner_id = Column(String(64), ForeignKey("users.id"), nullable=False, unique=True)

    owner = relationship("User", back_populates="hotels")
    rooms = relationship("Room", back_populates="hotel")

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name={self.name}, status={self.status})>"
