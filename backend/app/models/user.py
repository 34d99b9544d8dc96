"""
User record mirrored from the external auth provider.
The primary key is the provider's user id.
"""

from sqlalchemy import Column, String, Boolean, JSON
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), index=True, nullable=False)
    username = Column(String(100), nullable=False)
    image = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default="user")  # see app.core.permissions.Role
    recent_searched_cities = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)

    hotels = relationship("Hotel", back_populates="owner")
    bookings = relationship("Booking", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
