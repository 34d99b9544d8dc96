from sqlalchemy import Column, Integer, String

from app.db.base import Base, TimestampMixin


class City(Base, TimestampMixin):
    """Destination shown in the city picker; curated by admins."""
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(1000), nullable=False, default="")
    image = Column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<City(id={self.id}, name={self.name})>"
