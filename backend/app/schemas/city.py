"""
Pydantic schemas for the city catalog.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class CityCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=1000)
    image: Optional[str] = Field(default=None, max_length=500)


class CityResponse(BaseModel):
    id: int
    name: str
    description: str
    image: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}
