# app/schemas/space.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from app.schemas.occupancy import CurrentOccupancyOut


class SpaceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    capacity: int = Field(..., gt=0)
    description: Optional[str] = None


class SpaceUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    capacity: Optional[int] = Field(None, gt=0)
    description: Optional[str] = None

    @field_validator("name", "address", "capacity")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not set to null")
        return v


class SpaceOut(BaseModel):
    id: int
    name: str
    address: str
    description: Optional[str]
    capacity: int
    owner_id: int
    created_at: datetime
    updated_at: Optional[datetime]
    current_occupancy: Optional[CurrentOccupancyOut] = None

    class Config:
        from_attributes = True
