# app/schemas/occupancy.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.models.occupancy import CrowdLevel


class OccupancyReport(BaseModel):
    count: int = Field(..., ge=0, description="Reported headcount; may exceed capacity")
    source: Optional[str] = Field(None, max_length=50)


class CurrentOccupancyOut(BaseModel):
    space_id: int
    current_count: int
    percentage: float
    crowd_level: CrowdLevel
    updated_at: datetime

    class Config:
        from_attributes = True


class OccupancyReadingOut(BaseModel):
    id: int
    space_id: int
    count: int
    source: Optional[str]
    recorded_at: datetime

    class Config:
        from_attributes = True
