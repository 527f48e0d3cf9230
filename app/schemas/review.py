# app/schemas/review.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    content: Optional[str] = Field(None, max_length=2000)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    content: Optional[str] = Field(None, max_length=2000)

    @field_validator("rating")
    @classmethod
    def rating_not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not set to null")
        return v


class ReviewOut(BaseModel):
    id: int
    user_id: int
    space_id: int
    rating: int
    content: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class RatingSummary(BaseModel):
    space_id: int
    review_count: int
    average_rating: Optional[float]
