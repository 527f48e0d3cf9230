# app/schemas/favorite.py
from pydantic import BaseModel
from datetime import datetime


class FavoriteOut(BaseModel):
    id: int
    user_id: int
    space_id: int
    created_at: datetime

    class Config:
        from_attributes = True
