# app/models/space.py
"""
Spaces table: physical locations whose occupancy is tracked.
Deleting a space removes its occupancy state, readings, reviews and favorites.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Space(Base):
    __tablename__ = "spaces"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    description = Column(Text)
    capacity = Column(Integer, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime)

    owner = relationship("User", back_populates="spaces")
    current_occupancy = relationship("CurrentOccupancy", back_populates="space", uselist=False,
                                     cascade="all, delete-orphan")
    readings = relationship("OccupancyReading", back_populates="space",
                            cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="space",
                           cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="space",
                             cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Space {self.id} {self.name!r} capacity={self.capacity}>"
