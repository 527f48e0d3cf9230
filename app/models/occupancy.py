# app/models/occupancy.py
"""
Occupancy tables.

occupancy_readings: append-only log of every reported headcount (audit/history).
current_occupancy : one row per space holding the latest computed state.
                     Overwritten as a whole on every reading; the version column
                     makes concurrent writers for the same space retry instead
                     of losing an update.
"""

import enum
from sqlalchemy import Column, Integer, String, DateTime, Float, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class CrowdLevel(str, enum.Enum):
    EMPTY = "EMPTY"
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    FULL = "FULL"


class OccupancyReading(Base):
    __tablename__ = "occupancy_readings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    space_id = Column(Integer, ForeignKey("spaces.id", ondelete="CASCADE"), nullable=False, index=True)
    count = Column(Integer, nullable=False)          # raw, never clamped
    source = Column(String(50))                      # sensor id | manual | reset
    recorded_at = Column(DateTime, nullable=False, index=True)

    space = relationship("Space", back_populates="readings")

    def __repr__(self):
        return f"<OccupancyReading {self.id} space={self.space_id} count={self.count}>"


class CurrentOccupancy(Base):
    __tablename__ = "current_occupancy"

    id = Column(Integer, primary_key=True, autoincrement=True)
    space_id = Column(Integer, ForeignKey("spaces.id", ondelete="CASCADE"),
                      unique=True, nullable=False, index=True)
    current_count = Column(Integer, nullable=False, default=0)
    percentage = Column(Float, nullable=False, default=0.0)   # clamped to [0, 100]
    crowd_level = Column(Enum(CrowdLevel, name="crowd_level"), nullable=False, default=CrowdLevel.EMPTY)
    reading_id = Column(Integer)                              # reading that produced this state
    updated_at = Column(DateTime, nullable=False)
    version = Column(Integer, nullable=False)

    space = relationship("Space", back_populates="current_occupancy")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return (f"<CurrentOccupancy space={self.space_id} count={self.current_count} "
                f"{self.percentage}% {self.crowd_level}>")
