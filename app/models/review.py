# app/models/review.py
"""Reviews table: at most one review per (user, space)."""

from sqlalchemy import Column, Integer, SmallInteger, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    space_id = Column(Integer, ForeignKey("spaces.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(SmallInteger, nullable=False)   # 1..5
    content = Column(Text)
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime)

    user = relationship("User", back_populates="reviews")
    space = relationship("Space", back_populates="reviews")

    __table_args__ = (
        UniqueConstraint("user_id", "space_id", name="uq_reviews_user_space"),
    )

    def __repr__(self):
        return f"<Review {self.id} user={self.user_id} space={self.space_id} rating={self.rating}>"
