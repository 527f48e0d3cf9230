# app/models/favorite.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    space_id = Column(Integer, ForeignKey("spaces.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="favorites")
    space = relationship("Space", back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "space_id", name="uq_favorites_user_space"),
    )

    def __repr__(self):
        return f"<Favorite user={self.user_id} space={self.space_id}>"
