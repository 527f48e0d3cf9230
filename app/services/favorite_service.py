# app/services/favorite_service.py
from datetime import datetime
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError
from app.models.favorite import Favorite
from app.models.space import Space
from app.schemas.common import PageParams
from app.services.space_service import get_space
from app.utils.pagination import paginate


def _find(db: Session, user_id: int, space_id: int):
    return (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id, Favorite.space_id == space_id)
        .first()
    )


def add_favorite(db: Session, user_id: int, space_id: int) -> Favorite:
    get_space(db, space_id)
    if _find(db, user_id, space_id):
        raise ConflictError(f"Space {space_id} is already a favorite")

    favorite = Favorite(user_id=user_id, space_id=space_id, created_at=datetime.utcnow())
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Space {space_id} is already a favorite")
    db.refresh(favorite)
    return favorite


def remove_favorite(db: Session, user_id: int, space_id: int) -> None:
    favorite = _find(db, user_id, space_id)
    if not favorite:
        raise NotFoundError(f"Space {space_id} is not in your favorites")
    db.delete(favorite)
    db.commit()


def list_favorite_spaces(db: Session, user_id: int, params: PageParams) -> Tuple[list, int]:
    """Favorite spaces of a user, most recently added first."""
    q = (
        db.query(Space)
        .join(Favorite, Favorite.space_id == Space.id)
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )
    return paginate(q, params)
