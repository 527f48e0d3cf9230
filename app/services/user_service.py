# app/services/user_service.py
"""
User profile management and admin helpers.
Signup/login live in auth_service.
"""

from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, UnauthorizedError
from app.models.user import Role, User
from app.schemas.common import PageParams
from app.schemas.user import ProfileUpdate
from app.services.auth_service import hash_password, verify_password
from app.utils.logger import get_logger
from app.utils.pagination import paginate

logger = get_logger(__name__)


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def update_profile(db: Session, user_id: int, body: ProfileUpdate) -> User:
    user = get_user(db, user_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user_id: int, current_password: str, new_password: str) -> None:
    user = get_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise UnauthorizedError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    user.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"🔑 Password changed for user {user_id}")


def list_users(db: Session, params: PageParams, role: Optional[Role] = None) -> Tuple[list, int]:
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return paginate(q.order_by(User.id), params)


def change_role(db: Session, user_id: int, role: Role) -> User:
    user = get_user(db, user_id)
    previous = user.role
    user.role = role
    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)
    logger.warning(f"User {user_id} role changed {previous.value} → {role.value}")
    return user
