# app/services/space_service.py
"""
Space CRUD. Ownership/role checks are done here so every caller
(routers, scripts) gets the same rules.
"""

from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.space import Space
from app.schemas.common import PageParams
from app.schemas.space import SpaceCreate, SpaceUpdate
from app.security import Permission, Principal, ensure_owner_or_permission
from app.utils.logger import get_logger
from app.utils.pagination import paginate

logger = get_logger(__name__)


def get_space(db: Session, space_id: int) -> Space:
    space = db.query(Space).filter(Space.id == space_id).first()
    if not space:
        raise NotFoundError(f"Space {space_id} not found")
    return space


def list_spaces(db: Session, params: PageParams, q: Optional[str] = None,
                owner_id: Optional[int] = None) -> Tuple[list, int]:
    query = db.query(Space)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(Space.name.ilike(pattern), Space.address.ilike(pattern)))
    if owner_id is not None:
        query = query.filter(Space.owner_id == owner_id)
    return paginate(query.order_by(Space.id), params)


def create_space(db: Session, principal: Principal, body: SpaceCreate) -> Space:
    space = Space(
        name=body.name,
        address=body.address,
        description=body.description,
        capacity=body.capacity,
        owner_id=principal.user_id,
        created_at=datetime.utcnow(),
    )
    db.add(space)
    db.commit()
    db.refresh(space)
    logger.info(f"🏢 Space {space.id} '{space.name}' created by user {principal.user_id}")
    return space


def update_space(db: Session, principal: Principal, space_id: int, body: SpaceUpdate) -> Space:
    space = get_space(db, space_id)
    ensure_owner_or_permission(principal, space.owner_id,
                               Permission.SPACE_MANAGE_OWN, Permission.SPACE_MANAGE_ANY)

    changes = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(space, field, value)
    space.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(space)
    logger.info(f"Space {space_id} updated: {sorted(changes)}")
    return space


def delete_space(db: Session, principal: Principal, space_id: int) -> None:
    space = get_space(db, space_id)
    ensure_owner_or_permission(principal, space.owner_id,
                               Permission.SPACE_MANAGE_OWN, Permission.SPACE_MANAGE_ANY)
    db.delete(space)
    db.commit()
    logger.info(f"🗑️  Space {space_id} deleted by user {principal.user_id}")
