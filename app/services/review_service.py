# app/services/review_service.py
"""Reviews: one per (user, space)."""

from datetime import datetime
from typing import Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.models.review import Review
from app.schemas.common import PageParams
from app.schemas.review import RatingSummary, ReviewCreate, ReviewUpdate
from app.security import Permission, Principal, has_permission
from app.services.space_service import get_space
from app.utils.logger import get_logger
from app.utils.pagination import paginate

logger = get_logger(__name__)


def get_review(db: Session, review_id: int) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError(f"Review {review_id} not found")
    return review


def create_review(db: Session, principal: Principal, space_id: int, body: ReviewCreate) -> Review:
    get_space(db, space_id)
    existing = (
        db.query(Review)
        .filter(Review.user_id == principal.user_id, Review.space_id == space_id)
        .first()
    )
    if existing:
        raise ConflictError(f"You have already reviewed space {space_id}")

    review = Review(user_id=principal.user_id, space_id=space_id, rating=body.rating,
                    content=body.content, created_at=datetime.utcnow())
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"You have already reviewed space {space_id}")
    db.refresh(review)
    logger.info(f"⭐ Review {review.id}: user {principal.user_id} rated space {space_id} {body.rating}/5")
    return review


def list_reviews_for_space(db: Session, space_id: int, params: PageParams) -> Tuple[list, int]:
    get_space(db, space_id)
    q = db.query(Review).filter(Review.space_id == space_id)
    return paginate(q.order_by(Review.created_at.desc(), Review.id.desc()), params)


def list_reviews_by_user(db: Session, user_id: int, params: PageParams) -> Tuple[list, int]:
    q = db.query(Review).filter(Review.user_id == user_id)
    return paginate(q.order_by(Review.created_at.desc(), Review.id.desc()), params)


def update_review(db: Session, principal: Principal, review_id: int, body: ReviewUpdate) -> Review:
    review = get_review(db, review_id)
    if review.user_id != principal.user_id:
        raise ForbiddenError("Only the author can edit a review")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(review, field, value)
    review.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, principal: Principal, review_id: int) -> None:
    review = get_review(db, review_id)
    if review.user_id != principal.user_id and not has_permission(principal.role, Permission.REVIEW_MODERATE):
        raise ForbiddenError("Only the author or a moderator can delete a review")
    db.delete(review)
    db.commit()
    logger.info(f"Review {review_id} deleted by user {principal.user_id}")


def rating_summary(db: Session, space_id: int) -> RatingSummary:
    get_space(db, space_id)
    count, average = (
        db.query(func.count(Review.id), func.avg(Review.rating))
        .filter(Review.space_id == space_id)
        .one()
    )
    return RatingSummary(
        space_id=space_id,
        review_count=count or 0,
        average_rating=round(float(average), 2) if average is not None else None,
    )
