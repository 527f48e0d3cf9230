# app/routers/reviews.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from app.schemas.review import RatingSummary, ReviewCreate, ReviewOut, ReviewUpdate
from app.security import Permission, Principal, get_current_principal, require_permission
from app.services import review_service
from app.utils.pagination import page_params

router = APIRouter()


@router.post("/spaces/{space_id}/reviews", response_model=ApiResponse[ReviewOut],
             status_code=status.HTTP_201_CREATED, summary="Review a space (one per user)")
def create_review(space_id: int, body: ReviewCreate,
                  principal: Principal = Depends(require_permission(Permission.REVIEW_WRITE)),
                  db: Session = Depends(get_db)):
    review = review_service.create_review(db, principal, space_id, body)
    return ok(ReviewOut.model_validate(review), "Review created")


@router.get("/spaces/{space_id}/reviews", response_model=ApiResponse[Page[ReviewOut]],
            summary="Reviews for a space, newest first")
def list_space_reviews(space_id: int, params: PageParams = Depends(page_params),
                       db: Session = Depends(get_db)):
    items, total = review_service.list_reviews_for_space(db, space_id, params)
    return ok(page_of([ReviewOut.model_validate(r) for r in items], total, params))


@router.get("/spaces/{space_id}/reviews/summary", response_model=ApiResponse[RatingSummary],
            summary="Review count and average rating")
def get_rating_summary(space_id: int, db: Session = Depends(get_db)):
    return ok(review_service.rating_summary(db, space_id))


@router.get("/users/me/reviews", response_model=ApiResponse[Page[ReviewOut]], summary="Own reviews")
def list_my_reviews(params: PageParams = Depends(page_params),
                    principal: Principal = Depends(get_current_principal),
                    db: Session = Depends(get_db)):
    items, total = review_service.list_reviews_by_user(db, principal.user_id, params)
    return ok(page_of([ReviewOut.model_validate(r) for r in items], total, params))


@router.put("/reviews/{review_id}", response_model=ApiResponse[ReviewOut], summary="Edit own review")
def update_review(review_id: int, body: ReviewUpdate,
                  principal: Principal = Depends(get_current_principal),
                  db: Session = Depends(get_db)):
    review = review_service.update_review(db, principal, review_id, body)
    return ok(ReviewOut.model_validate(review), "Review updated")


@router.delete("/reviews/{review_id}", response_model=ApiResponse, summary="Delete a review")
def delete_review(review_id: int,
                  principal: Principal = Depends(get_current_principal),
                  db: Session = Depends(get_db)):
    review_service.delete_review(db, principal, review_id)
    return ok(message="Review deleted")
