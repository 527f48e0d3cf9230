# app/routers/favorites.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from app.schemas.favorite import FavoriteOut
from app.schemas.space import SpaceOut
from app.security import Permission, Principal, get_current_principal, require_permission
from app.services import favorite_service
from app.utils.pagination import page_params

router = APIRouter()


@router.post("/spaces/{space_id}/favorite", response_model=ApiResponse[FavoriteOut],
             status_code=status.HTTP_201_CREATED, summary="Add a space to favorites")
def add_favorite(space_id: int,
                 principal: Principal = Depends(require_permission(Permission.FAVORITE_WRITE)),
                 db: Session = Depends(get_db)):
    favorite = favorite_service.add_favorite(db, principal.user_id, space_id)
    return ok(FavoriteOut.model_validate(favorite), "Added to favorites")


@router.delete("/spaces/{space_id}/favorite", response_model=ApiResponse,
               summary="Remove a space from favorites")
def remove_favorite(space_id: int,
                    principal: Principal = Depends(require_permission(Permission.FAVORITE_WRITE)),
                    db: Session = Depends(get_db)):
    favorite_service.remove_favorite(db, principal.user_id, space_id)
    return ok(message="Removed from favorites")


@router.get("/users/me/favorites", response_model=ApiResponse[Page[SpaceOut]], summary="Own favorite spaces")
def list_my_favorites(params: PageParams = Depends(page_params),
                      principal: Principal = Depends(get_current_principal),
                      db: Session = Depends(get_db)):
    items, total = favorite_service.list_favorite_spaces(db, principal.user_id, params)
    return ok(page_of([SpaceOut.model_validate(s) for s in items], total, params))
