# app/routers/spaces.py
"""Spaces: public browsing, owner/admin management."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from app.schemas.space import SpaceCreate, SpaceOut, SpaceUpdate
from app.security import Permission, Principal, get_current_principal, require_permission
from app.services import space_service
from app.utils.pagination import page_params

router = APIRouter()


@router.get("/spaces", response_model=ApiResponse[Page[SpaceOut]], summary="List / search spaces")
def list_spaces(q: Optional[str] = None, owner_id: Optional[int] = None,
                params: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    """`q` matches name or address. Each space includes its current occupancy when known."""
    items, total = space_service.list_spaces(db, params, q, owner_id)
    return ok(page_of([SpaceOut.model_validate(s) for s in items], total, params))


@router.post("/spaces", response_model=ApiResponse[SpaceOut], status_code=status.HTTP_201_CREATED,
             summary="Create a space (OWNER / ADMIN)")
def create_space(body: SpaceCreate,
                 principal: Principal = Depends(require_permission(Permission.SPACE_CREATE)),
                 db: Session = Depends(get_db)):
    space = space_service.create_space(db, principal, body)
    return ok(SpaceOut.model_validate(space), "Space created")


@router.get("/spaces/{space_id}", response_model=ApiResponse[SpaceOut], summary="Space detail")
def get_space(space_id: int, db: Session = Depends(get_db)):
    return ok(SpaceOut.model_validate(space_service.get_space(db, space_id)))


@router.put("/spaces/{space_id}", response_model=ApiResponse[SpaceOut], summary="Update a space")
def update_space(space_id: int, body: SpaceUpdate,
                 principal: Principal = Depends(get_current_principal),
                 db: Session = Depends(get_db)):
    space = space_service.update_space(db, principal, space_id, body)
    return ok(SpaceOut.model_validate(space), "Space updated")


@router.delete("/spaces/{space_id}", response_model=ApiResponse, summary="Delete a space")
def delete_space(space_id: int,
                 principal: Principal = Depends(get_current_principal),
                 db: Session = Depends(get_db)):
    space_service.delete_space(db, principal, space_id)
    return ok(message="Space deleted")
