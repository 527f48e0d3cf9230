# app/routers/users.py
"""Own profile + admin user management."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.models.user import Role
from app.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from app.schemas.user import PasswordChange, ProfileUpdate, RoleChange, UserOut
from app.security import Permission, Principal, get_current_principal, require_permission
from app.services import user_service
from app.utils.pagination import page_params

router = APIRouter()


@router.get("/users/me", response_model=ApiResponse[UserOut], summary="Own profile")
def get_me(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return ok(UserOut.model_validate(user_service.get_user(db, principal.user_id)))


@router.put("/users/me", response_model=ApiResponse[UserOut], summary="Update own profile")
def update_me(body: ProfileUpdate, principal: Principal = Depends(get_current_principal),
              db: Session = Depends(get_db)):
    user = user_service.update_profile(db, principal.user_id, body)
    return ok(UserOut.model_validate(user), "Profile updated")


@router.put("/users/me/password", response_model=ApiResponse, summary="Change own password")
def change_my_password(body: PasswordChange, principal: Principal = Depends(get_current_principal),
                       db: Session = Depends(get_db)):
    user_service.change_password(db, principal.user_id, body.current_password, body.new_password)
    return ok(message="Password changed")


@router.get("/users", response_model=ApiResponse[Page[UserOut]], summary="ADMIN — list users")
def list_users(role: Optional[Role] = None,
               params: PageParams = Depends(page_params),
               principal: Principal = Depends(require_permission(Permission.USER_ADMIN)),
               db: Session = Depends(get_db)):
    items, total = user_service.list_users(db, params, role)
    return ok(page_of([UserOut.model_validate(u) for u in items], total, params))


@router.put("/users/{user_id}/role", response_model=ApiResponse[UserOut], summary="ADMIN — change a user's role")
def change_user_role(user_id: int, body: RoleChange,
                     principal: Principal = Depends(require_permission(Permission.USER_ADMIN)),
                     db: Session = Depends(get_db)):
    user = user_service.change_role(db, user_id, body.role)
    return ok(UserOut.model_validate(user), "Role updated")
