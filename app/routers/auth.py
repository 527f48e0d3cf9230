# app/routers/auth.py
"""Signup, login and token refresh. These are the only unauthenticated write endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import ApiResponse, ok
from app.schemas.user import LoginRequest, RefreshRequest, SignupRequest, TokenPair, UserOut
from app.services import auth_service

router = APIRouter()


@router.post("/auth/signup", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED,
             summary="Register a USER or OWNER account")
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    user = auth_service.signup(db, body)
    return ok(UserOut.model_validate(user), "Account created")


@router.post("/auth/login", response_model=ApiResponse[TokenPair], summary="Exchange credentials for tokens")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    return ok(auth_service.login(db, body.email, body.password), "Logged in")


@router.post("/auth/refresh", response_model=ApiResponse[TokenPair], summary="Exchange a refresh token")
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    return ok(auth_service.refresh(db, body.refresh_token), "Token refreshed")
