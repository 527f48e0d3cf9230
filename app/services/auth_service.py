# app/services/auth_service.py
"""
Authentication: password hashing, JWT access/refresh pairs, signup and login.

Tokens are HS256 JWTs signed with settings.JWT_SECRET and carry
sub (user id), role, type (access | refresh), iat and exp.
Tokens are stateless: a role change takes effect on the next login/refresh.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ConflictError, UnauthorizedError, ValidationFailedError
from app.models.user import Role, User
from app.schemas.user import SignupRequest, TokenPair
from app.utils.logger import get_logger

logger = get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"
_HASH_SCHEME = "pbkdf2_sha256"


# ── Passwords ────────────────────────────────────────────────────────────────
def hash_password(password: str, rounds: Optional[int] = None) -> str:
    rounds = rounds or settings.PASSWORD_HASH_ROUNDS
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), rounds)
    return f"{_HASH_SCHEME}${rounds}${salt}${dk.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, rounds, salt, expected = stored.split("$")
    except ValueError:
        return False
    if scheme != _HASH_SCHEME:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), int(rounds))
    return hmac.compare_digest(dk.hex(), expected)


# ── Tokens ───────────────────────────────────────────────────────────────────
def create_token(user_id: int, role: Role, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "role": role.value,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_token_pair(user: User) -> TokenPair:
    access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return TokenPair(
        access_token=create_token(user.id, user.role, ACCESS, access_ttl),
        refresh_token=create_token(user.id, user.role, REFRESH, refresh_ttl),
        expires_in=int(access_ttl.total_seconds()),
    )


def decode_token(token: str, expected_type: str = ACCESS) -> dict:
    """Verify signature + expiry and return the claims. Raises UnauthorizedError."""
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp", "type", "role"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise UnauthorizedError("Invalid token")

    if claims.get("type") != expected_type:
        raise UnauthorizedError(f"Expected an {expected_type} token")
    return claims


# ── Account flows ────────────────────────────────────────────────────────────
def signup(db: Session, body: SignupRequest) -> User:
    if body.role == Role.ADMIN:
        raise ValidationFailedError("ADMIN accounts cannot be self-registered")

    email = body.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise ConflictError(f"Email {email} is already registered")

    user = User(
        email=email,
        password_hash=hash_password(body.password),
        nickname=body.nickname,
        phone=body.phone,
        role=body.role,
        created_at=datetime.utcnow(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Email {email} is already registered")
    db.refresh(user)
    logger.info(f"👤 New {user.role.value} account: {email} (id={user.id})")
    return user


def login(db: Session, email: str, password: str) -> TokenPair:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {email}")
        raise UnauthorizedError("Invalid email or password")
    return create_token_pair(user)


def refresh(db: Session, refresh_token: str) -> TokenPair:
    claims = decode_token(refresh_token, expected_type=REFRESH)
    user = db.query(User).filter(User.id == int(claims["sub"])).first()
    if not user:
        raise UnauthorizedError("Account no longer exists")
    return create_token_pair(user)
