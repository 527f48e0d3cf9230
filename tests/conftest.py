# tests/conftest.py
"""Shared fixtures: in-memory SQLite database, API client, users, spaces, auth headers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["SCHEMA_MODE"] = "validate"

import itertools
import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from app.database import Base, SessionLocal, create_tables, engine
from app.main import app
from app.models.space import Space
from app.models.user import Role, User
from app.services.auth_service import create_token_pair, hash_password

PASSWORD = "password123"


@pytest.fixture
def db():
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=Role.USER, password=PASSWORD):
        n = next(counter)
        user = User(email=f"{role.value.lower()}{n}@example.com", password_hash=hash_password(password),
                    nickname=f"{role.value.lower()}-{n}", role=role, created_at=datetime.utcnow())
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_space(db):
    def _make(owner, capacity=100, name="Central Library"):
        space = Space(name=name, address="1 Main St", capacity=capacity,
                      owner_id=owner.id, created_at=datetime.utcnow())
        db.add(space)
        db.commit()
        db.refresh(space)
        return space
    return _make


@pytest.fixture
def auth():
    """auth(user) -> Authorization header with a fresh access token."""
    def _headers(user):
        return {"Authorization": f"Bearer {create_token_pair(user).access_token}"}
    return _headers
