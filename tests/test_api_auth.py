# tests/test_api_auth.py
"""Signup, login, refresh and token enforcement through the HTTP API."""

from datetime import timedelta
from app.models.user import Role
from app.services.auth_service import REFRESH, create_token

SIGNUP = {"email": "Alice@Example.com", "password": "password123", "nickname": "alice"}


class TestSignupAndLogin:
    def test_signup_returns_user_in_envelope(self, client):
        resp = client.post("/api/v1/auth/signup", json=SIGNUP)

        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["email"] == "alice@example.com"
        assert body["data"]["role"] == "USER"
        assert "password_hash" not in body["data"]

    def test_duplicate_email_conflicts(self, client):
        client.post("/api/v1/auth/signup", json=SIGNUP)
        resp = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": "alice@example.com"})

        assert resp.status_code == 409
        assert resp.json()["code"] == "CONFLICT"
        assert resp.json()["success"] is False

    def test_admin_cannot_self_register(self, client):
        resp = client.post("/api/v1/auth/signup", json={**SIGNUP, "role": "ADMIN"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_short_password_is_validation_error(self, client):
        resp = client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "short"})
        assert resp.status_code == 400
        assert any(d["field"].endswith("password") for d in resp.json()["details"])

    def test_login_returns_token_pair(self, client):
        client.post("/api/v1/auth/signup", json=SIGNUP)
        resp = client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "password123"})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["access_token"] and data["refresh_token"]

    def test_wrong_password_is_unauthorized(self, client):
        client.post("/api/v1/auth/signup", json=SIGNUP)
        resp = client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})

        assert resp.status_code == 401
        assert resp.json()["code"] == "UNAUTHORIZED"

    def test_refresh_issues_new_pair(self, client):
        client.post("/api/v1/auth/signup", json=SIGNUP)
        tokens = client.post("/api/v1/auth/login",
                             json={"email": "alice@example.com", "password": "password123"}).json()["data"]

        resp = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert resp.status_code == 200
        assert resp.json()["data"]["access_token"]

    def test_access_token_cannot_refresh(self, client):
        client.post("/api/v1/auth/signup", json=SIGNUP)
        tokens = client.post("/api/v1/auth/login",
                             json={"email": "alice@example.com", "password": "password123"}).json()["data"]

        resp = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
        assert resp.status_code == 401


class TestProtectedRoutes:
    def test_missing_token_is_unauthorized(self, client):
        resp = client.get("/api/v1/users/me")
        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_expired_token_is_unauthorized(self, client, make_user):
        user = make_user()
        token = create_token(user.id, user.role, "access", timedelta(seconds=-30))

        resp = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token has expired"

    def test_refresh_token_rejected_as_access(self, client, make_user):
        user = make_user()
        token = create_token(user.id, user.role, REFRESH, timedelta(days=1))

        resp = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_garbage_token_is_unauthorized(self, client):
        resp = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert resp.status_code == 401

    def test_me_returns_profile(self, client, make_user, auth):
        user = make_user(Role.OWNER)
        resp = client.get("/api/v1/users/me", headers=auth(user))

        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == user.id
        assert resp.json()["data"]["role"] == "OWNER"

    def test_profile_update_keeps_untouched_fields(self, client, make_user, auth):
        user = make_user()
        client.put("/api/v1/users/me", json={"phone": "010-1234-5678"}, headers=auth(user))
        resp = client.put("/api/v1/users/me", json={"nickname": "renamed"}, headers=auth(user))

        data = resp.json()["data"]
        assert data["nickname"] == "renamed"
        assert data["phone"] == "010-1234-5678"

    def test_null_nickname_is_validation_error(self, client, make_user, auth):
        user = make_user()
        resp = client.put("/api/v1/users/me", json={"nickname": None}, headers=auth(user))

        assert resp.status_code == 400
        assert client.get("/api/v1/users/me", headers=auth(user)).json()["data"]["nickname"] == user.nickname

    def test_change_password(self, client, make_user, auth):
        user = make_user()
        resp = client.put("/api/v1/users/me/password",
                          json={"current_password": "wrong-pass", "new_password": "newpassword1"},
                          headers=auth(user))
        assert resp.status_code == 401

        resp = client.put("/api/v1/users/me/password",
                          json={"current_password": "password123", "new_password": "newpassword1"},
                          headers=auth(user))
        assert resp.status_code == 200
        login = client.post("/api/v1/auth/login", json={"email": user.email, "password": "newpassword1"})
        assert login.status_code == 200


class TestAdminUsers:
    def test_user_cannot_list_users(self, client, make_user, auth):
        resp = client.get("/api/v1/users", headers=auth(make_user()))
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"

    def test_admin_lists_and_promotes(self, client, make_user, auth):
        admin = make_user(Role.ADMIN)
        user = make_user()

        listing = client.get("/api/v1/users", params={"role": "USER"}, headers=auth(admin)).json()["data"]
        assert listing["total"] == 1
        assert listing["items"][0]["id"] == user.id

        resp = client.put(f"/api/v1/users/{user.id}/role", json={"role": "OWNER"}, headers=auth(admin))
        assert resp.status_code == 200
        assert resp.json()["data"]["role"] == "OWNER"

    def test_promoting_missing_user_is_not_found(self, client, make_user, auth):
        resp = client.put("/api/v1/users/999/role", json={"role": "OWNER"}, headers=auth(make_user(Role.ADMIN)))
        assert resp.status_code == 404
