# tests/test_api_reviews_favorites.py
"""Reviews (one per user and space) and favorites."""

import pytest
from app.models.user import Role


@pytest.fixture
def space(make_user, make_space):
    return make_space(make_user(Role.OWNER))


class TestReviews:
    def test_create_and_list(self, client, make_user, auth, space):
        user = make_user()
        resp = client.post(f"/api/v1/spaces/{space.id}/reviews",
                           json={"rating": 5, "content": "Plenty of seats"}, headers=auth(user))
        assert resp.status_code == 201

        page = client.get(f"/api/v1/spaces/{space.id}/reviews").json()["data"]
        assert page["total"] == 1
        assert page["items"][0]["user_id"] == user.id

    def test_second_review_by_same_user_conflicts(self, client, make_user, auth, space):
        user = make_user()
        client.post(f"/api/v1/spaces/{space.id}/reviews", json={"rating": 4}, headers=auth(user))
        resp = client.post(f"/api/v1/spaces/{space.id}/reviews", json={"rating": 2}, headers=auth(user))

        assert resp.status_code == 409
        assert resp.json()["code"] == "CONFLICT"

    def test_rating_out_of_range(self, client, make_user, auth, space):
        resp = client.post(f"/api/v1/spaces/{space.id}/reviews", json={"rating": 6}, headers=auth(make_user()))
        assert resp.status_code == 400

    def test_review_for_missing_space(self, client, make_user, auth):
        resp = client.post("/api/v1/spaces/777/reviews", json={"rating": 3}, headers=auth(make_user()))
        assert resp.status_code == 404

    def test_summary(self, client, make_user, auth, space):
        for rating in (5, 4, 2):
            client.post(f"/api/v1/spaces/{space.id}/reviews", json={"rating": rating}, headers=auth(make_user()))

        summary = client.get(f"/api/v1/spaces/{space.id}/reviews/summary").json()["data"]
        assert summary == {"space_id": space.id, "review_count": 3, "average_rating": 3.67}

    def test_summary_without_reviews(self, client, space):
        summary = client.get(f"/api/v1/spaces/{space.id}/reviews/summary").json()["data"]
        assert summary["review_count"] == 0
        assert summary["average_rating"] is None

    def test_only_author_edits(self, client, make_user, auth, space):
        author = make_user()
        review_id = client.post(f"/api/v1/spaces/{space.id}/reviews",
                                json={"rating": 3, "content": "ok"}, headers=auth(author)).json()["data"]["id"]

        assert client.put(f"/api/v1/reviews/{review_id}", json={"rating": 1},
                          headers=auth(make_user())).status_code == 403

        data = client.put(f"/api/v1/reviews/{review_id}", json={"rating": 4},
                          headers=auth(author)).json()["data"]
        assert data["rating"] == 4
        assert data["content"] == "ok"

    def test_null_rating_is_validation_error(self, client, make_user, auth, space):
        author = make_user()
        review_id = client.post(f"/api/v1/spaces/{space.id}/reviews",
                                json={"rating": 3}, headers=auth(author)).json()["data"]["id"]

        resp = client.put(f"/api/v1/reviews/{review_id}", json={"rating": None}, headers=auth(author))

        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_admin_deletes_any_review(self, client, make_user, auth, space):
        review_id = client.post(f"/api/v1/spaces/{space.id}/reviews", json={"rating": 1},
                                headers=auth(make_user())).json()["data"]["id"]

        assert client.delete(f"/api/v1/reviews/{review_id}", headers=auth(make_user())).status_code == 403
        assert client.delete(f"/api/v1/reviews/{review_id}",
                             headers=auth(make_user(Role.ADMIN))).status_code == 200
        assert client.delete(f"/api/v1/reviews/{review_id}",
                             headers=auth(make_user(Role.ADMIN))).status_code == 404

    def test_my_reviews(self, client, make_user, make_space, auth, space):
        user = make_user()
        other_space = make_space(make_user(Role.OWNER), name="Other")
        client.post(f"/api/v1/spaces/{space.id}/reviews", json={"rating": 5}, headers=auth(user))
        client.post(f"/api/v1/spaces/{other_space.id}/reviews", json={"rating": 3}, headers=auth(user))

        page = client.get("/api/v1/users/me/reviews", headers=auth(user)).json()["data"]
        assert page["total"] == 2


class TestFavorites:
    def test_add_list_remove(self, client, make_user, auth, space):
        user = make_user()
        assert client.post(f"/api/v1/spaces/{space.id}/favorite", headers=auth(user)).status_code == 201

        page = client.get("/api/v1/users/me/favorites", headers=auth(user)).json()["data"]
        assert [s["id"] for s in page["items"]] == [space.id]

        assert client.delete(f"/api/v1/spaces/{space.id}/favorite", headers=auth(user)).status_code == 200
        page = client.get("/api/v1/users/me/favorites", headers=auth(user)).json()["data"]
        assert page["total"] == 0

    def test_duplicate_favorite_conflicts(self, client, make_user, auth, space):
        user = make_user()
        client.post(f"/api/v1/spaces/{space.id}/favorite", headers=auth(user))
        resp = client.post(f"/api/v1/spaces/{space.id}/favorite", headers=auth(user))
        assert resp.status_code == 409

    def test_removing_unknown_favorite_is_not_found(self, client, make_user, auth, space):
        resp = client.delete(f"/api/v1/spaces/{space.id}/favorite", headers=auth(make_user()))
        assert resp.status_code == 404

    def test_favorite_missing_space(self, client, make_user, auth):
        resp = client.post("/api/v1/spaces/31337/favorite", headers=auth(make_user()))
        assert resp.status_code == 404
