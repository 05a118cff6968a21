"""Tests for the current-user endpoints."""

from tests.api.conftest import auth_headers, register


class TestCurrentUser:
    def test_requires_token(self, client):
        response = client.get("/api/users/me")

        assert response.status_code == 401
        assert response.json() == {
            "error": "Unauthorized",
            "detail": "Unauthorized",
            "code": "UNAUTHENTICATED",
        }

    def test_rejects_garbage_token(self, client):
        response = client.get("/api/users/me", headers=auth_headers("not-a-jwt"))
        assert response.status_code == 401

    def test_get_profile(self, client):
        token = register(client, "alice@example.com", name="Alice")["accessToken"]

        response = client.get("/api/users/me", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Alice"

    def test_update_profile(self, client):
        token = register(client, "alice@example.com", name="Alice")["accessToken"]

        response = client.patch(
            "/api/users/me",
            headers=auth_headers(token),
            json={"name": "Alice B", "avatarUrl": "https://img/a.png"},
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["name"] == "Alice B"
        assert user["avatarUrl"] == "https://img/a.png"
        assert user["email"] == "alice@example.com"
