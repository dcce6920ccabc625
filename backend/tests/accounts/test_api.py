"""
Tests for auth API endpoints.
"""

import pytest

from .factories import DEFAULT_PASSWORD, UserFactory


@pytest.mark.django_db
class TestLogin:
    def test_login_returns_token(self, api_client):
        user = UserFactory(email="ops@crm.example")

        response = api_client.post(
            "/api/v1/auth/login",
            {"email": "ops@crm.example", "password": DEFAULT_PASSWORD},
            content_type="application/json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["token_type"] == "bearer"
        assert body["data"]["user"]["id"] == user.pk
        assert body["data"]["access_token"]

    def test_bad_credentials_return_400(self, api_client):
        UserFactory(email="ops@crm.example")

        response = api_client.post(
            "/api/v1/auth/login",
            {"email": "ops@crm.example", "password": "nope"},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid email or password"}

    def test_issued_token_authenticates(self, api_client):
        UserFactory(email="ops@crm.example", name="Ops")
        login = api_client.post(
            "/api/v1/auth/login",
            {"email": "ops@crm.example", "password": DEFAULT_PASSWORD},
            content_type="application/json",
        )
        token = login.json()["data"]["access_token"]

        response = api_client.get("/api/v1/auth/me", HTTP_AUTHORIZATION=f"Bearer {token}")

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ops@crm.example"


@pytest.mark.django_db
class TestMe:
    def test_requires_token(self, api_client):
        response = api_client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authentication required"}

    def test_returns_role(self, api_client, admin_user, admin_headers):
        response = api_client.get("/api/v1/auth/me", **admin_headers)

        assert response.json()["data"]["role"] == "admin"
