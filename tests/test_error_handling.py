"""Error Handling Tests

Tests for the error envelope: authentication failures, not found errors,
validation errors and unexpected exceptions.
"""

from datetime import timedelta

import pytest

from recipe_organizer.auth.jwt import create_access_token
from tests.factories import pantry_item_request, recipe_request


# =============================================================================
# Authentication Errors
# =============================================================================

class TestAuthenticationErrors:
    """Tests for authentication-related errors"""

    @pytest.mark.asyncio
    async def test_missing_auth_header(self, test_client):
        """Missing Authorization header returns 401"""
        response = await test_client.get("/pantry")

        assert response.status_code == 401
        assert response.json() == {"detail": "Not authenticated", "error": "UNAUTHENTICATED"}

    @pytest.mark.asyncio
    async def test_wrong_auth_scheme(self, test_client):
        """Basic instead of Bearer returns 401"""
        headers = {"Authorization": "Basic dXNlcjpwYXNz"}  # base64 "user:pass"

        response = await test_client.get("/pantry", headers=headers)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_format(self, test_client):
        headers = {"Authorization": "Bearer not.a.jwt"}

        response = await test_client.get("/shopping-lists", headers=headers)

        assert response.status_code == 401
        assert response.json()["detail"] == "Could not validate credentials"

    @pytest.mark.asyncio
    async def test_token_signed_with_other_key(self, test_client, test_user):
        from jose import jwt

        token = jwt.encode({"sub": test_user["id"]}, "some-other-secret", algorithm="HS256")

        response = await test_client.get("/meal-plans", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, test_client, test_user):
        token = create_access_token({"sub": test_user["id"]}, expires_delta=timedelta(seconds=-10))

        response = await test_client.get("/family", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_without_subject(self, test_client):
        token = create_access_token({"email": "nobody@example.com"})

        response = await test_client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client, mock_db):
        """Valid token for a user that no longer exists"""
        token = create_access_token({"sub": "ghost"})

        response = await test_client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        mock_db.get_user_by_id.assert_called_once_with("ghost")


# =============================================================================
# Not Found Errors
# =============================================================================

class TestNotFoundErrors:
    """Tests for 404 responses"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/recipes/unknown",
        "/pantry/unknown",
        "/shopping-lists/unknown",
        "/meal-plans/unknown",
        "/family/unknown",
    ])
    async def test_unknown_resource(self, test_client, jwt_headers, path):
        response = await test_client.get(path, headers=jwt_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/does-not-exist")
        assert response.status_code == 404


# =============================================================================
# Validation Errors
# =============================================================================

class TestValidationErrors:
    """Request validation failures return 400"""

    @pytest.mark.asyncio
    async def test_missing_required_field(self, test_client, jwt_headers):
        body = recipe_request()
        del body["title"]

        response = await test_client.post("/recipes", json=body, headers=jwt_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert "title" in data["detail"]

    @pytest.mark.asyncio
    async def test_unknown_field(self, test_client, jwt_headers):
        response = await test_client.post(
            "/pantry", json=pantry_item_request(userId="someone-else"), headers=jwt_headers
        )

        assert response.status_code == 400
        assert "userId" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client, jwt_headers):
        response = await test_client.post(
            "/pantry",
            content=b"{not json",
            headers={**jwt_headers, "Content-Type": "application/json"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_query_parameter(self, test_client, jwt_headers):
        response = await test_client.get("/pantry", params={"page": 0}, headers=jwt_headers)
        assert response.status_code == 400


# =============================================================================
# Unexpected Errors
# =============================================================================

class TestInternalErrors:
    """Unhandled exceptions become a generic 500"""

    @pytest.mark.asyncio
    async def test_database_failure(self, test_client, mock_db, test_user):
        mock_db.get_user_by_id.return_value = test_user
        mock_db.get_user_pantry_items.side_effect = RuntimeError("disk on fire")

        response = await test_client.get("/pantry", headers=test_user["headers"])

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error", "error": "INTERNAL_ERROR"}

    @pytest.mark.asyncio
    async def test_failure_does_not_leak_details(self, test_client, mock_db):
        mock_db.get_user_by_email.side_effect = RuntimeError("connection string: secret")

        response = await test_client.post(
            "/auth/login", json={"email": "someone@example.com", "password": "secret123"}
        )

        assert response.status_code == 500
        assert "secret" not in response.text
