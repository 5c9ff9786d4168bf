"""
Tests for authentication API views.

Covers:
- JWT token obtain / refresh (simplejwt)
- GET /api/v1/auth/me/
"""

from django.urls import reverse
from rest_framework import status


class TestTokenObtain:
    def test_returns_token_pair_for_valid_credentials(self, api_client, user):
        """
        Given an active user
        When posting email and password to the token endpoint
        Then an access and refresh token are returned
        """
        # Act
        response = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "known@example.com", "password": "TestPass123!"},
            format="json",
        )

        # Assert
        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
        assert "refresh" in response.data

    def test_rejects_wrong_password(self, api_client, user):
        response = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "known@example.com", "password": "wrong"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_access_token_authenticates_requests(self, api_client, user):
        tokens = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "known@example.com", "password": "TestPass123!"},
            format="json",
        ).data

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = api_client.get(reverse("authentication:me"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["email"] == "known@example.com"


class TestCurrentUserView:
    def test_returns_caller_role(self, instructor_client, instructor):
        response = instructor_client.get(reverse("authentication:me"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == str(instructor.id)
        assert response.data["role"] == "instructor"

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse("authentication:me"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
