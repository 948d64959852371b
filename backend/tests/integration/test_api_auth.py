"""
Integration tests for authentication and the plan endpoint.
"""
import uuid

import pytest
from fastapi import status

from aeolytics.core.security import create_access_token


class TestAuthentication:
    """Test token handling."""

    @pytest.mark.asyncio
    async def test_missing_token(self, async_client):
        """Test missing token."""
        response = await async_client.get("/api/v1/plan")

        assert response.status_code in [
            status.HTTP_401_UNAUTHORIZED,
            status.HTTP_403_FORBIDDEN,
        ]

    @pytest.mark.asyncio
    async def test_invalid_token(self, async_client):
        """Test invalid token."""
        response = await async_client.get(
            "/api/v1/plan",
            headers={"Authorization": "Bearer fake-token"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"]["code"] == "unauthorized"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_first_request_creates_free_profile(self, async_client):
        """Test first request creates free profile."""
        token = create_access_token(data={"sub": str(uuid.uuid4()), "email": "new@example.com"})

        response = await async_client.get(
            "/api/v1/plan",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["plan"] == "free"

    @pytest.mark.asyncio
    async def test_unknown_subject_without_email(self, async_client):
        """Test unknown subject without email."""
        token = create_access_token(data={"sub": str(uuid.uuid4())})

        response = await async_client.get(
            "/api/v1/plan",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestHealth:
    """Test health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, async_client):
        """Test health."""
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"


class TestPlan:
    """Test plan entitlements and usage."""

    @pytest.mark.asyncio
    async def test_plan_with_usage(self, async_client, pro_headers, pro_user, make_query, make_domain):
        """Test plan with usage."""
        await make_domain(pro_user)
        await make_query(pro_user, "one")
        await make_query(pro_user, "two")

        response = await async_client.get("/api/v1/plan", headers=pro_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["plan"] == "pro"
        assert data["max_domains"] == 5
        assert data["features"]["fixItBriefs"] is True
        assert data["usage"] == {"queries": 2, "domains": 1}

    @pytest.mark.asyncio
    async def test_unknown_plan_resolves_to_free(self, async_client, db_session, pro_user, pro_headers):
        """Test unknown plan resolves to free."""
        pro_user.plan = "platinum"
        await db_session.flush()

        response = await async_client.get("/api/v1/plan", headers=pro_headers)

        assert response.json()["plan"] == "free"
        assert response.json()["allowed_engines"] == ["ChatGPT"]
