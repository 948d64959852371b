"""
Integration tests for Domains API endpoints.
"""
import uuid

import pytest
from fastapi import status


class TestDomainsAPI:
    """Test domain CRUD operations."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, async_client, pro_headers):
        """Test create and list."""
        response = await async_client.post(
            "/api/v1/domains",
            json={"domain": "https://acme.io/"},
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["domain"] == "acme.io"
        assert response.json()["status"] == "pending"

        listed = await async_client.get("/api/v1/domains", headers=pro_headers)
        assert [d["domain"] for d in listed.json()] == ["acme.io"]

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, async_client, free_headers, free_user, make_domain):
        """Test quota exceeded."""
        await make_domain(free_user, "first.com")

        response = await async_client.post(
            "/api/v1/domains",
            json={"domain": "second.com"},
            headers=free_headers,
        )

        assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
        assert response.json()["detail"]["code"] == "quota_exceeded"

    @pytest.mark.asyncio
    async def test_duplicate(self, async_client, pro_headers, pro_user, make_domain):
        """Test duplicate."""
        await make_domain(pro_user, "acme.io")

        response = await async_client.post(
            "/api/v1/domains",
            json={"domain": "acme.io"},
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"]["code"] == "duplicate_entity"

    @pytest.mark.asyncio
    async def test_empty_domain(self, async_client, pro_headers):
        """Test empty domain."""
        response = await async_client.post(
            "/api/v1/domains",
            json={"domain": ""},
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_get_not_found(self, async_client, pro_headers):
        """Test get not found."""
        response = await async_client.get(f"/api/v1/domains/{uuid.uuid4()}", headers=pro_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_other_users_domain_hidden(self, async_client, pro_headers, agency_user, make_domain):
        """Test other users domain hidden."""
        theirs = await make_domain(agency_user, "agency.io")

        get = await async_client.get(f"/api/v1/domains/{theirs.id}", headers=pro_headers)
        delete = await async_client.delete(f"/api/v1/domains/{theirs.id}", headers=pro_headers)

        assert get.status_code == status.HTTP_404_NOT_FOUND
        assert delete.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_and_delete(self, async_client, pro_headers, pro_user, make_domain):
        """Test update and delete."""
        domain = await make_domain(pro_user, "acme.io")

        patched = await async_client.patch(
            f"/api/v1/domains/{domain.id}",
            json={"status": "error"},
            headers=pro_headers,
        )
        assert patched.json()["status"] == "error"

        deleted = await async_client.delete(f"/api/v1/domains/{domain.id}", headers=pro_headers)
        assert deleted.status_code == status.HTTP_200_OK
