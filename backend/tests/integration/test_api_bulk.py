"""
Integration tests for the bulk operation endpoint.
"""
import uuid

import pytest
from fastapi import status


class TestBulkAPI:
    """Test bulk operations over HTTP."""

    @pytest.mark.asyncio
    async def test_bulk_delete_queries(self, async_client, pro_headers, pro_user, make_query):
        """Test bulk delete queries."""
        queries = [await make_query(pro_user, f"q{i}") for i in range(3)]

        response = await async_client.post(
            "/api/v1/bulk",
            json={
                "type": "delete",
                "entity_type": "queries",
                "entity_ids": [str(q.id) for q in queries],
            },
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "success_count": 3,
            "failure_count": 0,
            "errors": [],
        }
        listed = await async_client.get("/api/v1/queries", headers=pro_headers)
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_bulk_with_foreign_ids(self, async_client, pro_headers, agency_user, make_query):
        """Test bulk with foreign ids."""
        theirs = await make_query(agency_user)

        response = await async_client.post(
            "/api/v1/bulk",
            json={
                "type": "delete",
                "entity_type": "queries",
                "entity_ids": [str(theirs.id), str(uuid.uuid4())],
            },
            headers=pro_headers,
        )

        data = response.json()
        assert data["success"] is False
        assert data["failure_count"] == 2

    @pytest.mark.asyncio
    async def test_bulk_update_citations_rejected(self, async_client, pro_headers):
        """Test bulk update citations rejected."""
        response = await async_client.post(
            "/api/v1/bulk",
            json={
                "type": "update",
                "entity_type": "citations",
                "entity_ids": [str(uuid.uuid4())],
                "updates": {"cited": True},
            },
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_bulk_process(self, async_client, pro_headers, pro_user, make_query, mock_pipeline):
        """Test bulk process."""
        query = await make_query(pro_user)

        response = await async_client.post(
            "/api/v1/bulk",
            json={"type": "process", "entity_type": "queries", "entity_ids": [str(query.id)]},
            headers=pro_headers,
        )

        assert response.json()["success_count"] == 1
        mock_pipeline.submit_batch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_bulk(self, async_client, pro_headers):
        """Test empty bulk."""
        response = await async_client.post(
            "/api/v1/bulk",
            json={"type": "delete", "entity_type": "domains", "entity_ids": []},
            headers=pro_headers,
        )

        assert response.json()["success"] is True
        assert response.json()["success_count"] == 0
