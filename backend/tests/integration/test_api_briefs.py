"""
Integration tests for Fix-It brief endpoints.
"""
import json
import uuid

import httpx
import pytest
from fastapi import status

from aeolytics.integrations.llm import LLMResponse


@pytest.fixture
def llm_answer(mock_llm_client):
    mock_llm_client.chat.return_value = LLMResponse(
        content=json.dumps({
            "title": "Best CRM for Startups in 2026",
            "metaDescription": "Compare the top CRMs",
            "contentBrief": "Cover pricing and integrations",
            "faqEntries": [{"question": "Which CRM is cheapest?", "answer": "It depends"}],
        }),
        model="test",
    )
    return mock_llm_client


class TestBriefsAPI:
    """Test brief generation and lifecycle."""

    @pytest.mark.asyncio
    async def test_generate_requires_entitlement(self, async_client, free_headers, free_user, make_query):
        """Test generate requires entitlement."""
        query = await make_query(free_user)

        response = await async_client.post(
            "/api/v1/briefs",
            json={"query_id": str(query.id)},
            headers=free_headers,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_generate(self, async_client, pro_headers, pro_user, make_query, make_citation, llm_answer):
        """Test generate."""
        query = await make_query(pro_user, "best crm for startups", intent_tags=["crm"])
        await make_citation(query, engine="ChatGPT", cited=True)

        response = await async_client.post(
            "/api/v1/briefs",
            json={"query_id": str(query.id), "custom_prompt": "Mention pricing"},
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["brief"]["title"] == "Best CRM for Startups in 2026"
        assert data["brief"]["status"] == "generated"
        assert data["brief"]["faq_entries"][0]["question"] == "Which CRM is cheapest?"
        assert data["analysis"]["cited_engines"] == ["ChatGPT"]
        assert data["analysis"]["missing_keywords"] == ["crm"]

    @pytest.mark.asyncio
    async def test_generate_unknown_query(self, async_client, pro_headers, llm_answer):
        """Test generate unknown query."""
        response = await async_client.post(
            "/api/v1/briefs",
            json={"query_id": str(uuid.uuid4())},
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        llm_answer.chat.assert_not_called()

    @pytest.mark.asyncio
    async def test_llm_unreachable(self, async_client, pro_headers, pro_user, make_query, mock_llm_client):
        """Test llm unreachable."""
        query = await make_query(pro_user)
        mock_llm_client.chat.side_effect = httpx.ConnectError("refused")

        response = await async_client.post(
            "/api/v1/briefs",
            json={"query_id": str(query.id)},
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_502_BAD_GATEWAY

    @pytest.mark.asyncio
    async def test_lifecycle(self, async_client, pro_headers, pro_user, make_query, llm_answer):
        """Test lifecycle."""
        query = await make_query(pro_user)
        created = await async_client.post(
            "/api/v1/briefs",
            json={"query_id": str(query.id)},
            headers=pro_headers,
        )
        brief_id = created.json()["brief"]["id"]

        listed = await async_client.get(f"/api/v1/briefs?query_id={query.id}", headers=pro_headers)
        assert [b["id"] for b in listed.json()] == [brief_id]

        patched = await async_client.patch(
            f"/api/v1/briefs/{brief_id}",
            json={"status": "downloaded"},
            headers=pro_headers,
        )
        assert patched.json()["status"] == "downloaded"

        fetched = await async_client.get(f"/api/v1/briefs/{brief_id}", headers=pro_headers)
        assert fetched.json()["status"] == "downloaded"

        deleted = await async_client.delete(f"/api/v1/briefs/{brief_id}", headers=pro_headers)
        assert deleted.status_code == status.HTTP_200_OK
        gone = await async_client.get(f"/api/v1/briefs/{brief_id}", headers=pro_headers)
        assert gone.status_code == status.HTTP_404_NOT_FOUND
