"""
Integration tests for export and report endpoints.
"""
import csv
import io

import pytest
from fastapi import status


class TestExportsAPI:
    """Test CSV and JSON exports."""

    @pytest.mark.asyncio
    async def test_citations_csv(self, async_client, pro_headers, pro_user, make_query, make_citation):
        """Test citations csv."""
        query = await make_query(pro_user, 'crm, "best" one')
        await make_citation(query)

        response = await async_client.get("/api/v1/exports/citations?format=csv", headers=pro_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/csv")
        assert "citations-export-" in response.headers["content-disposition"]
        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert rows[0]["query"] == 'crm, "best" one'
        assert rows[0]["cited"] == "Yes"

    @pytest.mark.asyncio
    async def test_queries_json(self, async_client, pro_headers, pro_user, make_query):
        """Test queries json."""
        await make_query(pro_user, "best crm")

        response = await async_client.get("/api/v1/exports/queries?format=json", headers=pro_headers)

        assert response.json()[0]["query_text"] == "best crm"

    @pytest.mark.asyncio
    async def test_empty_domains_csv(self, async_client, pro_headers):
        """Test empty domains csv."""
        response = await async_client.get("/api/v1/exports/domains", headers=pro_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.text == ""

    @pytest.mark.asyncio
    async def test_full_export_json_only(self, async_client, pro_headers, pro_user, make_query, make_domain):
        """Test full export json only."""
        await make_domain(pro_user)
        await make_query(pro_user)

        csv_response = await async_client.get("/api/v1/exports/all?format=csv", headers=pro_headers)
        assert csv_response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        response = await async_client.get("/api/v1/exports/all?format=json", headers=pro_headers)
        data = response.json()
        assert data["total_records"] == 2
        assert len(data["queries"]) == 1

    @pytest.mark.asyncio
    async def test_citation_report(self, async_client, pro_headers, pro_user, make_query, make_citation):
        """Test citation report."""
        query = await make_query(pro_user)
        await make_citation(query, cited=True)
        await make_citation(query, cited=False)

        response = await async_client.get("/api/v1/exports/citation-report", headers=pro_headers)

        summary = response.json()["summary"]
        assert summary["visibility_score"] == 50
        assert summary["total_citations"] == 2

    @pytest.mark.asyncio
    async def test_unknown_export_type(self, async_client, pro_headers):
        """Test unknown export type."""
        response = await async_client.get("/api/v1/exports/users", headers=pro_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestReportsAPI:
    """Test report metrics and Markdown reports."""

    @pytest.mark.asyncio
    async def test_metrics(self, async_client, pro_headers, pro_user, make_query, make_citation):
        """Test metrics."""
        query = await make_query(pro_user)
        await make_citation(query, cited=True)
        await make_citation(query, cited=False, days_ago=20)

        response = await async_client.get("/api/v1/reports/metrics?time_range=7d", headers=pro_headers)

        data = response.json()
        assert data["total_citations"] == 1
        assert data["visibility_score"] == 100

    @pytest.mark.asyncio
    async def test_generate_report(self, async_client, pro_headers, pro_user, make_query, make_citation):
        """Test generate report."""
        await make_citation(await make_query(pro_user))

        response = await async_client.post(
            "/api/v1/reports",
            json={"time_range": "all", "include_detailed_analysis": True},
            headers=pro_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["filename"].startswith("AEOlytics-Citation-Report-all-")
        assert "# Detailed Citation Analysis" in data["content"]

    @pytest.mark.asyncio
    async def test_branding_needs_agency(self, async_client, pro_headers, agency_headers):
        """Test branding needs agency."""
        body = {"brand_config": {"company_name": "Acme", "primary_color": "#112233"}}

        refused = await async_client.post("/api/v1/reports", json=body, headers=pro_headers)
        assert refused.status_code == status.HTTP_403_FORBIDDEN

        allowed = await async_client.post("/api/v1/reports", json=body, headers=agency_headers)
        assert allowed.status_code == status.HTTP_200_OK
        assert allowed.json()["content"].startswith("# Acme Citation Report")
