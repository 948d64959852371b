"""
Data export endpoints.
"""
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Query
from fastapi.responses import Response

from aeolytics.core.deps import CurrentUser, DbSession
from aeolytics.core.exceptions import ValidationFailureError
from aeolytics.services.citation_service import CitationService
from aeolytics.services.domain_service import DomainService
from aeolytics.services.exporter import (
    citation_report,
    citation_rows,
    domain_rows,
    full_export,
    query_rows,
    to_csv,
    to_json,
)
from aeolytics.services.query_service import QueryService

router = APIRouter(prefix="/exports", tags=["Exports"])

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
}


def _file_response(content: str, filename: str, format: str) -> Response:
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}.{format}"'},
    )


@router.get("/citation-report")
async def export_citation_report(
    current_user: CurrentUser,
    db: DbSession,
    limit: int = Query(default=1000, ge=1, le=10000),
):
    """Citation analysis report as JSON."""
    now = datetime.now(timezone.utc)
    citations = await CitationService(db).list_citations(current_user, limit=limit)
    report = citation_report(citations, now=now)
    return _file_response(
        to_json(report),
        f"citation-analysis-report-{now.date().isoformat()}",
        "json",
    )


@router.get("/{export_type}")
async def export_data(
    export_type: Literal["citations", "queries", "domains", "all"],
    current_user: CurrentUser,
    db: DbSession,
    format: Literal["csv", "json"] = "csv",
    limit: int = Query(default=1000, ge=1, le=10000),
):
    """Export citations, queries, domains or everything."""
    now = datetime.now(timezone.utc)
    today = now.date().isoformat()

    queries = await QueryService(db).list_queries(current_user)
    domains = await DomainService(db).list_domains(current_user)

    if export_type == "citations":
        citations = await CitationService(db).list_citations(current_user, limit=limit)
        rows = citation_rows(citations, {str(q.id): q.query_text for q in queries})
        filename = f"citations-export-{today}"
    elif export_type == "queries":
        rows = query_rows(queries, {str(d.id): d.domain for d in domains})
        filename = f"queries-export-{today}"
    elif export_type == "domains":
        rows = domain_rows(domains)
        filename = f"domains-export-{today}"
    else:
        if format == "csv":
            raise ValidationFailureError("The full export is only available as JSON")
        citations = await CitationService(db).list_citations(current_user, limit=limit)
        return _file_response(
            to_json(full_export(citations, queries, domains, now=now)),
            f"aeolytics-full-export-{today}",
            "json",
        )

    content = to_csv(rows) if format == "csv" else to_json(rows)
    return _file_response(content, filename, format)
