"""
Report endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from aeolytics.core.deps import CurrentUser, DbSession
from aeolytics.schemas.report import ReportConfig, ReportMetrics, ReportResponse, TimeRange
from aeolytics.services.citation_service import CitationService
from aeolytics.services.domain_service import DomainService
from aeolytics.services.query_service import QueryService
from aeolytics.services.report_generator import (
    ReportGenerator,
    filter_by_time_range,
    report_metrics,
)

router = APIRouter(prefix="/reports", tags=["Reports"])

# Reports look further back than the dashboard's default read
REPORT_CITATION_LIMIT = 5000


@router.get("/metrics", response_model=ReportMetrics)
async def get_report_metrics(
    current_user: CurrentUser,
    db: DbSession,
    time_range: TimeRange = "all",
):
    """Report metrics for a time range."""
    now = datetime.now(timezone.utc)
    citations = await CitationService(db).list_citations(
        current_user, limit=REPORT_CITATION_LIMIT
    )
    queries = await QueryService(db).list_queries(current_user)
    return report_metrics(
        filter_by_time_range(citations, time_range, now), queries, today=now.date()
    )


@router.post("", response_model=ReportResponse)
async def generate_report(config: ReportConfig, current_user: CurrentUser, db: DbSession):
    """Render the citation report as Markdown. Branding needs a white-label plan."""
    now = datetime.now(timezone.utc)
    citations = await CitationService(db).list_citations(
        current_user, limit=REPORT_CITATION_LIMIT
    )
    queries = await QueryService(db).list_queries(current_user)
    domains = await DomainService(db).list_domains(current_user)

    generator = ReportGenerator()
    content, metrics = generator.render(
        config, current_user.plan, citations, queries, domains, now=now
    )
    return ReportResponse(
        filename=generator.filename(config, now.date()),
        content=content,
        metrics=metrics,
    )
