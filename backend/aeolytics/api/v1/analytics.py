"""
Dashboard analytics endpoints.
"""
from dataclasses import asdict
from datetime import datetime, timedelta, timezone
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query

from aeolytics.core.deps import CurrentUser, DbSession, require_entitlement
from aeolytics.models.user import User
from aeolytics.schemas.analytics import (
    ActivityItemResponse,
    CitationStatsResponse,
    EnhancedAnalyticsResponse,
    PositionDistributionResponse,
    RankedQueryResponse,
)
from aeolytics.services.citation_analytics import (
    citation_stats,
    engine_breakdown,
    position_distribution,
    recent_activity,
    top_queries,
    trend_series,
)
from aeolytics.services.citation_service import CitationService
from aeolytics.services.entitlements import Feature
from aeolytics.services.query_service import QueryService

router = APIRouter(prefix="/analytics", tags=["Analytics"])

TREND_WINDOWS = {"7d": 7, "30d": 30, "90d": 90}


@router.get("/stats", response_model=CitationStatsResponse)
async def get_stats(current_user: CurrentUser, db: DbSession):
    """Visibility score and citation totals over the newest citations."""
    citations = await CitationService(db).list_citations(current_user)
    return CitationStatsResponse.model_validate(asdict(citation_stats(citations)))


@router.get("/activity", response_model=list[ActivityItemResponse])
async def get_activity(
    current_user: CurrentUser,
    db: DbSession,
    limit: int = Query(default=10, ge=1, le=50),
):
    """Recent citation activity feed."""
    citations = await CitationService(db).list_citations(current_user, limit=limit)
    queries = await QueryService(db).list_queries(current_user)
    query_texts = {str(q.id): q.query_text for q in queries}
    return [
        ActivityItemResponse.model_validate(asdict(item))
        for item in recent_activity(citations, query_texts, limit=limit)
    ]


@router.get("/enhanced", response_model=EnhancedAnalyticsResponse)
async def get_enhanced_analytics(
    current_user: Annotated[User, Depends(require_entitlement(Feature.ADVANCED_ANALYTICS))],
    db: DbSession,
    time_range: Literal["7d", "30d", "90d"] = "30d",
):
    """Trends, engine breakdown, positions and top queries."""
    days = TREND_WINDOWS[time_range]
    now = datetime.now(timezone.utc)

    citations = await CitationService(db).list_citations(
        current_user, since=now - timedelta(days=days)
    )
    queries = await QueryService(db).list_queries(current_user)

    return EnhancedAnalyticsResponse(
        days=days,
        stats=asdict(citation_stats(citations)),
        trends=[asdict(p) for p in trend_series(citations, days, today=now.date())],
        engines=[asdict(e) for e in engine_breakdown(citations)],
        positions=PositionDistributionResponse.model_validate(
            asdict(position_distribution(citations))
        ),
        top_queries=[
            RankedQueryResponse(
                query_id=ranked.query.id,
                query_text=ranked.query.query_text,
                citation_rate=ranked.citation_rate,
                total_citations=ranked.total_citations,
                cited_count=ranked.cited_count,
            )
            for ranked in top_queries(queries, citations, n=5)
        ],
        generated_for=now.date(),
    )
