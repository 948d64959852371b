"""
Citation endpoints.
"""
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import ValidationError

from aeolytics.core.deps import CurrentUser, DbSession
from aeolytics.core.exceptions import NotFoundError, ValidationFailureError
from aeolytics.schemas.citation import CitationFilter, CitationListResponse, CitationResponse
from aeolytics.schemas.common import MessageResponse
from aeolytics.services.citation_filters import apply_citation_filter
from aeolytics.services.citation_service import CitationService
from aeolytics.services.domain_service import DomainService
from aeolytics.services.query_service import QueryService

router = APIRouter(prefix="/citations", tags=["Citations"])


@router.get("", response_model=CitationListResponse)
async def list_citations(
    current_user: CurrentUser,
    db: DbSession,
    search: str = "",
    engines: list[str] = Query(default=[]),
    cited: Literal["all", "cited", "uncited"] = "all",
    date_range: Literal["all", "7d", "30d", "90d"] = "all",
    domains: list[str] = Query(default=[]),
    positions: list[str] = Query(default=[]),
    intent_tags: list[str] = Query(default=[]),
    confidence_min: int = Query(default=0, ge=0, le=100),
    confidence_max: int = Query(default=100, ge=0, le=100),
    query_id: UUID | None = None,
    limit: int | None = Query(default=None, ge=1, le=1000),
):
    """List the newest citations, narrowed by the given filters."""
    try:
        filters = CitationFilter(
            search_term=search,
            engines=engines,
            citation_status=cited,
            date_range=date_range,
            domains=domains,
            positions=positions,
            confidence_range=(confidence_min, confidence_max),
            intent_tags=intent_tags,
        )
    except ValidationError as e:
        raise ValidationFailureError(str(e)) from e

    citations = await CitationService(db).list_citations(
        current_user, limit=limit, query_id=query_id
    )
    queries = await QueryService(db).list_queries(current_user)
    domain_rows = await DomainService(db).list_domains(current_user)

    filtered = apply_citation_filter(
        citations,
        filters,
        queries_by_id={str(q.id): q for q in queries},
        domains_by_id={str(d.id): d.domain for d in domain_rows},
    )
    return CitationListResponse(
        items=[CitationResponse.model_validate(c) for c in filtered],
        total=len(filtered),
        active_filter_count=filters.active_filter_count,
    )


@router.delete("/{citation_id}", response_model=MessageResponse)
async def delete_citation(citation_id: UUID, current_user: CurrentUser, db: DbSession):
    """Delete a citation."""
    if not await CitationService(db).delete(current_user, citation_id):
        raise NotFoundError("Citation")
    return MessageResponse(message="Citation deleted successfully")
