"""
Query management endpoints.
"""
from uuid import UUID

import httpx
from fastapi import APIRouter, Query, status

from aeolytics.core.deps import CurrentUser, DbSession, PipelineClient
from aeolytics.core.exceptions import NotFoundError, UpstreamServiceError, ValidationFailureError
from aeolytics.integrations.pipeline import PipelineResult
from aeolytics.models.query import MONITORED_ENGINES, QueryStatus
from aeolytics.schemas.common import MessageResponse
from aeolytics.schemas.query import (
    QueryCreate,
    QueryProcessRequest,
    QueryResponse,
    QueryUpdate,
)
from aeolytics.services.entitlements import filter_engines, plan_priority
from aeolytics.services.query_service import QueryService

router = APIRouter(prefix="/queries", tags=["Queries"])


@router.get("", response_model=list[QueryResponse])
async def list_queries(
    current_user: CurrentUser,
    db: DbSession,
    status_filter: QueryStatus | None = Query(default=None, alias="status"),
):
    """List the current user's queries. Deleted queries are never returned."""
    if status_filter == QueryStatus.DELETED:
        return []
    queries = await QueryService(db).list_queries(current_user, status=status_filter)
    return [QueryResponse.model_validate(q) for q in queries]


@router.post("", response_model=QueryResponse, status_code=status.HTTP_201_CREATED)
async def create_query(data: QueryCreate, current_user: CurrentUser, db: DbSession):
    """Create a query. Engines outside the plan are dropped."""
    query = await QueryService(db).add_query(current_user, data)
    return QueryResponse.model_validate(query)


@router.post("/process", response_model=PipelineResult)
async def process_queries(
    data: QueryProcessRequest,
    current_user: CurrentUser,
    db: DbSession,
    pipeline: PipelineClient,
):
    """Submit queries to the processing pipeline (all active queries when none are given)."""
    engines = filter_engines(current_user.plan, data.engines or MONITORED_ENGINES)
    if not engines:
        raise ValidationFailureError("None of the requested engines are available on your plan")

    query_ids = data.query_ids
    if query_ids is not None:
        owned = await QueryService(db).list_queries(
            current_user, status=QueryStatus.ACTIVE, query_ids=query_ids
        )
        if not owned:
            raise NotFoundError("Query")
        query_ids = [q.id for q in owned]

    try:
        return await pipeline.submit_batch(
            user_id=current_user.id,
            query_ids=query_ids,
            engines=engines,
            priority=plan_priority(current_user.plan),
        )
    except httpx.HTTPError as e:
        raise UpstreamServiceError("Query pipeline", str(e)) from e


@router.get("/{query_id}", response_model=QueryResponse)
async def get_query(query_id: UUID, current_user: CurrentUser, db: DbSession):
    """Get a query by ID."""
    query = await QueryService(db).get_by_id(current_user, query_id)
    if not query:
        raise NotFoundError("Query")
    return QueryResponse.model_validate(query)


@router.patch("/{query_id}", response_model=QueryResponse)
async def update_query(
    query_id: UUID,
    data: QueryUpdate,
    current_user: CurrentUser,
    db: DbSession,
):
    """Update a query's status, tags or engines."""
    query = await QueryService(db).update(current_user, query_id, data)
    if not query:
        raise NotFoundError("Query")
    return QueryResponse.model_validate(query)


@router.delete("/{query_id}", response_model=MessageResponse)
async def delete_query(query_id: UUID, current_user: CurrentUser, db: DbSession):
    """Soft delete a query."""
    if not await QueryService(db).delete(current_user, query_id):
        raise NotFoundError("Query")
    return MessageResponse(message="Query deleted successfully")
