"""
Fix-It brief endpoints.
"""
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from aeolytics.core.deps import BriefGeneratorDep, CurrentUser, DbSession, require_entitlement
from aeolytics.core.exceptions import NotFoundError
from aeolytics.models.user import User
from aeolytics.schemas.brief import (
    BriefGenerateRequest,
    BriefGenerateResponse,
    BriefResponse,
    BriefStatusUpdate,
)
from aeolytics.schemas.common import MessageResponse
from aeolytics.services.brief_generator import analyze_citations
from aeolytics.services.brief_service import BriefService
from aeolytics.services.citation_service import CitationService
from aeolytics.services.entitlements import Feature
from aeolytics.services.query_service import QueryService

router = APIRouter(prefix="/briefs", tags=["Fix-It Briefs"])


@router.get("", response_model=list[BriefResponse])
async def list_briefs(
    current_user: CurrentUser,
    db: DbSession,
    query_id: UUID | None = None,
):
    """List the current user's briefs."""
    briefs = await BriefService(db).list_briefs(current_user, query_id=query_id)
    return [BriefResponse.model_validate(b) for b in briefs]


@router.post("", response_model=BriefGenerateResponse, status_code=status.HTTP_201_CREATED)
async def generate_brief(
    data: BriefGenerateRequest,
    current_user: Annotated[User, Depends(require_entitlement(Feature.FIX_IT_BRIEFS))],
    db: DbSession,
    generator: BriefGeneratorDep,
):
    """Analyze a query's citations and generate a Fix-It brief for it."""
    query = await QueryService(db).get_by_id(current_user, data.query_id)
    if not query:
        raise NotFoundError("Query")

    citations = await CitationService(db).list_citations(current_user, query_id=query.id)
    analysis = analyze_citations(query, citations)
    generated = await generator.generate(analysis, data.custom_prompt)

    brief = await BriefService(db).create_brief(current_user, query.id, generated)
    return BriefGenerateResponse(
        brief=BriefResponse.model_validate(brief),
        analysis=analysis,
    )


@router.get("/{brief_id}", response_model=BriefResponse)
async def get_brief(brief_id: UUID, current_user: CurrentUser, db: DbSession):
    """Get a brief by ID."""
    brief = await BriefService(db).get_by_id(current_user, brief_id)
    if not brief:
        raise NotFoundError("Brief")
    return BriefResponse.model_validate(brief)


@router.patch("/{brief_id}", response_model=BriefResponse)
async def update_brief_status(
    brief_id: UUID,
    data: BriefStatusUpdate,
    current_user: CurrentUser,
    db: DbSession,
):
    """Mark a brief downloaded or implemented."""
    brief = await BriefService(db).update_status(current_user, brief_id, data.status)
    if not brief:
        raise NotFoundError("Brief")
    return BriefResponse.model_validate(brief)


@router.delete("/{brief_id}", response_model=MessageResponse)
async def delete_brief(brief_id: UUID, current_user: CurrentUser, db: DbSession):
    """Delete a brief."""
    if not await BriefService(db).delete(current_user, brief_id):
        raise NotFoundError("Brief")
    return MessageResponse(message="Brief deleted successfully")
