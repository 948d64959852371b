"""
Domain management endpoints.
"""
from uuid import UUID

from fastapi import APIRouter, status

from aeolytics.core.deps import CurrentUser, DbSession
from aeolytics.core.exceptions import NotFoundError
from aeolytics.schemas.common import MessageResponse
from aeolytics.schemas.domain import DomainCreate, DomainResponse, DomainUpdate
from aeolytics.services.domain_service import DomainService

router = APIRouter(prefix="/domains", tags=["Domains"])


@router.get("", response_model=list[DomainResponse])
async def list_domains(current_user: CurrentUser, db: DbSession):
    """List the current user's domains."""
    domains = await DomainService(db).list_domains(current_user)
    return [DomainResponse.model_validate(d) for d in domains]


@router.post("", response_model=DomainResponse, status_code=status.HTTP_201_CREATED)
async def create_domain(data: DomainCreate, current_user: CurrentUser, db: DbSession):
    """Add a domain. Refused when the plan's domain limit is reached."""
    domain = await DomainService(db).add_domain(current_user, data.domain)
    return DomainResponse.model_validate(domain)


@router.get("/{domain_id}", response_model=DomainResponse)
async def get_domain(domain_id: UUID, current_user: CurrentUser, db: DbSession):
    """Get a domain by ID."""
    domain = await DomainService(db).get_by_id(current_user, domain_id)
    if not domain:
        raise NotFoundError("Domain")
    return DomainResponse.model_validate(domain)


@router.patch("/{domain_id}", response_model=DomainResponse)
async def update_domain(
    domain_id: UUID,
    data: DomainUpdate,
    current_user: CurrentUser,
    db: DbSession,
):
    """Update a domain."""
    domain = await DomainService(db).update(current_user, domain_id, data)
    if not domain:
        raise NotFoundError("Domain")
    return DomainResponse.model_validate(domain)


@router.delete("/{domain_id}", response_model=MessageResponse)
async def delete_domain(domain_id: UUID, current_user: CurrentUser, db: DbSession):
    """Delete a domain."""
    if not await DomainService(db).delete(current_user, domain_id):
        raise NotFoundError("Domain")
    return MessageResponse(message="Domain deleted successfully")
