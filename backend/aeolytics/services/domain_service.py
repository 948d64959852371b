"""
Domain service for business logic.
"""
import logging
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aeolytics.core.exceptions import (
    DuplicateEntityError,
    QuotaExceededError,
    ValidationFailureError,
    store_errors,
)
from aeolytics.models.domain import Domain, DomainStatus
from aeolytics.models.user import User
from aeolytics.schemas.domain import DomainUpdate
from aeolytics.services.entitlements import resolve_limits

logger = logging.getLogger(__name__)


def normalize_hostname(hostname: str) -> str:
    """Strip a leading http:// or https:// and one trailing slash."""
    value = hostname.strip()
    for scheme in ("https://", "http://"):
        if value.lower().startswith(scheme):
            value = value[len(scheme):]
            break
    if value.endswith("/"):
        value = value[:-1]
    return value


class DomainService:
    """Service for domain operations. Every call is scoped to ``owner``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, owner: User, domain_id: UUID) -> Domain | None:
        """Get one of the owner's domains by ID."""
        with store_errors("load domain"):
            result = await self.db.execute(
                select(Domain).where(
                    Domain.id == domain_id,
                    Domain.user_id == owner.id,
                )
            )
        return result.scalar_one_or_none()

    async def get_by_hostname(self, owner: User, hostname: str) -> Domain | None:
        """Get one of the owner's domains by normalized hostname."""
        with store_errors("load domain"):
            result = await self.db.execute(
                select(Domain).where(
                    Domain.domain == hostname,
                    Domain.user_id == owner.id,
                )
            )
        return result.scalars().first()

    async def list_domains(self, owner: User) -> list[Domain]:
        """List the owner's domains, newest first."""
        with store_errors("load domains"):
            result = await self.db.execute(
                select(Domain)
                .where(Domain.user_id == owner.id)
                .order_by(Domain.created_at.desc())
            )
        return list(result.scalars().all())

    async def count_domains(self, owner: User) -> int:
        with store_errors("count domains"):
            result = await self.db.execute(
                select(func.count(Domain.id)).where(Domain.user_id == owner.id)
            )
        return result.scalar() or 0

    async def add_domain(self, owner: User, hostname: str) -> Domain:
        """
        Register a domain for the owner.

        Raises ValidationFailureError for an empty hostname,
        DuplicateEntityError when the owner already tracks it and
        QuotaExceededError when the plan's domain limit is reached. None of
        these refusals write to the store.
        """
        normalized = normalize_hostname(hostname)
        if not normalized:
            raise ValidationFailureError("Domain must not be empty")

        if await self.get_by_hostname(owner, normalized):
            raise DuplicateEntityError(f"Domain {normalized} already exists")

        limits = resolve_limits(owner.plan)
        current = await self.count_domains(owner)
        if current >= limits.max_domains:
            logger.info(
                f"Domain quota reached for user {owner.id}: {current}/{limits.max_domains}"
            )
            raise QuotaExceededError("domains", limits.max_domains, limits.plan)

        domain = Domain(
            user_id=owner.id,
            domain=normalized,
            status=DomainStatus.PENDING,
        )
        with store_errors("add domain"):
            self.db.add(domain)
            await self.db.flush()
            await self.db.refresh(domain)
            owner.usage_domains = current + 1
            await self.db.flush()
        return domain

    async def update(self, owner: User, domain_id: UUID, data: DomainUpdate) -> Domain | None:
        """Update a domain."""
        domain = await self.get_by_id(owner, domain_id)
        if not domain:
            return None

        update_data = data.model_dump(exclude_unset=True)
        with store_errors("update domain"):
            for field, value in update_data.items():
                setattr(domain, field, value)
            await self.db.flush()
            await self.db.refresh(domain)
        return domain

    async def delete(self, owner: User, domain_id: UUID) -> bool:
        """Hard delete a domain. Queries pointing at it fall back to all domains."""
        deleted = await self.delete_many(owner, [domain_id])
        return deleted > 0

    async def delete_many(self, owner: User, domain_ids: list[UUID]) -> int:
        """Hard delete several of the owner's domains in one statement."""
        with store_errors("delete domains"):
            result = await self.db.execute(
                delete(Domain).where(
                    Domain.id.in_(domain_ids),
                    Domain.user_id == owner.id,
                )
            )
            owner.usage_domains = await self.count_domains(owner)
            await self.db.flush()
        return result.rowcount or 0

    async def update_status_many(
        self, owner: User, domain_ids: list[UUID], status: DomainStatus
    ) -> int:
        with store_errors("update domains"):
            result = await self.db.execute(
                update(Domain)
                .where(Domain.id.in_(domain_ids), Domain.user_id == owner.id)
                .values(status=status)
            )
        return result.rowcount or 0
