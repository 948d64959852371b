"""
Query service for business logic.
"""
import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aeolytics.core.exceptions import (
    QuotaExceededError,
    ValidationFailureError,
    store_errors,
)
from aeolytics.models.domain import Domain
from aeolytics.models.query import MONITORED_ENGINES, Query, QueryStatus
from aeolytics.models.user import User
from aeolytics.schemas.query import QueryCreate, QueryUpdate
from aeolytics.services.entitlements import filter_engines, resolve_limits

logger = logging.getLogger(__name__)


class QueryService:
    """Service for query operations. Every call is scoped to ``owner``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, owner: User, query_id: UUID) -> Query | None:
        """Get one of the owner's non-deleted queries by ID."""
        with store_errors("load query"):
            result = await self.db.execute(
                select(Query).where(
                    Query.id == query_id,
                    Query.user_id == owner.id,
                    Query.status != QueryStatus.DELETED,
                )
            )
        return result.scalar_one_or_none()

    async def list_queries(
        self,
        owner: User,
        status: QueryStatus | None = None,
        query_ids: list[UUID] | None = None,
    ) -> list[Query]:
        """List the owner's queries, newest first. Deleted queries never appear."""
        query = select(Query).where(
            Query.user_id == owner.id,
            Query.status != QueryStatus.DELETED,
        )
        if status:
            query = query.where(Query.status == status)
        if query_ids is not None:
            query = query.where(Query.id.in_(query_ids))

        with store_errors("load queries"):
            result = await self.db.execute(query.order_by(Query.created_at.desc()))
        return list(result.scalars().all())

    async def count_active_queries(self, owner: User) -> int:
        with store_errors("count queries"):
            result = await self.db.execute(
                select(func.count(Query.id)).where(
                    Query.user_id == owner.id,
                    Query.status == QueryStatus.ACTIVE,
                )
            )
        return result.scalar() or 0

    async def add_query(self, owner: User, data: QueryCreate) -> Query:
        """
        Create a query for the owner.

        Engines outside the owner's plan are dropped and creation proceeds
        with whatever remains. Raises ValidationFailureError for empty text
        or a domain the owner does not have, and QuotaExceededError when the
        plan's active query limit is reached.
        """
        text = data.query_text.strip()
        if not text:
            raise ValidationFailureError("Query text must not be empty")

        if data.domain_id is not None:
            with store_errors("load domain"):
                result = await self.db.execute(
                    select(Domain.id).where(
                        Domain.id == data.domain_id,
                        Domain.user_id == owner.id,
                    )
                )
            if result.scalar_one_or_none() is None:
                raise ValidationFailureError("Unknown domain")

        limits = resolve_limits(owner.plan)
        current = await self.count_active_queries(owner)
        if current >= limits.max_queries:
            logger.info(
                f"Query quota reached for user {owner.id}: {current}/{limits.max_queries}"
            )
            raise QuotaExceededError("queries", limits.max_queries, limits.plan)

        requested = data.engines if data.engines is not None else MONITORED_ENGINES
        engines = filter_engines(owner.plan, requested)
        dropped = [e for e in requested if e not in engines]
        if dropped:
            logger.debug(f"Dropped engines outside {limits.plan} plan: {dropped}")

        query = Query(
            user_id=owner.id,
            query_text=text,
            domain_id=data.domain_id,
            intent_tags=list(dict.fromkeys(data.intent_tags)),
            engines=engines,
            status=QueryStatus.ACTIVE,
        )
        with store_errors("add query"):
            self.db.add(query)
            await self.db.flush()
            await self.db.refresh(query)
            owner.usage_queries = current + 1
            await self.db.flush()
        return query

    async def update(self, owner: User, query_id: UUID, data: QueryUpdate) -> Query | None:
        """Update a query. New engines go through the same plan filter as creation."""
        query = await self.get_by_id(owner, query_id)
        if not query:
            return None

        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("engines") is not None:
            update_data["engines"] = filter_engines(owner.plan, update_data["engines"])

        if (
            update_data.get("status") == QueryStatus.ACTIVE
            and query.status != QueryStatus.ACTIVE
        ):
            await self._check_quota(owner, 1)

        with store_errors("update query"):
            for field, value in update_data.items():
                setattr(query, field, value)
            await self.db.flush()
            await self.db.refresh(query)
            if "status" in update_data:
                owner.usage_queries = await self.count_active_queries(owner)
                await self.db.flush()
        return query

    async def delete(self, owner: User, query_id: UUID) -> bool:
        """Soft delete a query."""
        deleted = await self.delete_many(owner, [query_id])
        return deleted > 0

    async def delete_many(self, owner: User, query_ids: list[UUID]) -> int:
        """Soft delete several of the owner's queries (status -> deleted)."""
        with store_errors("delete queries"):
            result = await self.db.execute(
                update(Query)
                .where(
                    Query.id.in_(query_ids),
                    Query.user_id == owner.id,
                    Query.status != QueryStatus.DELETED,
                )
                .values(status=QueryStatus.DELETED)
            )
            owner.usage_queries = await self.count_active_queries(owner)
            await self.db.flush()
        return result.rowcount or 0

    async def update_status_many(
        self, owner: User, query_ids: list[UUID], status: QueryStatus
    ) -> int:
        """
        Set the status of several of the owner's queries.

        Activating is all or nothing: QuotaExceededError is raised when the
        newly activated queries would take the owner past the plan limit.
        """
        if status == QueryStatus.ACTIVE:
            with store_errors("count queries"):
                result = await self.db.execute(
                    select(func.count(Query.id)).where(
                        Query.id.in_(query_ids),
                        Query.user_id == owner.id,
                        Query.status == QueryStatus.PAUSED,
                    )
                )
            activating = result.scalar() or 0
            await self._check_quota(owner, activating)

        with store_errors("update queries"):
            result = await self.db.execute(
                update(Query)
                .where(
                    Query.id.in_(query_ids),
                    Query.user_id == owner.id,
                    Query.status != QueryStatus.DELETED,
                )
                .values(status=status)
            )
            owner.usage_queries = await self.count_active_queries(owner)
            await self.db.flush()
        return result.rowcount or 0

    async def _check_quota(self, owner: User, adding: int) -> None:
        if adding <= 0:
            return
        limits = resolve_limits(owner.plan)
        current = await self.count_active_queries(owner)
        if current + adding > limits.max_queries:
            logger.info(
                f"Query quota reached for user {owner.id}: "
                f"{current} active, {adding} more requested, limit {limits.max_queries}"
            )
            raise QuotaExceededError("queries", limits.max_queries, limits.plan)
