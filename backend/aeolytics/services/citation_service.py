"""
Citation service: read and delete citation check records.

Citations are written by the processing pipeline and never updated here.
"""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from aeolytics.config import settings
from aeolytics.core.exceptions import store_errors
from aeolytics.models.citation import Citation
from aeolytics.models.query import Query, QueryStatus
from aeolytics.models.user import User

logger = logging.getLogger(__name__)


class CitationService:
    """Service for citation operations. Every call is scoped to ``owner``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_citations(
        self,
        owner: User,
        limit: int | None = None,
        since: datetime | None = None,
        query_id: UUID | None = None,
    ) -> list[Citation]:
        """
        Newest citations first, capped at ``limit``.

        Citations of deleted or missing queries are excluded by the join, so
        callers can aggregate the result directly.
        """
        if limit is None:
            limit = settings.CITATION_FETCH_LIMIT

        query = (
            select(Citation)
            .join(Query, Citation.query_id == Query.id)
            .where(
                Citation.user_id == owner.id,
                Query.user_id == owner.id,
                Query.status != QueryStatus.DELETED,
            )
        )
        if since is not None:
            query = query.where(Citation.run_date >= since)
        if query_id is not None:
            query = query.where(Citation.query_id == query_id)

        query = query.order_by(Citation.run_date.desc(), Citation.id).limit(limit)

        with store_errors("load citations"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, owner: User, citation_id: UUID) -> Citation | None:
        with store_errors("load citation"):
            result = await self.db.execute(
                select(Citation).where(
                    Citation.id == citation_id,
                    Citation.user_id == owner.id,
                )
            )
        return result.scalar_one_or_none()

    async def delete(self, owner: User, citation_id: UUID) -> bool:
        deleted = await self.delete_many(owner, [citation_id])
        return deleted > 0

    async def delete_many(self, owner: User, citation_ids: list[UUID]) -> int:
        """Hard delete several of the owner's citations."""
        with store_errors("delete citations"):
            result = await self.db.execute(
                delete(Citation).where(
                    Citation.id.in_(citation_ids),
                    Citation.user_id == owner.id,
                )
            )
        return result.rowcount or 0
