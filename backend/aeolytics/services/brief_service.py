"""
Fix-It brief service for business logic.
"""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aeolytics.core.exceptions import NotFoundError, store_errors
from aeolytics.models.brief import BriefStatus, FixItBrief
from aeolytics.models.query import Query, QueryStatus
from aeolytics.models.user import User
from aeolytics.schemas.brief import GeneratedBrief


class BriefService:
    """Service for brief operations. Every call is scoped to ``owner``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_briefs(self, owner: User, query_id: UUID | None = None) -> list[FixItBrief]:
        query = select(FixItBrief).where(FixItBrief.user_id == owner.id)
        if query_id is not None:
            query = query.where(FixItBrief.query_id == query_id)

        with store_errors("load briefs"):
            result = await self.db.execute(query.order_by(FixItBrief.created_at.desc()))
        return list(result.scalars().all())

    async def get_by_id(self, owner: User, brief_id: UUID) -> FixItBrief | None:
        with store_errors("load brief"):
            result = await self.db.execute(
                select(FixItBrief).where(
                    FixItBrief.id == brief_id,
                    FixItBrief.user_id == owner.id,
                )
            )
        return result.scalar_one_or_none()

    async def create_brief(
        self, owner: User, query_id: UUID, generated: GeneratedBrief
    ) -> FixItBrief:
        """Store a generated brief for one of the owner's live queries."""
        with store_errors("load query"):
            result = await self.db.execute(
                select(Query.id).where(
                    Query.id == query_id,
                    Query.user_id == owner.id,
                    Query.status != QueryStatus.DELETED,
                )
            )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Query")

        brief = FixItBrief(
            user_id=owner.id,
            query_id=query_id,
            title=generated.title,
            meta_description=generated.meta_description,
            schema_markup=generated.schema_markup,
            content_brief=generated.content_brief,
            faq_entries=[entry.model_dump() for entry in generated.faq_entries],
            status=BriefStatus.GENERATED,
        )
        with store_errors("save brief"):
            self.db.add(brief)
            await self.db.flush()
            await self.db.refresh(brief)
        return brief

    async def update_status(
        self, owner: User, brief_id: UUID, status: BriefStatus
    ) -> FixItBrief | None:
        # Any transition is allowed, including back to generated
        brief = await self.get_by_id(owner, brief_id)
        if not brief:
            return None

        with store_errors("update brief"):
            brief.status = status
            await self.db.flush()
            await self.db.refresh(brief)
        return brief

    async def delete(self, owner: User, brief_id: UUID) -> bool:
        brief = await self.get_by_id(owner, brief_id)
        if not brief:
            return False

        with store_errors("delete brief"):
            await self.db.delete(brief)
            await self.db.flush()
        return True
