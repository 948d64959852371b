"""
Unit tests for citation reads against the record store.
"""
from datetime import datetime, timedelta, timezone

import pytest

from aeolytics.models.query import QueryStatus
from aeolytics.services.citation_service import CitationService


class TestListCitations:
    """Test ordering, caps and exclusions."""

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session, pro_user, make_query, make_citation):
        """Test newest first."""
        query = await make_query(pro_user)
        old = await make_citation(query, days_ago=3)
        new = await make_citation(query, days_ago=0)
        middle = await make_citation(query, days_ago=1)

        result = await CitationService(db_session).list_citations(pro_user)

        assert [c.id for c in result] == [new.id, middle.id, old.id]

    @pytest.mark.asyncio
    async def test_capped_at_limit(self, db_session, pro_user, make_query, make_citation):
        """Test capped at limit."""
        query = await make_query(pro_user)
        for i in range(5):
            await make_citation(query, days_ago=i)

        result = await CitationService(db_session).list_citations(pro_user, limit=3)

        assert len(result) == 3
        assert result[0].run_date > result[-1].run_date

    @pytest.mark.asyncio
    async def test_default_cap(self, db_session, pro_user, make_query, make_citation):
        """Test default cap."""
        from aeolytics.config import settings

        query = await make_query(pro_user)
        for _ in range(settings.CITATION_FETCH_LIMIT + 2):
            await make_citation(query)

        result = await CitationService(db_session).list_citations(pro_user)

        assert len(result) == settings.CITATION_FETCH_LIMIT

    @pytest.mark.asyncio
    async def test_deleted_query_citations_excluded(self, db_session, pro_user, make_query, make_citation):
        """Test deleted query citations excluded."""
        live = await make_query(pro_user, "live")
        gone = await make_query(pro_user, "gone", status=QueryStatus.DELETED)
        kept = await make_citation(live)
        await make_citation(gone)

        result = await CitationService(db_session).list_citations(pro_user)

        assert [c.id for c in result] == [kept.id]

    @pytest.mark.asyncio
    async def test_other_users_citations_excluded(
        self, db_session, pro_user, agency_user, make_query, make_citation
    ):
        """Test other users citations excluded."""
        mine = await make_citation(await make_query(pro_user))
        await make_citation(await make_query(agency_user))

        result = await CitationService(db_session).list_citations(pro_user)

        assert [c.id for c in result] == [mine.id]

    @pytest.mark.asyncio
    async def test_since_and_query_filters(self, db_session, pro_user, make_query, make_citation):
        """Test since and query filters."""
        first = await make_query(pro_user, "first")
        second = await make_query(pro_user, "second")
        recent = await make_citation(first, days_ago=1)
        await make_citation(first, days_ago=10)
        await make_citation(second, days_ago=1)

        result = await CitationService(db_session).list_citations(
            pro_user,
            since=datetime.now(timezone.utc) - timedelta(days=7),
            query_id=first.id,
        )

        assert [c.id for c in result] == [recent.id]


class TestDeleteCitations:
    """Test hard deletion."""

    @pytest.mark.asyncio
    async def test_delete(self, db_session, pro_user, make_query, make_citation):
        """Test delete."""
        citation = await make_citation(await make_query(pro_user))
        service = CitationService(db_session)

        assert await service.delete(pro_user, citation.id) is True
        assert await service.get_by_id(pro_user, citation.id) is None

    @pytest.mark.asyncio
    async def test_cannot_delete_other_users_citation(
        self, db_session, pro_user, agency_user, make_query, make_citation
    ):
        """Test cannot delete other users citation."""
        theirs = await make_citation(await make_query(agency_user))

        assert await CitationService(db_session).delete(pro_user, theirs.id) is False
        assert await CitationService(db_session).get_by_id(agency_user, theirs.id) is not None
