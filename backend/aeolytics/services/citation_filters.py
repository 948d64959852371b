"""
Advanced filtering over fetched citations.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

from aeolytics.schemas.citation import CitationFilter

DATE_RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90}


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def apply_citation_filter(
    citations: Sequence[Any],
    filters: CitationFilter,
    queries_by_id: dict[str, Any] | None = None,
    domains_by_id: dict[str, str] | None = None,
    now: datetime | None = None,
) -> list[Any]:
    """
    Apply every active filter in turn and return the matching citations.

    ``queries_by_id`` supplies query text, intent tags and domain for the
    search, tag and domain filters; ``domains_by_id`` maps domain ids to
    hostnames.
    """
    queries_by_id = queries_by_id or {}
    domains_by_id = domains_by_id or {}
    result = list(citations)

    def query_of(citation):
        return queries_by_id.get(str(citation.query_id))

    if filters.search_term:
        term = filters.search_term.lower()

        def matches(citation) -> bool:
            query = query_of(citation)
            fields = [citation.response_text, citation.engine]
            if query is not None:
                fields.append(query.query_text)
            return any(term in str(value).lower() for value in fields if value)

        result = [c for c in result if matches(c)]

    if filters.engines:
        result = [c for c in result if c.engine in filters.engines]

    if filters.citation_status != "all":
        should_be_cited = filters.citation_status == "cited"
        result = [c for c in result if bool(c.cited) == should_be_cited]

    if filters.date_range != "all":
        now = now or datetime.now(timezone.utc)
        cutoff = _aware(now) - timedelta(days=DATE_RANGE_DAYS[filters.date_range])
        result = [c for c in result if c.run_date and _aware(c.run_date) >= cutoff]

    if filters.domains:
        def domain_of(citation) -> str | None:
            query = query_of(citation)
            if query is None or query.domain_id is None:
                return None
            return domains_by_id.get(str(query.domain_id))

        result = [c for c in result if domain_of(c) in filters.domains]

    if filters.positions:
        result = [c for c in result if str(c.position) in filters.positions]

    low, high = filters.confidence_range
    if low > 0 or high < 100:
        result = [
            c for c in result
            if low <= (c.confidence_score or 0) * 100 <= high
        ]

    if filters.intent_tags:
        def has_tag(citation) -> bool:
            query = query_of(citation)
            tags = (query.intent_tags or []) if query is not None else []
            return any(tag in tags for tag in filters.intent_tags)

        result = [c for c in result if has_tag(c)]

    return result
