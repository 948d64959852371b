"""
Citation Aggregator

Pure functions that turn citation check records into dashboard metrics:
- Visibility score and citation stats
- Per-engine and per-query citation rates
- Position distribution
- Calendar-day trend series
- Top queries and recent activity

Records may be ORM rows, pydantic models or plain dicts. None of these
functions raise on empty or malformed input; they degrade to zero-valued
results so dashboards always render. Inputs are never mutated.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Sequence

from aeolytics.models.citation import CitationPosition
from aeolytics.models.query import QueryStatus

UNKNOWN_ENGINE = "Unknown"


@dataclass
class CitationStats:
    total: int = 0
    cited: int = 0
    uncited: int = 0
    visibility_score: int = 0
    engine_stats: dict[str, int] = field(default_factory=dict)


@dataclass
class QueryCitationRate:
    cited_count: int = 0
    total_count: int = 0
    rate: int = 0


@dataclass
class PositionDistribution:
    """
    Where the brand appeared in cited answers.

    ``not_cited`` counts every uncited record whatever its position value.
    A cited record without a recognised position lands in ``unpositioned``
    so the five buckets always add up to the number of records.
    """
    top: int = 0
    middle: int = 0
    bottom: int = 0
    not_cited: int = 0
    unpositioned: int = 0

    @property
    def total(self) -> int:
        return self.top + self.middle + self.bottom + self.not_cited + self.unpositioned


@dataclass
class TrendPoint:
    date: date
    visibility_score: int
    citations: int
    cited: int
    uncited: int


@dataclass
class EngineShare:
    name: str
    citations: int
    percentage: int
    citation_rate: int


@dataclass
class RankedQuery:
    query: Any
    citation_rate: int
    total_citations: int
    cited_count: int


@dataclass
class ActivityItem:
    id: Any
    type: str
    message: str
    engine: str
    time: datetime | None
    status: str


def _get(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _is_cited(record: Any) -> bool:
    return bool(_get(record, "cited", False))


def _engine(record: Any) -> str:
    engine = _get(record, "engine")
    return str(engine) if engine else UNKNOWN_ENGINE


def _position(record: Any) -> str | None:
    position = _get(record, "position")
    if isinstance(position, CitationPosition):
        return position.value
    return position


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (12.5 -> 13)."""
    return math.floor(value + 0.5)


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def _as_utc_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return _as_utc_date(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def confidence_percent(score: Any) -> int:
    """Confidence as shown to users: score * 100, halves rounded up."""
    try:
        return round_half_up(float(score) * 100)
    except (TypeError, ValueError):
        return 0


def visibility_score(citations: Iterable[Any]) -> int:
    """Percentage of citation checks where the brand was cited."""
    records = list(citations)
    return _percent(sum(1 for c in records if _is_cited(c)), len(records))


def citation_stats(citations: Iterable[Any]) -> CitationStats:
    """Totals, visibility score and per-engine record counts."""
    records = list(citations)
    cited = sum(1 for c in records if _is_cited(c))

    engine_stats: dict[str, int] = {}
    for citation in records:
        engine = _engine(citation)
        engine_stats[engine] = engine_stats.get(engine, 0) + 1

    return CitationStats(
        total=len(records),
        cited=cited,
        uncited=len(records) - cited,
        visibility_score=_percent(cited, len(records)),
        engine_stats=engine_stats,
    )


def engine_citation_rate(citations: Iterable[Any], engine: str) -> int:
    """Citation rate among records for one engine (0 when there are none)."""
    records = [c for c in citations if _engine(c) == engine]
    return _percent(sum(1 for c in records if _is_cited(c)), len(records))


def query_citation_rate(citations: Iterable[Any], query_id: Any) -> QueryCitationRate:
    """Citation rate among records for one query."""
    records = [c for c in citations if str(_get(c, "query_id")) == str(query_id)]
    cited = sum(1 for c in records if _is_cited(c))
    return QueryCitationRate(
        cited_count=cited,
        total_count=len(records),
        rate=_percent(cited, len(records)),
    )


def top_queries(
    queries: Sequence[Any],
    citations: Iterable[Any],
    n: int = 5,
) -> list[RankedQuery]:
    """
    Rank queries by citation rate, highest first.

    The sort is stable: equal rates keep their input order.
    """
    records = list(citations)
    ranked = []
    for query in queries:
        rate = query_citation_rate(records, _get(query, "id"))
        ranked.append(
            RankedQuery(
                query=query,
                citation_rate=rate.rate,
                total_citations=rate.total_count,
                cited_count=rate.cited_count,
            )
        )
    ranked.sort(key=lambda item: -item.citation_rate)
    return ranked[: max(n, 0)]


def position_distribution(citations: Iterable[Any]) -> PositionDistribution:
    """Bucket records by answer position."""
    distribution = PositionDistribution()
    for citation in citations:
        if not _is_cited(citation):
            distribution.not_cited += 1
            continue

        position = _position(citation)
        if position == CitationPosition.TOP.value:
            distribution.top += 1
        elif position == CitationPosition.MIDDLE.value:
            distribution.middle += 1
        elif position == CitationPosition.BOTTOM.value:
            distribution.bottom += 1
        else:
            distribution.unpositioned += 1
    return distribution


def trend_series(
    citations: Iterable[Any],
    days: int,
    today: date | None = None,
) -> list[TrendPoint]:
    """
    One bucket per calendar day, oldest first, ending today.

    Records are matched by exact UTC calendar date of ``run_date``, not by a
    rolling 24 hour window. Records without a usable run date are skipped.
    """
    if days <= 0:
        return []
    today = today or datetime.now(timezone.utc).date()

    by_day: dict[date, list[Any]] = {}
    for citation in citations:
        run_day = _as_utc_date(_get(citation, "run_date"))
        if run_day is not None:
            by_day.setdefault(run_day, []).append(citation)

    series = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_records = by_day.get(day, [])
        cited = sum(1 for c in day_records if _is_cited(c))
        series.append(
            TrendPoint(
                date=day,
                visibility_score=_percent(cited, len(day_records)),
                citations=len(day_records),
                cited=cited,
                uncited=len(day_records) - cited,
            )
        )
    return series


def engine_breakdown(citations: Iterable[Any]) -> list[EngineShare]:
    """Engines ranked by record count, with share of all records and citation rate."""
    records = list(citations)
    stats = citation_stats(records)
    shares = [
        EngineShare(
            name=engine,
            citations=count,
            percentage=_percent(count, stats.total),
            citation_rate=engine_citation_rate(records, engine),
        )
        for engine, count in stats.engine_stats.items()
    ]
    shares.sort(key=lambda share: -share.citations)
    return shares


def exclude_orphans(citations: Iterable[Any], queries: Iterable[Any]) -> list[Any]:
    """Keep only citations whose query exists and is not deleted."""
    live_ids = {
        str(_get(q, "id"))
        for q in queries
        if _get(q, "status") not in (QueryStatus.DELETED, QueryStatus.DELETED.value)
    }
    return [c for c in citations if str(_get(c, "query_id")) in live_ids]


def recent_activity(
    citations: Sequence[Any],
    query_texts: dict[str, str] | None = None,
    limit: int = 10,
) -> list[ActivityItem]:
    """
    Activity feed entries for the newest records.

    ``citations`` is expected newest first, as the store returns them.
    """
    query_texts = query_texts or {}
    items = []
    for citation in list(citations)[: max(limit, 0)]:
        text = query_texts.get(str(_get(citation, "query_id")), "Unknown query")
        cited = _is_cited(citation)
        items.append(
            ActivityItem(
                id=_get(citation, "id"),
                type="citation" if cited else "missing",
                message=(
                    f'New citation found for "{text}"'
                    if cited
                    else f'Brand missing from "{text}" query'
                ),
                engine=_engine(citation),
                time=_get(citation, "run_date"),
                status="positive" if cited else "negative",
            )
        )
    return items
