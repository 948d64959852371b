"""
Dashboard analytics schemas.
"""
from datetime import date, datetime
from typing import Any
from uuid import UUID

from aeolytics.schemas.common import BaseSchema
from aeolytics.schemas.report import EngineShareSchema, TrendPointSchema


class CitationStatsResponse(BaseSchema):
    total: int
    cited: int
    uncited: int
    visibility_score: int
    engine_stats: dict[str, int]


class PositionDistributionResponse(BaseSchema):
    top: int
    middle: int
    bottom: int
    not_cited: int
    unpositioned: int


class RankedQueryResponse(BaseSchema):
    query_id: UUID
    query_text: str
    citation_rate: int
    total_citations: int
    cited_count: int


class ActivityItemResponse(BaseSchema):
    id: Any
    type: str
    message: str
    engine: str
    time: datetime | None
    status: str


class EnhancedAnalyticsResponse(BaseSchema):
    """Advanced analytics for the selected trend window."""

    days: int
    stats: CitationStatsResponse
    trends: list[TrendPointSchema]
    engines: list[EngineShareSchema]
    positions: PositionDistributionResponse
    top_queries: list[RankedQueryResponse]
    generated_for: date
