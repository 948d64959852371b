"""
Citation schemas.
"""
import math
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field, computed_field, model_validator

from aeolytics.schemas.common import BaseSchema, IDSchema


class CitationResponse(IDSchema):
    """Citation response."""

    query_id: UUID
    engine: str
    response_text: str
    cited: bool
    position: str | None
    confidence_score: float
    run_date: datetime
    created_at: datetime

    @computed_field
    @property
    def confidence_percent(self) -> int:
        return math.floor(self.confidence_score * 100 + 0.5)


class CitationFilter(BaseSchema):
    """Client-side style filters applied to already-fetched citations."""

    search_term: str = ""
    engines: list[str] = []
    citation_status: Literal["all", "cited", "uncited"] = "all"
    date_range: Literal["all", "7d", "30d", "90d"] = "all"
    domains: list[str] = []
    positions: list[str] = []
    confidence_range: tuple[int, int] = (0, 100)
    intent_tags: list[str] = []

    @model_validator(mode="after")
    def check_confidence_range(self) -> "CitationFilter":
        low, high = self.confidence_range
        if not 0 <= low <= high <= 100:
            raise ValueError("confidence_range must satisfy 0 <= low <= high <= 100")
        return self

    @property
    def active_filter_count(self) -> int:
        count = 0
        if self.search_term:
            count += 1
        if self.engines:
            count += 1
        if self.citation_status != "all":
            count += 1
        if self.date_range != "all":
            count += 1
        if self.domains:
            count += 1
        if self.intent_tags:
            count += 1
        if self.positions:
            count += 1
        if self.confidence_range[0] > 0 or self.confidence_range[1] < 100:
            count += 1
        return count


class CitationListResponse(BaseSchema):
    """Filtered citations plus the number of active filters."""

    items: list[CitationResponse]
    total: int
    active_filter_count: int = Field(default=0)
