"""
Report schemas.
"""
from datetime import date
from typing import Literal

from pydantic import Field

from aeolytics.schemas.common import BaseSchema

TimeRange = Literal["7d", "30d", "90d", "all"]


class EngineShareSchema(BaseSchema):
    name: str
    citations: int
    percentage: int
    citation_rate: int


class TrendPointSchema(BaseSchema):
    date: date
    visibility_score: int
    citations: int
    cited: int
    uncited: int


class ReportMetrics(BaseSchema):
    """Computed report metrics."""

    visibility_score: int = 0
    total_citations: int = 0
    cited_queries: int = 0
    top_engines: list[EngineShareSchema] = []
    recommendations: list[str] = []
    improvements: list[str] = []
    trends: list[TrendPointSchema] = []


class BrandConfig(BaseSchema):
    """White-label branding for generated reports."""

    company_name: str | None = Field(default=None, max_length=100)
    website: str | None = Field(default=None, max_length=255)
    logo_url: str | None = Field(default=None, max_length=500)
    primary_color: str | None = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")


class ReportConfig(BaseSchema):
    """Report generation request."""

    time_range: TimeRange = "30d"
    include_trends: bool = True
    include_recommendations: bool = True
    include_detailed_analysis: bool = False
    brand_config: BrandConfig | None = None


class ReportResponse(BaseSchema):
    filename: str
    content: str
    metrics: ReportMetrics
