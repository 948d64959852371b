"""
Fix-It brief schemas.
"""
from uuid import UUID

from pydantic import Field

from aeolytics.models.brief import BriefStatus
from aeolytics.schemas.common import BaseSchema, IDSchema, TimestampSchema


class FaqEntry(BaseSchema):
    question: str
    answer: str
    keywords: list[str] = []


class GeneratedBrief(BaseSchema):
    """Brief content as returned by the generation service."""

    title: str
    meta_description: str = ""
    schema_markup: str = ""
    content_brief: str = ""
    faq_entries: list[FaqEntry] = []


class CitationAnalysis(BaseSchema):
    """Citation performance summary used to prompt brief generation."""

    query: str
    total_citations: int
    cited_engines: list[str]
    uncited_engines: list[str]
    citation_gaps: list[str]
    top_performing_content: list[str]
    missing_keywords: list[str]


class BriefGenerateRequest(BaseSchema):
    """Generate a brief for a query."""

    query_id: UUID
    custom_prompt: str | None = Field(default=None, max_length=2000)


class BriefStatusUpdate(BaseSchema):
    status: BriefStatus


class BriefResponse(IDSchema, TimestampSchema):
    """Brief response."""

    query_id: UUID
    user_id: UUID
    title: str
    meta_description: str | None
    schema_markup: str | None
    content_brief: str | None
    faq_entries: list[FaqEntry]
    status: BriefStatus


class BriefGenerateResponse(BaseSchema):
    brief: BriefResponse
    analysis: CitationAnalysis
