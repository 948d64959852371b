"""
E-mail notification schemas.
"""
from datetime import datetime

from pydantic import EmailStr, Field

from aeolytics.schemas.common import BaseSchema


class NotificationSettings(BaseSchema):
    """Per-user e-mail preferences stored on the profile."""

    weekly_reports: bool = True
    citation_alerts: bool = True


class WeeklySummary(BaseSchema):
    visibility_score: int
    total_citations: int
    cited_queries: int
    uncited_queries: int
    top_engine: str
    total_queries: int
    total_domains: int
    time_range: str = "Last 7 days"
    generated_on: str


class WeeklySummaryRequest(BaseSchema):
    """Send the weekly summary now; defaults to the profile e-mail."""

    to: EmailStr | None = None


class NotificationResult(BaseSchema):
    channel: str = "email"
    success: bool
    recipients: list[str] = []
    error: str | None = None
    sent_at: datetime | None = None


class CitationAlertRequest(BaseSchema):
    """Send an alert for citations found in the last ``since_hours`` hours."""

    to: EmailStr | None = None
    since_hours: int = Field(default=24, ge=1, le=168)
