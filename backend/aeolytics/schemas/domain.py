"""
Domain schemas.
"""
from datetime import datetime
from uuid import UUID

from pydantic import Field

from aeolytics.models.domain import DomainStatus
from aeolytics.schemas.common import BaseSchema, IDSchema, TimestampSchema


class DomainCreate(BaseSchema):
    """Create domain request. Scheme and trailing slash are stripped."""

    domain: str = Field(min_length=1, max_length=255)


class DomainUpdate(BaseSchema):
    """Update domain request."""

    status: DomainStatus | None = None


class DomainResponse(IDSchema, TimestampSchema):
    """Domain response."""

    user_id: UUID
    domain: str
    status: DomainStatus
    queries_count: int
    citations_count: int
    last_check: datetime | None
