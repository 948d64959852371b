"""
Query schemas.
"""
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from aeolytics.models.query import QueryStatus
from aeolytics.schemas.common import BaseSchema, IDSchema, TimestampSchema


class QueryCreate(BaseSchema):
    """Create query request.

    ``engines`` defaults to every monitored engine; engines outside the
    user's plan are dropped before the query is stored.
    """

    query_text: str = Field(max_length=1000)
    domain_id: UUID | None = None
    intent_tags: list[str] = []
    engines: list[str] | None = None


class QueryUpdate(BaseSchema):
    """Update query request. Deletion goes through DELETE, not status."""

    status: QueryStatus | None = None
    intent_tags: list[str] | None = None
    engines: list[str] | None = None

    @field_validator("status")
    @classmethod
    def status_not_deleted(cls, value: QueryStatus | None) -> QueryStatus | None:
        if value == QueryStatus.DELETED:
            raise ValueError("use DELETE to remove a query")
        return value


class QueryResponse(IDSchema, TimestampSchema):
    """Query response."""

    user_id: UUID
    query_text: str
    domain_id: UUID | None
    intent_tags: list[str]
    engines: list[str]
    status: QueryStatus
    last_run: datetime | None


class QueryProcessRequest(BaseSchema):
    """Submit queries to the processing pipeline (all active when omitted)."""

    query_ids: list[UUID] | None = None
    engines: list[str] | None = None
