"""
Bulk operation schemas.
"""
from enum import Enum
from uuid import UUID

from pydantic import Field, field_validator

from aeolytics.models.domain import DomainStatus
from aeolytics.models.query import QueryStatus
from aeolytics.schemas.common import BaseSchema


class BulkOperationType(str, Enum):
    DELETE = "delete"
    UPDATE = "update"
    PROCESS = "process"


class BulkEntityType(str, Enum):
    QUERIES = "queries"
    DOMAINS = "domains"
    CITATIONS = "citations"


class QueryBulkUpdate(BaseSchema):
    """Fields a bulk update may set on queries."""

    status: QueryStatus

    @field_validator("status")
    @classmethod
    def status_not_deleted(cls, value: QueryStatus) -> QueryStatus:
        if value == QueryStatus.DELETED:
            raise ValueError("use a bulk delete to remove queries")
        return value


class DomainBulkUpdate(BaseSchema):
    """Fields a bulk update may set on domains."""

    status: DomainStatus


class BulkOperationRequest(BaseSchema):
    type: BulkOperationType
    entity_type: BulkEntityType
    entity_ids: list[UUID] = Field(default_factory=list, max_length=1000)
    updates: dict | None = None


class BulkOperationResult(BaseSchema):
    success: bool = True
    success_count: int = 0
    failure_count: int = 0
    errors: list[str] = []


class BulkProgress(BaseSchema):
    current: int = 0
    total: int = 0
