"""
Bulk Operation Executor

Applies a delete, update or process operation to many entity ids in
fixed-size batches. Batches run strictly one after another with a short
pause between them. A failing batch is accounted as failures for all of its
ids and the remaining batches still run.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol
from uuid import UUID

import httpx
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from aeolytics.config import settings
from aeolytics.core.exceptions import UpstreamServiceError, ValidationFailureError
from aeolytics.integrations.pipeline import QueryPipelineClient
from aeolytics.models.query import QueryStatus
from aeolytics.models.user import User
from aeolytics.schemas.bulk import (
    BulkEntityType,
    BulkOperationRequest,
    BulkOperationResult,
    BulkOperationType,
    BulkProgress,
    DomainBulkUpdate,
    QueryBulkUpdate,
)
from aeolytics.services.citation_service import CitationService
from aeolytics.services.domain_service import DomainService
from aeolytics.services.entitlements import available_engines, plan_priority
from aeolytics.services.query_service import QueryService

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class BatchResult:
    success_count: int = 0
    failure_count: int = 0
    errors: list[str] = field(default_factory=list)


class BulkBackend(Protocol):
    """Store operations the executor applies to one batch at a time."""

    async def delete(self, entity_type: BulkEntityType, ids: list[UUID]) -> BatchResult: ...

    async def update(
        self,
        entity_type: BulkEntityType,
        ids: list[UUID],
        updates: QueryBulkUpdate | DomainBulkUpdate,
    ) -> BatchResult: ...

    async def process(self, ids: list[UUID]) -> BatchResult: ...


def parse_updates(
    entity_type: BulkEntityType, updates: dict | None
) -> QueryBulkUpdate | DomainBulkUpdate:
    """Validate a bulk update payload against the closed shape for its entity type."""
    if entity_type == BulkEntityType.CITATIONS:
        raise ValidationFailureError("Citations cannot be updated")
    if not updates:
        raise ValidationFailureError("Bulk update requires updates")

    model = QueryBulkUpdate if entity_type == BulkEntityType.QUERIES else DomainBulkUpdate
    try:
        return model.model_validate(updates)
    except ValidationError as e:
        raise ValidationFailureError(f"Invalid {entity_type.value} update: {e}") from e


class BulkOperationExecutor:
    """Run a bulk operation batch by batch against a backend."""

    def __init__(
        self,
        backend: BulkBackend,
        batch_size: int | None = None,
        pause: float | None = None,
        on_progress: ProgressCallback | None = None,
    ):
        self.backend = backend
        self.batch_size = batch_size or settings.BULK_BATCH_SIZE
        self.pause = settings.BULK_BATCH_PAUSE_SECONDS if pause is None else pause
        self.on_progress = on_progress
        self.progress = BulkProgress()

    def _report(self, current: int, total: int) -> None:
        self.progress = BulkProgress(current=current, total=total)
        if self.on_progress:
            self.on_progress(current, total)

    async def execute(self, operation: BulkOperationRequest) -> BulkOperationResult:
        """
        Execute the operation and return aggregate counts.

        Raises ValidationFailureError before any batch runs when the
        operation itself is malformed.
        """
        ids = list(operation.entity_ids)
        if not ids:
            return BulkOperationResult(success=True)

        updates = None
        if operation.type == BulkOperationType.UPDATE:
            updates = parse_updates(operation.entity_type, operation.updates)
        elif (
            operation.type == BulkOperationType.PROCESS
            and operation.entity_type != BulkEntityType.QUERIES
        ):
            raise ValidationFailureError("Only queries can be processed")

        total = len(ids)
        result = BulkOperationResult(success=True)
        self._report(0, total)

        for index, start in enumerate(range(0, total, self.batch_size), start=1):
            batch = ids[start:start + self.batch_size]
            try:
                if operation.type == BulkOperationType.DELETE:
                    batch_result = await self.backend.delete(operation.entity_type, batch)
                elif operation.type == BulkOperationType.UPDATE:
                    batch_result = await self.backend.update(operation.entity_type, batch, updates)
                else:
                    batch_result = await self.backend.process(batch)

                result.success_count += batch_result.success_count
                result.failure_count += batch_result.failure_count
                result.errors.extend(f"Batch {index}: {e}" for e in batch_result.errors)
            except Exception as e:
                logger.warning(f"Bulk {operation.type.value} batch {index} failed: {e}")
                result.failure_count += len(batch)
                result.errors.append(f"Batch {index}: {e}")

            self._report(min(start + self.batch_size, total), total)

            if start + self.batch_size < total and self.pause > 0:
                await asyncio.sleep(self.pause)

        result.success = result.failure_count == 0
        logger.info(
            f"Bulk {operation.type.value} on {operation.entity_type.value}: "
            f"{result.success_count} succeeded, {result.failure_count} failed"
        )
        return result


class RecordStoreBulkBackend:
    """
    Bulk backend over the record store services.

    Each batch runs in its own transaction: committed when it succeeds,
    rolled back when it raises.
    """

    def __init__(
        self,
        db: AsyncSession,
        owner: User,
        pipeline: QueryPipelineClient | None = None,
    ):
        self.db = db
        self.owner = owner
        self.pipeline = pipeline or QueryPipelineClient()

    async def _finish(self, ids: list[UUID], affected: int) -> BatchResult:
        await self.db.commit()
        missing = len(ids) - affected
        if missing > 0:
            return BatchResult(
                success_count=affected,
                failure_count=missing,
                errors=[f"{missing} of {len(ids)} items not found"],
            )
        return BatchResult(success_count=len(ids))

    async def delete(self, entity_type: BulkEntityType, ids: list[UUID]) -> BatchResult:
        try:
            if entity_type == BulkEntityType.QUERIES:
                affected = await QueryService(self.db).delete_many(self.owner, ids)
            elif entity_type == BulkEntityType.DOMAINS:
                affected = await DomainService(self.db).delete_many(self.owner, ids)
            else:
                affected = await CitationService(self.db).delete_many(self.owner, ids)
        except Exception:
            await self.db.rollback()
            raise
        return await self._finish(ids, affected)

    async def update(
        self,
        entity_type: BulkEntityType,
        ids: list[UUID],
        updates: QueryBulkUpdate | DomainBulkUpdate,
    ) -> BatchResult:
        try:
            if entity_type == BulkEntityType.QUERIES:
                affected = await QueryService(self.db).update_status_many(
                    self.owner, ids, updates.status
                )
            elif entity_type == BulkEntityType.DOMAINS:
                affected = await DomainService(self.db).update_status_many(
                    self.owner, ids, updates.status
                )
            else:
                raise ValidationFailureError("Citations cannot be updated")
        except Exception:
            await self.db.rollback()
            raise
        return await self._finish(ids, affected)

    async def process(self, ids: list[UUID]) -> BatchResult:
        # Only the owner's active queries go to the pipeline
        queries = await QueryService(self.db).list_queries(
            self.owner, status=QueryStatus.ACTIVE, query_ids=ids
        )
        owned_ids = [q.id for q in queries]
        missing = len(ids) - len(owned_ids)
        if not owned_ids:
            return BatchResult(
                failure_count=missing,
                errors=[f"{missing} of {len(ids)} items not found"],
            )

        try:
            result = await self.pipeline.submit_batch(
                user_id=self.owner.id,
                query_ids=owned_ids,
                engines=available_engines(self.owner.plan),
                priority=plan_priority(self.owner.plan),
            )
        except httpx.HTTPError as e:
            raise UpstreamServiceError("Query pipeline", str(e)) from e

        if not result.success:
            raise UpstreamServiceError("Query pipeline", result.error or "Bulk processing failed")
        batch = BatchResult(
            success_count=result.processed_count,
            failure_count=result.failed_count + missing,
        )
        if missing > 0:
            batch.errors.append(f"{missing} of {len(ids)} items not found")
        return batch
