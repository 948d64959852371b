"""
Unit tests for the bulk operation executor.
"""
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from aeolytics.core.exceptions import ValidationFailureError
from aeolytics.schemas.bulk import (
    BulkEntityType,
    BulkOperationRequest,
    BulkOperationType,
    DomainBulkUpdate,
    QueryBulkUpdate,
)
from aeolytics.services.bulk_operations import (
    BatchResult,
    BulkOperationExecutor,
    parse_updates,
)


def ids(n):
    return [uuid.uuid4() for _ in range(n)]


def ok(entity_type, batch, *args):
    return BatchResult(success_count=len(batch))


@pytest.fixture
def backend():
    mock = MagicMock()
    mock.delete = AsyncMock(side_effect=ok)
    mock.update = AsyncMock(side_effect=ok)
    mock.process = AsyncMock(side_effect=lambda batch: BatchResult(success_count=len(batch)))
    return mock


class TestParseUpdates:
    """Test bulk update payload validation."""

    def test_query_update(self):
        """Test query update."""
        updates = parse_updates(BulkEntityType.QUERIES, {"status": "paused"})
        assert isinstance(updates, QueryBulkUpdate)

    def test_domain_update(self):
        """Test domain update."""
        updates = parse_updates(BulkEntityType.DOMAINS, {"status": "active"})
        assert isinstance(updates, DomainBulkUpdate)

    def test_citations_cannot_be_updated(self):
        """Test citations cannot be updated."""
        with pytest.raises(ValidationFailureError):
            parse_updates(BulkEntityType.CITATIONS, {"cited": True})

    @pytest.mark.parametrize("updates", [None, {}, {"status": "deleted"}, {"status": "bogus"}])
    def test_invalid_query_updates(self, updates):
        """Test invalid query updates."""
        with pytest.raises(ValidationFailureError):
            parse_updates(BulkEntityType.QUERIES, updates)


class TestBulkOperationExecutor:
    """Test batch sequencing and accounting."""

    @pytest.mark.asyncio
    async def test_empty_ids_make_no_calls(self, backend):
        """Test empty ids make no calls."""
        executor = BulkOperationExecutor(backend, batch_size=10, pause=0)
        result = await executor.execute(BulkOperationRequest(
            type=BulkOperationType.DELETE,
            entity_type=BulkEntityType.QUERIES,
            entity_ids=[],
        ))

        assert result.success is True
        assert result.success_count == 0
        assert result.failure_count == 0
        backend.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_all_batches_succeed(self, backend):
        """Test all batches succeed."""
        executor = BulkOperationExecutor(backend, batch_size=10, pause=0)
        result = await executor.execute(BulkOperationRequest(
            type=BulkOperationType.DELETE,
            entity_type=BulkEntityType.DOMAINS,
            entity_ids=ids(25),
        ))

        assert result.success is True
        assert result.success_count == 25
        assert backend.delete.await_count == 3
        batch_sizes = [len(call.args[1]) for call in backend.delete.await_args_list]
        assert batch_sizes == [10, 10, 5]

    @pytest.mark.asyncio
    async def test_failed_batch_counts_all_its_ids(self, backend):
        """Test failed batch counts all its ids."""
        calls = []

        async def flaky(entity_type, batch):
            calls.append(batch)
            if len(calls) == 2:
                raise RuntimeError("connection reset")
            return BatchResult(success_count=len(batch))

        backend.delete = AsyncMock(side_effect=flaky)
        executor = BulkOperationExecutor(backend, batch_size=10, pause=0)
        result = await executor.execute(BulkOperationRequest(
            type=BulkOperationType.DELETE,
            entity_type=BulkEntityType.QUERIES,
            entity_ids=ids(25),
        ))

        assert result.success_count == 15
        assert result.failure_count == 10
        assert result.success is False
        assert len(calls) == 3
        assert result.errors == ["Batch 2: connection reset"]

    @pytest.mark.asyncio
    async def test_batches_run_in_order(self, backend):
        """Test batches run in order."""
        entity_ids = ids(12)
        executor = BulkOperationExecutor(backend, batch_size=5, pause=0)
        await executor.execute(BulkOperationRequest(
            type=BulkOperationType.DELETE,
            entity_type=BulkEntityType.CITATIONS,
            entity_ids=entity_ids,
        ))

        seen = [i for call in backend.delete.await_args_list for i in call.args[1]]
        assert seen == entity_ids

    @pytest.mark.asyncio
    async def test_backend_partial_failures(self, backend):
        """Test backend partial failures."""
        backend.update = AsyncMock(return_value=BatchResult(
            success_count=8, failure_count=2, errors=["2 of 10 items not found"],
        ))
        executor = BulkOperationExecutor(backend, batch_size=10, pause=0)
        result = await executor.execute(BulkOperationRequest(
            type=BulkOperationType.UPDATE,
            entity_type=BulkEntityType.QUERIES,
            entity_ids=ids(10),
            updates={"status": "paused"},
        ))

        assert result.success is False
        assert result.failure_count == 2
        assert result.errors == ["Batch 1: 2 of 10 items not found"]
        assert backend.update.await_args.args[2].status.value == "paused"

    @pytest.mark.asyncio
    async def test_invalid_update_rejected_before_any_batch(self, backend):
        """Test invalid update rejected before any batch."""
        executor = BulkOperationExecutor(backend, batch_size=10, pause=0)

        with pytest.raises(ValidationFailureError):
            await executor.execute(BulkOperationRequest(
                type=BulkOperationType.UPDATE,
                entity_type=BulkEntityType.CITATIONS,
                entity_ids=ids(3),
                updates={"cited": True},
            ))
        backend.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_process_only_for_queries(self, backend):
        """Test process only for queries."""
        executor = BulkOperationExecutor(backend, batch_size=10, pause=0)

        with pytest.raises(ValidationFailureError):
            await executor.execute(BulkOperationRequest(
                type=BulkOperationType.PROCESS,
                entity_type=BulkEntityType.DOMAINS,
                entity_ids=ids(3),
            ))

    @pytest.mark.asyncio
    async def test_progress_reported_per_batch(self, backend):
        """Test progress reported per batch."""
        progress = []
        executor = BulkOperationExecutor(
            backend, batch_size=10, pause=0,
            on_progress=lambda current, total: progress.append((current, total)),
        )
        await executor.execute(BulkOperationRequest(
            type=BulkOperationType.PROCESS,
            entity_type=BulkEntityType.QUERIES,
            entity_ids=ids(25),
        ))

        assert progress == [(0, 25), (10, 25), (20, 25), (25, 25)]
        assert executor.progress.current == 25

    @pytest.mark.asyncio
    async def test_pause_only_between_batches(self, backend):
        """Test pause only between batches."""
        executor = BulkOperationExecutor(backend, batch_size=10, pause=0.1)

        with patch("aeolytics.services.bulk_operations.asyncio.sleep", new=AsyncMock()) as sleep:
            await executor.execute(BulkOperationRequest(
                type=BulkOperationType.DELETE,
                entity_type=BulkEntityType.QUERIES,
                entity_ids=ids(25),
            ))

        assert sleep.await_count == 2
