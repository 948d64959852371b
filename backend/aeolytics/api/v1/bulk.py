"""
Bulk operation endpoint.
"""
from fastapi import APIRouter

from aeolytics.core.deps import CurrentUser, DbSession, PipelineClient
from aeolytics.schemas.bulk import BulkOperationRequest, BulkOperationResult
from aeolytics.services.bulk_operations import BulkOperationExecutor, RecordStoreBulkBackend

router = APIRouter(prefix="/bulk", tags=["Bulk"])


@router.post("", response_model=BulkOperationResult)
async def execute_bulk_operation(
    operation: BulkOperationRequest,
    current_user: CurrentUser,
    db: DbSession,
    pipeline: PipelineClient,
):
    """Delete, update or process many entities in batches."""
    backend = RecordStoreBulkBackend(db, current_user, pipeline)
    return await BulkOperationExecutor(backend).execute(operation)
