"""
Query-processing pipeline client.

The pipeline runs queries against the AI engines and writes citation
records. This client only submits work and reads back per-engine statuses.
"""
import logging
from typing import Any
from uuid import UUID

import httpx
from pydantic import BaseModel, Field

from aeolytics.config import settings

logger = logging.getLogger(__name__)


class ProcessingStatus(BaseModel):
    query_id: str = Field(alias="queryId")
    engine: str
    status: str  # pending, processing, completed, failed
    error: str | None = None

    model_config = {"populate_by_name": True}


class PipelineResult(BaseModel):
    success: bool = False
    processed_count: int = Field(default=0, alias="processedCount")
    failed_count: int = Field(default=0, alias="failedCount")
    statuses: list[ProcessingStatus] = []
    message: str | None = None
    error: str | None = None

    model_config = {"populate_by_name": True}


class QueryPipelineClient:
    """HTTP client for the query-processing pipeline."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or settings.PIPELINE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.PIPELINE_API_KEY
        self.timeout = timeout or settings.PIPELINE_TIMEOUT

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def submit_batch(
        self,
        user_id: UUID | str,
        query_ids: list[UUID | str] | None,
        engines: list[str],
        priority: str = "normal",
    ) -> PipelineResult:
        """
        Submit queries for processing.

        ``query_ids`` of None asks the pipeline to run every active query of
        the user. Raises httpx.HTTPError when the pipeline is unreachable or
        answers with an error status.
        """
        payload: dict[str, Any] = {
            "userId": str(user_id),
            "queryIds": [str(q) for q in query_ids] if query_ids is not None else None,
            "engines": engines,
            "priority": priority,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/process-query-batch",
                json=payload,
                headers=self._headers(),
            )
            response.raise_for_status()
            result = PipelineResult.model_validate(response.json())

        logger.info(
            f"Pipeline batch for user {user_id}: "
            f"{result.processed_count} processed, {result.failed_count} failed"
        )
        return result
