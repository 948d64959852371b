"""
Query Processing Tasks

Scheduled submission of due queries to the query-processing pipeline.
"""

import asyncio
import logging
from typing import Any

import httpx
from celery import shared_task
from sqlalchemy import select

from aeolytics.database import get_sync_compatible_session_maker
from aeolytics.integrations.pipeline import QueryPipelineClient
from aeolytics.models.query import QueryStatus
from aeolytics.models.user import User
from aeolytics.services.entitlements import available_engines, plan_priority
from aeolytics.services.query_service import QueryService
from aeolytics.services.scheduler import RunType, SchedulerSummary, select_due_queries

logger = logging.getLogger(__name__)

# Pause between users so one run does not flood the pipeline
USER_PAUSE_SECONDS = 0.1


def run_async(coro):
    """Helper to run async code in sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@shared_task(bind=True)
def schedule_query_runs(self, run_type: str = RunType.DAILY.value) -> dict[str, Any]:
    """Submit every user's due queries to the pipeline."""
    return run_async(_schedule_query_runs(RunType(run_type)))


async def _schedule_query_runs(
    run_type: RunType,
    pipeline: QueryPipelineClient | None = None,
) -> dict[str, Any]:
    pipeline = pipeline or QueryPipelineClient()
    summary = SchedulerSummary(run_type=run_type.value)
    session_maker = get_sync_compatible_session_maker()

    async with session_maker() as session:
        users = (await session.execute(select(User))).scalars().all()
        summary.total_users = len(users)
        service = QueryService(session)

        for user in users:
            queries = await service.list_queries(user, status=QueryStatus.ACTIVE)
            due = select_due_queries(queries, run_type, user.plan)
            if not due:
                summary.skipped_users += 1
                continue

            summary.total_queries += len(due)
            try:
                result = await pipeline.submit_batch(
                    user_id=user.id,
                    query_ids=[q.id for q in due],
                    engines=available_engines(user.plan),
                    priority=plan_priority(user.plan),
                )
            except httpx.HTTPError as e:
                logger.error(f"Scheduled run failed for user {user.id}: {e}")
                summary.errors.append(f"User {user.id}: {e}")
                continue

            summary.processed_users += 1
            summary.processed_queries += result.processed_count
            await asyncio.sleep(USER_PAUSE_SECONDS)

    logger.info(
        f"{run_type.value} run: {summary.processed_users} users, "
        f"{summary.processed_queries} queries processed, {len(summary.errors)} errors"
    )
    return {
        "success": True,
        "type": run_type.value,
        "summary": summary.__dict__,
    }
