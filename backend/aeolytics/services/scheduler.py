"""
Scheduled query runs: which active queries are due, and how many a plan may run.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Sequence

from aeolytics.models.query import QueryStatus
from aeolytics.services.entitlements import resolve_limits


class RunType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MANUAL = "manual"


RUN_INTERVALS = {
    RunType.DAILY: timedelta(hours=24),
    RunType.WEEKLY: timedelta(days=7),
}


@dataclass
class SchedulerSummary:
    run_type: str
    total_users: int = 0
    processed_users: int = 0
    skipped_users: int = 0
    total_queries: int = 0
    processed_queries: int = 0
    errors: list[str] = field(default_factory=list)


def _is_active(query: Any) -> bool:
    return query.status in (QueryStatus.ACTIVE, QueryStatus.ACTIVE.value)


def select_due_queries(
    queries: Sequence[Any],
    run_type: RunType,
    plan: str,
    now: datetime | None = None,
) -> list[Any]:
    """
    Active queries due for a run, capped at the plan's daily run allowance.

    A query that never ran is always due. Manual runs take every active query.
    """
    now = now or datetime.now(timezone.utc)
    interval = RUN_INTERVALS.get(run_type)

    due = []
    for query in queries:
        if not _is_active(query):
            continue
        if interval is not None and query.last_run is not None:
            last_run = query.last_run
            if last_run.tzinfo is None:
                last_run = last_run.replace(tzinfo=timezone.utc)
            if now - last_run < interval:
                continue
        due.append(query)

    return due[: resolve_limits(plan).daily_runs]
