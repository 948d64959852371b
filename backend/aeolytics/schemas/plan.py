"""
Plan and usage schemas.
"""
from aeolytics.schemas.common import BaseSchema


class PlanUsage(BaseSchema):
    queries: int
    domains: int


class PlanResponse(BaseSchema):
    """Entitlements of the current user's plan plus current usage."""

    plan: str
    max_queries: int
    max_domains: int
    allowed_engines: list[str]
    features: dict[str, bool]
    daily_runs: int
    usage: PlanUsage
    subscription_status: str | None = None
