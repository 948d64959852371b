"""
Plan and usage endpoint.
"""
from fastapi import APIRouter

from aeolytics.core.deps import CurrentPlanLimits, CurrentUser, DbSession
from aeolytics.schemas.plan import PlanResponse, PlanUsage
from aeolytics.services.domain_service import DomainService
from aeolytics.services.query_service import QueryService

router = APIRouter(prefix="/plan", tags=["Plan"])


@router.get("", response_model=PlanResponse)
async def get_plan(
    current_user: CurrentUser,
    limits: CurrentPlanLimits,
    db: DbSession,
):
    """Get the current user's plan entitlements and usage."""
    queries = await QueryService(db).count_active_queries(current_user)
    domains = await DomainService(db).count_domains(current_user)

    return PlanResponse(
        plan=limits.plan,
        max_queries=limits.max_queries,
        max_domains=limits.max_domains,
        allowed_engines=list(limits.allowed_engines),
        features=dict(limits.features),
        daily_runs=limits.daily_runs,
        usage=PlanUsage(queries=queries, domains=domains),
        subscription_status=(
            current_user.subscription_status.value
            if current_user.subscription_status
            else None
        ),
    )
