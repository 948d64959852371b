"""
Entitlement Resolver

Maps a subscription plan to its quotas, AI engines and feature flags.
Every write path consults this module; nothing here touches the database.
An unrecognized plan resolves to the free tier.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from aeolytics.core.exceptions import NotEntitledError
from aeolytics.models.query import Engine
from aeolytics.models.user import Plan

logger = logging.getLogger(__name__)


class Feature:
    """Feature flag names."""
    ADVANCED_ANALYTICS = "advancedAnalytics"
    FIX_IT_BRIEFS = "fixItBriefs"
    EMAIL_REPORTS = "emailReports"
    WHITELABEL_REPORTS = "whitelabelReports"
    API_ACCESS = "apiAccess"
    TEAM_COLLABORATION = "teamCollaboration"
    INTEGRATIONS = "integrations"


@dataclass(frozen=True)
class PlanLimits:
    """Quota limits and entitlements for a plan."""
    plan: str
    max_queries: int
    max_domains: int
    allowed_engines: tuple[str, ...]
    features: dict[str, bool] = field(default_factory=dict)
    daily_runs: int = 0


_ALL_ENGINES = (Engine.CHATGPT.value, Engine.PERPLEXITY.value, Engine.GEMINI.value)

# Plan configurations
PLAN_LIMITS = {
    Plan.FREE.value: PlanLimits(
        plan=Plan.FREE.value,
        max_queries=50,
        max_domains=1,
        allowed_engines=(Engine.CHATGPT.value,),
        features={
            Feature.ADVANCED_ANALYTICS: False,
            Feature.FIX_IT_BRIEFS: False,
            Feature.EMAIL_REPORTS: False,
            Feature.WHITELABEL_REPORTS: False,
            Feature.API_ACCESS: False,
            Feature.TEAM_COLLABORATION: False,
            Feature.INTEGRATIONS: False,
        },
        daily_runs=5,
    ),
    Plan.PRO.value: PlanLimits(
        plan=Plan.PRO.value,
        max_queries=1000,
        max_domains=5,
        allowed_engines=_ALL_ENGINES,
        features={
            Feature.ADVANCED_ANALYTICS: True,
            Feature.FIX_IT_BRIEFS: True,
            Feature.EMAIL_REPORTS: True,
            Feature.WHITELABEL_REPORTS: False,
            Feature.API_ACCESS: False,
            Feature.TEAM_COLLABORATION: False,
            Feature.INTEGRATIONS: True,
        },
        daily_runs=50,
    ),
    Plan.AGENCY.value: PlanLimits(
        plan=Plan.AGENCY.value,
        max_queries=10000,
        max_domains=10,
        allowed_engines=_ALL_ENGINES,
        features={
            Feature.ADVANCED_ANALYTICS: True,
            Feature.FIX_IT_BRIEFS: True,
            Feature.EMAIL_REPORTS: True,
            Feature.WHITELABEL_REPORTS: True,
            Feature.API_ACCESS: True,
            Feature.TEAM_COLLABORATION: True,
            Feature.INTEGRATIONS: True,
        },
        daily_runs=200,
    ),
}

# Pipeline priority by plan
PLAN_PRIORITY = {
    Plan.FREE.value: "low",
    Plan.PRO.value: "normal",
    Plan.AGENCY.value: "high",
}


def _plan_key(plan) -> str:
    if isinstance(plan, Plan):
        return plan.value
    return str(plan) if plan is not None else Plan.FREE.value


def resolve_limits(plan) -> PlanLimits:
    """Get limits for a plan, falling back to the free tier."""
    limits = PLAN_LIMITS.get(_plan_key(plan))
    if limits is None:
        logger.warning(f"Unknown plan {plan!r}, using free tier limits")
        return PLAN_LIMITS[Plan.FREE.value]
    return limits


def can_use_engine(plan, engine: str) -> bool:
    return engine in resolve_limits(plan).allowed_engines


def can_access_feature(plan, feature: str) -> bool:
    return bool(resolve_limits(plan).features.get(feature, False))


def available_engines(plan) -> list[str]:
    return list(resolve_limits(plan).allowed_engines)


def plan_priority(plan) -> str:
    return PLAN_PRIORITY.get(resolve_limits(plan).plan, "low")


def filter_engines(plan, engines: Iterable[str]) -> list[str]:
    """
    Drop engines outside the plan.

    Keeps the requested order and removes duplicates. Engines are filtered,
    never rejected: the caller proceeds with whatever is left.
    """
    allowed = resolve_limits(plan).allowed_engines
    result: list[str] = []
    for engine in engines:
        if engine in allowed and engine not in result:
            result.append(engine)
    return result


def require_feature(plan, feature: str) -> None:
    """Raise NotEntitledError when the plan does not include the feature."""
    if not can_access_feature(plan, feature):
        limits = resolve_limits(plan)
        logger.info(f"Refused {feature} for plan {limits.plan}")
        raise NotEntitledError(feature, limits.plan)
