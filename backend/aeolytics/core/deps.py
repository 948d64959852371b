"""
FastAPI dependencies for authentication, database and plan gating.
"""
import logging
from typing import Annotated, AsyncGenerator
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aeolytics.core.exceptions import UnauthorizedError
from aeolytics.core.security import decode_token
from aeolytics.database import get_db
from aeolytics.integrations.pipeline import QueryPipelineClient
from aeolytics.models.user import User
from aeolytics.services.brief_generator import BriefGenerator
from aeolytics.services.entitlements import PlanLimits, require_feature, resolve_limits
from aeolytics.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Get the current authenticated user from the auth provider's JWT.

    A profile row is created on the first request of a new account; the plan
    starts at free until the billing provider updates it.
    """
    payload = decode_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError()

    subject = payload.get("sub")
    if subject is None:
        raise UnauthorizedError()

    try:
        user_id = UUID(str(subject))
    except ValueError:
        raise UnauthorizedError()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        email = payload.get("email")
        if not email:
            raise UnauthorizedError()
        user = User(id=user_id, email=email, full_name=payload.get("name"))
        db.add(user)
        await db.flush()
        await db.refresh(user)
        logger.info(f"Created profile for user {user_id}")

    return user


def get_plan_limits(
    current_user: Annotated[User, Depends(get_current_user)],
) -> PlanLimits:
    """Resolve the current user's plan limits."""
    return resolve_limits(current_user.plan)


def require_entitlement(feature: str):
    """
    Dependency factory for feature gating.

    Raises 403 (not_entitled) when the user's plan lacks the feature.
    """

    async def entitlement_checker(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        require_feature(current_user.plan, feature)
        return current_user

    return entitlement_checker


# Common dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentPlanLimits = Annotated[PlanLimits, Depends(get_plan_limits)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_pipeline_client() -> QueryPipelineClient:
    """Query-processing pipeline client."""
    return QueryPipelineClient()


async def get_brief_generator() -> AsyncGenerator[BriefGenerator, None]:
    """Fix-It brief generator backed by the configured LLM."""
    generator = BriefGenerator()
    try:
        yield generator
    finally:
        await generator.client.close()


def get_notification_service() -> NotificationService:
    return NotificationService()


PipelineClient = Annotated[QueryPipelineClient, Depends(get_pipeline_client)]
BriefGeneratorDep = Annotated[BriefGenerator, Depends(get_brief_generator)]
Notifier = Annotated[NotificationService, Depends(get_notification_service)]
