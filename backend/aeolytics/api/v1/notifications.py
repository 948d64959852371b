"""
E-mail notification endpoints.
"""
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from aeolytics.core.deps import CurrentUser, DbSession, Notifier, require_entitlement
from aeolytics.core.exceptions import store_errors
from aeolytics.models.user import User
from aeolytics.schemas.notification import (
    CitationAlertRequest,
    NotificationResult,
    NotificationSettings,
    WeeklySummaryRequest,
)
from aeolytics.services.citation_service import CitationService
from aeolytics.services.domain_service import DomainService
from aeolytics.services.entitlements import Feature
from aeolytics.services.notification_service import build_weekly_summary
from aeolytics.services.query_service import QueryService

router = APIRouter(prefix="/notifications", tags=["Notifications"])

EmailReportsUser = Annotated[User, Depends(require_entitlement(Feature.EMAIL_REPORTS))]


@router.post("/weekly-summary", response_model=NotificationResult)
async def send_weekly_summary(
    data: WeeklySummaryRequest,
    current_user: EmailReportsUser,
    db: DbSession,
    notifier: Notifier,
):
    """Send the weekly summary e-mail now."""
    since = datetime.now(timezone.utc) - timedelta(days=7)
    citations = await CitationService(db).list_citations(current_user, since=since)
    queries = await QueryService(db).list_queries(current_user)
    domains = await DomainService(db).list_domains(current_user)

    summary = build_weekly_summary(citations, queries, domains)
    return await notifier.send_weekly_summary(data.to or current_user.email, summary)


@router.post("/citation-alert", response_model=NotificationResult)
async def send_citation_alert(
    data: CitationAlertRequest,
    current_user: EmailReportsUser,
    db: DbSession,
    notifier: Notifier,
):
    """E-mail the citations found in the last ``since_hours`` hours."""
    since = datetime.now(timezone.utc) - timedelta(hours=data.since_hours)
    citations = await CitationService(db).list_citations(current_user, since=since)
    cited = [c for c in citations if c.cited]
    if not cited:
        return NotificationResult(success=False, error="No new citations to report")

    queries = await QueryService(db).list_queries(current_user)
    query_texts = {str(q.id): q.query_text for q in queries}
    return await notifier.send_citation_alert(data.to or current_user.email, cited, query_texts)


@router.get("/settings", response_model=NotificationSettings)
async def get_notification_settings(current_user: CurrentUser):
    """Get the current user's e-mail preferences."""
    return NotificationSettings.model_validate(current_user.email_notifications or {})


@router.put("/settings", response_model=NotificationSettings)
async def update_notification_settings(
    data: NotificationSettings,
    current_user: EmailReportsUser,
    db: DbSession,
):
    """Update the current user's e-mail preferences."""
    with store_errors("update notification settings"):
        current_user.email_notifications = data.model_dump()
        await db.flush()
    return data
