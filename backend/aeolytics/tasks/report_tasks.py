"""
Report Tasks

Weekly summary e-mails for users whose plan includes e-mail reports.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from celery import shared_task
from sqlalchemy import select

from aeolytics.database import get_sync_compatible_session_maker
from aeolytics.models.user import User
from aeolytics.schemas.notification import NotificationSettings
from aeolytics.services.citation_service import CitationService
from aeolytics.services.domain_service import DomainService
from aeolytics.services.entitlements import Feature, can_access_feature
from aeolytics.services.notification_service import NotificationService, build_weekly_summary
from aeolytics.services.query_service import QueryService
from aeolytics.tasks.processing_tasks import run_async

logger = logging.getLogger(__name__)


def wants_weekly_summary(user: User) -> bool:
    if not can_access_feature(user.plan, Feature.EMAIL_REPORTS):
        return False
    prefs = NotificationSettings.model_validate(user.email_notifications or {})
    return prefs.weekly_reports


@shared_task(bind=True)
def send_weekly_summaries(self) -> dict[str, Any]:
    """Send the weekly summary e-mail to every opted-in user."""
    return run_async(_send_weekly_summaries())


async def _send_weekly_summaries(notifier: NotificationService | None = None) -> dict[str, Any]:
    notifier = notifier or NotificationService()
    since = datetime.now(timezone.utc) - timedelta(days=7)
    sent = failed = skipped = 0

    session_maker = get_sync_compatible_session_maker()
    async with session_maker() as session:
        users = (await session.execute(select(User))).scalars().all()

        for user in users:
            if not wants_weekly_summary(user):
                skipped += 1
                continue

            citations = await CitationService(session).list_citations(user, since=since)
            queries = await QueryService(session).list_queries(user)
            domains = await DomainService(session).list_domains(user)

            result = await notifier.send_weekly_summary(
                user.email, build_weekly_summary(citations, queries, domains)
            )
            if result.success:
                sent += 1
            else:
                failed += 1
                logger.warning(f"Weekly summary to user {user.id} failed: {result.error}")

    logger.info(f"Weekly summaries: {sent} sent, {failed} failed, {skipped} skipped")
    return {"sent": sent, "failed": failed, "skipped": skipped}
