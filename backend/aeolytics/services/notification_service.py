"""
Notification service for weekly summary and citation alert e-mails.
"""
import asyncio
import logging
import smtplib
from datetime import date, datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Any, Sequence

from aeolytics.config import settings
from aeolytics.schemas.notification import NotificationResult, WeeklySummary
from aeolytics.services.citation_analytics import citation_stats

logger = logging.getLogger(__name__)

MAX_ALERT_CITATIONS = 5


def build_weekly_summary(
    citations: Sequence[Any],
    queries: Sequence[Any],
    domains: Sequence[Any],
    today: date | None = None,
) -> WeeklySummary:
    """Summary numbers for the weekly e-mail."""
    stats = citation_stats(citations)
    top_engine = max(stats.engine_stats.items(), key=lambda item: item[1], default=("N/A", 0))[0]
    return WeeklySummary(
        visibility_score=stats.visibility_score,
        total_citations=stats.total,
        cited_queries=stats.cited,
        uncited_queries=stats.uncited,
        top_engine=top_engine,
        total_queries=len(queries),
        total_domains=len(domains),
        generated_on=(today or datetime.now(timezone.utc).date()).isoformat(),
    )


class NotificationService:
    """Service for sending e-mail notifications over SMTP."""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_from = settings.SMTP_FROM
        self.smtp_use_tls = settings.SMTP_USE_TLS
        self.app_url = settings.cors_origins_list[0] if settings.cors_origins_list else "http://localhost:3000"

    async def send_weekly_summary(self, to: str, summary: WeeklySummary) -> NotificationResult:
        subject = f"AEOlytics Weekly Report - {summary.generated_on}"
        return await self._send_email([to], subject, self._weekly_summary_body(summary))

    async def send_citation_alert(
        self,
        to: str,
        citations: Sequence[Any],
        query_texts: dict[str, str],
    ) -> NotificationResult:
        subject = f"New AI Citations Found - {len(citations)} updates"
        body = self._citation_alert_body(citations, query_texts)
        return await self._send_email([to], subject, body)

    async def _send_email(self, recipients: list[str], subject: str, body: str) -> NotificationResult:
        if not self.smtp_host:
            return NotificationResult(success=False, error="SMTP not configured")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.smtp_from
        msg["To"] = ", ".join(recipients)
        msg.attach(MIMEText(body, "html"))

        # Send in thread pool to not block
        try:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._send_smtp,
                msg,
                recipients,
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send failed: {e}")
            return NotificationResult(
                success=False,
                error=str(e),
                sent_at=datetime.now(timezone.utc),
            )

        return NotificationResult(
            success=True,
            recipients=recipients,
            sent_at=datetime.now(timezone.utc),
        )

    def _send_smtp(self, msg: MIMEMultipart, recipients: list[str]):
        """Sync SMTP send (run in thread pool)."""
        with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
            if self.smtp_use_tls:
                server.starttls()
            if self.smtp_user and self.smtp_password:
                server.login(self.smtp_user, self.smtp_password)
            server.sendmail(self.smtp_from, recipients, msg.as_string())

    def _weekly_summary_body(self, summary: WeeklySummary) -> str:
        verdict = "performed well" if summary.visibility_score >= 50 else "has room for improvement"
        return f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1>Weekly Citation Performance Report</h1>
            <h2>Summary for {summary.time_range}</h2>
            <div style="background: #f5f5f5; padding: 20px; margin: 20px 0; border-radius: 8px;">
                <h3>Key Metrics</h3>
                <ul>
                    <li><strong>Visibility Score:</strong> {summary.visibility_score}%</li>
                    <li><strong>Citations Found:</strong> {summary.cited_queries}</li>
                    <li><strong>Total Queries:</strong> {summary.total_queries}</li>
                    <li><strong>Top Engine:</strong> {escape(summary.top_engine)}</li>
                </ul>
            </div>
            <p>This week your brand visibility {verdict} with {summary.cited_queries}
            citations out of {summary.total_citations} checks across {summary.total_queries} tracked queries.</p>
            <p>Your strongest performance was on {escape(summary.top_engine)}.</p>
            <p style="margin-top: 30px;">
                <a href="{self.app_url}/dashboard"
                   style="background: #0052CC; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px;">
                    View Full Dashboard
                </a>
            </p>
            <hr style="margin: 30px 0;">
            <p style="color: #666; font-size: 12px;">
                Generated by AEOlytics - AI Citation Analytics Platform<br>
                Report generated on {summary.generated_on}
            </p>
        </body>
        </html>
        """

    def _citation_alert_body(self, citations: Sequence[Any], query_texts: dict[str, str]) -> str:
        items = []
        for citation in list(citations)[:MAX_ALERT_CITATIONS]:
            text = escape(query_texts.get(str(citation.query_id), "Unknown query"))
            position = f" ({escape(citation.position)} position)" if citation.position else ""
            items.append(
                '<div style="margin: 15px 0; padding: 10px; background: white; border-radius: 4px;">'
                f"<strong>{escape(citation.engine)}</strong> - {text}<br>"
                f'<span style="color: #10B981;">Brand mentioned</span>{position}'
                "</div>"
            )

        return f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1>New Citations Found!</h1>
            <p>We found {len(citations)} new citations for your brand.</p>
            <div style="background: #f0f9ff; padding: 20px; margin: 20px 0; border-radius: 8px; border-left: 4px solid #0052CC;">
                <h3>Recent Citations:</h3>
                {"".join(items)}
            </div>
            <p>
                <a href="{self.app_url}/dashboard/citations"
                   style="background: #10B981; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px;">
                    View All Citations
                </a>
            </p>
        </body>
        </html>
        """
