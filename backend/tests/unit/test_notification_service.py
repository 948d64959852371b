"""
Unit tests for e-mail notifications.
"""
import smtplib
from datetime import date
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from aeolytics.services.notification_service import NotificationService, build_weekly_summary


def citation(engine, cited):
    return SimpleNamespace(engine=engine, cited=cited, query_id="q1", position=None)


@pytest.fixture
def summary():
    citations = [citation("ChatGPT", True), citation("ChatGPT", False), citation("Gemini", True)]
    return build_weekly_summary(citations, [object()], [object(), object()], today=date(2026, 1, 12))


class TestWeeklySummary:
    """Test weekly summary numbers."""

    def test_summary(self, summary):
        """Test summary."""
        assert summary.visibility_score == 67
        assert summary.total_citations == 3
        assert summary.cited_queries == 2
        assert summary.top_engine == "ChatGPT"
        assert summary.total_queries == 1
        assert summary.total_domains == 2
        assert summary.generated_on == "2026-01-12"

    def test_empty_summary(self):
        """Test empty summary."""
        summary = build_weekly_summary([], [], [], today=date(2026, 1, 12))
        assert summary.top_engine == "N/A"
        assert summary.visibility_score == 0


class TestNotificationService:
    """Test SMTP delivery handling."""

    @pytest.mark.asyncio
    async def test_smtp_not_configured(self, summary):
        """Test smtp not configured."""
        service = NotificationService()
        service.smtp_host = ""

        result = await service.send_weekly_summary("pro@example.com", summary)

        assert result.success is False
        assert result.error == "SMTP not configured"

    @pytest.mark.asyncio
    async def test_sends_email(self, summary):
        """Test sends email."""
        service = NotificationService()
        service.smtp_host = "smtp.example.com"

        with patch.object(NotificationService, "_send_smtp") as send:
            result = await service.send_weekly_summary("pro@example.com", summary)

        assert result.success is True
        assert result.recipients == ["pro@example.com"]
        msg, recipients = send.call_args.args
        assert msg["Subject"] == "AEOlytics Weekly Report - 2026-01-12"
        assert recipients == ["pro@example.com"]

    @pytest.mark.asyncio
    async def test_smtp_failure_reported(self, summary):
        """Test smtp failure reported."""
        service = NotificationService()
        service.smtp_host = "smtp.example.com"

        with patch.object(
            NotificationService, "_send_smtp", side_effect=smtplib.SMTPException("rejected")
        ):
            result = await service.send_weekly_summary("pro@example.com", summary)

        assert result.success is False
        assert result.error == "rejected"

    def test_alert_body_escapes_query_text(self):
        """Test alert body escapes query text."""
        service = NotificationService()
        body = service._citation_alert_body(
            [SimpleNamespace(engine="ChatGPT", query_id="q1", position="top")],
            {"q1": "<script>alert(1)</script>"},
        )

        assert "<script>" not in body
        assert "&lt;script&gt;" in body
