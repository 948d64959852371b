"""
AEOlytics Report Generator

Computes report metrics and renders the citation report as Markdown using
Jinja2 templates. The report holds:
- Executive summary (visibility score, citation totals, top engine)
- AI engine performance table
- Visibility trend for the last 7 days
- Strategic recommendations
- Detailed analysis (domains, top queries, improvement opportunities)
"""

import logging
from dataclasses import asdict
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from aeolytics.models.query import MONITORED_ENGINES
from aeolytics.schemas.report import ReportConfig, ReportMetrics
from aeolytics.services.citation_analytics import (
    engine_breakdown,
    engine_citation_rate,
    query_citation_rate,
    trend_series,
    visibility_score,
)
from aeolytics.services.citation_filters import DATE_RANGE_DAYS
from aeolytics.services.entitlements import Feature, require_feature

logger = logging.getLogger(__name__)

# Template directory
TEMPLATE_DIR = Path(__file__).parent / "templates"

TIME_RANGE_LABELS = {
    "7d": "Last 7 Days",
    "30d": "Last 30 Days",
    "90d": "Last 90 Days",
    "all": "All Time",
}

LOW_VISIBILITY = 30
MID_VISIBILITY = 60
LOW_ENGINE_SHARE = 20
LOW_ENGINE_RATE = 30
MAX_RECOMMENDATIONS = 5
MAX_IMPROVEMENTS = 6
TREND_DAYS = 7


def get_jinja_env() -> Environment:
    """Get configured Jinja2 environment."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )

    env.filters["score_label"] = lambda s: (
        "Strong" if s >= 70 else
        "Fair" if s >= 50 else
        "Weak"
    )

    env.filters["engine_performance"] = lambda p: (
        "Excellent" if p >= 50 else
        "Good" if p >= 25 else
        "Needs Improvement"
    )

    return env


def generate_recommendations(score: int, top_engines: Sequence[Any]) -> list[str]:
    """Strategic recommendations chosen by visibility score band."""
    if score < LOW_VISIBILITY:
        recommendations = [
            "Implement comprehensive SEO strategy focusing on Answer Engine Optimization (AEO)",
            "Create detailed FAQ sections for your most important product pages",
            "Develop content that directly answers common customer questions",
        ]
    elif score < MID_VISIBILITY:
        recommendations = [
            "Optimize existing content with structured data markup to improve AI citations",
            "Expand content depth on pages with existing citations",
            "Target long-tail keywords that align with voice search queries",
        ]
    else:
        recommendations = [
            "Maintain current content quality while expanding to new topic areas",
            "Monitor competitor citation performance and identify content gaps",
            "Consider creating thought leadership content for emerging industry topics",
        ]

    low_share = [e.name for e in top_engines if e.percentage < LOW_ENGINE_SHARE]
    if low_share:
        recommendations.append(
            f"Focus on improving performance in {' and '.join(low_share)} "
            "through targeted content optimization"
        )

    return recommendations[:MAX_RECOMMENDATIONS]


def generate_improvements(citations: Sequence[Any], queries: Sequence[Any]) -> list[str]:
    """Improvement opportunities from uncited queries and weak engines."""
    improvements = []

    cited_query_ids = {str(c.query_id) for c in citations if c.cited}
    uncited = [q for q in queries if str(q.id) not in cited_query_ids]
    if uncited:
        improvements.append(
            f"{len(uncited)} queries need content optimization for better AI citations"
        )

    weak_engines = [
        engine for engine in MONITORED_ENGINES
        if engine_citation_rate(citations, engine) < LOW_ENGINE_RATE
    ]
    if weak_engines:
        improvements.append(
            f"Improve content strategy for {', '.join(weak_engines)} optimization"
        )

    improvements.extend([
        "Add schema markup to increase structured data visibility",
        "Create comprehensive buyer's guide content",
        "Develop comparison pages for competitive keywords",
    ])
    return improvements[:MAX_IMPROVEMENTS]


def report_metrics(
    citations: Sequence[Any],
    queries: Sequence[Any],
    today: date | None = None,
) -> ReportMetrics:
    """Compute report metrics. Output depends only on the inputs."""
    score = visibility_score(citations)
    top_engines = engine_breakdown(citations)

    return ReportMetrics(
        visibility_score=score,
        total_citations=len(citations),
        cited_queries=len({str(c.query_id) for c in citations if c.cited}),
        top_engines=[asdict(e) for e in top_engines],
        recommendations=generate_recommendations(score, top_engines),
        improvements=generate_improvements(citations, queries),
        trends=[asdict(p) for p in trend_series(citations, TREND_DAYS, today=today)],
    )


def filter_by_time_range(
    citations: Sequence[Any],
    time_range: str,
    now: datetime | None = None,
) -> list[Any]:
    """Keep citations whose run date falls inside the rolling window."""
    days = DATE_RANGE_DAYS.get(time_range)
    if days is None:
        return list(citations)

    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    result = []
    for citation in citations:
        run_date = citation.run_date
        if run_date is None:
            continue
        if run_date.tzinfo is None:
            run_date = run_date.replace(tzinfo=timezone.utc)
        if run_date >= cutoff:
            result.append(citation)
    return result


class ReportGenerator:
    """Citation report generator using Jinja2 templates."""

    def __init__(self):
        self.env = get_jinja_env()

    def render(
        self,
        config: ReportConfig,
        plan: str,
        citations: Sequence[Any],
        queries: Sequence[Any],
        domains: Sequence[Any],
        now: datetime | None = None,
    ) -> tuple[str, ReportMetrics]:
        """
        Render the Markdown report for the configured time range.

        Brand configuration is a white-label feature and raises
        NotEntitledError on plans without it.
        """
        if config.brand_config is not None:
            require_feature(plan, Feature.WHITELABEL_REPORTS)

        now = now or datetime.now(timezone.utc)
        filtered = filter_by_time_range(citations, config.time_range, now)
        metrics = report_metrics(filtered, queries, today=now.date())

        top_queries = []
        for query in list(queries)[:10]:
            rate = query_citation_rate(filtered, query.id)
            top_queries.append({
                "text": query.query_text,
                "rate": rate.rate,
                "engines": ", ".join(query.engines or []),
            })

        brand = config.brand_config
        template = self.env.get_template("citation_report.md.j2")
        content = template.render(
            title=(
                f"{brand.company_name} Citation Report"
                if brand and brand.company_name
                else "AI Citation Analytics Report"
            ),
            company_name=(brand.company_name if brand and brand.company_name else "AEOlytics"),
            website=(brand.website if brand and brand.website else "aeolytics.com"),
            logo_url=brand.logo_url if brand else None,
            generated_at=now.strftime("%Y-%m-%d %H:%M UTC"),
            time_range=TIME_RANGE_LABELS.get(config.time_range, config.time_range),
            metrics=metrics,
            query_count=len(queries),
            top_engine=metrics.top_engines[0] if metrics.top_engines else None,
            include_trends=config.include_trends,
            include_recommendations=config.include_recommendations,
            include_detailed_analysis=config.include_detailed_analysis,
            domains=domains,
            top_queries=top_queries,
        )
        logger.info(
            f"Rendered {config.time_range} report over {len(filtered)} citations"
        )
        return content, metrics

    @staticmethod
    def filename(config: ReportConfig, today: date) -> str:
        company = (
            config.brand_config.company_name
            if config.brand_config and config.brand_config.company_name
            else "AEOlytics"
        )
        return f"{company}-Citation-Report-{config.time_range}-{today.isoformat()}.md"
