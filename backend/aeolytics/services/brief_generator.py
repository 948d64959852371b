"""
Fix-It Brief Generator

Analyzes how a query performs across AI engines and asks the LLM for a
content optimization brief: page title, meta description, schema markup,
content strategy and FAQ entries.
"""

import json
import logging
from typing import Any, Sequence

import httpx

from aeolytics.core.exceptions import UpstreamServiceError
from aeolytics.integrations.llm import LLMClient, Message, strip_code_fence
from aeolytics.models.query import MONITORED_ENGINES
from aeolytics.schemas.brief import CitationAnalysis, FaqEntry, GeneratedBrief

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert SEO and content strategist specializing in Answer Engine Optimization (AEO). Your task is to create comprehensive content optimization briefs that help brands get cited by AI engines like ChatGPT, Perplexity, and Gemini.

Focus on:
1. Creating content that directly answers user questions
2. Using structured data and schema markup
3. Including FAQ sections that AI engines love to cite
4. Optimizing for both traditional SEO and AI search

Respond with a JSON object containing:
- title: SEO-optimized page title (max 60 chars)
- metaDescription: Compelling meta description (max 160 chars)
- schemaMarkup: JSON-LD schema markup (FAQPage or Article)
- contentBrief: Detailed content strategy (200-400 words)
- faqEntries: Array of 3-5 FAQ objects with question, answer, and keywords"""

FALLBACK_BRIEF_LENGTH = 500


def analyze_citations(query: Any, citations: Sequence[Any]) -> CitationAnalysis:
    """Summarize a query's citation performance across the monitored engines."""
    cited_engines = list(dict.fromkeys(c.engine for c in citations if c.cited))
    uncited_engines = [e for e in MONITORED_ENGINES if e not in cited_engines]

    citation_gaps = []
    if uncited_engines:
        citation_gaps.append(f"Missing from {', '.join(uncited_engines)}")

    strong = sorted(
        (c for c in citations if c.cited and (c.confidence_score or 0) > 0.5),
        key=lambda c: c.confidence_score,
        reverse=True,
    )

    return CitationAnalysis(
        query=query.query_text,
        total_citations=len(citations),
        cited_engines=cited_engines,
        uncited_engines=uncited_engines,
        citation_gaps=citation_gaps,
        top_performing_content=[c.response_text for c in strong[:2]],
        missing_keywords=list(query.intent_tags or []),
    )


def default_schema(analysis: CitationAnalysis) -> str:
    return json.dumps(
        {
            "@context": "https://schema.org",
            "@type": "FAQPage",
            "mainEntity": [
                {
                    "@type": "Question",
                    "name": analysis.query,
                    "acceptedAnswer": {
                        "@type": "Answer",
                        "text": (
                            f"Comprehensive answer to {analysis.query} "
                            "with detailed insights and recommendations."
                        ),
                    },
                }
            ],
        },
        indent=2,
    )


def default_faqs(analysis: CitationAnalysis) -> list[FaqEntry]:
    return [
        FaqEntry(
            question=analysis.query,
            answer=(
                f"Detailed answer addressing {analysis.query} with specific "
                "insights and actionable recommendations."
            ),
            keywords=analysis.missing_keywords[:3],
        ),
        FaqEntry(
            question=f"What are the best practices for {analysis.query.lower()}?",
            answer=(
                "Best practices include comprehensive research, expert insights, "
                "and following industry standards."
            ),
            keywords=["best practices", "expert", "recommendations"],
        ),
    ]


def fallback_brief(analysis: CitationAnalysis, raw_content: str) -> GeneratedBrief:
    """Brief used when the model answer is not usable JSON."""
    return GeneratedBrief(
        title=f"Complete Guide to {analysis.query}",
        meta_description=(
            f"Expert insights and comprehensive information about {analysis.query}. "
            "Get the answers you need."
        ),
        schema_markup=default_schema(analysis),
        content_brief=raw_content[:FALLBACK_BRIEF_LENGTH] + "...",
        faq_entries=default_faqs(analysis),
    )


def _parse_faqs(value: Any) -> list[FaqEntry] | None:
    if not isinstance(value, list) or not value:
        return None
    entries = []
    for item in value:
        if not isinstance(item, dict) or not item.get("question"):
            continue
        keywords = item.get("keywords") or []
        entries.append(
            FaqEntry(
                question=str(item["question"]),
                answer=str(item.get("answer", "")),
                keywords=[str(k) for k in keywords] if isinstance(keywords, list) else [],
            )
        )
    return entries or None


def build_brief(analysis: CitationAnalysis, data: dict[str, Any]) -> GeneratedBrief:
    """Fill any field the model left out with a default."""
    schema_markup = data.get("schemaMarkup")
    if isinstance(schema_markup, (dict, list)):
        schema_markup = json.dumps(schema_markup, indent=2)

    return GeneratedBrief(
        title=data.get("title") or f'Optimized Content for "{analysis.query}"',
        meta_description=data.get("metaDescription") or (
            f"Learn about {analysis.query} with comprehensive insights "
            "and expert recommendations."
        ),
        schema_markup=schema_markup or default_schema(analysis),
        content_brief=data.get("contentBrief") or (
            f'Create comprehensive content targeting "{analysis.query}" '
            "to improve AI citations."
        ),
        faq_entries=_parse_faqs(data.get("faqEntries")) or default_faqs(analysis),
    )


class BriefGenerator:
    """Generate Fix-It briefs with the LLM."""

    def __init__(self, client: LLMClient | None = None):
        self.client = client or LLMClient()

    def _user_prompt(self, analysis: CitationAnalysis, custom_prompt: str | None) -> str:
        subject = "your brand" if analysis.cited_engines else "your website"
        lines = [
            "Query Analysis:",
            f'- Search Query: "{analysis.query}"',
            f"- Currently cited by: {', '.join(analysis.cited_engines) or 'None'}",
            f"- Missing from: {', '.join(analysis.uncited_engines) or 'None'}",
            f"- Citation gaps: {', '.join(analysis.citation_gaps) or 'General optimization needed'}",
            "",
        ]
        if custom_prompt:
            lines.append(f"Additional Requirements: {custom_prompt}")
            lines.append("")
        lines.append(
            f"Create a comprehensive Fix-It brief that will help {subject} get cited "
            "by AI engines for this query. Focus on actionable, specific recommendations."
        )
        return "\n".join(lines)

    async def generate(
        self,
        analysis: CitationAnalysis,
        custom_prompt: str | None = None,
    ) -> GeneratedBrief:
        """
        Ask the LLM for a brief.

        Raises UpstreamServiceError when the LLM cannot be reached. An answer
        that is not a JSON object yields the fallback brief.
        """
        messages = [
            Message(role="system", content=SYSTEM_PROMPT),
            Message(role="user", content=self._user_prompt(analysis, custom_prompt)),
        ]
        try:
            response = await self.client.chat(
                messages, temperature=0.3, max_tokens=2000, json_mode=True
            )
        except httpx.HTTPError as e:
            logger.error(f"Brief generation failed for '{analysis.query}': {e}")
            raise UpstreamServiceError("Brief generation", str(e)) from e

        try:
            data = json.loads(strip_code_fence(response.content))
        except json.JSONDecodeError:
            logger.warning("Failed to parse LLM response as JSON, using fallback brief")
            return fallback_brief(analysis, response.content)

        if not isinstance(data, dict):
            return fallback_brief(analysis, response.content)
        return build_brief(analysis, data)
