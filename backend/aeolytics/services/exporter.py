"""
Export formatter: flat CSV/JSON projections of domains, queries and citations.
"""
import csv
import io
import json
from datetime import date, datetime, timezone
from typing import Any, Iterable, Sequence

from aeolytics.services.citation_analytics import visibility_score

RESPONSE_PREVIEW_LENGTH = 100


def to_csv(rows: Sequence[dict[str, Any]]) -> str:
    """
    Render rows as CSV.

    The header is the keys of the first row; later rows are read by those
    keys. Missing and None values render as empty fields. Fields holding
    commas, quotes or newlines are quoted with inner quotes doubled.
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(
            ["" if row.get(header) is None else row.get(header) for header in headers]
        )
    return output.getvalue()


def to_json(rows: Any) -> str:
    """Pretty-printed JSON keeping each record's field order."""
    return json.dumps(rows, indent=2, default=str)


def _day(value: datetime | date | None, default: str = "Never") -> str:
    if value is None:
        return default
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def _preview(text: str | None) -> str:
    text = text or ""
    if len(text) <= RESPONSE_PREVIEW_LENGTH:
        return text
    return text[:RESPONSE_PREVIEW_LENGTH] + "..."


def _status(value: Any) -> str:
    return getattr(value, "value", value)


def citation_rows(citations: Iterable[Any], query_texts: dict[str, str]) -> list[dict[str, Any]]:
    return [
        {
            "id": str(c.id),
            "query": query_texts.get(str(c.query_id), "Unknown"),
            "engine": c.engine,
            "cited": "Yes" if c.cited else "No",
            "position": c.position or "N/A",
            "confidence_score": c.confidence_score,
            "response_text": _preview(c.response_text),
            "run_date": _day(c.run_date),
            "created_at": _day(c.created_at),
        }
        for c in citations
    ]


def query_rows(queries: Iterable[Any], domain_names: dict[str, str]) -> list[dict[str, Any]]:
    return [
        {
            "id": str(q.id),
            "query_text": q.query_text,
            "domain": domain_names.get(str(q.domain_id), "All domains")
            if q.domain_id
            else "All domains",
            "engines": ", ".join(q.engines or []),
            "intent_tags": ", ".join(q.intent_tags or []),
            "status": _status(q.status),
            "last_run": _day(q.last_run),
            "created_at": _day(q.created_at),
        }
        for q in queries
    ]


def domain_rows(domains: Iterable[Any]) -> list[dict[str, Any]]:
    return [
        {
            "id": str(d.id),
            "domain": d.domain,
            "status": _status(d.status),
            "queries_count": d.queries_count,
            "citations_count": d.citations_count,
            "last_check": _day(d.last_check),
            "created_at": _day(d.created_at),
        }
        for d in domains
    ]


def full_export(
    citations: Sequence[Any],
    queries: Sequence[Any],
    domains: Sequence[Any],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Every record of the user in one document."""
    query_texts = {str(q.id): q.query_text for q in queries}
    return {
        "citations": [
            {**c.to_dict(), "query_text": query_texts.get(str(c.query_id), "Unknown")}
            for c in citations
        ],
        "queries": [q.to_dict() for q in queries],
        "domains": [d.to_dict() for d in domains],
        "exported_at": (now or datetime.now(timezone.utc)).isoformat(),
        "total_records": len(citations) + len(queries) + len(domains),
    }


def citation_report(citations: Sequence[Any], now: datetime | None = None) -> dict[str, Any]:
    """Citation analysis summary plus the raw records."""
    run_dates = [c.run_date for c in citations if c.run_date is not None]
    return {
        "summary": {
            "total_citations": len(citations),
            "cited_count": sum(1 for c in citations if c.cited),
            "visibility_score": visibility_score(citations),
            "engines": list(dict.fromkeys(c.engine for c in citations)),
            "date_range": {
                "from": _day(min(run_dates), "N/A") if run_dates else "N/A",
                "to": _day(max(run_dates), "N/A") if run_dates else "N/A",
            },
        },
        "citations": [c.to_dict() for c in citations],
        "generated_at": (now or datetime.now(timezone.utc)).isoformat(),
    }
