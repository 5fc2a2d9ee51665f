"""Tavily usage analytics: credits, success rate, companies and errors."""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from prepdeck.config import TAVILY_CREDIT_COST
from prepdeck.models.api_call import SearchApiCall
from prepdeck.models.search import Search

RECENT_LIMIT = 50
TOP_COMPANIES_LIMIT = 10
ERROR_PREFIX_LENGTH = 50


def _round_half_up(value: float, digits: int = 0):
    """Round halves away from zero; built-in round() rounds them to even."""
    rounded = Decimal(str(value)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def summarize_calls(records: Iterable[SearchApiCall], company_by_search: dict[int, str]) -> dict:
    """Aggregate call-log rows into usage statistics."""
    records = list(records)

    total_credits = sum(r.credits_used or 0 for r in records)
    total_searches = sum(1 for r in records if r.api_type == "search")
    total_extracts = sum(1 for r in records if r.api_type == "extract")

    successful = [r for r in records if r.response_status == 200]
    average_response_time = (
        sum(r.request_duration_ms or 0 for r in successful) / len(successful)
        if successful
        else 0
    )
    success_rate = (len(successful) / len(records) * 100) if records else 0.0

    companies = Counter(
        company_by_search[r.search_id]
        for r in records
        if r.search_id is not None and company_by_search.get(r.search_id)
    )
    top_companies = [
        {"company": company, "searches": count}
        for company, count in sorted(companies.items(), key=lambda kv: kv[1], reverse=True)[:TOP_COMPANIES_LIMIT]
    ]

    errors = Counter(
        r.error_message[:ERROR_PREFIX_LENGTH] + "..."
        for r in records
        if r.error_message
    )
    error_breakdown = [
        {"error": error, "count": count}
        for error, count in sorted(errors.items(), key=lambda kv: kv[1], reverse=True)
    ]

    return {
        "total_credits_used": total_credits,
        "total_searches": total_searches,
        "total_extracts": total_extracts,
        "average_response_time": _round_half_up(average_response_time),
        "success_rate": _round_half_up(success_rate, 2),
        "top_companies": top_companies,
        "error_breakdown": error_breakdown,
    }


def _companies_for(db: Session, search_ids: set) -> dict[int, str]:
    if not search_ids:
        return {}
    rows = db.query(Search.id, Search.company).filter(Search.id.in_(search_ids)).all()
    return {search_id: company for search_id, company in rows}


def get_user_analytics(db: Session, user_id: int, days: int = 30, now: Optional[datetime] = None) -> dict:
    """Usage statistics for a user's calls within the last ``days`` days."""
    now = now or datetime.utcnow()
    since = now - timedelta(days=days)

    records = (
        db.query(SearchApiCall)
        .filter(SearchApiCall.user_id == user_id, SearchApiCall.created_at >= since)
        .order_by(SearchApiCall.created_at.desc(), SearchApiCall.id.desc())
        .all()
    )

    company_by_search = _companies_for(db, {r.search_id for r in records if r.search_id is not None})
    analytics = summarize_calls(records, company_by_search)
    analytics["recent_searches"] = records[:RECENT_LIMIT]
    return analytics


def get_search_usage(db: Session, search_id: int, user_id: int) -> list[SearchApiCall]:
    """All calls made for one search, oldest first."""
    return (
        db.query(SearchApiCall)
        .filter(SearchApiCall.search_id == search_id, SearchApiCall.user_id == user_id)
        .order_by(SearchApiCall.created_at.asc(), SearchApiCall.id.asc())
        .all()
    )


def find_similar_search(
    db: Session,
    user_id: int,
    query_text: str,
    api_type: str,
    search_depth: str = "basic",
    hours_threshold: float = 24,
    now: Optional[datetime] = None,
) -> Optional[SearchApiCall]:
    """
    Most recent successful call with the same query, type and depth.

    Only reports whether an identical call exists; callers decide whether to
    reuse it.
    """
    now = now or datetime.utcnow()
    since = now - timedelta(hours=hours_threshold)

    return (
        db.query(SearchApiCall)
        .filter(
            SearchApiCall.user_id == user_id,
            SearchApiCall.query_text == query_text,
            SearchApiCall.api_type == api_type,
            SearchApiCall.search_depth == search_depth,
            SearchApiCall.response_status == 200,
            SearchApiCall.created_at >= since,
        )
        .order_by(SearchApiCall.created_at.desc(), SearchApiCall.id.desc())
        .first()
    )


def get_cost_estimate(analytics: dict, credit_cost: float = TAVILY_CREDIT_COST) -> dict:
    """Estimated spend from credits used at a fixed per-credit rate."""
    estimated_cost = analytics["total_credits_used"] * credit_cost
    searches = analytics["total_searches"]

    breakdown = {
        "total_credits": analytics["total_credits_used"],
        "estimated_cost": _round_half_up(estimated_cost, 2),
        "searches": searches,
        "extracts": analytics["total_extracts"],
        "avg_cost_per_search": _round_half_up(estimated_cost / searches, 2) if searches > 0 else 0,
    }

    return {"estimated_cost": estimated_cost, "breakdown": breakdown}
