from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from prepdeck.database import get_db
from prepdeck.dependencies import get_current_user
from prepdeck.models.user import User
from prepdeck.schemas.analytics import (
    UsageAnalytics,
    CostEstimate,
    SearchApiCallResponse,
    SimilarSearchResponse,
)
from prepdeck.services.usage_analytics import (
    get_user_analytics,
    get_search_usage,
    find_similar_search,
    get_cost_estimate,
)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def _load_analytics(db: Session, user: User, days: int) -> dict:
    try:
        return get_user_analytics(db, user.id, days=days)
    except SQLAlchemyError as e:
        print(f"[Analytics] Error fetching Tavily analytics: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load usage analytics",
        )


@router.get("/usage", response_model=UsageAnalytics)
async def get_usage(
    days: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Tavily usage statistics for the last ``days`` days."""
    return _load_analytics(db, current_user, days)


@router.get("/cost", response_model=CostEstimate)
async def get_cost(
    days: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Estimated Tavily spend for the last ``days`` days."""
    return get_cost_estimate(_load_analytics(db, current_user, days))


@router.get("/searches/{search_id}", response_model=list[SearchApiCallResponse])
async def get_usage_for_search(
    search_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Every Tavily call made for one search, oldest first."""
    return get_search_usage(db, search_id, current_user.id)


@router.get("/similar", response_model=SimilarSearchResponse)
async def get_similar_search(
    query_text: str,
    api_type: str = Query("search", pattern="^(search|extract)$"),
    search_depth: str = "basic",
    hours_threshold: float = Query(24, gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Report the most recent identical successful call, if any."""
    match = find_similar_search(
        db,
        current_user.id,
        query_text=query_text,
        api_type=api_type,
        search_depth=search_depth,
        hours_threshold=hours_threshold,
    )
    return {"found": match is not None, "search": match}
