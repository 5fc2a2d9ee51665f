import asyncio

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from prepdeck.config import TAVILY_API_KEY
from prepdeck.database import get_db
from prepdeck.dependencies import get_current_user
from prepdeck.models.search import Search, InterviewStage, InterviewQuestion
from prepdeck.models.user import User
from prepdeck.schemas.analytics import SearchApiCallResponse
from prepdeck.schemas.search import (
    SearchCreate,
    SearchResponse,
    SearchDetailResponse,
    StageCreate,
    StageResponse,
    ResearchRequest,
)
from prepdeck.services.question_bank import get_user_search
from prepdeck.services.tavily_client import TavilyClient
from prepdeck.services.usage_analytics import find_similar_search

router = APIRouter(prefix="/api/searches", tags=["searches"])


def _require_search(db: Session, search_id: int, user: User) -> Search:
    search = get_user_search(db, search_id, user.id)
    if not search:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Search not found",
        )
    return search


@router.post("", response_model=SearchResponse)
async def create_search(
    request: SearchCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a search record for a company and role."""
    if not request.company.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company cannot be empty",
        )

    search = Search(
        user_id=current_user.id,
        company=request.company.strip(),
        role=request.role,
        country=request.country,
        role_links=request.role_links,
        search_status="pending",
    )
    db.add(search)
    db.commit()
    db.refresh(search)
    return search


@router.get("", response_model=list[SearchResponse])
async def get_search_history(
    limit: int = 50,
    offset: int = 0,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the user's searches, newest first."""
    return (
        db.query(Search)
        .filter(Search.user_id == current_user.id)
        .order_by(Search.created_at.desc(), Search.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


@router.get("/{search_id}", response_model=SearchDetailResponse)
async def get_search_results(
    search_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a search with its interview stages and questions."""
    return _require_search(db, search_id, current_user)


@router.post("/{search_id}/stages", response_model=StageResponse)
async def add_stage(
    search_id: int,
    request: StageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an interview stage and its questions to a search."""
    search = _require_search(db, search_id, current_user)

    order_index = request.order_index
    if order_index is None:
        order_index = max((s.order_index for s in search.stages), default=-1) + 1

    stage = InterviewStage(
        search_id=search.id,
        name=request.name,
        duration=request.duration,
        interviewer=request.interviewer,
        content=request.content,
        guidance=request.guidance,
        order_index=order_index,
    )
    stage.questions = [
        InterviewQuestion(
            question=q.question,
            type=q.type,
            difficulty=q.difficulty,
            category=q.category,
        )
        for q in request.questions
        if q.question.strip()
    ]
    db.add(stage)
    db.commit()
    db.refresh(stage)
    return stage


@router.post("/{search_id}/research")
async def run_research_query(
    search_id: int,
    request: ResearchRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Run a Tavily search for this search record.

    The call is always made; ``previous_call`` reports an identical successful
    call from the last 24 hours, if there was one.
    """
    search = _require_search(db, search_id, current_user)
    if not TAVILY_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tavily API key is not configured",
        )

    previous = find_similar_search(
        db,
        current_user.id,
        query_text=request.query,
        api_type="search",
        search_depth=request.search_depth,
    )

    search.search_status = "processing"
    db.commit()

    client = TavilyClient(db, current_user.id, search_id=search.id)
    result = await asyncio.to_thread(
        client.search,
        request.query,
        search_depth=request.search_depth,
        max_results=request.max_results,
        include_domains=request.include_domains,
    )

    search.search_status = "completed" if result is not None else "failed"
    db.commit()
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Search request failed",
        )

    return {
        "result": result,
        "previous_call": SearchApiCallResponse.model_validate(previous) if previous else None,
    }
