from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from prepdeck.config import DEFAULT_SAMPLE_SIZE
from prepdeck.database import get_db
from prepdeck.dependencies import get_current_user
from prepdeck.exceptions import PracticeSessionError
from prepdeck.models.user import User
from prepdeck.schemas.practice import (
    StartSessionRequest,
    AnswerRequest,
    JumpRequest,
    MarkAnsweredRequest,
    SessionStateResponse,
)
from prepdeck.services import navigator
from prepdeck.services.navigator import PracticeSession
from prepdeck.services.question_bank import get_user_search, questions_for_search
from prepdeck.services.sampler import sample_questions, validate_sample_size

router = APIRouter(prefix="/api/practice", tags=["practice"])


def _load_session(session_id: str, user: User) -> PracticeSession:
    session = navigator.get_session(session_id, user.id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Practice session not found",
        )
    return session


@router.post("/sessions", response_model=SessionStateResponse)
async def start_session(
    request: StartSessionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Start a practice session over a sample of a search's questions (or the default set)."""
    if request.search_id is not None:
        search = get_user_search(db, request.search_id, current_user.id)
        if not search:
            raise HTTPException(status_code=404, detail="Search not found")
        questions = questions_for_search(
            search,
            stage_ids=request.stage_ids,
            category=request.category,
            difficulty=request.difficulty,
        )
    else:
        questions = navigator.default_questions()

    if not questions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No questions selected. Select some questions to practice.",
        )

    sample_size = validate_sample_size(
        request.sample_size if request.sample_size is not None else DEFAULT_SAMPLE_SIZE
    )
    session_id, session = navigator.create_session(
        current_user.id, sample_questions(questions, sample_size)
    )
    return session.to_state(session_id)


@router.get("/sessions/{session_id}", response_model=SessionStateResponse)
async def get_session_state(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    return _load_session(session_id, current_user).to_state(session_id)


@router.post("/sessions/{session_id}/next", response_model=SessionStateResponse)
async def next_question(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    """Mark the current question answered and move forward."""
    session = _load_session(session_id, current_user)
    session.next_question()
    return session.to_state(session_id)


@router.post("/sessions/{session_id}/previous", response_model=SessionStateResponse)
async def previous_question(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    session = _load_session(session_id, current_user)
    session.previous_question()
    return session.to_state(session_id)


@router.post("/sessions/{session_id}/skip", response_model=SessionStateResponse)
async def skip_question(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    """Move forward without marking the current question answered."""
    session = _load_session(session_id, current_user)
    session.skip_question()
    return session.to_state(session_id)


@router.post("/sessions/{session_id}/jump", response_model=SessionStateResponse)
async def jump_to_question(
    session_id: str,
    request: JumpRequest,
    current_user: User = Depends(get_current_user),
):
    session = _load_session(session_id, current_user)
    try:
        session.jump_to(request.index)
    except PracticeSessionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return session.to_state(session_id)


@router.post("/sessions/{session_id}/mark-answered", response_model=SessionStateResponse)
async def mark_answered(
    session_id: str,
    request: MarkAnsweredRequest,
    current_user: User = Depends(get_current_user),
):
    session = _load_session(session_id, current_user)
    try:
        session.mark_answered(request.index)
    except PracticeSessionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return session.to_state(session_id)


@router.post("/sessions/{session_id}/answer", response_model=SessionStateResponse)
async def update_answer(
    session_id: str,
    request: AnswerRequest,
    current_user: User = Depends(get_current_user),
):
    """Replace the answer buffer. The first non-blank answer starts the timer."""
    session = _load_session(session_id, current_user)
    session.update_answer(request.answer)
    return session.to_state(session_id)


@router.post("/sessions/{session_id}/recording", response_model=SessionStateResponse)
async def toggle_recording(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    session = _load_session(session_id, current_user)
    session.toggle_recording()
    return session.to_state(session_id)


@router.post("/sessions/{session_id}/reset-timer", response_model=SessionStateResponse)
async def reset_timer(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    session = _load_session(session_id, current_user)
    session.reset_timer()
    return session.to_state(session_id)


@router.delete("/sessions/{session_id}")
async def end_session(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    if not navigator.end_session(session_id, current_user.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Practice session not found",
        )
    return {"status": "ok"}
