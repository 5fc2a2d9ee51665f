from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from prepdeck.database import get_db
from prepdeck.dependencies import get_current_user
from prepdeck.models.question_flag import QuestionFlag, FLAG_TYPES
from prepdeck.models.search import Search, InterviewStage, InterviewQuestion
from prepdeck.models.user import User
from prepdeck.schemas.search import QuestionFlagRequest, QuestionFlagResponse

router = APIRouter(prefix="/api/questions", tags=["questions"])


def _require_question(db: Session, question_id: int, user: User) -> InterviewQuestion:
    question = (
        db.query(InterviewQuestion)
        .join(InterviewStage, InterviewQuestion.stage_id == InterviewStage.id)
        .join(Search, InterviewStage.search_id == Search.id)
        .filter(InterviewQuestion.id == question_id, Search.user_id == user.id)
        .first()
    )
    if not question:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found",
        )
    return question


@router.get("/flags", response_model=list[QuestionFlagResponse])
async def list_flags(
    flag_type: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the user's question flags, optionally of one type."""
    query = db.query(QuestionFlag).filter(QuestionFlag.user_id == current_user.id)
    if flag_type:
        query = query.filter(QuestionFlag.flag_type == flag_type)
    return query.order_by(QuestionFlag.updated_at.desc(), QuestionFlag.id.desc()).all()


@router.put("/{question_id}/flag", response_model=QuestionFlagResponse)
async def set_flag(
    question_id: int,
    request: QuestionFlagRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set the flag on a question, replacing any existing flag."""
    if request.flag_type not in FLAG_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"flag_type must be one of: {', '.join(FLAG_TYPES)}",
        )
    _require_question(db, question_id, current_user)

    flag = (
        db.query(QuestionFlag)
        .filter(QuestionFlag.user_id == current_user.id, QuestionFlag.question_id == question_id)
        .first()
    )
    if flag is None:
        flag = QuestionFlag(user_id=current_user.id, question_id=question_id)
        db.add(flag)
    flag.flag_type = request.flag_type

    db.commit()
    db.refresh(flag)
    return flag


@router.delete("/{question_id}/flag")
async def clear_flag(
    question_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    flag = (
        db.query(QuestionFlag)
        .filter(QuestionFlag.user_id == current_user.id, QuestionFlag.question_id == question_id)
        .first()
    )
    if not flag:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Flag not found",
        )
    db.delete(flag)
    db.commit()
    return {"status": "ok"}
