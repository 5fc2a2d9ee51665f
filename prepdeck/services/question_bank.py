"""Builds practice questions from a search's stored interview stages."""

from typing import Optional

from sqlalchemy.orm import Session

from prepdeck.models.search import Search
from prepdeck.schemas.practice import Question


def get_user_search(db: Session, search_id: int, user_id: int) -> Optional[Search]:
    """Get a search by ID for a specific user."""
    return db.query(Search).filter(
        Search.id == search_id,
        Search.user_id == user_id,
    ).first()


def questions_for_search(
    search: Search,
    stage_ids: list[int] = None,
    category: str = None,
    difficulty: str = None,
) -> list[Question]:
    """Flatten a search's stages into session questions, applying the optional filters."""
    questions = []
    for stage in search.stages:
        if stage_ids and stage.id not in stage_ids:
            continue
        for q in stage.questions:
            if category and q.category != category:
                continue
            if difficulty and q.difficulty != difficulty:
                continue
            questions.append(Question(
                id=str(q.id),
                stage_id=str(stage.id),
                stage=stage.name,
                question=q.question,
                type=q.type,
                difficulty=q.difficulty,
                category=q.category,
            ))
    return questions
