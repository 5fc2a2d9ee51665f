"""Profile store: one CV record per user, overwritten wholesale on save."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prepdeck.exceptions import ProfileStoreError
from prepdeck.models.resume import Resume


def get_resume(db: Session, user_id: int) -> Optional[Resume]:
    """Get the stored CV for a user, or None if they have not saved one."""
    return db.query(Resume).filter(Resume.user_id == user_id).first()


def save_resume(
    db: Session,
    user_id: int,
    content: str,
    parsed_data: dict = None,
    fallback_used: bool = False,
) -> Resume:
    """Create or replace the user's CV record."""
    resume = get_resume(db, user_id)
    if resume is None:
        resume = Resume(user_id=user_id)
        db.add(resume)

    resume.content = content
    resume.parsed_data = parsed_data
    resume.fallback_used = fallback_used
    resume.updated_at = datetime.utcnow()

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        print(f"[Profile] Failed to save CV for user {user_id}: {e}")
        raise ProfileStoreError("Failed to save CV") from e

    db.refresh(resume)
    return resume


def delete_resume(db: Session, user_id: int) -> bool:
    """Delete the user's CV record. Returns False when there was nothing to delete."""
    resume = get_resume(db, user_id)
    if resume is None:
        return False

    try:
        db.delete(resume)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        print(f"[Profile] Failed to delete CV for user {user_id}: {e}")
        raise ProfileStoreError("Failed to delete CV") from e

    return True
