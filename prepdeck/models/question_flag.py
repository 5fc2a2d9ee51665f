from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from prepdeck.database import Base

FLAG_TYPES = ("favorite", "needs_work", "skipped")


class QuestionFlag(Base):
    __tablename__ = "user_question_flags"
    __table_args__ = (UniqueConstraint("user_id", "question_id"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("interview_questions.id"), nullable=False, index=True)
    flag_type = Column(String(20), nullable=False)  # favorite, needs_work, skipped

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    question = relationship("InterviewQuestion")
