from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from prepdeck.database import Base


class Search(Base):
    __tablename__ = "searches"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    company = Column(String(255), nullable=False)
    role = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)
    role_links = Column(Text, nullable=True)
    search_status = Column(String(20), default="pending", nullable=False)  # pending, processing, completed, failed

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="searches")
    stages = relationship(
        "InterviewStage",
        back_populates="search",
        order_by="InterviewStage.order_index",
        cascade="all, delete-orphan",
    )


class InterviewStage(Base):
    __tablename__ = "interview_stages"

    id = Column(Integer, primary_key=True, index=True)
    search_id = Column(Integer, ForeignKey("searches.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    duration = Column(String(100), nullable=True)
    interviewer = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    guidance = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    search = relationship("Search", back_populates="stages")
    questions = relationship(
        "InterviewQuestion",
        back_populates="stage",
        order_by="InterviewQuestion.id",
        cascade="all, delete-orphan",
    )


class InterviewQuestion(Base):
    __tablename__ = "interview_questions"

    id = Column(Integer, primary_key=True, index=True)
    stage_id = Column(Integer, ForeignKey("interview_stages.id"), nullable=False, index=True)

    question = Column(Text, nullable=False)
    type = Column(String(50), nullable=True)  # behavioral, technical, situational
    difficulty = Column(String(20), nullable=True)  # easy, medium, hard
    category = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    stage = relationship("InterviewStage", back_populates="questions")
