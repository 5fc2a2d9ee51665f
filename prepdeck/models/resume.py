from sqlalchemy import Column, Integer, DateTime, Boolean, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from prepdeck.database import Base


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # Raw CV text as pasted or uploaded
    content = Column(Text, nullable=False)

    # Structured fields derived from the content
    parsed_data = Column(JSON, nullable=True)
    fallback_used = Column(Boolean, default=False)  # AI output could not be decoded

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship
    user = relationship("User", back_populates="resume")
