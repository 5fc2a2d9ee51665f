from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from prepdeck.database import Base


class SearchApiCall(Base):
    """One row per Tavily request. Rows are written once and never updated."""

    __tablename__ = "search_api_calls"

    id = Column(Integer, primary_key=True, index=True)
    search_id = Column(Integer, ForeignKey("searches.id"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # API call details
    api_type = Column(String(20), nullable=False)  # search, extract
    endpoint_url = Column(String(500), nullable=False)

    # Request data
    request_payload = Column(JSON, nullable=True)
    query_text = Column(Text, nullable=True)
    search_depth = Column(String(20), nullable=True)
    max_results = Column(Integer, nullable=True)

    # Response data
    response_status = Column(Integer, nullable=False)
    results_count = Column(Integer, default=0)

    # Performance & cost tracking
    request_duration_ms = Column(Integer, nullable=True)
    credits_used = Column(Integer, default=1)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    search = relationship("Search")
