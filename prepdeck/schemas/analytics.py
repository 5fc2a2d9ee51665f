from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SearchApiCallResponse(BaseModel):
    id: int
    search_id: Optional[int]
    api_type: str
    query_text: Optional[str]
    search_depth: Optional[str]
    results_count: Optional[int]
    request_duration_ms: Optional[int]
    credits_used: Optional[int]
    response_status: int
    error_message: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class CompanyCount(BaseModel):
    company: str
    searches: int


class ErrorCount(BaseModel):
    error: str
    count: int


class UsageAnalytics(BaseModel):
    total_credits_used: int
    total_searches: int
    total_extracts: int
    average_response_time: int
    success_rate: float
    recent_searches: list[SearchApiCallResponse]
    top_companies: list[CompanyCount]
    error_breakdown: list[ErrorCount]


class CostBreakdown(BaseModel):
    total_credits: int
    estimated_cost: float
    searches: int
    extracts: int
    avg_cost_per_search: float


class CostEstimate(BaseModel):
    estimated_cost: float
    breakdown: CostBreakdown


class SimilarSearchResponse(BaseModel):
    found: bool
    search: Optional[SearchApiCallResponse] = None
