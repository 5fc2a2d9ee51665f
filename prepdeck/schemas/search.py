from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SearchCreate(BaseModel):
    company: str
    role: Optional[str] = None
    country: Optional[str] = None
    role_links: Optional[str] = None


class QuestionCreate(BaseModel):
    question: str
    type: Optional[str] = None
    difficulty: Optional[str] = None
    category: Optional[str] = None


class StageCreate(BaseModel):
    name: str
    duration: Optional[str] = None
    interviewer: Optional[str] = None
    content: Optional[str] = None
    guidance: Optional[str] = None
    order_index: Optional[int] = None
    questions: list[QuestionCreate] = []


class QuestionResponse(BaseModel):
    id: int
    stage_id: int
    question: str
    type: Optional[str]
    difficulty: Optional[str]
    category: Optional[str]

    class Config:
        from_attributes = True


class StageResponse(BaseModel):
    id: int
    name: str
    duration: Optional[str]
    interviewer: Optional[str]
    content: Optional[str]
    guidance: Optional[str]
    order_index: int
    questions: list[QuestionResponse]

    class Config:
        from_attributes = True


class SearchResponse(BaseModel):
    id: int
    company: str
    role: Optional[str]
    country: Optional[str]
    role_links: Optional[str]
    search_status: str
    created_at: datetime

    class Config:
        from_attributes = True


class SearchDetailResponse(SearchResponse):
    stages: list[StageResponse]


class ResearchRequest(BaseModel):
    query: str
    search_depth: str = "basic"
    max_results: int = 12
    include_domains: Optional[list[str]] = None


class QuestionFlagRequest(BaseModel):
    flag_type: str


class QuestionFlagResponse(BaseModel):
    id: int
    question_id: int
    flag_type: str
    updated_at: datetime

    class Config:
        from_attributes = True
