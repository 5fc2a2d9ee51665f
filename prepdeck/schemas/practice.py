from pydantic import BaseModel, Field
from typing import Optional


class Question(BaseModel):
    id: str
    stage_id: Optional[str] = None
    stage: str
    question: str
    answered: bool = False
    type: Optional[str] = None
    difficulty: Optional[str] = None
    category: Optional[str] = None


class StartSessionRequest(BaseModel):
    search_id: Optional[int] = None
    sample_size: Optional[float] = Field(None, allow_inf_nan=False)
    stage_ids: Optional[list[int]] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None


class AnswerRequest(BaseModel):
    answer: str


class JumpRequest(BaseModel):
    index: int


class MarkAnsweredRequest(BaseModel):
    index: Optional[int] = None


class SessionStateResponse(BaseModel):
    session_id: str
    questions: list[Question]
    current_index: int
    current_question: Optional[Question]
    answer: str
    time_elapsed: int
    time_display: str
    is_timer_running: bool
    is_recording: bool
    progress: float
    answered_count: int
    total_questions: int
