from prepdeck.schemas.profile import (
    CVAnalysis,
    HeuristicCV,
    ProfileParsedData,
    CVAnalysisRequest,
    CVAnalysisResponse,
    ResumeSaveRequest,
    ResumeResponse,
)
from prepdeck.schemas.practice import Question, SessionStateResponse
from prepdeck.schemas.analytics import UsageAnalytics, CostEstimate

__all__ = [
    "CVAnalysis",
    "HeuristicCV",
    "ProfileParsedData",
    "CVAnalysisRequest",
    "CVAnalysisResponse",
    "ResumeSaveRequest",
    "ResumeResponse",
    "Question",
    "SessionStateResponse",
    "UsageAnalytics",
    "CostEstimate",
]
