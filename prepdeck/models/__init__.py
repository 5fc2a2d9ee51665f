from prepdeck.models.user import User
from prepdeck.models.resume import Resume
from prepdeck.models.search import Search, InterviewStage, InterviewQuestion
from prepdeck.models.question_flag import QuestionFlag
from prepdeck.models.api_call import SearchApiCall

__all__ = [
    "User",
    "Resume",
    "Search",
    "InterviewStage",
    "InterviewQuestion",
    "QuestionFlag",
    "SearchApiCall",
]
