from prepdeck.routers.cv import router as cv_router
from prepdeck.routers.profile import router as profile_router
from prepdeck.routers.practice import router as practice_router
from prepdeck.routers.searches import router as searches_router
from prepdeck.routers.questions import router as questions_router
from prepdeck.routers.analytics import router as analytics_router

__all__ = [
    "cv_router",
    "profile_router",
    "practice_router",
    "searches_router",
    "questions_router",
    "analytics_router",
]
