from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from prepdeck.config import FRONTEND_URL, GEMINI_API_KEY, TAVILY_API_KEY
from prepdeck.database import init_db
from prepdeck.routers import (
    cv_router,
    profile_router,
    practice_router,
    searches_router,
    questions_router,
    analytics_router,
)

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if not GEMINI_API_KEY:
        print("[WARN] GEMINI_API_KEY not set, CVs will be parsed with the heuristic parser")
    if not TAVILY_API_KEY:
        print("[WARN] TAVILY_API_KEY not set, research queries are disabled")
    yield


app = FastAPI(title="Prepdeck API", lifespan=lifespan)

app.include_router(cv_router)
app.include_router(profile_router)
app.include_router(practice_router)
app.include_router(searches_router)
app.include_router(questions_router)
app.include_router(analytics_router)


def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value


allowed_origins = [
    _strip_trailing_slash(FRONTEND_URL),
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
