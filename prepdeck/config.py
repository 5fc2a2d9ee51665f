import os
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./prepdeck.db")

# JWT
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours

# Gemini (CV analysis). Empty key means the heuristic parser is used.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
CV_ANALYSIS_MAX_TOKENS = int(os.getenv("CV_ANALYSIS_MAX_TOKENS", "2000"))
CV_ANALYSIS_TEMPERATURE = float(os.getenv("CV_ANALYSIS_TEMPERATURE", "0.3"))

# Tavily
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY", "")
TAVILY_BASE_URL = os.getenv("TAVILY_BASE_URL", "https://api.tavily.com")
TAVILY_CREDIT_COST = float(os.getenv("TAVILY_CREDIT_COST", "0.005"))  # USD per credit

# Practice sessions
DEFAULT_SAMPLE_SIZE = int(os.getenv("DEFAULT_SAMPLE_SIZE", "10"))

# Frontend URL for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
