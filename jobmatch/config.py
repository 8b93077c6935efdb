import os
from datetime import timedelta
from typing import List

from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

# Document database
MONGO_DETAILS = os.getenv("MONGO_DETAILS", "")
DB_NAME = os.getenv("DB_NAME", "jobmatch_db")

# Hosted auth provider (user endpoint that resolves a bearer token)
AUTH_URL = os.getenv("AUTH_URL", "")
AUTH_API_KEY = os.getenv("AUTH_API_KEY", "")

# Primary chat provider: structured extraction and batch scoring
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

# Secondary chat provider: stateless "simple mode" endpoints
NVIDIA_API_KEY = os.getenv("NVIDIA_API_KEY", "")
NVIDIA_BASE_URL = os.getenv("NVIDIA_BASE_URL", "https://integrate.api.nvidia.com/v1")
NVIDIA_MODEL = os.getenv("NVIDIA_MODEL", "meta/llama-3.1-8b-instruct")

# Embeddings
EMBED_API_KEY = os.getenv("EMBED_API_KEY", "")
EMBED_BASE_URL = os.getenv("EMBED_BASE_URL", "https://api.openai.com/v1")
EMBED_MODEL = os.getenv("EMBED_MODEL", "text-embedding-ada-002")
EMBED_DIM = 1536
EMBED_TEXT_LIMIT = 8000

# Job search aggregator
RAPIDAPI_KEY = os.getenv("RAPIDAPI_KEY", "")
JSEARCH_URL = os.getenv("JSEARCH_URL", "https://jsearch.p.rapidapi.com/search")

LLM_TIMEOUT = int(os.getenv("LLM_TIMEOUT", "120"))
SEED_EMBED_CONCURRENCY = int(os.getenv("SEED_EMBED_CONCURRENCY", "4"))

# Upload constraints
PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MIME_TYPES = [PDF_MIME, DOCX_MIME]
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Recommendation tuning
MIN_MATCH_SCORE = 0.3
FRESHNESS_WINDOW = timedelta(hours=24)
JOB_FETCH_LIMIT = 20
CANDIDATE_LIMIT = 10
RECOMMENDATION_LIMIT = 10

SETUP_GUIDE = "/DATABASE_SETUP_REQUIRED.md"

FULL_MODE_SETTINGS = {
    "MONGO_DETAILS": MONGO_DETAILS,
    "AUTH_URL": AUTH_URL,
    "GROQ_API_KEY": GROQ_API_KEY,
}


def is_simple_mode() -> bool:
    """Simple mode: only the secondary LLM is configured, no database."""
    return bool(NVIDIA_API_KEY) and not MONGO_DETAILS


def missing_full_mode_settings() -> List[str]:
    return [name for name, value in FULL_MODE_SETTINGS.items() if not value]
