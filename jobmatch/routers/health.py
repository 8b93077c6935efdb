from datetime import datetime

from fastapi import APIRouter, HTTPException

from jobmatch.config import ENVIRONMENT, NVIDIA_API_KEY, RAPIDAPI_KEY, is_simple_mode, missing_full_mode_settings
from jobmatch.services.db import ping
from jobmatch.services.storage import list_files
from jobmatch.utils.logging_config import get_logger

router = APIRouter(prefix="/api", tags=["health"])
logger = get_logger(__name__)


def simple_mode_status() -> dict:
    return {
        "status": "OK",
        "mode": "SIMPLE",
        "message": "AI Resume Analyzer - Simple Mode (No Database)",
        "environment": ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
        "services": {
            "nvidia_ai": "Configured" if NVIDIA_API_KEY else "Missing API Key",
            "job_search": "Configured" if RAPIDAPI_KEY else "Missing API Key",
        },
        "endpoints": {
            "analyze": "/api/simple-analyze",
            "jobs": "/api/simple-jobs",
        },
        "features": ["AI Resume Analysis", "Real Job Search", "AI Career Coach", "ATS Scoring"],
    }


@router.get("/health")
@router.head("/health")
async def health():
    if is_simple_mode():
        return simple_mode_status()

    missing = missing_full_mode_settings()
    if missing:
        logger.error(f"Health check: missing settings {missing}")
        raise HTTPException(status_code=500, detail={"error": "Missing environment variables", "missing": missing})

    database_status = "OK"
    storage_status = "OK"
    try:
        await ping()
    except Exception as e:
        logger.warning(f"Health check database probe failed: {e}")
        database_status = f"Database Error: {e}"
    try:
        await list_files(limit=1)
    except Exception as e:
        logger.warning(f"Health check storage probe failed: {e}")
        storage_status = f"Storage Error: {e}"

    return {
        "status": "OK",
        "mode": "FULL",
        "message": "AI Resume Matcher API is working",
        "environment": ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
        "services": {
            "database": database_status,
            "storage": storage_status,
        },
        "endpoints": {
            "resumes": "/api/resumes",
            "recommendations": "/api/recommendations",
            "feedback": "/api/recommendations/feedback",
        },
    }
