from fastapi import APIRouter, Depends, HTTPException

from jobmatch.config import ENVIRONMENT
from jobmatch.services.auth import require_full_mode
from jobmatch.services.seed import SAMPLE_JOBS, seed_jobs
from jobmatch.utils.exceptions import DatabaseError
from jobmatch.utils.logging_config import get_logger

router = APIRouter(
    prefix="/api",
    tags=["seed"],
    dependencies=[Depends(require_full_mode("Seed data API"))],
)
logger = get_logger(__name__)


@router.post("/seed-data")
async def seed_data():
    """Development only: load the sample job catalogue"""
    if ENVIRONMENT == "production":
        raise HTTPException(status_code=403, detail="Not available in production")

    try:
        written = await seed_jobs(SAMPLE_JOBS)
    except DatabaseError as e:
        logger.error(f"Seed data error: {e.cause}")
        raise HTTPException(status_code=500, detail="Failed to seed data")

    companies = {job["company"] for job in SAMPLE_JOBS}
    return {"message": "Sample data seeded successfully", "companies": len(companies), "jobs": written}
