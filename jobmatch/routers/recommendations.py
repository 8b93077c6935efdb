import asyncio
import uuid
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from jobmatch.config import FRESHNESS_WINDOW, JOB_FETCH_LIMIT, RECOMMENDATION_LIMIT
from jobmatch.models.models import AuthUser
from jobmatch.models.schemas import FeedbackPayload, FeedbackType, JobPosting, ParsedProfile
from jobmatch.services.auth import get_current_user, require_full_mode
from jobmatch.services.db import feedback_coll, jobs_coll, recommendations_coll, resumes_coll, users_coll
from jobmatch.services.recommendations import assemble_recommendations, to_view
from jobmatch.services.scoring import score_jobs
from jobmatch.utils.exceptions import NotFoundError, ValidationError
from jobmatch.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter(
    prefix="/api/recommendations",
    tags=["recommendations"],
    dependencies=[Depends(require_full_mode("Recommendations API"))],
)
logger = get_logger(__name__)

FEEDBACK_TYPES = {t.value for t in FeedbackType}


async def find_app_user(auth_user: AuthUser) -> dict:
    app_user = await users_coll.find_one({"auth_user_id": auth_user.id})
    if not app_user:
        raise NotFoundError("User profile not found", resource="user")
    return app_user


async def load_recommendations(user_id: str, resume_id: str, since: datetime = None) -> List[dict]:
    query = {"user_id": user_id, "resume_id": resume_id}
    if since is not None:
        query["created_at"] = {"$gte": since}
    cursor = recommendations_coll.find(query).sort("match_score", -1).limit(RECOMMENDATION_LIMIT)
    return await cursor.to_list(length=RECOMMENDATION_LIMIT)


async def join_jobs(recs: List[dict]) -> list:
    job_ids = list({r["job_id"] for r in recs})
    jobs = await jobs_coll.find({"job_id": {"$in": job_ids}}).to_list(length=None) if job_ids else []
    by_id = {j["job_id"]: j for j in jobs}
    return [to_view(r, by_id.get(r["job_id"])) for r in recs]


async def generate_recommendations(user_id: str, resume: dict) -> int:
    """Score active jobs for ``resume`` and store the keepers; returns how many."""
    job_docs = await jobs_coll.find({"is_active": True}).limit(JOB_FETCH_LIMIT).to_list(length=JOB_FETCH_LIMIT)
    if not job_docs:
        logger.info("No active jobs to recommend from")
        return 0

    jobs = [JobPosting(**{k: v for k, v in d.items() if k != "_id"}) for d in job_docs]
    profile = ParsedProfile(**(resume.get("parsed_data") or {}))

    loop = asyncio.get_running_loop()
    with PerformanceMonitor(f"generate_recommendations[{len(jobs)}]", logger, threshold_ms=15000):
        recs = await loop.run_in_executor(
            None,
            lambda: assemble_recommendations(
                profile,
                jobs,
                resume.get("raw_text") or "",
                user_id,
                resume["resume_id"],
                resume_embedding=resume.get("embedding"),
                score=score_jobs,
            ),
        )

    if recs:
        docs = [{"recommendation_id": str(uuid.uuid4()), **r.model_dump()} for r in recs]
        await recommendations_coll.insert_many(docs)
    logger.info(f"Stored {len(recs)} recommendations for user {user_id}")
    return len(recs)


@router.get("")
async def get_recommendations(auth_user: AuthUser = Depends(get_current_user)):
    app_user = await find_app_user(auth_user)
    user_id = app_user["user_id"]

    resume = await resumes_coll.find_one(
        {"user_id": user_id, "is_active": True},
        sort=[("upload_date", -1)],
    )
    if not resume:
        return {"recommendations": []}

    fresh = await load_recommendations(user_id, resume["resume_id"], since=datetime.utcnow() - FRESHNESS_WINDOW)
    if fresh:
        logger.debug(f"Serving {len(fresh)} cached recommendations for user {user_id}")
        return {"recommendations": await join_jobs(fresh)}

    await generate_recommendations(user_id, resume)
    recs = await load_recommendations(user_id, resume["resume_id"])
    return {"recommendations": await join_jobs(recs)}


@router.post("/feedback")
async def submit_feedback(payload: FeedbackPayload, auth_user: AuthUser = Depends(get_current_user)):
    app_user = await find_app_user(auth_user)

    if not payload.recommendation_id or not payload.feedback_type:
        raise ValidationError("Missing required fields")
    if payload.feedback_type not in FEEDBACK_TYPES:
        raise ValidationError("Invalid feedback type", field="feedback_type", value=payload.feedback_type)

    rec = await recommendations_coll.find_one({
        "recommendation_id": payload.recommendation_id,
        "user_id": app_user["user_id"],
    })
    if not rec:
        raise NotFoundError("Recommendation not found", resource="recommendation")

    feedback = {
        "feedback_id": str(uuid.uuid4()),
        "user_id": app_user["user_id"],
        "recommendation_id": payload.recommendation_id,
        "feedback_type": payload.feedback_type,
        "feedback_reason": payload.feedback_reason or None,
        "created_at": datetime.utcnow(),
    }
    try:
        await feedback_coll.insert_one(dict(feedback))
    except Exception as e:
        logger.error(f"Feedback save error for {payload.recommendation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save feedback")

    logger.info(f"Saved {payload.feedback_type} feedback on {payload.recommendation_id}")
    return {"message": "Feedback saved successfully", "feedback": feedback}
