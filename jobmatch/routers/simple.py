import asyncio
from typing import Optional

import requests
from fastapi import APIRouter, File, HTTPException, UploadFile

from jobmatch.models.schemas import ChatCoachRequest, SimpleJobsRequest, SkillGapRequest
from jobmatch.services.coach import chat_coach
from jobmatch.services.job_search import search_jobs
from jobmatch.services.simple_analysis import analyze_resume
from jobmatch.services.skill_gap import analyze_skill_gap
from jobmatch.utils.exceptions import JobMatchBaseException
from jobmatch.utils.logging_config import get_logger

router = APIRouter(prefix="/api", tags=["simple"])
logger = get_logger(__name__)


@router.post("/simple-analyze")
async def simple_analyze(file: Optional[UploadFile] = File(None)):
    """Stateless résumé analysis; nothing is stored"""
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    data = await file.read()
    loop = asyncio.get_running_loop()
    try:
        analysis = await loop.run_in_executor(None, analyze_resume, data, file.content_type)
    except (JobMatchBaseException, requests.RequestException) as e:
        logger.error(f"Resume analysis error: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to analyze resume", "details": str(e)})

    return {"success": True, "analysis": analysis}


@router.post("/simple-jobs")
async def simple_jobs(payload: SimpleJobsRequest):
    if not payload.skills or not isinstance(payload.skills, list):
        raise HTTPException(status_code=400, detail="Skills array is required")

    skills = [str(s) for s in payload.skills]
    loop = asyncio.get_running_loop()
    jobs = await loop.run_in_executor(
        None, search_jobs, skills, payload.experience, payload.location or "United States"
    )
    return {"success": True, "jobs": jobs}


@router.post("/skill-gap")
async def skill_gap(payload: SkillGapRequest):
    if not payload.job_requirements:
        raise HTTPException(status_code=400, detail="Job requirements are required")

    loop = asyncio.get_running_loop()
    gap = await loop.run_in_executor(None, analyze_skill_gap, payload.user_skills, payload.job_requirements)
    return {
        "missingSkills": gap.missing_skills,
        "skillImprovements": gap.skill_improvements,
        "recommendedCourses": gap.recommended_courses,
    }


@router.post("/chat-coach")
async def coach(payload: ChatCoachRequest):
    if not payload.message:
        raise HTTPException(status_code=400, detail="Message is required")

    loop = asyncio.get_running_loop()
    try:
        result = await loop.run_in_executor(None, chat_coach, payload.message, payload.resumeData)
    except (JobMatchBaseException, requests.RequestException) as e:
        logger.error(f"Chat coach error: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to get response", "details": str(e)})

    return {"success": True, **result}
