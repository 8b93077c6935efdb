"""
Live job listings from the JSearch aggregator (RapidAPI).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from jobmatch.config import JSEARCH_URL, LLM_TIMEOUT, RAPIDAPI_KEY
from jobmatch.utils.exceptions import ExternalServiceError
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

MAX_RESULTS = 10
DEFAULT_LOCATION = "United States"
DEFAULT_ROLE = "Software Engineer"


def calculate_match_score(user_skills: List[str], job_skills: List[str]) -> float:
    """Share of the user's skills that appear in the job's skill list."""
    if not job_skills:
        return 0.5
    if not user_skills:
        return 0.0
    job_lower = [str(s).lower() for s in job_skills]
    matches = 0
    for skill in user_skills:
        s = str(skill).lower()
        if any(s in js or js in s for js in job_lower):
            matches += 1
    return min(matches / len(user_skills), 1.0)


def _location(job: Dict[str, Any]) -> str:
    if job.get("job_city") and job.get("job_state"):
        return f"{job['job_city']}, {job['job_state']}"
    return job.get("job_country") or "Remote"


def to_listing(job: Dict[str, Any], user_skills: List[str]) -> Dict[str, Any]:
    job_skills = job.get("job_required_skills") or []
    return {
        "title": job.get("job_title") or "Unknown Title",
        "company": job.get("employer_name") or "Unknown Company",
        "location": _location(job),
        "description": job.get("job_description") or "",
        "requirements": job_skills,
        "salary": job.get("job_salary"),
        "type": job.get("job_employment_type") or "Full-time",
        "url": job.get("job_apply_link") or job.get("job_google_link") or "#",
        "posted": job.get("job_posted_at_datetime_utc") or datetime.utcnow().isoformat(),
        "match_score": calculate_match_score(user_skills, job_skills),
    }


def fetch_jsearch(query: str) -> List[Dict[str, Any]]:
    resp = requests.get(
        JSEARCH_URL,
        params={"query": query, "page": 1, "num_pages": 1},
        headers={
            "X-RapidAPI-Key": RAPIDAPI_KEY,
            "X-RapidAPI-Host": "jsearch.p.rapidapi.com",
        },
        timeout=LLM_TIMEOUT,
    )
    if not resp.ok:
        raise ExternalServiceError(
            f"JSearch API failed: {resp.reason}",
            service_name="jsearch",
            status_code=resp.status_code,
        )
    data = resp.json().get("data")
    return data if isinstance(data, list) else []


def search_jobs(skills: List[str], experience: Any = None, location: Optional[str] = None) -> List[Dict[str, Any]]:
    """Up to ten listings for the first skill as role. Lookup failures yield no jobs."""
    if not RAPIDAPI_KEY:
        logger.warning("RAPIDAPI_KEY not configured, job search returns no results")
        return []

    role = skills[0] if skills else DEFAULT_ROLE
    query = f"{role} {location or DEFAULT_LOCATION}"
    try:
        jobs = fetch_jsearch(query)
    except (requests.RequestException, ValueError, ExternalServiceError) as e:
        logger.error(f"Job search failed for {query!r}: {e}")
        return []

    logger.info(f"Job search for {query!r} returned {len(jobs)} listings")
    return [to_listing(job, skills) for job in jobs[:MAX_RESULTS]]
