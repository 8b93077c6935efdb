from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from jobmatch.config import CANDIDATE_LIMIT, MIN_MATCH_SCORE
from jobmatch.models.models import ScoreBatch
from jobmatch.models.response import RecommendationView
from jobmatch.models.schemas import JobPosting, ParsedProfile, Recommendation
from jobmatch.services.matching import experience_matches, match_skills, narrow_by_embedding
from jobmatch.services.scoring import FALLBACK_REASONING, FALLBACK_SCORE, score_jobs
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

ScoreFn = Callable[[str, List[str]], ScoreBatch]


def job_description_line(job: JobPosting) -> str:
    return f"{job.title} at {job.company}: {job.description}"


def assemble_recommendations(
    profile: ParsedProfile,
    jobs: List[JobPosting],
    resume_text: str,
    user_id: str,
    resume_id: str,
    resume_embedding: Optional[Sequence[float]] = None,
    score: ScoreFn = score_jobs,
    candidate_limit: int = CANDIDATE_LIMIT,
    min_score: float = MIN_MATCH_SCORE,
) -> List[Recommendation]:
    """Score ``jobs`` for a profile and return the keepers, best first.

    The scorer is called once for the whole candidate batch and never for
    an empty job list.
    """
    if not jobs:
        return []

    candidates = narrow_by_embedding(resume_embedding, jobs, candidate_limit)
    descriptions = [job_description_line(job) for job in candidates]
    batch = score(resume_text, descriptions)

    years = len(profile.experience)
    created_at = datetime.utcnow()
    out = []
    for i, job in enumerate(candidates):
        match_score = batch.scores[i] if i < len(batch.scores) else FALLBACK_SCORE
        reasoning = batch.reasoning[i] if i < len(batch.reasoning) else FALLBACK_REASONING
        out.append(Recommendation(
            job_id=job.job_id,
            user_id=user_id,
            resume_id=resume_id,
            match_score=max(0.0, min(1.0, match_score)),
            skills_match=match_skills(profile.skills, job.required_skills + job.preferred_skills).matched,
            experience_match=experience_matches(years, job.experience_level),
            reasoning=reasoning,
            created_at=created_at,
        ))

    kept = [r for r in out if r.match_score >= min_score]
    logger.info(f"Assembled {len(kept)}/{len(out)} recommendations for resume {resume_id}")
    return sorted(kept, key=lambda r: r.match_score, reverse=True)


def format_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> Optional[str]:
    if not salary_min or not salary_max:
        return None
    return f"${salary_min:,} - ${salary_max:,}"


def to_view(rec: Dict[str, Any], job: Optional[Dict[str, Any]]) -> RecommendationView:
    job = job or {}
    return RecommendationView(
        id=str(rec.get("recommendation_id") or rec.get("_id")),
        job_id=rec["job_id"],
        job_title=job.get("title") or "Unknown Title",
        company=job.get("company") or "Unknown Company",
        location=job.get("location"),
        job_type=job.get("job_type"),
        salary_range=format_salary_range(job.get("salary_min"), job.get("salary_max")),
        requirements=job.get("requirements") or [],
        description=job.get("description") or "",
        match_score=rec["match_score"],
        skills_match=rec.get("skills_match") or [],
        experience_match=rec.get("experience_match", True),
        reasoning=rec.get("reasoning"),
        created_at=rec.get("created_at"),
    )
