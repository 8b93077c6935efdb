from typing import Dict, Iterable, List, Optional, Sequence
import numpy as np

from jobmatch.models.models import SkillMatch
from jobmatch.models.schemas import ExperienceLevel, JobPosting

# Minimum number of experience entries per level
EXPERIENCE_THRESHOLDS: Dict[str, int] = {
    ExperienceLevel.ENTRY.value: 0,
    ExperienceLevel.MID.value: 2,
    ExperienceLevel.SENIOR.value: 5,
    ExperienceLevel.EXECUTIVE.value: 10,
}


def _dedupe(skills: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for s in skills or []:
        if not isinstance(s, str) or not s.strip():
            continue
        key = s.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(s.strip())
    return out


def _skill_hit(job_skill: str, user_lower: List[str]) -> bool:
    js = job_skill.lower()
    # loose on purpose: "react" hits "react.js", and short tokens over-match
    return any(u in js or js in u for u in user_lower)


def match_skills(user_skills: Iterable[str], job_skills: Iterable[str]) -> SkillMatch:
    """Case-insensitive two-way substring overlap between user and job skills.

    ``matched`` keeps the job-side spelling in job order. ``ratio`` is
    ``|matched| / |job_skills|`` and 1.0 when the job lists no skills.
    """
    jobs = _dedupe(job_skills)
    user_lower = [u.lower() for u in _dedupe(user_skills)]
    if not jobs:
        return SkillMatch(matched=[], ratio=1.0)
    matched = [js for js in jobs if _skill_hit(js, user_lower)]
    return SkillMatch(matched=matched, ratio=len(matched) / len(jobs))


def missing_skills(user_skills: Iterable[str], job_skills: Iterable[str]) -> List[str]:
    user_lower = [u.lower() for u in _dedupe(user_skills)]
    return [js for js in _dedupe(job_skills) if not _skill_hit(js, user_lower)]


def experience_matches(years: int, level: Optional[str]) -> bool:
    """``years`` is the number of experience entries, not a tenure sum."""
    key = getattr(level, "value", level)
    if not key:
        return True
    threshold = EXPERIENCE_THRESHOLDS.get(str(key).lower())
    if threshold is None:
        return True
    return years >= threshold


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if a is None or b is None or len(a) == 0 or len(a) != len(b):
        return 0.0
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    den = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if den == 0.0:
        return 0.0
    return float(np.dot(va, vb)) / den


def narrow_by_embedding(
    resume_embedding: Optional[Sequence[float]],
    jobs: List[JobPosting],
    limit: int,
) -> List[JobPosting]:
    """Keep the ``limit`` jobs closest to the résumé embedding.

    Applies only when the résumé and at least one job carry an embedding;
    otherwise the list is returned untouched. Ties keep their input order
    and jobs without an embedding rank last.
    """
    if not resume_embedding or not any(j.embedding for j in jobs):
        return jobs

    def similarity(job: JobPosting) -> float:
        if not job.embedding:
            return -2.0
        return cosine_similarity(resume_embedding, job.embedding)

    ranked = sorted(jobs, key=similarity, reverse=True)
    return ranked[:limit]
